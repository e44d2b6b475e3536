"""
Pydantic summary of a recording session for reporting.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, validator


class RecordingSessionSummary(BaseModel):
    """Pydantic model describing the shape of a recording session."""

    data_mode: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    group_count: int = 0
    session_count: int = 0
    participant_count: int = 0
    stream_count: int = 0
    recording_association_count: int = 0
    participant_session_association_count: int = 0
    participant_stream_association_count: int = 0

    integrity_ok: bool = True

    # Computed fields
    duration_seconds: Optional[int] = None

    @validator('group_count', 'session_count', 'participant_count', 'stream_count',
               'recording_association_count', 'participant_session_association_count',
               'participant_stream_association_count')
    def validate_count(cls, v):
        if v < 0:
            raise ValueError("Counts cannot be negative")
        return v

    @validator('duration_seconds', always=True)
    def calculate_duration(cls, v, values):
        start_time = values.get('start_time')
        end_time = values.get('end_time')
        if start_time and end_time:
            return int((end_time - start_time).total_seconds())
        return None
