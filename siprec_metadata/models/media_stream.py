"""
MediaStream model for a single recorded media stream.
"""

from dataclasses import dataclass
from typing import Optional

from ..utils.unique_id import generate_unique_id


@dataclass
class MediaStream:
    """A media stream owned by exactly one communication session."""

    stream_id: str = ""
    session_id: str = ""
    label: Optional[str] = None
    content_type: Optional[str] = None

    def __post_init__(self):
        if not self.stream_id:
            self.stream_id = generate_unique_id()

    def __repr__(self):
        return f"<MediaStream(id={self.stream_id}, session={self.session_id}, label={self.label})>"
