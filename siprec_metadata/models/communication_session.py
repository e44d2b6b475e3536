"""
Communication session and communication session group models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from ..utils.time_utils import Timestamp, coerce_optional
from ..utils.unique_id import generate_unique_id

TimeValue = Union[Timestamp, datetime, str, None]


@dataclass
class CommunicationSession:
    """A SIP communication session being recorded."""

    session_id: str = ""
    reason: Optional[str] = None
    sip_session_ids: List[str] = field(default_factory=list)
    group_ref: Optional[str] = None
    start_time: Optional[Timestamp] = None
    stop_time: Optional[Timestamp] = None

    def __post_init__(self):
        if not self.session_id:
            self.session_id = generate_unique_id()

    def add_sip_session_id(self, sip_session_id: str):
        """Append an external SIP Session-ID value."""
        self.sip_session_ids.append(sip_session_id)

    def set_start_time(self, value: TimeValue):
        self.start_time = coerce_optional(value)

    def set_stop_time(self, value: TimeValue):
        self.stop_time = coerce_optional(value)

    def __repr__(self):
        return f"<CommunicationSession(id={self.session_id}, group={self.group_ref})>"


@dataclass
class CommunicationSessionGroup:
    """A group tying related communication sessions together."""

    group_id: str = ""
    associate_time: Optional[Timestamp] = None
    disassociate_time: Optional[Timestamp] = None

    def __post_init__(self):
        if not self.group_id:
            self.group_id = generate_unique_id()

    def set_associate_time(self, value: TimeValue):
        self.associate_time = coerce_optional(value)

    def set_disassociate_time(self, value: TimeValue):
        self.disassociate_time = coerce_optional(value)

    def __repr__(self):
        return f"<CommunicationSessionGroup(id={self.group_id})>"
