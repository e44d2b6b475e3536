"""
Time-bounded associations between recording metadata entities.

Each association stores the ids of the entities it binds. Whether those
ids resolve is checked separately by the integrity checker.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from ..utils.time_utils import Timestamp, coerce_optional

TimeValue = Union[Timestamp, datetime, str]


@dataclass
class _TimedAssociation:
    """Shared activation interval; the associate time defaults to the epoch."""

    associate_time: Timestamp = field(default_factory=Timestamp)
    disassociate_time: Optional[Timestamp] = None

    def set_associate_time(self, value: TimeValue):
        self.associate_time = Timestamp.coerce(value)

    def set_disassociate_time(self, value: Optional[TimeValue]):
        self.disassociate_time = coerce_optional(value)

    def is_active(self, at: Optional[Timestamp] = None) -> bool:
        """Check whether the association is in force at the given time (default now)."""
        at = at or Timestamp.now()
        if at < self.associate_time:
            return False
        return self.disassociate_time is None or at < self.disassociate_time


@dataclass
class CSRSAssociation(_TimedAssociation):
    """Binds a communication session to this recording session."""

    session_id: str = ""

    def set_session(self, session):
        """Bind to a CommunicationSession or a raw session id."""
        self.session_id = session if isinstance(session, str) else session.session_id


@dataclass
class ParticipantSessionAssociation(_TimedAssociation):
    """A participant's membership in a communication session."""

    participant_id: str = ""
    session_id: str = ""
    params: List[str] = field(default_factory=list)

    def add_param(self, param: str):
        self.params.append(param)


@dataclass
class ParticipantStreamAssociation(_TimedAssociation):
    """
    A participant's use of a media stream.

    There is one edge per (participant, stream) pair; sending and
    receiving are flags on that edge.
    """

    participant_id: str = ""
    stream_id: str = ""
    send: bool = False
    recv: bool = False

    def merge_direction(self, send: bool, recv: bool):
        """OR new send/recv flags into this edge."""
        self.send = self.send or send
        self.recv = self.recv or recv
