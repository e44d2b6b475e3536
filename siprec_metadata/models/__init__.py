# Data models package

from .participant import Participant
from .media_stream import MediaStream
from .communication_session import CommunicationSession, CommunicationSessionGroup
from .associations import (
    CSRSAssociation,
    ParticipantSessionAssociation,
    ParticipantStreamAssociation
)
from .recording_session import RecordingSession
from .summary import RecordingSessionSummary

__all__ = [
    # Entities
    "Participant",
    "MediaStream",
    "CommunicationSession",
    "CommunicationSessionGroup",

    # Associations
    "CSRSAssociation",
    "ParticipantSessionAssociation",
    "ParticipantStreamAssociation",

    # Aggregate
    "RecordingSession",
    "RecordingSessionSummary",
]
