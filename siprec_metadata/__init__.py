"""
SIP Recording (SIPREC) metadata model and XML codec, RFC 7865.
"""

from .models import (
    Participant,
    MediaStream,
    CommunicationSession,
    CommunicationSessionGroup,
    CSRSAssociation,
    ParticipantSessionAssociation,
    ParticipantStreamAssociation,
    RecordingSession,
    RecordingSessionSummary
)
from .services.xml_codec import MetadataDecodeError
from .utils.time_utils import Timestamp
from .utils.unique_id import UniqueIdGenerator, generate_unique_id

__version__ = "0.1.0"

__all__ = [
    "Participant",
    "MediaStream",
    "CommunicationSession",
    "CommunicationSessionGroup",
    "CSRSAssociation",
    "ParticipantSessionAssociation",
    "ParticipantStreamAssociation",
    "RecordingSession",
    "RecordingSessionSummary",
    "MetadataDecodeError",
    "Timestamp",
    "UniqueIdGenerator",
    "generate_unique_id",
]
