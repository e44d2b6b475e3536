"""
RecordingSession aggregate: owns every entity and association of one
SIPREC metadata document.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from ..config import config
from ..utils.time_utils import Timestamp, coerce_optional
from ..utils.unique_id import UniqueIdGenerator, get_default_generator
from .associations import CSRSAssociation, ParticipantSessionAssociation, ParticipantStreamAssociation
from .communication_session import CommunicationSession, CommunicationSessionGroup
from .media_stream import MediaStream
from .participant import Participant

logger = logging.getLogger(__name__)

TimeValue = Union[Timestamp, datetime, str, None]


def _same_members(left: list, right: list) -> bool:
    """Order-independent comparison: equal sizes and every item found in the other list."""
    if len(left) != len(right):
        return False
    return all(item in right for item in left)


class RecordingSession:
    """
    Aggregate root of the recording metadata graph.

    Entities are created through the ``add_*`` factories and linked through
    the ``associate_*`` methods. Returned objects are live references that
    stay valid for the lifetime of the aggregate.
    """

    def __init__(self, id_generator: Optional[UniqueIdGenerator] = None):
        """
        Initialize an empty recording session.

        Args:
            id_generator: Source of ids for entities created without an
                explicit id. Defaults to the process default generator.
        """
        self.id_generator = id_generator or get_default_generator()

        self.start_time: Optional[Timestamp] = None
        self.end_time: Optional[Timestamp] = None
        self.data_mode: str = config.DEFAULT_DATA_MODE

        self.groups: List[CommunicationSessionGroup] = []
        self.comm_sessions: List[CommunicationSession] = []
        self.media_streams: List[MediaStream] = []
        self.participants: List[Participant] = []
        self.csrs_associations: List[CSRSAssociation] = []
        self.participant_session_associations: List[ParticipantSessionAssociation] = []
        self.participant_stream_associations: List[ParticipantStreamAssociation] = []

    def _new_id(self, explicit_id: str) -> str:
        return explicit_id or self.id_generator.generate()

    def set_start_time(self, value: TimeValue):
        self.start_time = coerce_optional(value)

    def set_end_time(self, value: TimeValue):
        self.end_time = coerce_optional(value)

    def set_data_mode(self, mode: str):
        self.data_mode = mode

    # Factories

    def add_group(self, group_id: str = "") -> CommunicationSessionGroup:
        """Add a communication session group."""
        group = CommunicationSessionGroup(self._new_id(group_id))
        self.groups.append(group)
        return group

    def add_comm_session(self, session_id: str = "") -> CommunicationSession:
        """Add a communication session."""
        session = CommunicationSession(self._new_id(session_id))
        self.comm_sessions.append(session)
        return session

    def add_participant(self, participant_id: str = "") -> Participant:
        """Add a participant."""
        participant = Participant(self._new_id(participant_id))
        self.participants.append(participant)
        return participant

    def add_stream(self, stream_id: str = "") -> MediaStream:
        """Add a media stream; its owning session is set by ``associate_stream``."""
        stream = MediaStream(self._new_id(stream_id))
        self.media_streams.append(stream)
        return stream

    # Associations

    def associate_stream(self, session: CommunicationSession, stream: MediaStream):
        """Make ``session`` the owner of ``stream``, replacing any previous owner."""
        stream.session_id = session.session_id

    def associate_group(self, group: CommunicationSessionGroup, session: CommunicationSession):
        """Place ``session`` in ``group``."""
        session.group_ref = group.group_id

    def associate_recording(self, session: CommunicationSession) -> CSRSAssociation:
        """Bind a communication session to this recording session."""
        association = CSRSAssociation(session_id=session.session_id)
        self.csrs_associations.append(association)
        return association

    def associate_participant(self, session: CommunicationSession,
                              participant: Participant) -> ParticipantSessionAssociation:
        """Record that ``participant`` takes part in ``session``."""
        association = ParticipantSessionAssociation(
            participant_id=participant.participant_id,
            session_id=session.session_id
        )
        self.participant_session_associations.append(association)
        return association

    def associate_participant_stream(self, participant: Participant, stream: MediaStream,
                                     send: bool, recv: bool) -> ParticipantStreamAssociation:
        """
        Record that ``participant`` sends and/or receives ``stream``.

        An existing edge for the same pair gets the new flags OR-ed in;
        otherwise a new edge is created with exactly these flags.
        """
        return merge_participant_stream(
            self.participant_stream_associations,
            participant.participant_id,
            stream.stream_id,
            send,
            recv
        )

    # Lookups

    def find_group(self, group_id: str) -> Optional[CommunicationSessionGroup]:
        return next((g for g in self.groups if g.group_id == group_id), None)

    def find_comm_session(self, session_id: str) -> Optional[CommunicationSession]:
        return next((s for s in self.comm_sessions if s.session_id == session_id), None)

    def find_participant(self, participant_id: str) -> Optional[Participant]:
        return next((p for p in self.participants if p.participant_id == participant_id), None)

    def find_stream(self, stream_id: str) -> Optional[MediaStream]:
        return next((s for s in self.media_streams if s.stream_id == stream_id), None)

    def streams_for_participant(self, participant_id: str) -> List[ParticipantStreamAssociation]:
        """Participant-stream edges of one participant, in association order."""
        return [a for a in self.participant_stream_associations if a.participant_id == participant_id]

    # Validation

    def check(self) -> bool:
        """Check that every association refers to existing entities."""
        from ..services.integrity_checker import IntegrityChecker
        return IntegrityChecker(self).is_valid()

    def check_report(self):
        """Collect every integrity problem of the graph."""
        from ..services.integrity_checker import IntegrityChecker
        return IntegrityChecker(self).report()

    # Serialization

    def to_xml(self) -> str:
        """Serialize to a SIPREC metadata XML document."""
        from ..services.xml_codec import encode_document
        return encode_document(self)

    @classmethod
    def from_xml(cls, xml_content: str,
                 id_generator: Optional[UniqueIdGenerator] = None) -> 'RecordingSession':
        """
        Build a recording session from an XML document.

        Raises:
            MetadataDecodeError: if the document is malformed or an element
                lacks a required attribute.
        """
        from ..services.xml_codec import decode_document
        return decode_document(xml_content, id_generator=id_generator)

    def load_xml(self, xml_content: str) -> bool:
        """
        Replace this session's contents with a decoded document.

        The document is decoded into a staging session first, so on failure
        this session is left exactly as it was.
        """
        from ..services.xml_codec import MetadataDecodeError, decode_document
        try:
            staged = decode_document(xml_content, id_generator=self.id_generator)
        except MetadataDecodeError as e:
            logger.warning(f"Failed to load recording metadata: {e}")
            return False
        self._adopt(staged)
        return True

    def _adopt(self, other: 'RecordingSession'):
        self.start_time = other.start_time
        self.end_time = other.end_time
        self.data_mode = other.data_mode
        self.groups = other.groups
        self.comm_sessions = other.comm_sessions
        self.media_streams = other.media_streams
        self.participants = other.participants
        self.csrs_associations = other.csrs_associations
        self.participant_session_associations = other.participant_session_associations
        self.participant_stream_associations = other.participant_stream_associations

    def to_dot(self) -> str:
        """Graphviz view of the graph, for debugging."""
        from ..services.graph_export import to_dot
        return to_dot(self)

    def summary(self):
        """Build a RecordingSessionSummary of this session."""
        from .summary import RecordingSessionSummary
        return RecordingSessionSummary(
            data_mode=self.data_mode,
            start_time=self.start_time.instant if self.start_time else None,
            end_time=self.end_time.instant if self.end_time else None,
            group_count=len(self.groups),
            session_count=len(self.comm_sessions),
            participant_count=len(self.participants),
            stream_count=len(self.media_streams),
            recording_association_count=len(self.csrs_associations),
            participant_session_association_count=len(self.participant_session_associations),
            participant_stream_association_count=len(self.participant_stream_associations),
            integrity_ok=self.check()
        )

    def __eq__(self, other):
        if not isinstance(other, RecordingSession):
            return NotImplemented
        return (
            self.data_mode == other.data_mode
            and self.start_time == other.start_time
            and self.end_time == other.end_time
            and _same_members(self.groups, other.groups)
            and _same_members(self.comm_sessions, other.comm_sessions)
            and _same_members(self.media_streams, other.media_streams)
            and _same_members(self.participants, other.participants)
            and _same_members(self.csrs_associations, other.csrs_associations)
            and _same_members(self.participant_session_associations,
                              other.participant_session_associations)
            and _same_members(self.participant_stream_associations,
                              other.participant_stream_associations)
        )

    __hash__ = None

    def __repr__(self):
        return (f"<RecordingSession(data_mode={self.data_mode}, sessions={len(self.comm_sessions)}, "
                f"participants={len(self.participants)}, streams={len(self.media_streams)})>")


def merge_participant_stream(associations: List[ParticipantStreamAssociation],
                             participant_id: str, stream_id: str,
                             send: bool, recv: bool) -> ParticipantStreamAssociation:
    """Find-or-create the edge for (participant_id, stream_id) and OR in the flags."""
    for association in associations:
        if association.participant_id == participant_id and association.stream_id == stream_id:
            association.merge_direction(send, recv)
            return association

    association = ParticipantStreamAssociation(
        participant_id=participant_id,
        stream_id=stream_id,
        send=send,
        recv=recv
    )
    associations.append(association)
    return association
