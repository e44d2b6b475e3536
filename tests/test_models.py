"""
Unit tests for data models.
"""

import pytest

from siprec_metadata.models.associations import (
    CSRSAssociation,
    ParticipantSessionAssociation,
    ParticipantStreamAssociation
)
from siprec_metadata.models.communication_session import CommunicationSession, CommunicationSessionGroup
from siprec_metadata.models.media_stream import MediaStream
from siprec_metadata.models.participant import Participant
from siprec_metadata.models.summary import RecordingSessionSummary
from siprec_metadata.utils.time_utils import Timestamp


class TestEntityIds:
    """Test identifier defaulting on entities."""

    @pytest.mark.parametrize("model, id_field", [
        (Participant, "participant_id"),
        (MediaStream, "stream_id"),
        (CommunicationSession, "session_id"),
        (CommunicationSessionGroup, "group_id"),
    ])
    def test_empty_id_is_generated(self, model, id_field):
        """Test that an empty explicit id is replaced by a generated one."""
        entity = model("")
        assert len(getattr(entity, id_field)) == 24

    @pytest.mark.parametrize("model, id_field", [
        (Participant, "participant_id"),
        (MediaStream, "stream_id"),
        (CommunicationSession, "session_id"),
        (CommunicationSessionGroup, "group_id"),
    ])
    def test_explicit_id_kept(self, model, id_field):
        """Test that explicit ids are used as given."""
        entity = model("explicit-id")
        assert getattr(entity, id_field) == "explicit-id"


class TestParticipant:
    """Test Participant model."""

    def test_name_ids_keep_order(self):
        """Test that name/AoR pairs are kept in insertion order."""
        participant = Participant("p1")
        participant.add_name_id("Bob", "sip:bob@biloxi.com")
        participant.add_name_id("", "sip:bob@example.com")

        assert participant.name_ids == [("Bob", "sip:bob@biloxi.com"), ("", "sip:bob@example.com")]

    def test_structural_equality(self):
        """Test that participants compare by value."""
        first = Participant("p1")
        second = Participant("p1")
        first.add_name_id("Bob", "sip:bob@biloxi.com")

        assert first != second

        second.add_name_id("Bob", "sip:bob@biloxi.com")
        assert first == second


class TestMediaStream:
    """Test MediaStream model."""

    def test_optional_fields_default_to_none(self):
        """Test that label and content type are unset by default."""
        stream = MediaStream("s1")

        assert stream.session_id == ""
        assert stream.label is None
        assert stream.content_type is None

    def test_equality_covers_all_fields(self):
        """Test that every field takes part in equality."""
        base = MediaStream("s1", session_id="cs1", label="96", content_type="audio/PCMU")

        assert base == MediaStream("s1", session_id="cs1", label="96", content_type="audio/PCMU")
        assert base != MediaStream("s1", session_id="cs2", label="96", content_type="audio/PCMU")
        assert base != MediaStream("s1", session_id="cs1", label="97", content_type="audio/PCMU")
        assert base != MediaStream("s1", session_id="cs1", label="96")


class TestCommunicationSession:
    """Test CommunicationSession and group models."""

    def test_sip_session_ids_and_times(self):
        """Test SIP session ids and start/stop time setters."""
        session = CommunicationSession("cs1")
        session.add_sip_session_id("abc;remote=def")
        session.set_start_time("2010-12-16T23:41:07Z")
        session.set_stop_time(None)

        assert session.sip_session_ids == ["abc;remote=def"]
        assert session.start_time == Timestamp.from_rfc3339("2010-12-16T23:41:07Z")
        assert session.stop_time is None

    def test_group_times(self):
        """Test group associate/disassociate times are optional."""
        group = CommunicationSessionGroup("g1")
        assert group.associate_time is None

        group.set_associate_time("2010-12-16T23:41:07Z")
        group.set_disassociate_time(Timestamp.from_rfc3339("2010-12-17T00:00:00Z"))

        assert group.associate_time.to_rfc3339() == "2010-12-16T23:41:07Z"
        assert group.disassociate_time.to_rfc3339() == "2010-12-17T00:00:00Z"


class TestAssociations:
    """Test association models."""

    @pytest.mark.parametrize("model", [
        CSRSAssociation,
        ParticipantSessionAssociation,
        ParticipantStreamAssociation,
    ])
    def test_associate_time_defaults_to_epoch(self, model):
        """Test that the required associate time starts at the zero instant."""
        association = model()

        assert association.associate_time == Timestamp()
        assert association.disassociate_time is None

    def test_csrs_set_session(self):
        """Test binding a CSRS association by object or by id."""
        association = CSRSAssociation()
        association.set_session(CommunicationSession("cs1"))
        assert association.session_id == "cs1"

        association.set_session("cs2")
        assert association.session_id == "cs2"

    def test_participant_session_params(self):
        """Test opaque parameters are kept in order."""
        association = ParticipantSessionAssociation(participant_id="p1", session_id="cs1")
        association.add_param("role=agent")
        association.add_param("queue=7")

        assert association.params == ["role=agent", "queue=7"]

    def test_merge_direction_only_sets_flags(self):
        """Test that merging ORs flags and never clears them."""
        association = ParticipantStreamAssociation(participant_id="p1", stream_id="s1", send=True)
        association.merge_direction(False, True)
        assert association.send and association.recv

        association.merge_direction(False, False)
        assert association.send and association.recv

    def test_is_active(self):
        """Test the activation interval."""
        association = CSRSAssociation(session_id="cs1")
        association.set_associate_time("2010-12-16T23:00:00Z")
        association.set_disassociate_time("2010-12-17T00:00:00Z")

        assert association.is_active(Timestamp.from_rfc3339("2010-12-16T23:30:00Z"))
        assert not association.is_active(Timestamp.from_rfc3339("2010-12-16T22:59:59Z"))
        assert not association.is_active(Timestamp.from_rfc3339("2010-12-17T00:00:00Z"))

    def test_structural_equality(self):
        """Test that associations compare by value."""
        first = ParticipantStreamAssociation(participant_id="p1", stream_id="s1", send=True)
        second = ParticipantStreamAssociation(participant_id="p1", stream_id="s1", send=True)

        assert first == second

        second.set_associate_time("2010-12-16T23:41:07Z")
        assert first != second


class TestRecordingSessionSummary:
    """Test RecordingSessionSummary pydantic model."""

    def test_duration_computed(self):
        """Test that duration is derived from start and end."""
        summary = RecordingSessionSummary(
            data_mode="complete",
            start_time=Timestamp.from_rfc3339("2010-12-16T23:41:07Z").instant,
            end_time=Timestamp.from_rfc3339("2010-12-16T23:42:07Z").instant
        )

        assert summary.duration_seconds == 60

    def test_duration_missing_without_end(self):
        """Test that duration is None without both bounds."""
        summary = RecordingSessionSummary(
            data_mode="complete",
            start_time=Timestamp.from_rfc3339("2010-12-16T23:41:07Z").instant
        )

        assert summary.duration_seconds is None

    def test_negative_count_rejected(self):
        """Test count validation."""
        with pytest.raises(ValueError, match="Counts cannot be negative"):
            RecordingSessionSummary(data_mode="complete", participant_count=-1)
