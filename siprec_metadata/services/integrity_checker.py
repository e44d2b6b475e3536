"""
Referential integrity checks for a recording session graph.

Decoding and manual construction never enforce that association ids
resolve; callers run these checks explicitly.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class IssueKind(Enum):
    """Kinds of integrity problems."""
    UNRESOLVED_SESSION = "unresolved_session"
    UNRESOLVED_PARTICIPANT = "unresolved_participant"
    UNRESOLVED_STREAM = "unresolved_stream"
    UNRESOLVED_GROUP = "unresolved_group"
    DUPLICATE_ID = "duplicate_id"


class IssueSeverity(Enum):
    """Errors fail the check, warnings are reported only."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class IntegrityIssue:
    """A single integrity problem."""
    kind: IssueKind
    severity: IssueSeverity
    source: str
    reference_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'severity': self.severity.value,
            'source': self.source,
            'reference_id': self.reference_id
        }

    def __str__(self):
        return f"{self.severity.value}: {self.source} -> {self.kind.value} '{self.reference_id}'"


@dataclass
class IntegrityReport:
    """All integrity problems found in one recording session."""
    issues: List[IntegrityIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            'valid': self.is_valid,
            'errors': [i.to_dict() for i in self.errors],
            'warnings': [i.to_dict() for i in self.warnings]
        }


class IntegrityChecker:
    """Validates that the references held by a RecordingSession resolve."""

    def __init__(self, recording_session):
        self.recording_session = recording_session
        self.session_ids = {s.session_id for s in recording_session.comm_sessions}
        self.participant_ids = {p.participant_id for p in recording_session.participants}
        self.stream_ids = {s.stream_id for s in recording_session.media_streams}
        self.group_ids = {g.group_id for g in recording_session.groups}

    def _association_references(self):
        """Yield (source, kind, reference_id, resolved) for every association reference."""
        rs = self.recording_session

        for assoc in rs.csrs_associations:
            yield ("sessionrecordingassoc", IssueKind.UNRESOLVED_SESSION,
                   assoc.session_id, assoc.session_id in self.session_ids)

        for assoc in rs.participant_session_associations:
            yield ("participantsessionassoc", IssueKind.UNRESOLVED_PARTICIPANT,
                   assoc.participant_id, assoc.participant_id in self.participant_ids)
            yield ("participantsessionassoc", IssueKind.UNRESOLVED_SESSION,
                   assoc.session_id, assoc.session_id in self.session_ids)

        for assoc in rs.participant_stream_associations:
            yield ("participantstreamassoc", IssueKind.UNRESOLVED_PARTICIPANT,
                   assoc.participant_id, assoc.participant_id in self.participant_ids)
            yield ("participantstreamassoc", IssueKind.UNRESOLVED_STREAM,
                   assoc.stream_id, assoc.stream_id in self.stream_ids)

    def is_valid(self) -> bool:
        """True when every association reference resolves; stops at the first miss."""
        for source, kind, reference_id, resolved in self._association_references():
            if not resolved:
                logger.debug(f"{source} refers to missing id {reference_id!r} ({kind.value})")
                return False
        return True

    def report(self) -> IntegrityReport:
        """Collect every problem, including warnings that do not fail ``is_valid``."""
        report = IntegrityReport()

        for source, kind, reference_id, resolved in self._association_references():
            if not resolved:
                report.issues.append(IntegrityIssue(kind, IssueSeverity.ERROR, source, reference_id))

        rs = self.recording_session

        for stream in rs.media_streams:
            if stream.session_id and stream.session_id not in self.session_ids:
                report.issues.append(IntegrityIssue(
                    IssueKind.UNRESOLVED_SESSION, IssueSeverity.WARNING,
                    f"stream {stream.stream_id}", stream.session_id
                ))

        for session in rs.comm_sessions:
            if session.group_ref is not None and session.group_ref not in self.group_ids:
                report.issues.append(IntegrityIssue(
                    IssueKind.UNRESOLVED_GROUP, IssueSeverity.WARNING,
                    f"session {session.session_id}", session.group_ref
                ))

        collections = [
            ("group", [g.group_id for g in rs.groups]),
            ("session", [s.session_id for s in rs.comm_sessions]),
            ("participant", [p.participant_id for p in rs.participants]),
            ("stream", [s.stream_id for s in rs.media_streams]),
        ]
        for source, ids in collections:
            for entity_id, count in Counter(ids).items():
                if count > 1:
                    report.issues.append(IntegrityIssue(
                        IssueKind.DUPLICATE_ID, IssueSeverity.WARNING, source, entity_id
                    ))

        if not report.is_valid:
            logger.info(f"Integrity check found {len(report.errors)} unresolved references")
        return report
