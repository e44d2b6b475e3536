"""
Participant model: a party to one or more communication sessions.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from ..utils.unique_id import generate_unique_id


@dataclass
class Participant:
    """A participant with an ordered list of (display name, AoR) pairs."""

    participant_id: str = ""
    name_ids: List[Tuple[str, str]] = field(default_factory=list)

    def __post_init__(self):
        if not self.participant_id:
            self.participant_id = generate_unique_id()

    def add_name_id(self, name: str, aor: str):
        """Append a display name / address-of-record pair."""
        self.name_ids.append((name, aor))

    def __repr__(self):
        return f"<Participant(id={self.participant_id}, name_ids={len(self.name_ids)})>"
