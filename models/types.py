"""Type definitions for the room registry.

This module provides the small value types passed between the validator,
the dashboard sync and the room registry.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class RoomEntry:
    """One parsed row of the add-rooms table."""
    name: str
    template: str
    kind: str = ''


@dataclass(frozen=True)
class NewRoom:
    """A validated room ready to be created."""
    name: str
    template_id: str


@dataclass(frozen=True)
class DashboardCell:
    """A dashboard cell: visible label plus embedded link target."""
    label: str
    link: str | None = None


@dataclass(frozen=True)
class DocumentHandle:
    """Reference to a document (sheet) in the workbook."""
    doc_id: int
    name: str

    @property
    def link(self) -> str:
        return f"#gid={self.doc_id}"


@dataclass(frozen=True)
class Accepted:
    """The operator supplied a valid new name."""
    name: str


@dataclass(frozen=True)
class Cancelled:
    """The operator cancelled the prompt."""


class Outcome(Enum):
    """Result of a registry operation."""
    APPLIED = 'applied'
    NOTHING_TO_DO = 'nothing to do'
    INVALID = 'invalid'
    CANCELLED = 'cancelled'
    DECLINED = 'declined'
    FAILED = 'failed'
