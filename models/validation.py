"""Validation of new room entries and rename requests.

Validation is pure: it only looks at the entries and the name sets it is
given. Problems are collected as ValidationIssue records and rendered to
text when they reach the operator.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum

from core.config import RegistryConfig
from models.types import RoomEntry, NewRoom


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in an add-rooms batch.

    position is the 1-based row of the entry, or None for batch-wide issues.
    """
    code: str
    position: int | None = None
    value: str = ''
    names: tuple[str, ...] = ()

    def render(self) -> str:
        if self.code == 'name_missing':
            return f"Name missing for room {self.position}"
        if self.code == 'template_missing':
            return f"Template missing for room {self.position}"
        if self.code == 'kind_missing':
            return f"Budgeting option missing for room {self.position}"
        if self.code == 'kind_unknown':
            return f"Unknown budgeting option '{self.value}' for room {self.position}"
        if self.code == 'template_not_found':
            return f"Template '{self.value}' not found for room {self.position}"
        if self.code == 'exists':
            return f"Room {self.position}: '{self.value}' already exists"
        if self.code == 'duplicates':
            return f"Duplicate room names: {', '.join(self.names)}"
        return self.code


class RoomValidationError(ValueError):
    """Raised when an add-rooms batch has one or more problems."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(self.render())

    def render(self) -> str:
        return '\n'.join(issue.render() for issue in self.issues)


class RenameProblem(Enum):
    """Reasons a proposed new room name is rejected."""
    BLANK_NAME = 'blank'
    NAME_TAKEN = 'taken'
    ALREADY_ASSIGNED = 'assigned'

    def message(self, old_name: str, new_name: str) -> str:
        if self is RenameProblem.BLANK_NAME:
            return f"Name missing for room {old_name}"
        if self is RenameProblem.NAME_TAKEN:
            return f"Room {new_name} already exists"
        return f"You have already entered: {new_name}"


class RenameError(ValueError):
    """Raised when a proposed new room name is rejected."""

    def __init__(self, problem: RenameProblem, old_name: str, new_name: str):
        self.problem = problem
        self.old_name = old_name
        self.new_name = new_name
        super().__init__(problem.message(old_name, new_name))


def _check_entry(position: int, entry: RoomEntry, existing_names: set[str],
                 config: RegistryConfig, available_templates: set[str] | None) -> tuple[list[ValidationIssue], NewRoom | None]:
    issues = []
    name = entry.name.strip()
    template = entry.template.strip()
    kind = entry.kind.strip()
    kinds = config.budgeting_kinds

    if not name:
        issues.append(ValidationIssue('name_missing', position))
    if not template:
        issues.append(ValidationIssue('template_missing', position))
    if kinds:
        if not kind:
            issues.append(ValidationIssue('kind_missing', position))
        elif kind not in kinds:
            issues.append(ValidationIssue('kind_unknown', position, kind))
    if name and name in existing_names:
        issues.append(ValidationIssue('exists', position, name))

    if issues:
        return issues, None

    template_id = config.resolve_template(template, kind)
    if available_templates is not None and template_id not in available_templates:
        return [ValidationIssue('template_not_found', position, template_id)], None
    return [], NewRoom(name, template_id)


def validate_new_rooms(entries: list[RoomEntry], existing_names: set[str], config: RegistryConfig,
                       available_templates: set[str] | None = None) -> list[NewRoom]:
    """Validate a batch of new rooms.

    Every entry is checked and all problems are reported together, so the
    operator can fix the whole batch in one pass.

    Args:
        entries: Parsed rows of the add-rooms table, in input order
        existing_names: Names of every document in the workbook
        config: Registry configuration (template suffixes)
        available_templates: Document names a template may resolve to, or
            None to skip the template existence check

    Returns:
        The validated rooms in input order (may be empty)

    Raises:
        RoomValidationError: If any entry has a problem
    """
    issues = []
    rooms = []
    for position, entry in enumerate(entries, start=1):
        entry_issues, room = _check_entry(position, entry, existing_names, config, available_templates)
        issues.extend(entry_issues)
        if room:
            rooms.append(room)

    counts = Counter(name for name in (e.name.strip() for e in entries) if name)
    duplicates = tuple(name for name, count in counts.items() if count > 1)
    if duplicates:
        issues.append(ValidationIssue('duplicates', names=duplicates))

    if issues:
        raise RoomValidationError(issues)
    return rooms


def validate_rename(old_name: str, proposed_name: str, existing_names: set[str],
                    assigned_names: set[str]) -> str:
    """Validate a proposed new name for a room.

    Returns:
        The trimmed new name

    Raises:
        RenameError: With the reason the name was rejected
    """
    new_name = proposed_name.strip()
    if not new_name:
        raise RenameError(RenameProblem.BLANK_NAME, old_name, new_name)
    if new_name in existing_names:
        raise RenameError(RenameProblem.NAME_TAKEN, old_name, new_name)
    if new_name in assigned_names:
        raise RenameError(RenameProblem.ALREADY_ASSIGNED, old_name, new_name)
    return new_name
