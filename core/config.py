"""Configuration management for the room registry.

This module handles:
- Loading/saving the user configuration file
- Building the immutable RegistryConfig handed to the room registry
- Resolving which workbook backend to use
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

# Configuration file paths
USER_CONFIG_FILE = Path.home() / '.room_registry' / 'config.json'
DEFAULT_WORKBOOK_FILE = Path(__file__).parent.parent / 'cache.nosync' / 'workbook.json'

BACKENDS = ('local', 'sheets')


@dataclass(frozen=True)
class RegistryConfig:
    """Names and lookup tables the registry needs to find its surfaces.

    budgeting_suffixes maps a budgeting kind to the suffix appended to the
    template name. When it is empty, rooms have no kind and template_suffix
    is appended instead.
    """
    dashboard_sheet: str = 'Dashboard'
    add_rooms_range: str = 'AddRooms'
    existing_rooms_range: str = 'ConfigExistingRooms'
    material_row_range: str = 'DashboardMaterialRow'
    sum_row_range: str = 'DashboardSumRow'
    tab_colour: str = '#fcd241'
    template_suffix: str = ' (template)'
    selection_name_column: int = 0
    selection_check_column: int = 2
    budgeting_suffixes: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def budgeting_kinds(self) -> dict[str, str]:
        return dict(self.budgeting_suffixes)

    def resolve_template(self, template: str, kind: str = '') -> str:
        """Return the document name of the template for a room."""
        if self.budgeting_suffixes:
            return f"{template}{self.budgeting_kinds[kind]}"
        return f"{template}{self.template_suffix}"


def registry_config_from(settings: dict) -> RegistryConfig:
    """Build a RegistryConfig from the 'registry' section of the user config.

    Unknown keys are ignored so older config files keep working.
    """
    overrides = dict(settings or {})
    kinds = overrides.pop('budgeting_suffixes', None) or {}
    known = {k: v for k, v in overrides.items() if k in RegistryConfig.__dataclass_fields__}
    return RegistryConfig(**known, budgeting_suffixes=tuple(kinds.items()))


def load_config() -> dict:
    """Load configuration from the user config file.

    Returns:
        Dict with 'backend' and 'registry' keys, plus backend settings
    """
    if USER_CONFIG_FILE.exists():
        with open(USER_CONFIG_FILE, 'r') as f:
            return json.load(f)
    return {'backend': 'local', 'registry': {}}


def save_config(config: dict):
    """Save configuration to file.

    Args:
        config: Configuration dict to save
    """
    USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    with open(USER_CONFIG_FILE, 'w') as f:
        json.dump(config, f, indent=2)


def workbook_path(config: dict) -> Path:
    """Return the local workbook path from config, or the default."""
    path = config.get('workbook_path')
    return Path(path).expanduser() if path else DEFAULT_WORKBOOK_FILE
