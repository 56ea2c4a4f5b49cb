"""
Blood group registry - single source of truth for the ABO/Rh groups.

This module provides:
- YAML-based loading and validation of blood_groups.yaml
- BloodGroupDefinition dataclass (name, marker color, compatible recipients)
- Normalization of user input ("ab+" -> "AB+")
- Donor/recipient compatibility lookups

Usage:
    from core.blood_groups import is_valid_blood_group, normalize_blood_group

    group = normalize_blood_group(" o- ")   # "O-"
    is_valid_blood_group(group)              # True
    get_compatible_donors("A+")              # ("O-", "O+", "A-", "A+")
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# Wildcard accepted by the alert broadcast for "every blood group"
ANY_BLOOD_GROUP = "Any"

# Wildcard accepted by directory/inventory filters for "no filter"
ALL = "All"

_COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')


@dataclass(frozen=True)
class BloodGroupDefinition:
    """
    Immutable definition of a blood group.

    Attributes:
        name: Canonical group name ("A+", "O-", ...)
        color: Hex color for map markers and badges
        can_donate_to: Recipient groups this group can donate to
    """
    name: str
    color: str
    can_donate_to: Tuple[str, ...]

    def can_donate_to_group(self, recipient: str) -> bool:
        return recipient in self.can_donate_to


# =============================================================================
# YAML LOADING & VALIDATION
# =============================================================================

def _get_config_path() -> Path:
    """Get the path to the blood group configuration file."""
    return Path(__file__).parent / 'blood_groups.yaml'


def _load_yaml_config() -> Dict[str, Any]:
    config_path = _get_config_path()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error("Blood group config file not found", extra={'path': str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse blood group config", extra={'path': str(config_path), 'error': str(e)})
        raise


def _validate_entry(raw: Dict[str, Any], index: int, known: List[str]) -> None:
    """
    Validate a single blood group entry.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    for field in ('name', 'color', 'can_donate_to'):
        if field not in raw:
            raise ValueError(f"Blood group at index {index} is missing required field: '{field}'")

    if not _COLOR_PATTERN.match(raw['color']):
        raise ValueError(f"Blood group '{raw['name']}' has invalid color format: '{raw['color']}'")

    unknown = [g for g in raw['can_donate_to'] if g not in known]
    if unknown:
        raise ValueError(f"Blood group '{raw['name']}' lists unknown recipients: {unknown}")


@lru_cache(maxsize=1)
def _load_registry() -> Tuple[BloodGroupDefinition, ...]:
    """Load and cache the blood group definitions (read exactly once)."""
    config = _load_yaml_config()
    entries = config.get('blood_groups', [])
    known = [entry.get('name') for entry in entries]

    definitions = []
    for i, raw in enumerate(entries):
        _validate_entry(raw, i, known)
        definitions.append(BloodGroupDefinition(
            name=raw['name'],
            color=raw['color'],
            can_donate_to=tuple(raw['can_donate_to']),
        ))

    logger.debug("Blood group registry loaded", extra={'count': len(definitions)})
    return tuple(definitions)


# =============================================================================
# PUBLIC API
# =============================================================================

def list_blood_groups() -> List[BloodGroupDefinition]:
    """All known blood groups in configuration order."""
    return list(_load_registry())


def normalize_blood_group(name: Optional[str]) -> str:
    """Trim whitespace and uppercase the ABO letters, keeping the Rh sign."""
    if not name:
        return ''
    return re.sub(r'\s+', '', name).upper()


def get_blood_group(name: str) -> Optional[BloodGroupDefinition]:
    normalized = normalize_blood_group(name)
    for group in _load_registry():
        if group.name == normalized:
            return group
    return None


def is_valid_blood_group(name: Optional[str]) -> bool:
    return get_blood_group(name or '') is not None


def get_compatible_donors(recipient: str) -> Tuple[str, ...]:
    """
    Blood groups that can donate to the given recipient group.

    Returns an empty tuple for an unknown recipient.
    """
    recipient = normalize_blood_group(recipient)
    return tuple(
        group.name for group in _load_registry()
        if group.can_donate_to_group(recipient)
    )


def get_marker_color(name: str, default: str = "#546E7A") -> str:
    """Display colour for a blood group label, `default` for unknown groups."""
    group = get_blood_group(name)
    return group.color if group else default
