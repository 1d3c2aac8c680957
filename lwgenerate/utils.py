"""
Utility functions used across the lwgenerate codebase.

This module contains general-purpose helpers shared by the HCL encoder
and several generators.
"""

import re
from typing import Iterable, List

# HCL identifiers: a letter or underscore followed by letters, digits, underscores or dashes
_HCL_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*$')


def is_valid_identifier(name: str) -> bool:
    """
    Check whether a string can be written as a bare HCL identifier.

    Args:
        name: Candidate identifier (e.g. a map key)

    Returns:
        True if the name needs no quoting
    """
    return bool(_HCL_IDENTIFIER_PATTERN.match(name))


def unique_sorted(values: Iterable[str]) -> List[str]:
    """Return the distinct values in ascending order."""
    return sorted(set(values))


def make_safe_module_suffix(name: str) -> str:
    """
    Convert a display name to a suffix usable in a Terraform module name.

    Lowercases the name and replaces spaces with underscores, so cloud
    region display names map onto stable module names.

    Args:
        name: Display name (e.g., "West US 2")

    Returns:
        Safe suffix (e.g., "west_us_2")
    """
    return name.lower().replace(" ", "_")
