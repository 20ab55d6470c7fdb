"""
Assumptions Builder
===================

Canonical logic for preparing ``AllAssumptions`` from a (possibly partial)
nested overrides dictionary, typically the JSON body posted by the
assumptions editor.

This module is the **single source of truth** for:
- Merging user overrides over ``DEFAULT_ASSUMPTIONS`` section by section
- Coercing numeric fields to ``float`` (``projection_years`` to ``int``)
- Rejecting unknown sections / fields instead of silently ignoring them
- Validating the merged result before it reaches the cascade

Both ``startup_dcf_service`` and direct engine callers (CLI, notebooks, tests)
should use ``build_assumptions()`` so every call site sees identical inputs.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, Dict, Optional

from .assumptions import DEFAULT_ASSUMPTIONS, SECTION_NAMES, AllAssumptions, validate_assumptions
from .errors import InputError

logger = logging.getLogger(__name__)

_INTEGER_FIELDS = {"projection_years"}
_TEXT_FIELDS = {"method"}


def build_assumptions(
    overrides: Optional[Dict[str, Any]] = None,
    base: AllAssumptions = DEFAULT_ASSUMPTIONS,
) -> AllAssumptions:
    """
    Merge ``overrides`` over ``base`` and validate the result.

    Parameters
    ----------
    overrides : dict, optional
        Nested mapping such as ``{"corporate": {"discount_rate": 0.15}}``.
        Sections may be omitted; omitted fields keep their ``base`` value.
        ``version`` may be given at the top level.
    base : AllAssumptions
        Starting point, ``DEFAULT_ASSUMPTIONS`` unless stated otherwise.

    Returns
    -------
    AllAssumptions
        A new immutable, validated assumptions object.  ``base`` is untouched.
    """
    if not overrides:
        validate_assumptions(base)
        return base

    unknown_sections = set(overrides) - set(SECTION_NAMES) - {"version"}
    if unknown_sections:
        raise InputError(f"Unknown assumption sections: {', '.join(sorted(unknown_sections))}")

    merged_sections: Dict[str, Any] = {}
    for section_name in SECTION_NAMES:
        section_overrides = overrides.get(section_name)
        if not section_overrides:
            continue
        section = getattr(base, section_name)
        merged_sections[section_name] = _merge_section(section_name, section, section_overrides)

    if "version" in overrides:
        merged_sections["version"] = str(overrides["version"])

    assumptions = replace(base, **merged_sections)
    validate_assumptions(assumptions)

    logger.debug("Built assumptions with overridden sections: %s", sorted(merged_sections))
    return assumptions


def _merge_section(section_name: str, section: Any, section_overrides: Dict[str, Any]) -> Any:
    known = {f.name for f in fields(section)}
    unknown = set(section_overrides) - known
    if unknown:
        raise InputError(f"Unknown fields for {section_name}: {', '.join(sorted(unknown))}")

    coerced: Dict[str, Any] = {}
    for name, value in section_overrides.items():
        if value is None:
            continue
        coerced[name] = _coerce(section_name, name, value)
    return replace(section, **coerced)


def _coerce(section_name: str, name: str, value: Any) -> Any:
    if name in _TEXT_FIELDS:
        return str(value)
    if isinstance(value, bool):
        raise InputError(f"{section_name}.{name} must be a finite number")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        logger.warning(f"Rejected override {section_name}.{name}={value!r}: {e}")
        raise InputError(f"{section_name}.{name} must be a finite number") from e

    if name in _INTEGER_FIELDS:
        if not number.is_integer():
            raise InputError(f"{section_name}.{name} must be a positive integer")
        return int(number)
    return number
