"""Typed fleet-plan parsing for declarative ingest runs.

This module loads and validates YAML plan files that name the periods a
fleet run should process. A plan may give an inclusive start/end range,
an explicit period list, or both, plus periods to exclude.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from core.constants import SUPPORTED_PLAN_VERSION
from core.errors import GambitConfigError, GambitPlanError
from core.types import Period
from ingest.period_range import enumerate_periods, unique_periods

_PLAN_FIELDS = frozenset({"version", "start", "end", "periods", "exclude"})


@dataclass(frozen=True)
class FleetPlan:
    """Validated fleet plan root object."""

    version: int
    start: Period | None
    end: Period | None
    periods: tuple[Period, ...]
    exclude: tuple[Period, ...]

    def resolve_periods(self) -> list[Period]:
        """Return the closed, chronological set of periods the plan selects."""
        selected = list(self.periods)
        if self.start is not None and self.end is not None:
            selected.extend(enumerate_periods(self.start, self.end))
        excluded = set(self.exclude)
        return [period for period in unique_periods(selected) if period not in excluded]


def load_fleet_plan(plan_path: str) -> FleetPlan:
    """Load and validate a YAML fleet plan from disk.

    Args:
        plan_path: File path to YAML plan.

    Returns:
        Fully validated plan object.

    Raises:
        GambitPlanError: If file is invalid, schema checks fail, or the plan
            selects no periods.
    """
    plan_file = Path(plan_path).expanduser().resolve()
    fields = _plan_fields(_read_plan_document(plan_file))
    start = _period_field(fields, "start")
    end = _period_field(fields, "end")
    if (start is None) != (end is None):
        raise GambitPlanError(
            f"Fleet plan at {plan_file}: fields 'start' and 'end' must be given together."
        )
    plan = FleetPlan(
        version=_plan_version(fields),
        start=start,
        end=end,
        periods=_period_sequence(fields, "periods"),
        exclude=_period_sequence(fields, "exclude"),
    )
    try:
        resolved = plan.resolve_periods()
    except GambitConfigError as error:
        raise GambitPlanError(f"Invalid fleet plan at {plan_file}: {error}") from error
    if not resolved:
        raise GambitPlanError(
            f"Fleet plan at {plan_file} selects no periods. "
            "Add a start/end range or a 'periods' list."
        )
    return plan


def _read_plan_document(plan_file: Path) -> object:
    """Read the YAML document, mapping I/O and syntax problems to plan errors."""
    try:
        text = plan_file.read_text(encoding="utf-8")
    except FileNotFoundError as error:
        raise GambitPlanError(
            f"Fleet plan file does not exist at {plan_file}. Provide a valid YAML file path."
        ) from error
    except OSError as error:
        raise GambitPlanError(
            f"Failed to read fleet plan at {plan_file}: {error}. Check file permissions."
        ) from error
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise GambitPlanError(
            f"Fleet plan at {plan_file} is not valid YAML: {error}"
        ) from error
    if document is None:
        raise GambitPlanError(f"Fleet plan at {plan_file} is empty. Define 'version' and periods.")
    return document


def _plan_fields(document: object) -> dict[str, object]:
    """Check the plan root is a mapping of known field names."""
    if not isinstance(document, dict):
        raise GambitPlanError(
            f"Fleet plan root must be a mapping of fields, got {type(document).__name__}."
        )
    field_names = {str(key) for key in document}
    unknown_fields = sorted(field_names - _PLAN_FIELDS)
    if unknown_fields:
        raise GambitPlanError(
            f"Fleet plan contains unknown root fields: {', '.join(unknown_fields)}. "
            f"Allowed fields: {', '.join(sorted(_PLAN_FIELDS))}."
        )
    return {str(key): value for key, value in document.items()}


def _plan_version(fields: dict[str, object]) -> int:
    version = fields.get("version")
    # YAML booleans load as bool, which is an int subclass.
    if isinstance(version, bool) or not isinstance(version, int):
        raise GambitPlanError(
            f"Fleet plan field 'version' must be an integer, got {version!r}. Set version: 1."
        )
    if version != SUPPORTED_PLAN_VERSION:
        raise GambitPlanError(
            f"Unsupported fleet plan version {version}. Use version: {SUPPORTED_PLAN_VERSION}."
        )
    return version


def _period_field(fields: dict[str, object], field_name: str) -> Period | None:
    value = fields.get(field_name)
    if value is None:
        return None
    return _to_period(value, f"field '{field_name}'")


def _period_sequence(fields: dict[str, object], field_name: str) -> tuple[Period, ...]:
    values = fields.get(field_name)
    if values is None:
        return ()
    if not isinstance(values, list):
        raise GambitPlanError(
            f"Fleet plan field '{field_name}' must be a list of 'YYYY-MM' strings, "
            f"got {type(values).__name__}."
        )
    return tuple(
        _to_period(value, f"field '{field_name}' entry {position}")
        for position, value in enumerate(values, 1)
    )


def _to_period(value: object, location: str) -> Period:
    if not isinstance(value, str):
        raise GambitPlanError(
            f"Fleet plan {location} must be a quoted 'YYYY-MM' string, "
            f"got {type(value).__name__} {value!r}."
        )
    try:
        return Period.parse(value)
    except GambitConfigError as error:
        raise GambitPlanError(f"Fleet plan {location}: {error}") from error
