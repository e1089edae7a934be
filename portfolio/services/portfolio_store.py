"""Portfolio store — programs, program details and the active filters.

Holds the Program list and the parallel ProgramDetail list in memory,
persists both through the storage backend, and owns the current
FilterCriteria.

Lifecycle:
    store = PortfolioStore(storage)      # Uninitialized; accessors raise
    store.initialize(count=50, rng=rng)  # Ready; data loaded or generated

Update policy:
    update(id, fields) is a no-op returning None for an unknown id. Otherwise
    it validates the shape of ``fields``, merges them into both the Program
    and its ProgramDetail, stamps ``updatedAt`` on both and persists both
    collections in a single storage write.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import date
from typing import Any, Callable

from portfolio.core.exceptions import StoreNotReadyError, ValidationError
from portfolio.models.portfolio import (
    PROGRAM_FIELDS,
    DevelopmentPhase,
    FilterCriteria,
    Priority,
    Program,
    ProgramDetail,
    TherapeuticArea,
    coerce_enum,
)
from portfolio.services import sample_data
from portfolio.services.program_filter import filter_programs
from portfolio.services.storage import (
    PROGRAM_DETAILS_KEY,
    PROGRAMS_KEY,
    StorageBackend,
    save_json_many,
)
from portfolio.utils.helpers import parse_date_input
from portfolio.utils.helpers import today as _today

logger = logging.getLogger(__name__)

# ── Update field rules ───────────────────────────────────────────────────

READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})

_TEXT_FIELDS = frozenset({
    "code", "name", "description", "target_indication",
    "mechanism", "project_lead", "therapeutic_lead",
})
_ENUM_FIELDS = {
    "therapeutic_area": TherapeuticArea,
    "phase": DevelopmentPhase,
    "priority": Priority,
}
_AMOUNT_FIELDS = frozenset({"budget", "budget_spent"})
_DATE_FIELDS = frozenset({"start_date", "estimated_approval_date"})
_OPTIONAL_FIELDS = frozenset({"estimated_approval_date"})

# Accept both wire (camelCase) and attribute (snake_case) names
_ATTRIBUTE_NAMES = {**PROGRAM_FIELDS, **{attr: attr for attr in PROGRAM_FIELDS.values()}}


def _validate_value(attr: str, value: Any) -> tuple[Any, str | None]:
    """Return (coerced_value, error_message_or_None) for one field."""
    if value is None:
        if attr in _OPTIONAL_FIELDS:
            return None, None
        return None, "may not be null"
    if attr in _TEXT_FIELDS:
        if not isinstance(value, str):
            return None, "must be a string"
        return value, None
    if attr in _ENUM_FIELDS:
        try:
            return coerce_enum(_ENUM_FIELDS[attr], value, attr), None
        except ValidationError as exc:
            return None, str(exc)
    if attr in _AMOUNT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None, "must be a number"
        if isinstance(value, float) and not math.isfinite(value):
            return None, "must be a finite number"
        if value < 0:
            return None, "must be non-negative"
        return value, None
    if attr in _DATE_FIELDS:
        try:
            parsed = parse_date_input(value)
        except ValueError as exc:
            return None, str(exc)
        if parsed is None and attr not in _OPTIONAL_FIELDS:
            return None, "may not be empty"
        return parsed, None
    return None, "is not editable"


def normalize_program_update(fields: dict) -> dict[str, Any]:
    """Validate a partial Program update and map it to attribute names.

    Raises:
        ValidationError: unknown or read-only field, or a value of the
            wrong shape. ``details`` lists every offending field.
    """
    if not isinstance(fields, dict):
        raise ValidationError("Update payload must be an object")

    changes: dict[str, Any] = {}
    errors: dict[str, str] = {}
    for key, value in fields.items():
        attr = _ATTRIBUTE_NAMES.get(key)
        if attr is None:
            errors[key] = "unknown field"
            continue
        if attr in READ_ONLY_FIELDS:
            errors[key] = "is read-only"
            continue
        coerced, err = _validate_value(attr, value)
        if err:
            errors[key] = err
        else:
            changes[attr] = coerced

    if errors:
        raise ValidationError("Invalid program update", details=errors)
    return changes


class PortfolioStore:
    """In-memory portfolio state persisted through a storage backend."""

    def __init__(self, storage: StorageBackend, *, clock: Callable[[], date] | None = None):
        self._storage = storage
        self._clock = clock or _today
        self._programs: list[Program] = []
        self._details: list[ProgramDetail] = []
        self._program_index: dict[str, int] = {}
        self._detail_index: dict[str, int] = {}
        self._filters = FilterCriteria()
        self._ready = False

    # ── Lifecycle ────────────────────────────────────────────────────────

    def ready(self) -> bool:
        return self._ready

    def initialize(self, **seed_kwargs) -> sample_data.SeedResult:
        """Load (or generate) the portfolio and mark the store ready.

        Keyword arguments are passed to ``sample_data.initialize``.
        """
        result = sample_data.initialize(self._storage, **seed_kwargs)
        self._set_collections(result.programs, result.program_details)
        self._ready = True
        return result

    def _set_collections(self, programs, details):
        self._programs = list(programs)
        self._details = list(details)
        self._program_index = {p.id: i for i, p in enumerate(self._programs)}
        self._detail_index = {d.id: i for i, d in enumerate(self._details)}

    def _require_ready(self):
        if not self._ready:
            raise StoreNotReadyError("PortfolioStore", "PortfolioStore.initialize()")

    # ── Reads ────────────────────────────────────────────────────────────

    def list(self) -> list[Program]:
        self._require_ready()
        return list(self._programs)

    def details(self) -> list[ProgramDetail]:
        self._require_ready()
        return list(self._details)

    def detail(self, program_id: str) -> ProgramDetail | None:
        """Return the ProgramDetail for ``program_id`` or None if absent."""
        self._require_ready()
        index = self._detail_index.get(program_id)
        return self._details[index] if index is not None else None

    def get(self, program_id: str) -> Program | None:
        self._require_ready()
        index = self._program_index.get(program_id)
        return self._programs[index] if index is not None else None

    # ── Filters ──────────────────────────────────────────────────────────

    @property
    def filters(self) -> FilterCriteria:
        self._require_ready()
        return self._filters

    def set_filters(self, criteria) -> FilterCriteria:
        """Replace the current criteria as a whole (no per-field merge)."""
        self._require_ready()
        if not isinstance(criteria, FilterCriteria):
            criteria = FilterCriteria.from_dict(criteria)
        self._filters = criteria
        return criteria

    def clear_filters(self) -> FilterCriteria:
        return self.set_filters(FilterCriteria.cleared())

    def filtered(self, criteria: FilterCriteria | None = None) -> list[Program]:
        """Programs matching ``criteria`` (default: current filters), order kept."""
        self._require_ready()
        return filter_programs(self._programs, criteria if criteria is not None else self._filters)

    # ── Writes ───────────────────────────────────────────────────────────

    def update(self, program_id: str, fields: dict) -> Program | None:
        """Merge ``fields`` into the program and its detail.

        Returns the updated Program, or None when ``program_id`` is unknown.
        The id is looked up before ``fields`` are validated, so an unknown id
        is a no-op whatever the payload. Both collections are written in one
        ``save_many``; if that fails the in-memory state is left unchanged.
        """
        self._require_ready()
        index = self._program_index.get(program_id)
        detail_index = self._detail_index.get(program_id)
        if index is None or detail_index is None:
            logger.info("Update ignored, program not found: %s", program_id,
                        extra={"program_id": program_id})
            return None

        changes = normalize_program_update(fields)

        stamp = self._clock()
        program = replace(self._programs[index], **changes, updated_at=stamp)
        detail = replace(self._details[detail_index], **changes, updated_at=stamp)

        if program.budget_spent > program.budget:
            logger.warning("Program %s spend %s exceeds budget %s",
                           program_id, program.budget_spent, program.budget,
                           extra={"program_id": program_id, "event_type": "budget_overrun"})

        programs = list(self._programs)
        details = list(self._details)
        programs[index] = program
        details[detail_index] = detail
        save_json_many(self._storage, {
            PROGRAMS_KEY: [p.to_dict() for p in programs],
            PROGRAM_DETAILS_KEY: [d.to_dict() for d in details],
        })
        self._programs = programs
        self._details = details

        logger.info("Program %s updated: %s", program_id, ", ".join(sorted(changes)) or "(no fields)",
                    extra={"program_id": program_id, "event_type": "program_updated"})
        return program
