"""
Clinical R&D Portfolio Platform
Portfolio domain records.

Records:
    - Program: a drug-development initiative (the primary entity)
    - Study: a clinical trial owned by one Program
    - Milestone: a tracked deliverable owned by one Program
    - ProgramDetail: a Program plus its studies and milestones
    - FilterCriteria: the active filter selection (transient, never persisted)
    - User: the single authenticated principal

Records are frozen dataclasses persisted as JSON in the key/value store;
changes go through ``dataclasses.replace``. FilterCriteria stays mutable.
Python attributes are snake_case; ``to_dict()`` / ``from_dict()`` use the
camelCase wire names (``therapeuticArea``, ``budgetSpent`` ...). Optional
dates are omitted from the wire format when unset.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any

from portfolio.core.exceptions import ValidationError
from portfolio.utils.helpers import iso_or_none, parse_date_input


# ═════════════════════════════════════════════════════════════════════════════
# Enums
# ═════════════════════════════════════════════════════════════════════════════

class TherapeuticArea(str, Enum):
    ONCOLOGY = "Oncology"
    NEUROLOGY = "Neurology"
    CARDIOLOGY = "Cardiology"
    IMMUNOLOGY = "Immunology"
    INFECTIOUS_DISEASE = "Infectious Disease"
    RARE_DISEASE = "Rare Disease"
    METABOLIC = "Metabolic"
    RESPIRATORY = "Respiratory"


class DevelopmentPhase(str, Enum):
    """Development phases in clinical progression order."""
    DISCOVERY = "Discovery"
    PRECLINICAL = "Preclinical"
    PHASE_1 = "Phase 1"
    PHASE_2 = "Phase 2"
    PHASE_3 = "Phase 3"
    NDA_BLA = "NDA/BLA"
    APPROVED = "Approved"
    DISCONTINUED = "Discontinued"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class StudyStatus(str, Enum):
    NOT_STARTED = "Not Started"
    RECRUITING = "Recruiting"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    SUSPENDED = "Suspended"
    TERMINATED = "Terminated"


class MilestoneStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    DELAYED = "Delayed"
    AT_RISK = "At Risk"


class UserRole(str, Enum):
    VIEWER = "Viewer"
    EDITOR = "Editor"
    ADMIN = "Admin"


# Phases that no longer count as active development
CLOSED_PHASES = frozenset({DevelopmentPhase.APPROVED, DevelopmentPhase.DISCONTINUED})


# ═════════════════════════════════════════════════════════════════════════════
# Decoding helpers
# ═════════════════════════════════════════════════════════════════════════════

def _require(data: dict, key: str, record: str) -> Any:
    if key not in data or data[key] is None:
        raise ValidationError(f"{record} is missing '{key}'", details={key: "required"})
    return data[key]


def _as_str(data: dict, key: str, record: str) -> str:
    value = _require(data, key, record)
    if not isinstance(value, str):
        raise ValidationError(f"{record}.{key} must be a string", details={key: "not a string"})
    return value


def _as_number(data: dict, key: str, record: str) -> int | float:
    value = _require(data, key, record)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{record}.{key} must be numeric", details={key: "not a number"})
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{record}.{key} must be finite", details={key: "not finite"})
    return value


def _as_int(data: dict, key: str, record: str) -> int:
    value = _as_number(data, key, record)
    if not isinstance(value, int):
        raise ValidationError(f"{record}.{key} must be an integer", details={key: "not an integer"})
    return value


def coerce_enum(enum_cls: type[Enum], value: Any, key: str) -> Enum:
    """Return the ``enum_cls`` member for ``value`` or raise ValidationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise ValidationError(
            f"Invalid {key}: {value!r}. Allowed: {allowed}",
            details={key: "invalid choice"},
        ) from None


def _as_enum(enum_cls: type[Enum], data: dict, key: str, record: str) -> Enum:
    return coerce_enum(enum_cls, _require(data, key, record), key)


def _as_date(data: dict, key: str, record: str, *, optional: bool = False) -> date | None:
    value = data.get(key)
    if value is None or value == "":
        if optional:
            return None
        raise ValidationError(f"{record} is missing '{key}'", details={key: "required"})
    try:
        return parse_date_input(value)
    except ValueError as exc:
        raise ValidationError(f"{record}.{key}: {exc}", details={key: "invalid date"}) from None


def _as_list(data: dict, key: str, record: str) -> list:
    value = _require(data, key, record)
    if not isinstance(value, list):
        raise ValidationError(f"{record}.{key} must be a list", details={key: "not a list"})
    return value


def _as_mapping(data: Any, record: str) -> dict:
    if not isinstance(data, dict):
        raise ValidationError(f"{record} must be an object, got {type(data).__name__}")
    return data


# ═════════════════════════════════════════════════════════════════════════════
# Program
# ═════════════════════════════════════════════════════════════════════════════

# Wire name → attribute name, in wire order
PROGRAM_FIELDS: dict[str, str] = {
    "id": "id",
    "code": "code",
    "name": "name",
    "description": "description",
    "therapeuticArea": "therapeutic_area",
    "phase": "phase",
    "targetIndication": "target_indication",
    "mechanism": "mechanism",
    "projectLead": "project_lead",
    "therapeuticLead": "therapeutic_lead",
    "startDate": "start_date",
    "estimatedApprovalDate": "estimated_approval_date",
    "priority": "priority",
    "budget": "budget",
    "budgetSpent": "budget_spent",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


@dataclass(frozen=True)
class Program:
    """A drug-development program."""
    id: str
    code: str
    name: str
    description: str
    therapeutic_area: TherapeuticArea
    phase: DevelopmentPhase
    target_indication: str
    mechanism: str
    project_lead: str
    therapeutic_lead: str
    start_date: date
    priority: Priority
    budget: int | float
    budget_spent: int | float
    created_at: date
    updated_at: date
    estimated_approval_date: date | None = None

    def program_fields(self) -> dict[str, Any]:
        """Attribute values of the Program part only (no child collections)."""
        return {f.name: getattr(self, f.name) for f in fields(Program)}

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "therapeuticArea": self.therapeutic_area.value,
            "phase": self.phase.value,
            "targetIndication": self.target_indication,
            "mechanism": self.mechanism,
            "projectLead": self.project_lead,
            "therapeuticLead": self.therapeutic_lead,
            "startDate": iso_or_none(self.start_date),
            "priority": self.priority.value,
            "budget": self.budget,
            "budgetSpent": self.budget_spent,
            "createdAt": iso_or_none(self.created_at),
            "updatedAt": iso_or_none(self.updated_at),
        }
        if self.estimated_approval_date is not None:
            result["estimatedApprovalDate"] = iso_or_none(self.estimated_approval_date)
        return result

    @classmethod
    def _decode_fields(cls, data: Any, record: str) -> dict[str, Any]:
        data = _as_mapping(data, record)
        return {
            "id": _as_str(data, "id", record),
            "code": _as_str(data, "code", record),
            "name": _as_str(data, "name", record),
            "description": _as_str(data, "description", record),
            "therapeutic_area": _as_enum(TherapeuticArea, data, "therapeuticArea", record),
            "phase": _as_enum(DevelopmentPhase, data, "phase", record),
            "target_indication": _as_str(data, "targetIndication", record),
            "mechanism": _as_str(data, "mechanism", record),
            "project_lead": _as_str(data, "projectLead", record),
            "therapeutic_lead": _as_str(data, "therapeuticLead", record),
            "start_date": _as_date(data, "startDate", record),
            "estimated_approval_date": _as_date(data, "estimatedApprovalDate", record, optional=True),
            "priority": _as_enum(Priority, data, "priority", record),
            "budget": _as_number(data, "budget", record),
            "budget_spent": _as_number(data, "budgetSpent", record),
            "created_at": _as_date(data, "createdAt", record),
            "updated_at": _as_date(data, "updatedAt", record),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Program:
        return cls(**cls._decode_fields(data, "Program"))

    def __repr__(self):
        return f"<Program {self.id}: {self.name}>"


# ═════════════════════════════════════════════════════════════════════════════
# Study / Milestone
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Study:
    """A clinical trial belonging to a Program."""
    id: str
    program_id: str
    study_number: str
    title: str
    phase: DevelopmentPhase
    status: StudyStatus
    indication: str
    target_enrollment: int
    current_enrollment: int
    sites_count: int
    primary_endpoint: str
    start_date: date
    estimated_completion_date: date
    principal_investigator: str
    created_at: date
    updated_at: date
    actual_completion_date: date | None = None

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "programId": self.program_id,
            "studyNumber": self.study_number,
            "title": self.title,
            "phase": self.phase.value,
            "status": self.status.value,
            "indication": self.indication,
            "targetEnrollment": self.target_enrollment,
            "currentEnrollment": self.current_enrollment,
            "sitesCount": self.sites_count,
            "primaryEndpoint": self.primary_endpoint,
            "startDate": iso_or_none(self.start_date),
            "estimatedCompletionDate": iso_or_none(self.estimated_completion_date),
            "principalInvestigator": self.principal_investigator,
            "createdAt": iso_or_none(self.created_at),
            "updatedAt": iso_or_none(self.updated_at),
        }
        if self.actual_completion_date is not None:
            result["actualCompletionDate"] = iso_or_none(self.actual_completion_date)
        return result

    @classmethod
    def from_dict(cls, data: Any) -> Study:
        record = "Study"
        data = _as_mapping(data, record)
        return cls(
            id=_as_str(data, "id", record),
            program_id=_as_str(data, "programId", record),
            study_number=_as_str(data, "studyNumber", record),
            title=_as_str(data, "title", record),
            phase=_as_enum(DevelopmentPhase, data, "phase", record),
            status=_as_enum(StudyStatus, data, "status", record),
            indication=_as_str(data, "indication", record),
            target_enrollment=_as_int(data, "targetEnrollment", record),
            current_enrollment=_as_int(data, "currentEnrollment", record),
            sites_count=_as_int(data, "sitesCount", record),
            primary_endpoint=_as_str(data, "primaryEndpoint", record),
            start_date=_as_date(data, "startDate", record),
            estimated_completion_date=_as_date(data, "estimatedCompletionDate", record),
            actual_completion_date=_as_date(data, "actualCompletionDate", record, optional=True),
            principal_investigator=_as_str(data, "principalInvestigator", record),
            created_at=_as_date(data, "createdAt", record),
            updated_at=_as_date(data, "updatedAt", record),
        )


@dataclass(frozen=True)
class Milestone:
    """A tracked deliverable belonging to a Program."""
    id: str
    program_id: str
    title: str
    description: str
    target_date: date
    status: MilestoneStatus
    created_at: date
    updated_at: date
    completion_date: date | None = None

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "programId": self.program_id,
            "title": self.title,
            "description": self.description,
            "targetDate": iso_or_none(self.target_date),
            "status": self.status.value,
            "createdAt": iso_or_none(self.created_at),
            "updatedAt": iso_or_none(self.updated_at),
        }
        if self.completion_date is not None:
            result["completionDate"] = iso_or_none(self.completion_date)
        return result

    @classmethod
    def from_dict(cls, data: Any) -> Milestone:
        record = "Milestone"
        data = _as_mapping(data, record)
        return cls(
            id=_as_str(data, "id", record),
            program_id=_as_str(data, "programId", record),
            title=_as_str(data, "title", record),
            description=_as_str(data, "description", record),
            target_date=_as_date(data, "targetDate", record),
            completion_date=_as_date(data, "completionDate", record, optional=True),
            status=_as_enum(MilestoneStatus, data, "status", record),
            created_at=_as_date(data, "createdAt", record),
            updated_at=_as_date(data, "updatedAt", record),
        )


# ═════════════════════════════════════════════════════════════════════════════
# ProgramDetail
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProgramDetail(Program):
    """A Program together with the studies and milestones it owns."""
    studies: tuple[Study, ...] = ()
    milestones: tuple[Milestone, ...] = ()

    @classmethod
    def from_program(cls, program: Program, studies=None, milestones=None) -> ProgramDetail:
        return cls(
            **program.program_fields(),
            studies=tuple(studies or ()),
            milestones=tuple(milestones or ()),
        )

    def as_program(self) -> Program:
        return Program(**self.program_fields())

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["studies"] = [s.to_dict() for s in self.studies]
        result["milestones"] = [m.to_dict() for m in self.milestones]
        return result

    @classmethod
    def from_dict(cls, data: Any) -> ProgramDetail:
        record = "ProgramDetail"
        values = cls._decode_fields(data, record)
        return cls(
            **values,
            studies=tuple(Study.from_dict(s) for s in _as_list(data, "studies", record)),
            milestones=tuple(Milestone.from_dict(m) for m in _as_list(data, "milestones", record)),
        )

    def __repr__(self):
        return f"<ProgramDetail {self.id}: {len(self.studies)} studies, {len(self.milestones)} milestones>"


# ═════════════════════════════════════════════════════════════════════════════
# FilterCriteria / User
# ═════════════════════════════════════════════════════════════════════════════

@dataclass
class FilterCriteria:
    """Active filter selection. An empty dimension does not filter."""
    therapeutic_areas: list[TherapeuticArea] = field(default_factory=list)
    phases: list[DevelopmentPhase] = field(default_factory=list)
    priorities: list[Priority] = field(default_factory=list)
    search_query: str = ""

    def is_active(self) -> bool:
        return bool(self.therapeutic_areas or self.phases or self.priorities or self.search_query)

    @classmethod
    def cleared(cls) -> FilterCriteria:
        return cls()

    def to_dict(self) -> dict:
        return {
            "therapeuticAreas": [a.value for a in self.therapeutic_areas],
            "phases": [p.value for p in self.phases],
            "priorities": [p.value for p in self.priorities],
            "searchQuery": self.search_query,
        }

    @classmethod
    def from_dict(cls, data: Any) -> FilterCriteria:
        """Build criteria from a wire payload; missing keys mean "no filter"."""
        data = _as_mapping(data or {}, "FilterCriteria")

        def _values(key):
            raw = data.get(key) or []
            if isinstance(raw, str):
                raw = [raw]
            if not isinstance(raw, list):
                raise ValidationError(f"FilterCriteria.{key} must be a list", details={key: "not a list"})
            return raw

        query = data.get("searchQuery") or ""
        if not isinstance(query, str):
            raise ValidationError("FilterCriteria.searchQuery must be a string",
                                  details={"searchQuery": "not a string"})
        return cls(
            therapeutic_areas=[coerce_enum(TherapeuticArea, v, "therapeuticAreas")
                               for v in _values("therapeuticAreas")],
            phases=[coerce_enum(DevelopmentPhase, v, "phases") for v in _values("phases")],
            priorities=[coerce_enum(Priority, v, "priorities") for v in _values("priorities")],
            search_query=query,
        )


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: UserRole

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}

    @classmethod
    def from_dict(cls, data: Any) -> User:
        record = "User"
        data = _as_mapping(data, record)
        return cls(
            id=_as_str(data, "id", record),
            name=_as_str(data, "name", record),
            email=_as_str(data, "email", record),
            role=_as_enum(UserRole, data, "role", record),
        )
