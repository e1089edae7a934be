"""Sample data generator — seeds the portfolio on first start.

``initialize()`` is idempotent: the first call generates programs with their
studies and milestones and writes them to storage; every later call returns
the persisted collections unchanged. Missing, undecodable or mis-shaped
entries are replaced by a fresh dataset.

Usage:
    from portfolio.services.sample_data import initialize
    result = initialize(storage, count=50, rng=random.Random(7))
    result.programs, result.program_details, result.generated
"""
import logging
import random
from dataclasses import dataclass
from datetime import date, timedelta

from portfolio.core.exceptions import StorageCorruptionError, ValidationError
from portfolio.models.portfolio import (
    DevelopmentPhase,
    Milestone,
    MilestoneStatus,
    Priority,
    Program,
    ProgramDetail,
    Study,
    StudyStatus,
    TherapeuticArea,
)
from portfolio.services.reference_data import (
    DEFAULT_ENDPOINT,
    INDICATIONS,
    INVESTIGATORS,
    MECHANISM_TYPES,
    MILESTONE_TEMPLATES,
    ONCOLOGY_ENDPOINT,
    PROJECT_LEADS,
)
from portfolio.services.storage import (
    PROGRAM_DETAILS_KEY,
    PROGRAMS_KEY,
    StorageBackend,
    load_json,
    save_json_many,
)
from portfolio.utils.helpers import add_months
from portfolio.utils.helpers import today as _today

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_COUNT = 50
STUDIES_PER_PROGRAM = 3
MILESTONES_PER_PROGRAM = 5

START_WINDOW = (date(2018, 1, 1), date(2024, 12, 31))
BUDGET_MIN = 10_000_000
BUDGET_RANGE = 150_000_000
SPENT_FRACTION = (0.1, 0.8)
APPROVAL_OFFSET_MONTHS = (24, 48)
STUDY_SPACING_MONTHS = 6


@dataclass
class SeedResult:
    programs: list[Program]
    program_details: list[ProgramDetail]
    generated: bool


# ═════════════════════════════════════════════════════════════════════════════
# Generation
# ═════════════════════════════════════════════════════════════════════════════


def _fraction(rng: random.Random) -> float:
    low, high = SPENT_FRACTION
    return rng.random() * (high - low) + low


def _random_date(rng: random.Random, start: date, end: date) -> date:
    return start + timedelta(days=rng.randint(0, (end - start).days))


def program_code(area: TherapeuticArea, number: int) -> str:
    """Short code from the area prefix and sequence number, e.g. ``ONC-001``."""
    return f"{area.value[:3].upper()}-{number:03d}"


def generate_programs(count: int, rng: random.Random, today: date) -> list[Program]:
    programs = []
    areas = list(TherapeuticArea)
    phases = list(DevelopmentPhase)
    priorities = list(Priority)

    for i in range(count):
        number = i + 1
        area = rng.choice(areas)
        phase = rng.choice(phases)
        priority = rng.choice(priorities)
        start_date = _random_date(rng, *START_WINDOW)
        budget = rng.randrange(BUDGET_RANGE) + BUDGET_MIN
        budget_spent = int(budget * _fraction(rng))
        indications = INDICATIONS[area]

        approval = None
        if phase != DevelopmentPhase.DISCONTINUED:
            approval = add_months(start_date, rng.randint(*APPROVAL_OFFSET_MONTHS))

        programs.append(Program(
            id=f"PROG-{number:04d}",
            code=program_code(area, number),
            name=f"{rng.choice(MECHANISM_TYPES)} for {rng.choice(indications)}",
            description=(
                f"Novel {rng.choice(MECHANISM_TYPES).lower()} targeting {rng.choice(indications)}. "
                "The compound demonstrates promising efficacy and safety profile in early studies."
            ),
            therapeutic_area=area,
            phase=phase,
            target_indication=rng.choice(indications),
            mechanism=rng.choice(MECHANISM_TYPES),
            project_lead=rng.choice(PROJECT_LEADS),
            therapeutic_lead=rng.choice(PROJECT_LEADS),
            start_date=start_date,
            estimated_approval_date=approval,
            priority=priority,
            budget=budget,
            budget_spent=budget_spent,
            created_at=start_date,
            updated_at=today,
        ))
    return programs


def generate_studies(program: Program, rng: random.Random, today: date,
                     count: int = STUDIES_PER_PROGRAM) -> list[Study]:
    studies = []
    statuses = list(StudyStatus)
    endpoint = (ONCOLOGY_ENDPOINT if program.therapeutic_area == TherapeuticArea.ONCOLOGY
                else DEFAULT_ENDPOINT)

    for i in range(count):
        status = rng.choice(statuses)
        target = rng.randrange(800) + 50
        current = target if status == StudyStatus.COMPLETED else int(target * _fraction(rng))
        start_date = add_months(program.start_date, i * STUDY_SPACING_MONTHS)
        estimated_completion = add_months(start_date, rng.randrange(24) + 12)

        studies.append(Study(
            id=f"{program.id}-STD-{i + 1:03d}",
            program_id=program.id,
            study_number=f"{program.code}-{i + 1:03d}",
            title=f"{program.phase.value} Clinical Trial - {program.target_indication}",
            phase=program.phase,
            status=status,
            indication=program.target_indication,
            target_enrollment=target,
            current_enrollment=current,
            sites_count=rng.randrange(50) + 5,
            primary_endpoint=endpoint,
            start_date=start_date,
            estimated_completion_date=estimated_completion,
            actual_completion_date=estimated_completion if status == StudyStatus.COMPLETED else None,
            principal_investigator=rng.choice(INVESTIGATORS),
            created_at=start_date,
            updated_at=today,
        ))
    return studies


def generate_milestones(program: Program, rng: random.Random, today: date,
                        count: int = MILESTONES_PER_PROGRAM) -> list[Milestone]:
    milestones = []
    statuses = list(MilestoneStatus)

    for i in range(count):
        status = rng.choice(statuses)
        target_date = add_months(program.start_date, i * 4 + 2)
        milestones.append(Milestone(
            id=f"{program.id}-MS-{i + 1:03d}",
            program_id=program.id,
            title=MILESTONE_TEMPLATES[i % len(MILESTONE_TEMPLATES)],
            description=f"Key milestone for {program.name} development program",
            target_date=target_date,
            completion_date=target_date if status == MilestoneStatus.COMPLETED else None,
            status=status,
            created_at=program.start_date,
            updated_at=today,
        ))
    return milestones


def generate_program_details(programs: list[Program], rng: random.Random,
                             today: date) -> list[ProgramDetail]:
    return [
        ProgramDetail.from_program(
            program,
            studies=generate_studies(program, rng, today),
            milestones=generate_milestones(program, rng, today),
        )
        for program in programs
    ]


# ═════════════════════════════════════════════════════════════════════════════
# Persistence
# ═════════════════════════════════════════════════════════════════════════════


def _load_persisted(storage: StorageBackend):
    """Return (programs, details) from storage, or None when regeneration is needed."""
    try:
        raw_programs = load_json(storage, PROGRAMS_KEY)
        raw_details = load_json(storage, PROGRAM_DETAILS_KEY)
        if raw_programs is None or raw_details is None:
            return None
        if not isinstance(raw_programs, list) or not isinstance(raw_details, list):
            raise ValidationError("Persisted collections must be JSON arrays")
        programs = [Program.from_dict(p) for p in raw_programs]
        details = [ProgramDetail.from_dict(d) for d in raw_details]
    except (StorageCorruptionError, ValidationError) as exc:
        logger.warning("Persisted portfolio data unusable, regenerating: %s", exc,
                       extra={"event_type": "storage_corruption"})
        return None

    if len(programs) != len(details) or any(
        detail.as_program() != program for program, detail in zip(programs, details)
    ):
        logger.warning("Persisted programs and program details disagree, regenerating",
                       extra={"event_type": "storage_corruption"})
        return None
    return programs, details


def initialize(storage: StorageBackend, *, count: int = DEFAULT_PROGRAM_COUNT,
               rng: random.Random | None = None, today: date | None = None) -> SeedResult:
    """Return the persisted portfolio, generating and saving it on first use.

    Args:
        storage: Key/value backend holding ``programs`` / ``programDetails``.
        count: Number of programs to generate when seeding.
        rng: Random source; a fresh ``random.Random()`` if omitted.
        today: Date stamped into ``updatedAt``; defaults to the current date.
    """
    persisted = _load_persisted(storage)
    if persisted is not None:
        programs, details = persisted
        logger.debug("Loaded %d persisted programs", len(programs))
        return SeedResult(programs, details, generated=False)

    rng = rng or random.Random()
    today = today or _today()
    programs = generate_programs(count, rng, today)
    details = generate_program_details(programs, rng, today)

    save_json_many(storage, {
        PROGRAMS_KEY: [p.to_dict() for p in programs],
        PROGRAM_DETAILS_KEY: [d.to_dict() for d in details],
    })
    logger.info("Generated sample portfolio: %d programs", len(programs),
                extra={"event_type": "portfolio_seeded"})
    return SeedResult(programs, details, generated=True)


def reset(storage: StorageBackend) -> None:
    """Drop the persisted portfolio so the next ``initialize`` regenerates."""
    storage.remove(PROGRAMS_KEY)
    storage.remove(PROGRAM_DETAILS_KEY)
    logger.info("Portfolio data removed from storage", extra={"event_type": "portfolio_reset"})
