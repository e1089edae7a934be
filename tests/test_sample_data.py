"""
Clinical R&D Portfolio Platform
Tests — sample data generator.

Covers:
    - Shape of generated programs, studies and milestones
    - Idempotent initialization (second call returns persisted data)
    - Regeneration on missing / corrupt / mis-shaped storage
    - reset()
"""

import json
import random
from datetime import date

from portfolio.models.portfolio import (
    DevelopmentPhase,
    MilestoneStatus,
    StudyStatus,
    TherapeuticArea,
)
from portfolio.services import sample_data
from portfolio.services.reference_data import INDICATIONS, MILESTONE_TEMPLATES
from portfolio.services.storage import (
    PROGRAM_DETAILS_KEY,
    PROGRAMS_KEY,
    MemoryStorage,
)
from portfolio.utils.helpers import add_months

TODAY = date(2025, 3, 14)


def _seed(storage, count=50, seed=7):
    return sample_data.initialize(storage, count=count, rng=random.Random(seed), today=TODAY)


# ═════════════════════════════════════════════════════════════════════════════
# GENERATION
# ═════════════════════════════════════════════════════════════════════════════

def test_generates_fifty_programs_by_default(storage):
    result = sample_data.initialize(storage, rng=random.Random(1))
    assert result.generated is True
    assert len(result.programs) == 50
    assert len(result.program_details) == 50


def test_program_ids_and_codes(storage):
    result = _seed(storage)
    for i, program in enumerate(result.programs, start=1):
        assert program.id == f"PROG-{i:04d}"
        prefix = program.therapeutic_area.value[:3].upper()
        assert program.code == f"{prefix}-{i:03d}"


def test_program_field_ranges(storage):
    result = _seed(storage)
    for p in result.programs:
        assert 10_000_000 <= p.budget < 160_000_000
        assert p.budget * 0.1 - 1 <= p.budget_spent <= p.budget * 0.8
        assert date(2018, 1, 1) <= p.start_date <= date(2024, 12, 31)
        assert p.target_indication in INDICATIONS[p.therapeutic_area]
        assert p.created_at == p.start_date
        assert p.updated_at == TODAY
        assert " for " in p.name


def test_estimated_approval_absent_only_when_discontinued(storage):
    result = _seed(storage, count=200)
    for p in result.programs:
        if p.phase == DevelopmentPhase.DISCONTINUED:
            assert p.estimated_approval_date is None
        else:
            assert add_months(p.start_date, 24) <= p.estimated_approval_date <= add_months(p.start_date, 48)


def test_studies_shape(storage):
    result = _seed(storage)
    for detail in result.program_details:
        assert len(detail.studies) == 3
        for i, study in enumerate(detail.studies):
            assert study.program_id == detail.id
            assert study.id == f"{detail.id}-STD-{i + 1:03d}"
            assert study.study_number == f"{detail.code}-{i + 1:03d}"
            assert study.phase == detail.phase
            assert study.indication == detail.target_indication
            assert study.start_date == add_months(detail.start_date, i * 6)
            assert 50 <= study.target_enrollment < 850
            if study.status == StudyStatus.COMPLETED:
                assert study.current_enrollment == study.target_enrollment
                assert study.actual_completion_date == study.estimated_completion_date
            else:
                assert study.current_enrollment <= study.target_enrollment * 0.8
                assert study.actual_completion_date is None
            if detail.therapeutic_area == TherapeuticArea.ONCOLOGY:
                assert study.primary_endpoint == "Overall Survival"


def test_milestones_shape(storage):
    result = _seed(storage)
    for detail in result.program_details:
        assert [m.title for m in detail.milestones] == MILESTONE_TEMPLATES[:5]
        for i, milestone in enumerate(detail.milestones):
            assert milestone.target_date == add_months(detail.start_date, i * 4 + 2)
            assert milestone.created_at == detail.start_date
            if milestone.status == MilestoneStatus.COMPLETED:
                assert milestone.completion_date == milestone.target_date
            else:
                assert milestone.completion_date is None


def test_details_mirror_programs(storage):
    result = _seed(storage)
    for program, detail in zip(result.programs, result.program_details):
        assert detail.as_program() == program


def test_seeded_generation_is_reproducible():
    first = _seed(MemoryStorage(), seed=99)
    second = _seed(MemoryStorage(), seed=99)
    assert first.programs == second.programs
    assert first.program_details == second.program_details


# ═════════════════════════════════════════════════════════════════════════════
# PERSISTENCE
# ═════════════════════════════════════════════════════════════════════════════

def test_initialize_is_idempotent(storage):
    first = _seed(storage, seed=1)
    stored_programs = storage.load(PROGRAMS_KEY)
    stored_details = storage.load(PROGRAM_DETAILS_KEY)

    second = sample_data.initialize(storage, rng=random.Random(2))

    assert second.generated is False
    assert second.programs == first.programs
    assert second.program_details == first.program_details
    assert storage.load(PROGRAMS_KEY) == stored_programs
    assert storage.load(PROGRAM_DETAILS_KEY) == stored_details


def test_persisted_wire_format(storage):
    _seed(storage, count=3)
    programs = json.loads(storage.load(PROGRAMS_KEY))
    details = json.loads(storage.load(PROGRAM_DETAILS_KEY))
    assert programs[0]["id"] == "PROG-0001"
    assert {"therapeuticArea", "budgetSpent", "targetIndication", "updatedAt"} <= set(programs[0])
    assert len(details[0]["studies"]) == 3
    assert len(details[0]["milestones"]) == 5
    for p in programs:
        if p["phase"] == "Discontinued":
            assert "estimatedApprovalDate" not in p


def test_regenerates_when_one_key_missing(storage):
    _seed(storage, count=5)
    storage.remove(PROGRAM_DETAILS_KEY)
    result = _seed(storage, count=5)
    assert result.generated is True
    assert storage.load(PROGRAM_DETAILS_KEY) is not None


def test_regenerates_on_invalid_json(storage):
    storage.save(PROGRAMS_KEY, "{not json")
    storage.save(PROGRAM_DETAILS_KEY, "[]")
    result = _seed(storage, count=4)
    assert result.generated is True
    assert len(json.loads(storage.load(PROGRAMS_KEY))) == 4


def test_regenerates_on_bad_shape(storage):
    storage.save(PROGRAMS_KEY, json.dumps([{"id": "PROG-0001"}]))
    storage.save(PROGRAM_DETAILS_KEY, json.dumps([{"id": "PROG-0001"}]))
    result = _seed(storage, count=4)
    assert result.generated is True
    assert len(result.programs) == 4


def test_regenerates_when_collections_disagree(storage):
    _seed(storage, count=4)
    details = json.loads(storage.load(PROGRAM_DETAILS_KEY))
    storage.save(PROGRAM_DETAILS_KEY, json.dumps(details[:2]))
    result = _seed(storage, count=4)
    assert result.generated is True
    assert len(result.program_details) == 4


def test_reset_forces_regeneration(storage):
    _seed(storage, count=3)
    sample_data.reset(storage)
    assert storage.load(PROGRAMS_KEY) is None
    assert storage.load(PROGRAM_DETAILS_KEY) is None
    assert _seed(storage, count=3).generated is True


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 11, 15), 14) == date(2025, 1, 15)


def test_regenerates_when_detail_fields_diverge(storage):
    _seed(storage, count=4)
    programs = json.loads(storage.load(PROGRAMS_KEY))
    programs[1]["name"] = "Edited Only In Programs"
    storage.save(PROGRAMS_KEY, json.dumps(programs))

    result = _seed(storage, count=4)

    assert result.generated is True
    for program, detail in zip(result.programs, result.program_details):
        assert detail.as_program() == program


def test_regenerates_on_non_finite_budget(storage):
    _seed(storage, count=2)
    programs = json.loads(storage.load(PROGRAMS_KEY))
    details = json.loads(storage.load(PROGRAM_DETAILS_KEY))
    programs[0]["budget"] = details[0]["budget"] = float("nan")
    storage.save(PROGRAMS_KEY, json.dumps(programs))
    storage.save(PROGRAM_DETAILS_KEY, json.dumps(details))

    result = _seed(storage, count=2)

    assert result.generated is True
    assert json.loads(storage.load(PROGRAMS_KEY))[0]["budget"] == result.programs[0].budget
