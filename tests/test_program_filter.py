"""
Clinical R&D Portfolio Platform
Tests — program filter predicate.

Covers:
    - Empty criteria pass everything
    - Each set-membership gate
    - Case-insensitive search over name / code / indication / lead
    - Conjunction of all four dimensions
    - Stable ordering of filter_programs
"""

import itertools

import pytest

from portfolio.models.portfolio import (
    DevelopmentPhase,
    FilterCriteria,
    Priority,
    TherapeuticArea,
)
from portfolio.services.program_filter import filter_programs, matches


def test_empty_criteria_accepts(make_program):
    assert matches(make_program(), FilterCriteria()) is True


def test_therapeutic_area_gate(make_program):
    program = make_program(therapeutic_area=TherapeuticArea.NEUROLOGY)
    assert matches(program, FilterCriteria(therapeutic_areas=[TherapeuticArea.NEUROLOGY]))
    assert not matches(program, FilterCriteria(therapeutic_areas=[TherapeuticArea.ONCOLOGY]))
    assert matches(program, FilterCriteria(
        therapeutic_areas=[TherapeuticArea.ONCOLOGY, TherapeuticArea.NEUROLOGY],
    ))


def test_phase_gate(make_program):
    program = make_program(phase=DevelopmentPhase.NDA_BLA)
    assert matches(program, FilterCriteria(phases=[DevelopmentPhase.NDA_BLA]))
    assert not matches(program, FilterCriteria(phases=[DevelopmentPhase.PHASE_3]))


def test_priority_gate(make_program):
    program = make_program(priority=Priority.LOW)
    assert matches(program, FilterCriteria(priorities=[Priority.LOW, Priority.MEDIUM]))
    assert not matches(program, FilterCriteria(priorities=[Priority.HIGH]))


@pytest.mark.parametrize("query", [
    "lung cancer",      # name
    "onc-901",          # code
    "NON-SMALL",        # target indication
    "sarah",            # project lead
])
def test_search_fields_case_insensitive(make_program, query):
    assert matches(make_program(), FilterCriteria(search_query=query))


def test_search_ignores_other_fields(make_program):
    program = make_program(description="unique-description-token", therapeutic_lead="Dr. Zed")
    assert not matches(program, FilterCriteria(search_query="unique-description-token"))
    assert not matches(program, FilterCriteria(search_query="zed"))


def test_oncology_search_scenario(make_program):
    criteria = FilterCriteria(therapeutic_areas=[TherapeuticArea.ONCOLOGY], search_query="cancer")
    oncology = make_program(therapeutic_area=TherapeuticArea.ONCOLOGY,
                            name="Oncology Drug for Lung Cancer")
    neurology = make_program(therapeutic_area=TherapeuticArea.NEUROLOGY,
                             name="Oncology Drug for Lung Cancer")
    assert matches(oncology, criteria) is True
    assert matches(neurology, criteria) is False


def test_search_does_not_override_failed_gates(make_program):
    program = make_program(priority=Priority.LOW, phase=DevelopmentPhase.PHASE_1)
    assert not matches(program, FilterCriteria(priorities=[Priority.HIGH], search_query="lung"))
    assert not matches(program, FilterCriteria(phases=[DevelopmentPhase.PHASE_3], search_query="lung"))


def test_all_dimensions_compose_conjunctively(portfolio_store):
    """matches() equals the AND of the four independent dimension checks."""
    programs = portfolio_store.list()
    area_options = [[], [TherapeuticArea.ONCOLOGY, TherapeuticArea.CARDIOLOGY]]
    phase_options = [[], [DevelopmentPhase.PHASE_1, DevelopmentPhase.PHASE_2, DevelopmentPhase.PHASE_3]]
    priority_options = [[], [Priority.HIGH]]
    query_options = ["", "dr.", "inhibitor"]

    for areas, phases, priorities, query in itertools.product(
        area_options, phase_options, priority_options, query_options,
    ):
        criteria = FilterCriteria(areas, phases, priorities, query)
        for p in programs:
            expected = (
                (not areas or p.therapeutic_area in areas)
                and (not phases or p.phase in phases)
                and (not priorities or p.priority in priorities)
                and (not query or any(
                    query.lower() in value.lower()
                    for value in (p.name, p.code, p.target_indication, p.project_lead)
                ))
            )
            assert matches(p, criteria) == expected


def test_filter_programs_keeps_order(make_program):
    programs = [
        make_program(id="PROG-0003", priority=Priority.HIGH),
        make_program(id="PROG-0001", priority=Priority.LOW),
        make_program(id="PROG-0002", priority=Priority.HIGH),
    ]
    result = filter_programs(programs, FilterCriteria(priorities=[Priority.HIGH]))
    assert [p.id for p in result] == ["PROG-0003", "PROG-0002"]
