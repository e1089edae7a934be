"""Program filter predicate.

A program passes when every active dimension of the criteria accepts it:
therapeutic area, phase and priority are set-membership gates (an empty
selection lets everything through) and the search query is a
case-insensitive substring match over name, code, target indication and
project lead.
"""
from portfolio.models.portfolio import FilterCriteria, Program

SEARCH_FIELDS = ("name", "code", "target_indication", "project_lead")


def matches_search(program: Program, query: str) -> bool:
    needle = query.lower()
    return any(needle in getattr(program, attr).lower() for attr in SEARCH_FIELDS)


def matches(program: Program, criteria: FilterCriteria) -> bool:
    if criteria.therapeutic_areas and program.therapeutic_area not in criteria.therapeutic_areas:
        return False
    if criteria.phases and program.phase not in criteria.phases:
        return False
    if criteria.priorities and program.priority not in criteria.priorities:
        return False
    # Runs after the gates above, so search narrows the already-gated set
    if criteria.search_query:
        return matches_search(program, criteria.search_query)
    return True


def filter_programs(programs, criteria: FilterCriteria) -> list:
    """Return the programs matching ``criteria`` in their original order."""
    return [p for p in programs if matches(p, criteria)]
