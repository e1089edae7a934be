"""
Portfolio Analytics Service

Display aggregates for the dashboard, program detail and analytics views:
  - Portfolio summary (counts, budget, spend, utilization)
  - Distributions by phase / therapeutic area / priority
  - Budget allocation by phase
  - Top programs by budget
  - Per-program detail metrics (budget utilization, enrollment, milestones)

All functions are pure: they take records and return plain dicts ready
for ``jsonify``.
"""

from collections import Counter

from portfolio.models.portfolio import (
    CLOSED_PHASES,
    DevelopmentPhase,
    MilestoneStatus,
    Priority,
    StudyStatus,
    TherapeuticArea,
)

TOP_PROGRAMS_LIMIT = 10


def _percent(part, whole, digits=1):
    if not whole:
        return 0.0
    return round(part / whole * 100, digits)


def budget_utilization(program) -> float:
    """Spent share of the program budget, in percent (one decimal)."""
    return _percent(program.budget_spent, program.budget)


def portfolio_summary(programs) -> dict:
    """High-level portfolio KPIs."""
    total_budget = sum(p.budget for p in programs)
    total_spent = sum(p.budget_spent for p in programs)
    return {
        "total_programs": len(programs),
        "active_programs": sum(1 for p in programs if p.phase not in CLOSED_PHASES),
        "total_budget": total_budget,
        "total_spent": total_spent,
        "remaining_budget": total_budget - total_spent,
        "utilization_pct": _percent(total_spent, total_budget),
    }


def phase_distribution(programs) -> list[dict]:
    """Program count per phase, in clinical progression order."""
    counts = Counter(p.phase for p in programs)
    return [{"phase": phase.value, "count": counts.get(phase, 0)} for phase in DevelopmentPhase]


def therapeutic_area_distribution(programs) -> list[dict]:
    """Program count and share per therapeutic area, largest first."""
    counts = Counter(p.therapeutic_area for p in programs)
    rows = [
        {
            "therapeutic_area": area.value,
            "count": counts.get(area, 0),
            "share_pct": _percent(counts.get(area, 0), len(programs)),
        }
        for area in TherapeuticArea
    ]
    # sorted() is stable: ties keep enumeration order
    return sorted(rows, key=lambda r: r["count"], reverse=True)


def priority_distribution(programs) -> list[dict]:
    counts = Counter(p.priority for p in programs)
    return [{"priority": pr.value, "count": counts.get(pr, 0)} for pr in Priority]


def budget_by_phase(programs) -> list[dict]:
    """Budget and spend per phase, phases without budget omitted, largest first."""
    rows = []
    for phase in DevelopmentPhase:
        members = [p for p in programs if p.phase == phase]
        budget = sum(p.budget for p in members)
        if budget <= 0:
            continue
        spent = sum(p.budget_spent for p in members)
        rows.append({
            "phase": phase.value,
            "budget": budget,
            "spent": spent,
            "utilization_pct": _percent(spent, budget, digits=0),
        })
    return sorted(rows, key=lambda r: r["budget"], reverse=True)


def top_programs_by_budget(programs, limit=TOP_PROGRAMS_LIMIT) -> list[dict]:
    ranked = sorted(programs, key=lambda p: p.budget, reverse=True)[:limit]
    return [
        {
            "id": p.id,
            "code": p.code,
            "name": p.name,
            "phase": p.phase.value,
            "therapeutic_area": p.therapeutic_area.value,
            "budget": p.budget,
            "budget_spent": p.budget_spent,
            "utilization_pct": budget_utilization(p),
        }
        for p in ranked
    ]


def program_detail_metrics(detail) -> dict:
    """Metrics shown on a program's detail page."""
    target = sum(s.target_enrollment for s in detail.studies)
    current = sum(s.current_enrollment for s in detail.studies)
    study_status = Counter(s.status for s in detail.studies)
    completed = sum(1 for m in detail.milestones if m.status == MilestoneStatus.COMPLETED)
    return {
        "budget_utilization_pct": budget_utilization(detail),
        "remaining_budget": detail.budget - detail.budget_spent,
        "target_enrollment": target,
        "current_enrollment": current,
        "enrollment_progress_pct": _percent(current, target),
        "milestones_completed": completed,
        "milestones_total": len(detail.milestones),
        "study_status_counts": {s.value: study_status.get(s, 0) for s in StudyStatus},
    }


def portfolio_analytics(programs) -> dict:
    """Full analytics bundle for the analytics view."""
    return {
        "summary": portfolio_summary(programs),
        "phase_distribution": phase_distribution(programs),
        "therapeutic_area_distribution": therapeutic_area_distribution(programs),
        "priority_distribution": priority_distribution(programs),
        "budget_by_phase": budget_by_phase(programs),
        "top_programs": top_programs_by_budget(programs),
    }
