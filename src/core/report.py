from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from src.domain.errors import EmptyDatasetError
from src.domain.models import PatientRecord, Gender, Condition, CONDITION_ORDER, GENDER_ORDER

# --- View Models ---

@dataclass
class ConditionBreakdown:
    condition: Condition
    count: int
    percentage: float

@dataclass
class GenderSection:
    gender: Gender
    conditions: List[Tuple[Condition, int]]

    @property
    def total(self) -> int:
        return sum(count for _, count in self.conditions)

@dataclass
class CensusReport:
    total: int
    conditions: List[ConditionBreakdown] = field(default_factory=list)
    genders: List[GenderSection] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.total > 0

@dataclass
class LiveStats:
    total_patients: int
    average_age: Optional[int]
    unique_conditions: int
    today_count: int

# --- Aggregation ---

def aggregate_by_condition(records: Sequence[PatientRecord]) -> Dict[Condition, int]:
    """Count per known condition. Every condition is present, zero included."""
    counts = {c: 0 for c in CONDITION_ORDER}
    for r in records:
        counts[r.condition] += 1
    return counts

def aggregate_by_gender_and_condition(records: Sequence[PatientRecord]) -> Dict[Gender, Dict[Condition, int]]:
    counts = {g: {c: 0 for c in CONDITION_ORDER} for g in GENDER_ORDER}
    for r in records:
        counts[r.gender][r.condition] += 1
    return counts

def percentage_of(count: int, total: int) -> float:
    """Percentage with one fractional digit, ties rounded up; 0.0 when total is 0."""
    if total <= 0:
        return 0.0
    return float(Decimal(str(count / total * 100)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

def unique_condition_count(records: Sequence[PatientRecord]) -> int:
    return len({r.condition for r in records})

def average_age(records: Sequence[PatientRecord]) -> float:
    if not records:
        raise EmptyDatasetError("Average age is undefined without records")
    return sum(r.age for r in records) / len(records)

def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

# --- Report Building ---

def build_report(records: Sequence[PatientRecord]) -> CensusReport:
    """Report panel data. Empty input short-circuits before any percentage."""
    total = len(records)
    if total == 0:
        return CensusReport(total=0)

    # 1. Conditions breakdown (zero-count conditions are not rendered)
    breakdown = [
        ConditionBreakdown(condition=c, count=n, percentage=percentage_of(n, total))
        for c, n in aggregate_by_condition(records).items()
        if n > 0
    ]

    # 2. Gender sections (only genders with at least one record)
    sections = []
    for gender, per_condition in aggregate_by_gender_and_condition(records).items():
        if sum(per_condition.values()) == 0:
            continue
        sections.append(GenderSection(
            gender=gender,
            conditions=[(c, n) for c, n in per_condition.items() if n > 0],
        ))

    return CensusReport(total=total, conditions=breakdown, genders=sections)

def build_live_stats(records: Sequence[PatientRecord], today_count: int) -> LiveStats:
    return LiveStats(
        total_patients=len(records),
        average_age=round_half_up(average_age(records)) if records else None,
        unique_conditions=unique_condition_count(records),
        today_count=today_count,
    )

def chart_data(records: Sequence[PatientRecord]) -> Dict[str, int]:
    """Doughnut chart series: label -> count for all three conditions."""
    return {c.value: n for c, n in aggregate_by_condition(records).items()}
