from datetime import datetime

import pytest

from src.core.report import (
    aggregate_by_condition,
    aggregate_by_gender_and_condition,
    average_age,
    build_live_stats,
    build_report,
    chart_data,
    percentage_of,
    unique_condition_count,
)
from src.domain.errors import EmptyDatasetError
from src.domain.models import PatientRecord, Gender, Condition


def make_record(i, gender, age, condition) -> PatientRecord:
    return PatientRecord(
        id=i,
        name=f"Patient {i}",
        gender=gender,
        age=age,
        condition=condition,
        created_at=datetime(2026, 10, 1, 12, 0),
    )


@pytest.fixture
def records():
    return [
        make_record(1, Gender.FEMALE, 30, Condition.DIABETES),
        make_record(2, Gender.MALE, 45, Condition.THYROID),
        make_record(3, Gender.FEMALE, 60, Condition.DIABETES),
    ]


def test_aggregate_by_condition_includes_zero_counts(records):
    assert aggregate_by_condition(records) == {
        Condition.DIABETES: 2,
        Condition.THYROID: 1,
        Condition.HIGH_BLOOD_PRESSURE: 0,
    }


def test_aggregate_is_idempotent(records):
    assert aggregate_by_condition(records) == aggregate_by_condition(records)
    assert aggregate_by_gender_and_condition(records) == aggregate_by_gender_and_condition(records)


def test_condition_counts_sum_to_total(records):
    more = records + [make_record(4, Gender.MALE, 70, Condition.HIGH_BLOOD_PRESSURE)]
    for subset in ([], records[:1], records, more):
        assert sum(aggregate_by_condition(subset).values()) == len(subset)


def test_aggregate_by_gender_and_condition(records):
    counts = aggregate_by_gender_and_condition(records)
    assert counts[Gender.FEMALE][Condition.DIABETES] == 2
    assert counts[Gender.MALE][Condition.THYROID] == 1
    assert counts[Gender.MALE][Condition.DIABETES] == 0


def test_percentage_of():
    assert percentage_of(2, 3) == 66.7
    assert percentage_of(1, 3) == 33.3
    assert percentage_of(3, 3) == 100.0
    assert percentage_of(0, 0) == 0.0


def test_percentage_of_rounds_ties_up():
    assert percentage_of(1, 16) == 6.3
    assert percentage_of(1, 80) == 1.3
    assert percentage_of(3, 16) == 18.8


def test_unique_condition_count():
    assert unique_condition_count([]) == 0
    all_three = [
        make_record(1, Gender.MALE, 30, Condition.DIABETES),
        make_record(2, Gender.MALE, 30, Condition.THYROID),
        make_record(3, Gender.MALE, 30, Condition.HIGH_BLOOD_PRESSURE),
    ]
    assert unique_condition_count(all_three) == 3


def test_average_age(records):
    assert average_age(records) == 45


def test_average_age_requires_records():
    with pytest.raises(EmptyDatasetError):
        average_age([])


def test_empty_report_short_circuits():
    report = build_report([])
    assert not report.has_data
    assert report.total == 0
    assert report.conditions == []
    assert report.genders == []


def test_report_omits_zero_rows(records):
    report = build_report(records)

    assert report.total == 3
    assert [(row.condition, row.count, row.percentage) for row in report.conditions] == [
        (Condition.DIABETES, 2, 66.7),
        (Condition.THYROID, 1, 33.3),
    ]
    assert [s.gender for s in report.genders] == [Gender.MALE, Gender.FEMALE]
    female = report.genders[1]
    assert female.conditions == [(Condition.DIABETES, 2)]
    assert female.total == 2


def test_report_skips_gender_without_records():
    only_male = [make_record(1, Gender.MALE, 50, Condition.THYROID)]
    report = build_report(only_male)
    assert [s.gender for s in report.genders] == [Gender.MALE]


def test_live_stats_rounds_average_half_up():
    two = [
        make_record(1, Gender.MALE, 30, Condition.THYROID),
        make_record(2, Gender.FEMALE, 31, Condition.THYROID),
    ]
    stats = build_live_stats(two, today_count=2)
    assert stats.average_age == 31
    assert stats.unique_conditions == 1
    assert stats.today_count == 2


def test_live_stats_empty():
    stats = build_live_stats([], today_count=0)
    assert stats.total_patients == 0
    assert stats.average_age is None
    assert stats.unique_conditions == 0


def test_chart_data_labels(records):
    assert chart_data(records) == {"Diabetes": 2, "Thyroid": 1, "High Blood Pressure": 0}
    assert chart_data([]) == {"Diabetes": 0, "Thyroid": 0, "High Blood Pressure": 0}
