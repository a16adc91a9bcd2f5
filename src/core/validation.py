from typing import Any, Optional, Tuple

from src.domain.errors import ValidationError
from src.domain.models import Gender, Condition, MIN_AGE, MAX_AGE


def _parse_age(age: Any) -> Optional[int]:
    if age is None or isinstance(age, bool):
        return None
    if isinstance(age, int):
        return age
    if isinstance(age, float):
        return int(age) if age.is_integer() else None
    if isinstance(age, str):
        text = age.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
            return int(value) if value.is_integer() else None
    return None


def _parse_enum(enum_cls, value: Any):
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return enum_cls(value.strip())
    except ValueError:
        return None


def validate_patient_input(name: Any, gender: Any, age: Any, condition: Any) -> Tuple[str, Gender, int, Condition]:
    """
    Checks form input in the order the form presents it; the first failure wins.
    Returns the cleaned (name, gender, age, condition) tuple.
    """
    clean_name = name.strip() if isinstance(name, str) else ""
    if not clean_name:
        raise ValidationError("Please enter patient name")

    gender_enum = _parse_enum(Gender, gender)
    if gender_enum is None:
        raise ValidationError("Please select gender")

    age_value = _parse_age(age)
    if age_value is None or age_value < MIN_AGE or age_value > MAX_AGE:
        raise ValidationError(f"Please enter valid age ({MIN_AGE}-{MAX_AGE})")

    condition_enum = _parse_enum(Condition, condition)
    if condition_enum is None:
        raise ValidationError("Please select a condition")

    return clean_name, gender_enum, age_value, condition_enum
