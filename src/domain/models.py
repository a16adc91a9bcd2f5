from enum import Enum
from typing import List, Optional
from datetime import datetime
from dataclasses import dataclass
from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Enums ---

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"

class Condition(str, Enum):
    DIABETES = "Diabetes"
    THYROID = "Thyroid"
    HIGH_BLOOD_PRESSURE = "High Blood Pressure"

# Display order of the report, chart and export.
CONDITION_ORDER: List[Condition] = [Condition.DIABETES, Condition.THYROID, Condition.HIGH_BLOOD_PRESSURE]
GENDER_ORDER: List[Gender] = [Gender.MALE, Gender.FEMALE]

MIN_AGE = 1
MAX_AGE = 120

# --- Pydantic Models (Ledger) ---

class PatientRecord(BaseModel):
    """One census entry. Frozen once admitted to the ledger."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    id: int
    name: str = Field(..., min_length=1)
    gender: Gender
    age: int = Field(..., ge=MIN_AGE, le=MAX_AGE)
    condition: Condition
    created_at: datetime = Field(..., alias="date")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    def to_storage(self) -> dict:
        """Shape used by the persisted `patients` array."""
        return {
            "id": self.id,
            "name": self.name,
            "gender": self.gender.value,
            "age": self.age,
            "condition": self.condition.value,
            "date": self.created_at.isoformat(),
        }

# --- Pydantic Models (Reference Data) ---

class ConditionReference(BaseModel):
    name: str
    symptoms: List[str] = Field(default_factory=list)
    prevention: List[str] = Field(default_factory=list)
    treatment: str = ""
    image_ref: str = Field("", alias="imagesrc")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

# --- Dataclasses (Lookup) ---

@dataclass
class LookupResult:
    query: str
    condition: Optional[ConditionReference] = None
    error: Optional[str] = None  # FetchFailure reason

    @property
    def found(self) -> bool:
        return self.condition is not None

# --- Helpers ---

def to_local(moment: datetime) -> datetime:
    """Naive local time. Aware values (stored with `Z` or an offset) are converted first."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment
