from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as SchemaError

from src.domain.errors import FetchFailure
from src.domain.models import ConditionReference


def parse_reference_document(data: Any, source: Optional[str] = None) -> List[ConditionReference]:
    """Validates a `{"conditions": [...]}` document."""
    if not isinstance(data, dict) or not isinstance(data.get("conditions"), list):
        raise FetchFailure("Reference document has no 'conditions' list", source)

    conditions = []
    for i, entry in enumerate(data["conditions"]):
        try:
            conditions.append(ConditionReference.model_validate(entry))
        except SchemaError as e:
            raise FetchFailure(f"Invalid condition entry #{i}: {e}", source)
    return conditions


def find_condition(conditions: Sequence[ConditionReference], query: str) -> Optional[ConditionReference]:
    """Exact name match first, then the first substring match. Case-insensitive."""
    needle = (query or "").strip().lower()
    if not needle:
        return None

    for c in conditions:
        if c.name.lower() == needle:
            return c
    for c in conditions:
        if needle in c.name.lower():
            return c
    return None
