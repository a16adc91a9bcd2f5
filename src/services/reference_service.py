import logging

from src.adapters.reference_adapter import ReferenceAdapter
from src.core.reference import find_condition
from src.domain.errors import FetchFailure, ValidationError
from src.domain.models import LookupResult

logger = logging.getLogger("census.services.reference")

SEARCH_HINT = "Try searching for: Diabetes, Thyroid, or High Blood Pressure"


class ReferenceService:
    """Condition lookup over the reference dataset. Fetches on every lookup, never retries."""

    def __init__(self, adapter: ReferenceAdapter):
        self.adapter = adapter

    async def lookup(self, query: str) -> LookupResult:
        text = (query or "").strip()
        if not text:
            raise ValidationError("Please enter a condition to search")

        try:
            conditions = await self.adapter.fetch_conditions()
        except FetchFailure as e:
            logger.error(f"Reference lookup for {text!r} failed: {e.reason}")
            return LookupResult(query=text, error=e.reason)

        return LookupResult(query=text, condition=find_condition(conditions, text))
