import asyncio
import json
import logging
from typing import List, Optional

import requests

from src.core.reference import parse_reference_document
from src.domain.errors import FetchFailure
from src.domain.models import ConditionReference

logger = logging.getLogger("census.adapters.reference")


class ReferenceAdapter:
    """Retrieves the static condition reference dataset from a local path or an http(s) URL."""

    def __init__(self, source: str, timeout: Optional[float] = None):
        self.source = source
        self.timeout = timeout

    @property
    def is_remote(self) -> bool:
        return self.source.lower().startswith(("http://", "https://"))

    async def fetch_conditions(self) -> List[ConditionReference]:
        """Single attempt; any fault surfaces as FetchFailure with its reason."""
        data = await asyncio.to_thread(self._fetch_document)
        conditions = parse_reference_document(data, self.source)
        logger.info(f"Loaded {len(conditions)} reference conditions from {self.source}")
        return conditions

    def _fetch_document(self) -> dict:
        if self.is_remote:
            return self._fetch_remote()
        return self._read_local()

    def _read_local(self) -> dict:
        try:
            with open(self.source, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise FetchFailure(f"Cannot read reference dataset: {e}", self.source)
        except json.JSONDecodeError as e:
            raise FetchFailure(f"Reference dataset is not valid JSON: {e}", self.source)

    def _fetch_remote(self) -> dict:
        try:
            response = requests.get(self.source, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise FetchFailure(f"Reference server returned HTTP {status}", self.source)
        except requests.exceptions.RequestException as e:
            raise FetchFailure(f"Reference fetch failed: {str(e)}", self.source)
        except ValueError as e:
            # requests raises a ValueError subclass for undecodable bodies
            raise FetchFailure(f"Reference dataset is not valid JSON: {e}", self.source)
