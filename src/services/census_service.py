import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as SchemaError

from src.adapters.storage_adapter import StoragePort, PATIENTS_KEY
from src.core.config import CensusConfig
from src.core.daily_counter import DailyCounter
from src.core.export import export_csv, export_filename
from src.core.report import CensusReport, LiveStats, build_report, build_live_stats, chart_data
from src.core.validation import validate_patient_input
from src.domain.errors import NotFoundError
from src.domain.models import PatientRecord

logger = logging.getLogger("census.services.ledger")


@dataclass
class CensusState:
    """Everything the page mutates during a session."""
    records: List[PatientRecord] = field(default_factory=list)
    counter: Optional[DailyCounter] = None
    last_id: int = 0


class CensusService:
    """
    Patient ledger and report engine.
    The in-memory record list is the source of truth for the session and is
    written through the storage port after every mutation.
    """
    def __init__(self, storage: StoragePort, config: Optional[CensusConfig] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.storage = storage
        self.config = config or CensusConfig()
        self.clock = clock
        self.state = CensusState()
        self.refresh()

    # --- Persistence ---

    def _load_records(self) -> List[PatientRecord]:
        raw = self.storage.load(PATIENTS_KEY)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored patients are not valid JSON, starting empty: {e}")
            return []
        if not isinstance(entries, list):
            logger.warning("Stored patients are not a list, starting empty")
            return []

        records = []
        for entry in entries:
            try:
                records.append(PatientRecord.model_validate(entry))
            except SchemaError as e:
                logger.warning(f"Skipping corrupt patient entry {entry!r}: {e.error_count()} error(s)")
        return records

    def _save_records(self):
        payload = [r.to_storage() for r in self.state.records]
        self.storage.save(PATIENTS_KEY, json.dumps(payload))

    def refresh(self):
        """Reloads records and the daily counter from storage."""
        self.state.records = self._load_records()
        self.state.counter = DailyCounter(self.storage, clock=self.clock)
        self.state.last_id = max((r.id for r in self.state.records), default=0)

    def _next_id(self, now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        if candidate <= self.state.last_id:
            candidate = self.state.last_id + 1
        self.state.last_id = candidate
        return candidate

    # --- Ledger Operations ---

    def add_patient(self, name: Any, gender: Any, age: Any, condition: Any) -> PatientRecord:
        """Validates, appends and persists a new record. Raises ValidationError on bad input."""
        clean_name, gender_enum, age_value, condition_enum = validate_patient_input(name, gender, age, condition)

        now = self.clock()
        previous_last_id = self.state.last_id
        record = PatientRecord(
            id=self._next_id(now),
            name=clean_name,
            gender=gender_enum,
            age=age_value,
            condition=condition_enum,
            created_at=now,
        )

        self.state.records.append(record)
        persisted = False
        try:
            self._save_records()
            persisted = True
            if self.state.counter.is_today(record.created_at):
                self.state.counter.increment()
        except Exception:
            self.state.records.pop()
            self.state.last_id = previous_last_id
            if persisted:
                self._save_records()
            raise

        logger.info(f"Added patient #{record.id} ({record.condition.value})")
        return record

    def _index_of(self, patient_id: int) -> int:
        for i, r in enumerate(self.state.records):
            if r.id == patient_id:
                return i
        raise NotFoundError(patient_id)

    def get_patient(self, patient_id: int) -> PatientRecord:
        return self.state.records[self._index_of(patient_id)]

    def delete_patient(self, patient_id: int) -> PatientRecord:
        """Removes the first record with this id. Raises NotFoundError if absent."""
        try:
            index = self._index_of(patient_id)
        except NotFoundError:
            logger.warning(f"Delete ignored, unknown patient #{patient_id}")
            raise

        record = self.state.records.pop(index)
        persisted = False
        try:
            self._save_records()
            persisted = True
            if self.state.counter.is_today(record.created_at):
                self.state.counter.decrement()
        except Exception:
            self.state.records.insert(index, record)
            if persisted:
                self._save_records()
            raise

        logger.info(f"Deleted patient #{record.id}")
        return record

    def list_patients(self, limit: Optional[int] = None) -> List[PatientRecord]:
        """Most recent first."""
        newest_first = list(reversed(self.state.records))
        if limit is not None:
            return newest_first[:max(limit, 0)]
        return newest_first

    def recent_patients(self) -> List[PatientRecord]:
        return self.list_patients(self.config.recent_limit)

    @property
    def records(self) -> List[PatientRecord]:
        """Insertion-ordered copy of the ledger."""
        return list(self.state.records)

    @property
    def today_count(self) -> int:
        return self.state.counter.current()

    # --- Derived Views ---

    def report(self) -> CensusReport:
        return build_report(self.state.records)

    def live_stats(self) -> LiveStats:
        return build_live_stats(self.state.records, self.today_count)

    def chart_data(self) -> Dict[str, int]:
        return chart_data(self.state.records)

    def export_csv(self) -> str:
        """Raises EmptyDatasetError when the ledger is empty."""
        return export_csv(self.state.records, self.config.date_format)

    def export_filename(self, today: Optional[date] = None) -> str:
        return export_filename(today or self.clock().astimezone(timezone.utc).date())
