import logging
from datetime import date, datetime
from enum import Enum, auto
from typing import Callable

from src.adapters.storage_adapter import StoragePort, LAST_VISIT_KEY, TODAY_COUNT_KEY
from src.domain.models import to_local

logger = logging.getLogger("census.core.daily_counter")


class CounterState(Enum):
    STALE = auto()    # stored date != today
    CURRENT = auto()  # stored date == today


class DailyCounter:
    """
    Count of records created since local midnight.

    The count is persisted under `todayPatients` next to its date stamp
    `lastVisitDate`. Whenever the stamp differs from today the counter is
    Stale and rolls over to a zero count before any change is applied.
    """

    def __init__(self, storage: StoragePort, clock: Callable[[], datetime] = datetime.now):
        self.storage = storage
        self.clock = clock
        self.count = 0
        self.active_date: date = self.today()
        self._initialize()

    def today(self) -> date:
        return self.clock().date()

    @property
    def state(self) -> CounterState:
        return CounterState.CURRENT if self.active_date == self.today() else CounterState.STALE

    def is_today(self, moment: datetime) -> bool:
        return to_local(moment).date() == self.today()

    def _initialize(self):
        stored_date = self.storage.load(LAST_VISIT_KEY)
        if stored_date != self.today().isoformat():
            self._roll_over()
            return

        raw = self.storage.load(TODAY_COUNT_KEY) or "0"
        try:
            self.count = max(int(raw), 0)
        except ValueError:
            logger.warning(f"Stored daily count {raw!r} is not a number, using 0")
            self.count = 0

    def _roll_over(self):
        today = self.today()
        logger.info(f"Daily counter reset for {today.isoformat()}")
        self.active_date = today
        self.count = 0
        self.storage.save(LAST_VISIT_KEY, today.isoformat())
        self.storage.save(TODAY_COUNT_KEY, "0")

    def _ensure_current(self):
        if self.state is CounterState.STALE:
            self._roll_over()

    def increment(self) -> int:
        self._ensure_current()
        self.storage.save(TODAY_COUNT_KEY, str(self.count + 1))
        self.count += 1
        return self.count

    def decrement(self) -> bool:
        """Returns False when the count is already zero."""
        self._ensure_current()
        if self.count <= 0:
            return False
        self.storage.save(TODAY_COUNT_KEY, str(self.count - 1))
        self.count -= 1
        return True

    def current(self) -> int:
        """Today's count, rolling over first if midnight has passed."""
        self._ensure_current()
        return self.count
