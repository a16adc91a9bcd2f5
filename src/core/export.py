from datetime import date, datetime, timezone
from typing import Optional, Sequence

import pandas as pd

from src.domain.errors import EmptyDatasetError
from src.domain.models import PatientRecord, to_local

CSV_HEADERS = ["ID", "Name", "Gender", "Age", "Condition", "Date"]
EXPORT_MIME_TYPE = "text/csv"


def records_to_frame(records: Sequence[PatientRecord], date_format: str = "%x %X") -> pd.DataFrame:
    """Tabular view of the ledger in insertion order."""
    rows = [
        [r.id, r.name, r.gender.value, r.age, r.condition.value, to_local(r.created_at).strftime(date_format)]
        for r in records
    ]
    return pd.DataFrame(rows, columns=CSV_HEADERS)


def export_csv(records: Sequence[PatientRecord], date_format: str = "%x %X") -> str:
    if not records:
        raise EmptyDatasetError("No data to export")
    df = records_to_frame(records, date_format)
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")


def export_filename(today: Optional[date] = None) -> str:
    """Stamped with the UTC date, like an ISO timestamp cut at the `T`."""
    today = today or datetime.now(timezone.utc).date()
    return f"health_census_data_{today.isoformat()}.csv"
