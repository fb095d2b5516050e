from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Optional, List, Literal, Tuple

Granularity = Literal["day", "week", "month", "year"]

DATE_FORMAT_HINT = "dd-mm-yyyy"
DEFAULT_TYPE = "SALE"
# "RR" is the marketplace return code, matched as a substring like "CANCEL"
RETURN_MARKERS = ("CANCEL", "RR")


class ParseError(ValueError):
    """
    Raised when the CSV cannot be turned into records.
    One bad date fails the whole file, no partial result.
    """

    def __init__(
        self,
        message: str,
        row: Optional[int] = None,
        value: Optional[str] = None,
        expected_format: str = DATE_FORMAT_HINT,
    ) -> None:
        self.message = message
        self.row = row                      # 1-based data row, None when not row specific
        self.value = value
        self.expected_format = expected_format
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"Error parsing CSV: {self.message}. "
            f"Please check your date format (should be {self.expected_format})"
        )


@dataclass(frozen=True)
class TransactionRecord:
    date: date
    item: Optional[str]     # passthrough, None when the export has no item column
    payment: float
    gst: float
    rate: float
    profit: float
    quantity: int
    type: str               # "SALE" or the upper-cased return/cancel flag

    @property
    def date_str(self) -> str:
        return self.date.isoformat()

    @property
    def net_revenue(self) -> float:
        return self.payment - self.gst

    @property
    def is_return(self) -> bool:
        flag = self.type.upper()
        return any(marker in flag for marker in RETURN_MARKERS)


@dataclass(frozen=True)
class TimeBucket:
    start: date             # canonical period start (day / monday / 1st of month / jan 1st)
    total_profit: float
    net_revenue: float


@dataclass(frozen=True)
class ItemTally:
    name: Optional[str]
    value: int              # summed quantity, not transaction count


@dataclass(frozen=True)
class SalesSummary:
    order_count: int
    returns_count: int
    gross_profit: float
    gross_revenue: float


@dataclass(frozen=True)
class ParseReport:
    total_rows: int
    returns_rows: int
    columns: Tuple[str, ...]
    item_column: Optional[str]


@dataclass(frozen=True)
class DashboardBundle:
    records: List[TransactionRecord]          # filtered set
    granularity: Optional[Granularity]        # None when nothing is in range
    series: List[TimeBucket]
    top_items: List[ItemTally]
    summary: SalesSummary

    @property
    def is_empty(self) -> bool:
        return not self.records
