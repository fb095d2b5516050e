from __future__ import annotations
from datetime import date
from io import StringIO
from pathlib import Path
from typing import List, Optional, Tuple
import pandas as pd

from model import DEFAULT_TYPE, ParseError, ParseReport, TransactionRecord


# Date,ITEAMS,PAYMENT,GST,ITEM RATE,PROFIT,QUANTITY,RETURN / CANCEL
# headers are matched after strip + upper
DATE_COLUMN = "DATE"
ITEM_COLUMNS = ["ITEAMS", "ITEMS"]   # the seller export spells it ITEAMS
PAYMENT_COLUMN = "PAYMENT"
GST_COLUMN = "GST"
RATE_COLUMN = "ITEM RATE"
PROFIT_COLUMN = "PROFIT"
QUANTITY_COLUMN = "QUANTITY"
TYPE_COLUMN = "RETURN / CANCEL"


"""
    Read CSV text into a raw DataFrame of strings.
    Returns None for blank input, there is nothing to parse.
"""
def read_csv_text(text: str) -> Optional[pd.DataFrame]:
    if text is None or not text.strip():
        return None

    try:
        df = pd.read_csv(
            StringIO(text),
            dtype=str,             # read everything as string first
            keep_default_na=False, # prevent silent NaN coercion
            skip_blank_lines=True,
            index_col=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(f"unreadable CSV ({e})") from e

    # short rows come back as NaN even with keep_default_na=False
    return df.fillna("")


"""
    normalize header names, keep the first of any duplicates
"""
def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().upper() for c in df.columns]
    return df.loc[:, ~df.columns.duplicated()]


def resolve_item_column(columns) -> Optional[str]:
    for name in ITEM_COLUMNS:
        if name in columns:
            return name
    return None


"""
    strict dd-mm-yyyy: exactly 3 dash separated integer parts
    that form a real calendar date, anything else fails the file
"""
def parse_date(raw: str, row: Optional[int] = None) -> date:
    where = f" in row {row}" if row is not None else ""

    parts = raw.split("-")
    if len(parts) != 3:
        raise ParseError(f"Invalid date format{where}: {raw!r}", row=row, value=raw)

    parts = [p.strip() for p in parts]
    if not all(p.isdecimal() for p in parts):
        raise ParseError(f"Invalid date{where}: {raw!r}", row=row, value=raw)

    day, month, year = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ParseError(f"Invalid date{where}: {raw!r} ({e})", row=row, value=raw) from e


def _coerce_float(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series(0.0, index=df.index)
    num = pd.to_numeric(df[col].str.strip(), errors="coerce")
    # inf is not a usable amount either
    num = num.replace([float("inf"), float("-inf")], float("nan"))
    return num.fillna(0.0).astype(float)


INT64_LIMIT = 2 ** 63


def _coerce_int(df: pd.DataFrame, col: str) -> pd.Series:
    # "2.7" -> 2; a count that does not fit int64 is as unusable as text
    num = _coerce_float(df, col)
    return num.where(num.abs() < INT64_LIMIT, 0.0).astype("int64")


def _classify(df: pd.DataFrame) -> pd.Series:
    if TYPE_COLUMN not in df.columns:
        return pd.Series(DEFAULT_TYPE, index=df.index)
    flag = df[TYPE_COLUMN].str.strip().str.upper()
    return flag.where(flag != "", DEFAULT_TYPE)


"""
    turn a normalized raw frame into typed records, input order preserved
"""
def frame_to_records(df: pd.DataFrame) -> List[TransactionRecord]:
    if df.empty:
        return []
    if DATE_COLUMN not in df.columns:
        raise ParseError(f"missing required column 'Date' (found {list(df.columns)})")

    # dates first: one bad row aborts everything
    dates = [
        parse_date(raw, row=i + 1)
        for i, raw in enumerate(df[DATE_COLUMN].tolist())
    ]

    item_col = resolve_item_column(df.columns)
    items = df[item_col].tolist() if item_col else [None] * len(df)

    payment = _coerce_float(df, PAYMENT_COLUMN).tolist()
    gst = _coerce_float(df, GST_COLUMN).tolist()
    rate = _coerce_float(df, RATE_COLUMN).tolist()
    profit = _coerce_float(df, PROFIT_COLUMN).tolist()
    quantity = _coerce_int(df, QUANTITY_COLUMN).tolist()
    types = _classify(df).tolist()

    return [
        TransactionRecord(
            date=d,
            item=it,
            payment=float(p),
            gst=float(g),
            rate=float(r),
            profit=float(pr),
            quantity=int(q),
            type=t,
        )
        for d, it, p, g, r, pr, q, t in zip(dates, items, payment, gst, rate, profit, quantity, types)
    ]


"""
    overall parsing method
    CSV text -> records + a small report for the UI caption
    raises ParseError, never returns a partial record list
"""
def parse_with_report(text: str) -> Tuple[List[TransactionRecord], ParseReport]:
    df_raw = read_csv_text(text)
    if df_raw is None:
        return [], ParseReport(total_rows=0, returns_rows=0, columns=(), item_column=None)

    df = normalize_columns(df_raw)
    records = frame_to_records(df)

    report = ParseReport(
        total_rows=len(records),
        returns_rows=sum(1 for r in records if r.is_return),
        columns=tuple(df.columns),
        item_column=resolve_item_column(df.columns),
    )
    return records, report


def parse_records(text: str) -> List[TransactionRecord]:
    records, _ = parse_with_report(text)
    return records


"""
    uploaded file contents, utf-8-sig drops the BOM spreadsheet exports like to add
"""
def decode_upload(data: bytes, encoding: str = "utf-8-sig") -> str:
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise ParseError(f"file is not valid {encoding} text") from e


def parse_upload(
    data: bytes, encoding: str = "utf-8-sig"
) -> Tuple[List[TransactionRecord], ParseReport]:
    return parse_with_report(decode_upload(data, encoding))


def read_csv_file(csv_path: str) -> str:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    return decode_upload(path.read_bytes())
