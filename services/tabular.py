"""Delimited-text parsing for uploaded datasets."""
import io
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

EXCEL_EXTENSIONS = (".xls", ".xlsx")
DEFAULT_MAX_ROWS = 100

_EDGE_QUOTES = re.compile(r'^"|"$')


@dataclass
class Dataset:
    """Parsed tabular content of one uploaded file."""

    columns: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)
    total_rows: int = 0


def _clean(value: str) -> str:
    return _EDGE_QUOTES.sub("", value.strip())


def parse_table(text: str, max_rows: int = DEFAULT_MAX_ROWS) -> Optional[Dataset]:
    """Split comma-delimited text into a Dataset.

    The first line holds the column names. Only the first `max_rows` data
    lines are kept; `total_rows` counts all of them. Commas inside quoted
    fields are not supported.

    Returns:
        The Dataset, or None when the text has fewer than two lines.
    """
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return None

    columns = [_clean(h) for h in lines[0].split(",")]

    rows = []
    for line in lines[1:max_rows + 1]:
        values = [_clean(v) for v in line.split(",")]
        rows.append({
            col: values[idx] if idx < len(values) else ""
            for idx, col in enumerate(columns)
        })

    return Dataset(columns=columns, rows=rows, total_rows=len(lines) - 1)


def read_table_text(raw_bytes: bytes, file_name: Optional[str]) -> str:
    """Turn uploaded bytes into comma-delimited text.

    Excel workbooks (first sheet) are converted with pandas; anything else is
    decoded as UTF-8.
    """
    name = (file_name or "").lower()
    if name.endswith(EXCEL_EXTENSIONS):
        df = pd.read_excel(io.BytesIO(raw_bytes), dtype=str)
        return df.to_csv(index=False)
    return raw_bytes.decode("utf-8-sig", errors="replace")
