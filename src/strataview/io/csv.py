# src/strataview/io/csv.py
from __future__ import annotations

import csv
import io
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from strataview.errors import MissingColumns, ParseError

# survey exports: comma for horizons/faults/logs, semicolon for well sheets
DELIMITERS = (",", ";", "\t")
_SNIFF_BYTES = 32_000
_SNIFF_LINES = 20


def _head_text(path: Path) -> str:
    with path.open("rb") as f:
        return f.read(_SNIFF_BYTES).decode("utf-8-sig", errors="replace")


def _detect_delimiter(sample: str) -> str:
    """
    Pick the delimiter whose per-line count is non-zero on the header and stays
    the same over the first data lines. Ties go to DELIMITERS order; comma when
    nothing splits.
    """
    lines = [ln for ln in sample.splitlines() if ln.strip()][:_SNIFF_LINES]
    if not lines:
        return ","
    best, best_n = ",", 0
    for d in DELIMITERS:
        n = lines[0].count(d)
        if n == 0:
            continue
        # a trailing partial line from the byte cut may disagree
        body = lines[1:-1] if len(lines) > 2 else lines[1:]
        consistent = all(ln.count(d) == n for ln in body)
        if consistent and n > best_n:
            best, best_n = d, n
    if best_n:
        return best
    counts = {d: lines[0].count(d) for d in DELIMITERS}
    top = max(DELIMITERS, key=lambda d: counts[d])
    return top if counts[top] else ","


def _rows_from_reader(rdr: csv.DictReader, source: str) -> Tuple[List[str], List[Dict[str, str]]]:
    if rdr.fieldnames is None:
        raise ParseError(f"No header row found in {source}")
    headers = [h.strip() for h in rdr.fieldnames]
    out: List[Dict[str, str]] = []
    for r in rdr:
        if r is None:
            continue
        # Normalize None -> "" so downstream code can do .get(...,"") safely.
        # Overflow fields (key None) are dropped.
        out.append(
            {(k or "").strip(): (v.strip() if isinstance(v, str) else "") for k, v in r.items() if k is not None}
        )
    return headers, out


def read_csv_rows(path: Path, *, delimiter: Optional[str] = None) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Read a delimited file into (headers, list[dict[str,str]]) with empty-string fill for missing values.
    If delimiter is None, detect it using a small file prefix.
    """
    path = Path(path)
    if delimiter is None:
        sample = _head_text(path)
        delimiter = _detect_delimiter(sample)

    with path.open("r", encoding="utf-8-sig", errors="replace", newline="") as f:
        rdr = csv.DictReader(f, delimiter=delimiter)
        return _rows_from_reader(rdr, str(path))


def parse_csv_text(
    text: str, *, delimiter: Optional[str] = None, source: str = "<text>"
) -> Tuple[List[str], List[Dict[str, str]]]:
    """Same as read_csv_rows, for text already held in memory (e.g. an HTTP body)."""
    text = (text or "").lstrip("\ufeff")
    if not text.strip():
        raise ParseError(f"No header row found in {source}")
    if delimiter is None:
        delimiter = _detect_delimiter(text[:_SNIFF_BYTES])
    rdr = csv.DictReader(io.StringIO(text.strip()), delimiter=delimiter)
    return _rows_from_reader(rdr, source)


def require_columns(headers: Sequence[str], required: Sequence[str], *, source: str = "") -> None:
    have = set(headers)
    missing = [c for c in required if c not in have]
    if missing:
        raise MissingColumns(missing, list(headers), source=source)


def to_float(x: Any) -> Optional[float]:
    """
    Best-effort float parsing:
      - strips whitespace
      - accepts common null spellings
      - rejects NaN and +/-inf (returns None)
    """
    if x is None:
        return None
    if isinstance(x, (int, float)) and not isinstance(x, bool):
        v = float(x)
        return v if math.isfinite(v) else None
    s = str(x).strip()
    if not s:
        return None
    if s.upper() in {"NA", "N/A", "NULL", "NONE", "NAN"}:
        return None
    try:
        v = float(s)
    except ValueError:
        return None
    if not math.isfinite(v):
        return None
    return v


def to_int(x: Any) -> Optional[int]:
    """Integer ids such as stick numbers; '12.0' is accepted, '12.5' is not."""
    v = to_float(x)
    if v is None or not float(v).is_integer():
        return None
    return int(v)
