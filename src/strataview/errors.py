# src/strataview/errors.py
"""
Error taxonomy for strataview.

Row-level malformation (an unparseable number, a short row) never reaches these
classes; such rows are dropped where they are read. What is left are the
conditions a caller has to react to:

  - ParseError         no usable rows at all
  - MissingColumns     required schema absent (raised before any row is read)
  - EmptyResult        input parsed, but zero usable entities
  - DegenerateExtent   configuration invariant violated (e.g. count <= 1)
  - NoSourceAvailable  every data origin failed
"""
from __future__ import annotations

from typing import List, Sequence, Tuple


class StrataviewError(Exception):
    """Base class for all strataview errors."""


class ParseError(StrataviewError, ValueError):
    pass


class MissingColumns(StrataviewError, ValueError):
    def __init__(self, missing: Sequence[str], found: Sequence[str], *, source: str = "") -> None:
        self.missing: List[str] = list(missing)
        self.found: List[str] = list(found)
        self.source = source
        where = f" (in {source})" if source else ""
        super().__init__(
            f"Missing required columns: {self.missing}{where}. Found: {', '.join(self.found)}"
        )


class EmptyResult(StrataviewError, ValueError):
    pass


class DegenerateExtent(StrataviewError, ValueError):
    pass


class NoSourceAvailable(StrataviewError, RuntimeError):
    def __init__(self, endpoint: str, failures: Sequence[Tuple[str, str]] = ()) -> None:
        self.endpoint = endpoint
        # (strategy name, reason) in the order they were tried
        self.failures: List[Tuple[str, str]] = list(failures)
        detail = "; ".join(f"{n}: {r}" for n, r in self.failures)
        msg = f"All data sources failed for: {endpoint}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
