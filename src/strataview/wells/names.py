# src/strataview/wells/names.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from strataview.config.schema import NameConfig


@dataclass(frozen=True)
class NameReconciler:
    """
    Bridges the well naming conventions of independently keyed datasets.

    The coordinate sheet and the log export disagree on spelling: one side writes
    "GNK-007", the other "7" or "007". variants_of() lists the syntactic
    alternatives of a name (prefixed, zero-padded, zero-stripped) in a fixed order,
    so first-hit-wins lookups are deterministic.
    """

    prefix: str = "GNK-"
    pad_width: int = 3

    @classmethod
    def from_config(cls, cfg: NameConfig) -> "NameReconciler":
        return cls(prefix=cfg.prefix, pad_width=int(cfg.pad_width))

    def _prefixed_number(self, name: str) -> str:
        if not self.prefix:
            return ""
        m = re.match(rf"^{re.escape(self.prefix)}(\d+)$", name, flags=re.IGNORECASE)
        return m.group(1) if m else ""

    def variants_of(self, name: str) -> Tuple[str, ...]:
        s = (name or "").strip()
        if not s:
            return ()

        p = self.prefix
        cands: List[str] = []
        num = self._prefixed_number(s)
        if num:
            stripped = num.lstrip("0")
            padded = num.zfill(self.pad_width)
            cands += [num, stripped, padded, f"{p}{stripped}", f"{p}{padded}"]
        elif s.isdigit():
            stripped = s.lstrip("0")
            padded = s.zfill(self.pad_width)
            cands += [
                f"{p}{s}",
                f"{p}0{s}",
                stripped,
                f"{p}{stripped}",
                padded,
                f"{p}{padded}",
            ]
        elif p:
            cands.append(f"{p}{s}")

        seen = {s}
        out: List[str] = []
        for c in cands:
            if not c or c in seen:
                continue
            # a bare prefix ("GNK-") is never a well name
            if c == p:
                continue
            seen.add(c)
            out.append(c)
        return tuple(out)

    def candidates(self, name: str) -> Tuple[str, ...]:
        """The name itself first, then its variants."""
        s = (name or "").strip()
        if not s:
            return ()
        return (s,) + self.variants_of(s)
