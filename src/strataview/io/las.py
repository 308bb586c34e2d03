# src/strataview/io/las.py
from __future__ import annotations

import contextlib
import io
import re
from pathlib import Path
from typing import Dict, List, Sequence

import lasio
import pandas as pd

from strataview.errors import ParseError
from strataview.io.tables import RowTable

# Raw mnemonic -> display log type. Only the families the viewer knows are listed.
MNEMONIC_ALIASES: Dict[str, str] = {
    # depth
    "DEPT": "DEPT",
    "DEPTH": "DEPT",
    "DPTH": "DEPT",
    "TVDSS": "DEPT",
    "MD": "DEPT",
    # gamma ray
    "GR": "GR",
    "GAM": "GR",
    "GAMMA": "GR",
    "GAMMARAY": "GR",
    "CGR": "GR",
    "SGR": "GR",
    # resistivity
    "RT": "RT",
    "RESD": "RT",
    "ILD": "RT",
    "LLD": "RT",
    # density
    "RHOB": "RHOB",
    "RHOZ": "RHOB",
    "ZDEN": "RHOB",
    "DEN": "RHOB",
    # neutron
    "NPHI": "NPHI",
    "TNPH": "NPHI",
    "TNPHI": "NPHI",
    # sonic
    "DT": "DT",
    "DTC": "DT",
    "DTCO": "DT",
    # others
    "SP": "SP",
    "PHIE": "PHIE",
    "VSH": "VSH",
    "SW": "SWE",
    "SWE": "SWE",
}

_SUFFIX_RE = re.compile(r":\d+$")


def norm_mnemonic(m: str) -> str:
    """Upper-case, drop ':N' duplicate suffixes and map through MNEMONIC_ALIASES."""
    s = _SUFFIX_RE.sub("", (m or "").strip().upper())
    return MNEMONIC_ALIASES.get(s, s)


@contextlib.contextmanager
def quiet_stdio(enabled: bool = True):
    """
    Redirect stdout/stderr to suppress noisy third-party library prints.
    """
    if not enabled:
        yield
        return
    with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
        yield


def read_las(path: Path, *, quiet: bool = True) -> "lasio.LASFile":
    with quiet_stdio(quiet):
        return lasio.read(str(path))


def las_well_name(las: "lasio.LASFile", fallback: str) -> str:
    """~W WELL when present and non-blank, else the fallback (usually the file stem)."""
    try:
        item = las.well["WELL"]
    except KeyError:
        return fallback
    name = str(getattr(item, "value", "") or "").strip()
    return name or fallback


def las_to_table(path: Path, log_types: Sequence[str], *, quiet: bool = True) -> RowTable:
    """
    One LAS file -> WELL/TVDSS/<log type> rows.

    Strategy:
      - the depth axis is the curve index of las.df()
      - curves are matched to log types through norm_mnemonic(); for repeated
        families the first curve in ~CURVE order wins
      - non-finite readings are kept as NaN (null downstream)
    """
    path = Path(path)
    las = read_las(path, quiet=quiet)
    name = las_well_name(las, path.stem)

    df: pd.DataFrame = las.df()
    if df is None or df.shape[0] == 0:
        raise ParseError(f"{path.name}: LAS file has no data rows")

    wanted = set(log_types)
    picked: Dict[str, str] = {}
    for col in df.columns:
        canon = norm_mnemonic(str(col))
        if canon in wanted and canon not in picked:
            picked[canon] = str(col)

    depth = pd.to_numeric(pd.Series(df.index), errors="coerce").to_numpy(dtype="float64")
    values = {t: pd.to_numeric(df[c], errors="coerce").to_numpy(dtype="float64") for t, c in picked.items()}
    headers: List[str] = ["WELL", "TVDSS"] + list(picked.keys())
    rows: List[Dict[str, object]] = []
    for i, d in enumerate(depth):
        r: Dict[str, object] = {"WELL": name, "TVDSS": float(d)}
        for log_type, arr in values.items():
            r[log_type] = float(arr[i])
        rows.append(r)
    return RowTable(name=path.name, headers=headers, rows=rows)


def list_las_files(las_dir: Path) -> List[Path]:
    d = Path(las_dir)
    if not d.is_dir():
        return []
    return sorted(p for p in d.iterdir() if p.is_file() and p.suffix.lower() == ".las")
