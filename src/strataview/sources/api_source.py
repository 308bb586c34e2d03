# src/strataview/sources/api_source.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from strataview.io.tables import FAULT_COLUMNS, HORIZON_COLUMNS, WELL_COLUMNS, RowTable

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# JSON payload -> RowTable
# -----------------------------------------------------------------------------


def _as_list(payload: Any, key: str) -> List[Dict[str, Any]]:
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object with '{key}', got {type(payload).__name__}")
    items = payload.get(key)
    if not isinstance(items, list):
        raise ValueError(f"JSON payload has no '{key}' list")
    return [x for x in items if isinstance(x, dict)]


def horizons_from_json(payload: Any) -> List[RowTable]:
    """{horizons: [{name, points: [{inline, crossline, z}]}]} -> one table per horizon."""
    out: List[RowTable] = []
    for h in _as_list(payload, "horizons"):
        name = str(h.get("name") or "z")
        rows: List[Dict[str, object]] = [
            {"Inline": p.get("inline"), "Crossline": p.get("crossline"), name: p.get("z")}
            for p in (h.get("points") or [])
            if isinstance(p, dict)
        ]
        out.append(RowTable(name=f"api:horizons:{name}", headers=list(HORIZON_COLUMNS) + [name], rows=rows))
    return out


def wells_from_json(payload: Any) -> List[RowTable]:
    rows: List[Dict[str, object]] = [
        {"Inline_n": w.get("inline_n"), "Crossline_n": w.get("crossline_n"), "Well_name": w.get("well_name")}
        for w in _as_list(payload, "wells")
    ]
    return [RowTable(name="api:wells", headers=list(WELL_COLUMNS), rows=rows)]


def well_logs_from_json(payload: Any) -> List[RowTable]:
    """
    {well_logs: [{well_name, available_logs, data: [{tvdss, gr, rt, ...}]}]} -> one
    WELL/TVDSS table. Sample keys are the lower-cased log type names.
    """
    log_types: List[str] = []
    rows: List[Dict[str, object]] = []
    for wl in _as_list(payload, "well_logs"):
        name = wl.get("well_name")
        types = [str(t) for t in (wl.get("available_logs") or [])]
        for t in types:
            if t not in log_types:
                log_types.append(t)
        for dp in wl.get("data") or []:
            if not isinstance(dp, dict):
                continue
            r: Dict[str, object] = {"WELL": name, "TVDSS": dp.get("tvdss")}
            for t in types:
                r[t] = dp.get(t.lower())
            rows.append(r)
    return [RowTable(name="api:well-logs", headers=["WELL", "TVDSS"] + log_types, rows=rows)]


def faults_from_json(payload: Any) -> List[RowTable]:
    out: List[RowTable] = []
    for f in _as_list(payload, "faults"):
        rows: List[Dict[str, object]] = []
        for stick in f.get("sticks") or []:
            if not isinstance(stick, dict):
                continue
            sid = stick.get("stick_id")
            for p in stick.get("points") or []:
                if not isinstance(p, dict):
                    continue
                rows.append(
                    {
                        "Fault_Stick": sid,
                        "Fault_Plane": p.get("fault_plane"),
                        "Times": p.get("time"),
                        "inline_n": p.get("inline_n"),
                        "crossline_n": p.get("crossline_n"),
                    }
                )
        out.append(RowTable(name=str(f.get("filename") or "api:fault"), headers=list(FAULT_COLUMNS), rows=rows))
    return out


CONVERTERS = {
    "horizons": horizons_from_json,
    "wells": wells_from_json,
    "well-logs": well_logs_from_json,
    "faults": faults_from_json,
}


# -----------------------------------------------------------------------------
# Origin
# -----------------------------------------------------------------------------


class ApiSource:
    """HTTP JSON origin. Blocking requests calls run in a worker thread."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 3.0,
        session: Optional[requests.Session] = None,
        name: str = "Database",
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _check_health(self) -> bool:
        try:
            resp = self.session.get(self._url("health"), timeout=self.timeout_s)
        except requests.RequestException as e:
            logger.info("%s API not available: %s", self.name, e)
            return False
        return bool(resp.ok)

    def _get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        resp = self.session.get(self._url(endpoint), params=dict(params), timeout=self.timeout_s)
        if not resp.ok:
            raise RuntimeError(f"{self.name} fetch failed: {resp.status_code} for {resp.url}")
        return resp.json()

    async def is_available(self) -> bool:
        return await asyncio.to_thread(self._check_health)

    async def fetch(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> List[RowTable]:
        convert = CONVERTERS.get(endpoint)
        if convert is None:
            raise KeyError(f"{self.name}: unknown endpoint {endpoint!r}")
        query = {k: v for k, v in dict(params or {}).items() if k != "files"}
        if endpoint == "horizons" and isinstance(query.get("z_columns"), (list, tuple)):
            query["z_columns"] = ",".join(query["z_columns"])
        payload = await asyncio.to_thread(self._get_json, endpoint, query)
        return convert(payload)
