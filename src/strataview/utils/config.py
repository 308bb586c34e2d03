# src/strataview/utils/config.py
from __future__ import annotations

from dataclasses import fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from strataview.config.defaults import default_config
from strataview.config.schema import (
    FaultConfig,
    FillConfig,
    LogTypeConfig,
    NameConfig,
    RunConfig,
    SourceConfig,
    SurveyConfig,
    WellLogDisplayConfig,
)


def _find_repo_root(start: Path) -> Path:
    """
    Heuristic: walk up from start looking for a pyproject.toml.
    Falls back to start if not found.
    """
    p = start.resolve()
    for _ in range(10):
        if (p / "pyproject.toml").exists():
            return p
        if p.parent == p:
            break
        p = p.parent
    return start.resolve()


def resolve_config_path(path: Path) -> Path:
    """
    Resolve config path robustly:
      1) as given (absolute or relative to CWD)
      2) relative to repo root (parent chain containing pyproject.toml)
    """
    p = Path(path)
    if p.exists():
        return p.resolve()

    repo = _find_repo_root(Path.cwd())
    p2 = (repo / p).resolve()
    if p2.exists():
        return p2

    return p  # caller raises on the unresolved path


def load_yaml(path: Path) -> Dict[str, Any]:
    p = resolve_config_path(Path(path))
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    return obj if isinstance(obj, dict) else {}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def as_plain_dict(x: Any) -> Any:
    if is_dataclass(x):
        return {f.name: as_plain_dict(getattr(x, f.name)) for f in fields(x)}
    if isinstance(x, Mapping):
        return {k: as_plain_dict(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [as_plain_dict(v) for v in x]
    if isinstance(x, Path):
        return str(x)
    return x


# -----------------------------------------------------------------------------
# dict -> RunConfig
# -----------------------------------------------------------------------------

def _known(cls: Any, d: Any) -> Dict[str, Any]:
    d = d if isinstance(d, dict) else {}
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in d.items() if k in names}


def _parse_color(v: Any) -> int:
    if isinstance(v, str):
        s = v.strip().lower().lstrip("#")
        return int(s, 16)
    return int(v)


def _opt_path(v: Any) -> Optional[Path]:
    if v is None or str(v).strip() == "":
        return None
    return Path(str(v))


def _fill_from_dict(d: Any) -> Optional[FillConfig]:
    if not isinstance(d, dict):
        return None
    kw = _known(FillConfig, d)
    if "color" in kw:
        kw["color"] = _parse_color(kw["color"])
    return FillConfig(**kw)


def _log_type_from_dict(name: str, d: Dict[str, Any], base: Optional[LogTypeConfig]) -> LogTypeConfig:
    kw = _known(LogTypeConfig, d)
    kw.pop("name", None)
    if "color" in kw:
        kw["color"] = _parse_color(kw["color"])
    if "fill" in d:
        kw["fill"] = _fill_from_dict(d.get("fill"))
    # YAML spelling used by the display tables
    if "logScale" in d:
        kw["log_scale"] = bool(d["logScale"])
    if base is not None:
        return replace(base, **kw)
    kw.setdefault("label", name)
    return LogTypeConfig(name=name, **kw)


def run_config_from_dict(d: Dict[str, Any], *, base: Optional[RunConfig] = None) -> RunConfig:
    """
    Overlay a (YAML-shaped) dict onto the default RunConfig.
    Unknown keys are ignored; absent sections keep their defaults.
    """
    cfg = base or default_config()
    d = d if isinstance(d, dict) else {}

    survey = replace(cfg.survey, **_known(SurveyConfig, d.get("survey")))
    names = replace(cfg.names, **_known(NameConfig, d.get("names")))

    wl = d.get("well_logs") if isinstance(d.get("well_logs"), dict) else {}
    wl_kw = _known(WellLogDisplayConfig, wl)
    lt_raw = wl_kw.pop("log_types", None)
    log_types = dict(cfg.well_logs.log_types)
    if isinstance(lt_raw, dict):
        for name, raw in lt_raw.items():
            log_types[str(name)] = _log_type_from_dict(
                str(name), raw if isinstance(raw, dict) else {}, log_types.get(str(name))
            )
    well_logs = replace(cfg.well_logs, log_types=log_types, **wl_kw)

    fd = d.get("faults") if isinstance(d.get("faults"), dict) else {}
    f_kw = _known(FaultConfig, fd)
    if "base_path" in f_kw:
        f_kw["base_path"] = Path(str(f_kw["base_path"]))
    if isinstance(f_kw.get("files_by_type"), dict):
        f_kw["files_by_type"] = {str(k): tuple(str(x) for x in (v or [])) for k, v in f_kw["files_by_type"].items()}
    faults = replace(cfg.faults, **f_kw)

    sd = d.get("sources") if isinstance(d.get("sources"), dict) else {}
    s_kw = _known(SourceConfig, sd)
    for k in ("csv_base_path", "las_dir"):
        if k in s_kw:
            s_kw[k] = _opt_path(s_kw[k])
    if isinstance(s_kw.get("files"), dict):
        s_kw["files"] = {**dict(cfg.sources.files), **{str(k): str(v) for k, v in s_kw["files"].items()}}
    if "z_columns" in s_kw:
        s_kw["z_columns"] = tuple(str(x) for x in (s_kw["z_columns"] or []))
    sources = replace(cfg.sources, **s_kw)

    return RunConfig(survey=survey, well_logs=well_logs, names=names, faults=faults, sources=sources)


def load_run_config(path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None) -> RunConfig:
    """
    Defaults <- YAML document (if any) <- overrides (e.g. CLI options), deep-merged
    in that order.
    """
    doc: Dict[str, Any] = {}
    if path is not None and str(path) != "":
        doc = load_yaml(Path(path))
    if overrides:
        doc = deep_merge(doc, overrides)
    return run_config_from_dict(doc)
