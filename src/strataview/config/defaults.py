# src/strataview/config/defaults.py
from __future__ import annotations

from pathlib import Path
from typing import Dict

from .schema import (
    FaultConfig,
    FillConfig,
    LogTypeConfig,
    NameConfig,
    RunConfig,
    SourceConfig,
    SurveyConfig,
    WellLogDisplayConfig,
)


def default_log_types() -> Dict[str, LogTypeConfig]:
    # NPHI and DT are plotted with reversed ranges (min > max)
    types = [
        LogTypeConfig("None", "None", 0.0, 1.0, color=0xFFFFFF),
        LogTypeConfig(
            "GR",
            "Gamma Ray",
            0.0,
            150.0,
            color=0x00FF00,
            fill=FillConfig(enabled=True, color=0xFF7F7F, opacity=0.6, direction="right"),
        ),
        LogTypeConfig("RT", "Resistivity", 0.1, 1000.0, color=0xFF0000, log_scale=True),
        LogTypeConfig("RHOB", "Density", 1.95, 2.95, color=0x0000FF),
        LogTypeConfig("NPHI", "Neutron Porosity", 0.45, -0.15, color=0xFF00FF),
        LogTypeConfig("DT", "Sonic", 140.0, 40.0, color=0x00FFFF),
        LogTypeConfig("SP", "SP", -200.0, 50.0, color=0xFFFF00),
        LogTypeConfig("PHIE", "Effective Porosity", 0.0, 0.4, color=0x00FF88),
        LogTypeConfig("VSH", "Shale Volume", 0.0, 1.0, color=0x8B4513),
        LogTypeConfig("SWE", "Water Saturation", 0.0, 1.0, color=0x4169E1),
    ]
    return {t.name: t for t in types}


def default_config() -> RunConfig:
    base = Path.cwd()
    return RunConfig(
        survey=SurveyConfig(),
        well_logs=WellLogDisplayConfig(log_types=default_log_types()),
        names=NameConfig(),
        faults=FaultConfig(base_path=Path("CSV_fault")),
        sources=SourceConfig(csv_base_path=base / "data"),
    )
