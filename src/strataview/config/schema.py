# src/strataview/config/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class SurveyConfig:
    inline_count: int = 1092
    crossline_count: int = 549
    time_size: float = 1400.0

    # render span of one slice image (x and z share image_width)
    image_width: float = 2790.0
    image_height: float = 2800.0

    top_pad: float = 200.0

    # well coordinate files index traces from 1
    well_index_base: int = 1
    well_radius: float = 10.0
    default_well_time_end: float = 1200.0

    @property
    def vertical_offset(self) -> float:
        return self.time_size + self.top_pad


@dataclass(frozen=True)
class FillConfig:
    enabled: bool = True
    color: int = 0xFF7F7F
    opacity: float = 0.6
    direction: str = "right"  # "left" | "right"


@dataclass(frozen=True)
class LogTypeConfig:
    name: str
    label: str
    min: float
    max: float
    color: int = 0xFFFFFF
    log_scale: bool = False
    fill: Optional[FillConfig] = None

    @property
    def fill_enabled(self) -> bool:
        return self.fill is not None and bool(self.fill.enabled)


@dataclass(frozen=True)
class WellLogDisplayConfig:
    max_log_width: float = 10.0
    tube_radius: float = 1.0
    curve_segments: int = 6
    null_value: float = -999.25
    null_offset: float = 0.0
    log_types: Mapping[str, LogTypeConfig] = field(default_factory=dict)

    def log_type(self, name: str) -> Optional[LogTypeConfig]:
        return self.log_types.get(name)

    @property
    def curve_log_types(self) -> List[str]:
        """Log types that map to a data column (everything except the 'None' pseudo-type)."""
        return [k for k in self.log_types.keys() if k != "None"]


@dataclass(frozen=True)
class NameConfig:
    prefix: str = "GNK-"
    pad_width: int = 3


@dataclass(frozen=True)
class FaultConfig:
    base_path: Path = Path("CSV_fault")
    files_by_type: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    as_3d: bool = True

    def all_fault_files(self) -> List[str]:
        """
        Fault file names relative to the data root, in category order.
        Empty when no explicit list is configured (sources then glob base_path).
        """
        out: List[str] = []
        for files in self.files_by_type.values():
            for f in files:
                out.append(str(Path(self.base_path) / f))
        return out


@dataclass(frozen=True)
class SourceConfig:
    api_base_url: Optional[str] = None
    api_timeout_s: float = 3.0
    csv_base_path: Optional[Path] = None
    las_dir: Optional[Path] = None

    # endpoint -> file name under csv_base_path
    files: Mapping[str, str] = field(
        default_factory=lambda: {
            "horizons": "horizon.csv",
            "wells": "well_coordinates.csv",
            "well-logs": "GNK_update.csv",
        }
    )
    z_columns: Tuple[str, ...] = ("top", "bottom")

    api_priority: int = 1
    csv_priority: int = 100
    las_priority: int = 200


@dataclass(frozen=True)
class RunConfig:
    survey: SurveyConfig = SurveyConfig()
    well_logs: WellLogDisplayConfig = WellLogDisplayConfig()
    names: NameConfig = NameConfig()
    faults: FaultConfig = FaultConfig()
    sources: SourceConfig = SourceConfig()
