# src/strataview/wells/registry.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Protocol, Sequence, Set, Tuple

import numpy as np

from strataview.config.schema import SurveyConfig, WellLogDisplayConfig
from strataview.geometry.coords import well_position, well_time_to_y
from strataview.geometry.types import GeometryDescriptor
from strataview.io.csv import to_float
from strataview.io.tables import WELL_COLUMNS, RowTable
from strataview.wells.curve import LogCurveGeometry, WellAnchor, build_log_curve
from strataview.wells.logs import WellLogData
from strataview.wells.names import NameReconciler

logger = logging.getLogger(__name__)

NO_LOG = "None"
# label sprite sits this far above the bore top
LABEL_LIFT = 20.0


class LogLookup(Protocol):
    def find(self, name: str) -> Optional[WellLogData]: ...


@dataclass
class Well:
    primary_name: str
    inline: float
    crossline: float
    time_start: float
    time_end: float
    anchor: WellAnchor
    aliases: Set[str] = field(default_factory=set)
    alias_order: List[str] = field(default_factory=list, repr=False)

    # attached (shared) log data; the registry never copies it
    log_data: Optional[WellLogData] = None
    matched_log_name: Optional[str] = None
    current_log_type: str = NO_LOG
    curve: Optional[LogCurveGeometry] = None

    def add_alias(self, name: str) -> None:
        if name == self.primary_name or name in self.aliases:
            return
        self.aliases.add(name)
        self.alias_order.append(name)

    def all_names(self) -> List[str]:
        return [self.primary_name] + list(self.alias_order)

    def available_logs(self, null_value: float) -> List[str]:
        if self.log_data is None:
            return [NO_LOG]
        return [NO_LOG] + self.log_data.available_logs(null_value)

    def dispose_curve(self) -> None:
        self.curve = None

    def descriptor(self, radius: float) -> GeometryDescriptor:
        a = self.anchor
        return GeometryDescriptor(
            kind="tube",
            name=f"well:{self.primary_name}",
            positions=np.asarray([[a.x, a.top_y, a.z], [a.x, a.bottom_y, a.z]], dtype="float64"),
            metadata={
                "radius": radius,
                "aliases": list(self.alias_order),
                "label": self.primary_name,
                "label_position": [a.x, a.top_y + LABEL_LIFT, a.z],
                "log_type": self.current_log_type,
            },
        )


def parse_well_rows(rows: Sequence[Mapping[str, object]]) -> List[Tuple[float, float, str]]:
    """(inline, crossline, name) for every row with finite coordinates and a non-empty name."""
    out: List[Tuple[float, float, str]] = []
    for r in rows:
        il = to_float(r.get("Inline_n"))
        xl = to_float(r.get("Crossline_n"))
        name = str(r.get("Well_name") or "").strip()
        if il is None or xl is None or not name:
            continue
        out.append((il, xl, name))
    return out


class WellRegistry:
    """
    One Well per distinct (inline, crossline). Additional names seen at an occupied
    location become aliases of the Well already there. A name that is already
    registered is never registered again, wherever it appears.
    """

    def __init__(
        self,
        survey: SurveyConfig,
        display: WellLogDisplayConfig,
        reconciler: Optional[NameReconciler] = None,
    ) -> None:
        self.survey = survey
        self.display = display
        self.reconciler = reconciler or NameReconciler()
        self._wells: List[Well] = []
        self._by_name: Dict[str, Well] = {}
        self._by_location: Dict[Tuple[float, float], Well] = {}

    # -------------------------------------------------------------------------
    # registration
    # -------------------------------------------------------------------------

    def _new_well(self, name: str, inline: float, crossline: float) -> Well:
        s = self.survey
        t0, t1 = 0.0, float(s.default_well_time_end)
        x, z = well_position(inline, crossline, s)
        anchor = WellAnchor(x=x, z=z, top_y=well_time_to_y(t0, s), bottom_y=well_time_to_y(t1, s))
        return Well(primary_name=name, inline=inline, crossline=crossline, time_start=t0, time_end=t1, anchor=anchor)

    def register(self, table: RowTable) -> int:
        """Register wells from a coordinate table. Returns the number of new Wells."""
        table.require(WELL_COLUMNS)
        parsed = parse_well_rows(table.rows)

        groups: Dict[Tuple[float, float], List[str]] = {}
        for il, xl, name in parsed:
            names = groups.setdefault((il, xl), [])
            if name not in names:
                names.append(name)

        added = 0
        for key, names in groups.items():
            primary, duplicates = names[0], names[1:]
            well = self._by_location.get(key)

            if well is None:
                if primary in self._by_name:
                    logger.info("Skipping duplicate well name: %s", primary)
                    continue
                well = self._new_well(primary, key[0], key[1])
                self._wells.append(well)
                self._by_location[key] = well
                self._by_name[primary] = well
                added += 1
            else:
                duplicates = names

            for dup in duplicates:
                if dup in self._by_name:
                    continue
                well.add_alias(dup)
                self._by_name[dup] = well
            if well.aliases:
                logger.debug(
                    "Well %s has duplicates at same location: %s", well.primary_name, ", ".join(well.alias_order)
                )

        logger.info("Wells loaded: %d", len(self._wells))
        return added

    # -------------------------------------------------------------------------
    # lookup
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._wells)

    def __iter__(self) -> Iterator[Well]:
        return iter(list(self._wells))

    @property
    def wells(self) -> List[Well]:
        return list(self._wells)

    def names(self) -> List[str]:
        return [w.primary_name for w in self._wells]

    def find(self, name: str) -> Optional[Well]:
        for cand in self.reconciler.candidates(name):
            w = self._by_name.get(cand)
            if w is not None:
                return w
        return None

    # -------------------------------------------------------------------------
    # logs
    # -------------------------------------------------------------------------

    def attach_log_series(self, lookup: LogLookup) -> int:
        """
        Attach log data to every well: the well's own names (primary, then aliases)
        and their variants are tried in order against lookup.find(); first hit wins.
        Wells without a match stay log-less. Returns the number of wells attached.
        """
        attached = 0
        for well in self._wells:
            hit: Optional[WellLogData] = None
            matched = None
            for own in well.all_names():
                for cand in self.reconciler.candidates(own):
                    hit = lookup.find(cand)
                    if hit is not None:
                        matched = cand
                        break
                if hit is not None:
                    break
            if hit is None:
                continue
            well.log_data = hit
            well.matched_log_name = matched
            attached += 1
            logger.info("Attached log data to well %s (matched as %s)", well.primary_name, matched)

        logger.info("Total wells with log data: %d/%d", attached, len(self._wells))
        return attached

    def set_log_type(self, name: str, log_type: str) -> Optional[LogCurveGeometry]:
        """
        Switch the active log of one well. The previous curve is disposed before the
        new one is built; 'None' (or a well without that log) leaves no curve.
        """
        well = self.find(name)
        if well is None:
            return None
        well.dispose_curve()
        well.current_log_type = log_type
        if log_type == NO_LOG or well.log_data is None:
            return None
        series = well.log_data.series(log_type)
        cfg = self.display.log_type(log_type) or self.display.log_type("GR")
        if series is None or len(series) == 0 or cfg is None:
            return None
        curve = build_log_curve(well.primary_name, well.anchor, series, cfg, self.display)
        if curve.is_empty:
            logger.warning("Not enough valid points for log %s on well %s", log_type, well.primary_name)
            return None
        well.curve = curve
        return curve

    def set_all_log_type(self, log_type: str) -> int:
        changed = 0
        for well in self._wells:
            if well.log_data is not None:
                self.set_log_type(well.primary_name, log_type)
                changed += 1
        logger.info("Set %d wells to log type: %s", changed, log_type)
        return changed

    # -------------------------------------------------------------------------
    # output
    # -------------------------------------------------------------------------

    def descriptors(self) -> List[GeometryDescriptor]:
        out: List[GeometryDescriptor] = []
        for w in self._wells:
            out.append(w.descriptor(self.survey.well_radius))
            if w.curve is not None:
                out.extend(
                    w.curve.descriptors(
                        tube_radius=self.display.tube_radius, curve_segments=self.display.curve_segments
                    )
                )
        return out

    def dispose(self) -> None:
        for w in self._wells:
            w.dispose_curve()
        self._wells.clear()
        self._by_name.clear()
        self._by_location.clear()
