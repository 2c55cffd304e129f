"""Publication flow from time periods into research areas, rendered as a plotly Sankey."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import plotly.graph_objects as go

from homepage.research_areas import (
    AUTONOMOUS_AGENTS,
    COMPUTER_ARCHITECTURE,
    ML_SYSTEMS,
    MOBILE_COMPUTING,
    NETWORKING,
    SECURITY_PRIVACY,
    SYSTEMS_SOFTWARE,
)
from homepage.sources.data import Publication

logger = logging.getLogger(__name__)

RECENT = "Recent (≤2y)"
OLDER = "Older (≤10y)"
ARCHIVE = "Archive"
PERIODS = (RECENT, OLDER, ARCHIVE)

RECENT_YEARS = 2
OLDER_YEARS = 10

AREA_COLORS = {
    COMPUTER_ARCHITECTURE: "#A51C30",
    ML_SYSTEMS: "#1D4ED8",
    AUTONOMOUS_AGENTS: "#047857",
    MOBILE_COMPUTING: "#7C3AED",
    SYSTEMS_SOFTWARE: "#B45309",
    SECURITY_PRIVACY: "#BE185D",
    NETWORKING: "#0E7490",
}
DEFAULT_AREA_COLOR = "#6B7280"

PERIOD_COLORS = {
    RECENT: "#A51C30",
    OLDER: "#F59E0B",
    ARCHIVE: "#9CA3AF",
}


def area_color(area: str) -> str:
    return AREA_COLORS.get(area, DEFAULT_AREA_COLOR)


def period_for_year(year: int, current_year: int) -> str:
    age = current_year - year
    if age <= RECENT_YEARS:
        return RECENT
    if age <= OLDER_YEARS:
        return OLDER
    return ARCHIVE


def paper_color(year: int, current_year: Optional[int] = None) -> str:
    current_year = current_year or datetime.now().year
    return PERIOD_COLORS[period_for_year(year, current_year)]


def _rgba(hex_color: str, alpha: float) -> str:
    hex_color = hex_color.lstrip("#")
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha})"


@dataclass
class FlowData:
    """Nodes and weighted links of the flow diagram."""

    nodes: List[str] = field(default_factory=list)
    node_colors: List[str] = field(default_factory=list)
    sources: List[int] = field(default_factory=list)
    targets: List[int] = field(default_factory=list)
    values: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List]:
        return {
            "nodes": [{"name": n, "color": c} for n, c in zip(self.nodes, self.node_colors)],
            "links": [
                {"source": s, "target": t, "value": v}
                for s, t, v in zip(self.sources, self.targets, self.values)
            ],
        }


def build_flow_data(
    publications: Iterable[Publication],
    areas: List[str],
    current_year: Optional[int] = None,
) -> FlowData:
    """
    Count publications flowing from their period into each of their areas.

    A publication with several areas contributes one unit to each of them.
    Periods and areas without any publication are left out.

    Args:
        publications: Classified publications
        areas: Area nodes in display order
        current_year: Reference year for the periods; defaults to this year

    Returns:
        FlowData with period nodes first, then area nodes
    """
    current_year = current_year or datetime.now().year
    counts: Dict[str, Dict[str, int]] = {period: {} for period in PERIODS}

    for pub in publications:
        period = period_for_year(pub.year, current_year)
        for area in pub.areas:
            if area in areas:
                counts[period][area] = counts[period].get(area, 0) + 1

    used_periods = [p for p in PERIODS if counts[p]]
    used_areas = [a for a in areas if any(a in counts[p] for p in used_periods)]

    data = FlowData()
    index = {}
    for period in used_periods:
        index[period] = len(data.nodes)
        data.nodes.append(period)
        data.node_colors.append(PERIOD_COLORS[period])
    for area in used_areas:
        index[area] = len(data.nodes)
        data.nodes.append(area)
        data.node_colors.append(area_color(area))

    for period in used_periods:
        for area in used_areas:
            value = counts[period].get(area)
            if value:
                data.sources.append(index[period])
                data.targets.append(index[area])
                data.values.append(value)

    return data


def build_sankey_figure(data: FlowData, title: str = "Research Flow") -> go.Figure:
    fig = go.Figure(go.Sankey(
        arrangement="snap",
        node=dict(
            label=data.nodes,
            color=data.node_colors,
            pad=18,
            thickness=16,
            line=dict(color="#FFFFFF", width=0.5),
        ),
        link=dict(
            source=data.sources,
            target=data.targets,
            value=data.values,
            color=[_rgba(data.node_colors[s], 0.35) for s in data.sources],
        ),
    ))
    fig.update_layout(
        title=dict(text=title, font=dict(size=16, color="#111827")),
        font=dict(size=11, color="#374151"),
        paper_bgcolor="white",
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


def write_flow_diagram(data: FlowData, path: Union[str, Path]) -> Path:
    """Write the diagram as a standalone HTML page."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    build_sankey_figure(data).write_html(str(path), include_plotlyjs="cdn", full_html=True)
    logger.info(f"Wrote flow diagram to {path}")
    return path
