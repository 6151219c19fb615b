from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .models import ExecutionInterval

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_MARK = "·"


@dataclass(frozen=True)
class _Segment:
    # process_name is None for an idle stretch of the CPU
    process_name: Optional[str]
    width: int

    @property
    def label(self) -> str:
        if self.process_name is None:
            return " " * self.width
        return self.process_name[: self.width].ljust(self.width)


def _layout(timeline: Sequence[ExecutionInterval]) -> Tuple[List[_Segment], str]:
    """
    Split a timeline into busy and idle segments, one character per time
    unit, and format the time mark at every segment boundary.
    """
    segments: List[_Segment] = []
    boundaries = [0]
    cursor = 0

    for interval in timeline:
        if interval.start > cursor:
            segments.append(_Segment(None, interval.start - cursor))
            boundaries.append(interval.start)
        segments.append(_Segment(interval.process_name, interval.length))
        boundaries.append(interval.end)
        cursor = interval.end

    marks = str(boundaries[0]) + "".join(f"{t:>3}" for t in boundaries[1:])
    return segments, marks


def _color_map(timeline: Sequence[ExecutionInterval]) -> Dict[str, str]:
    colors: Dict[str, str] = {}
    for interval in timeline:
        if interval.process_name not in colors:
            colors[interval.process_name] = COLORS[len(colors) % len(COLORS)]
    return colors


def render_gantt(timeline: Sequence[ExecutionInterval]) -> str:
    """
    Plain-text Gantt chart: one ``=`` per busy time unit, one ``.`` per idle
    unit, process labels underneath and time marks at every boundary.
    """
    if not timeline:
        return "(no execution)"

    segments, marks = _layout(timeline)
    bar = "".join(("." if s.process_name is None else "=") * s.width for s in segments)
    labels = "".join(s.label for s in segments)

    return "\n".join(["Gantt Chart:", f"|{bar}|", labels, marks])


def build_rich_gantt(timeline: Sequence[ExecutionInterval]) -> tuple[Panel, str]:
    """
    Colored chart of the timeline. Each process keeps one color for all of
    its slices, idle time is drawn as dim dots, and a legend row maps colors
    to process names. Returns the panel and the time-mark line printed
    beneath it.
    """
    if not timeline:
        return Panel("No execution", title="Gantt Chart"), ""

    segments, marks = _layout(timeline)
    colors = _color_map(timeline)

    bars = Text()
    labels = Text()
    for s in segments:
        if s.process_name is None:
            bars.append(IDLE_MARK * s.width, style="dim")
        else:
            bars.append(" " * s.width, style=f"on {colors[s.process_name]}")
        labels.append(s.label, style="bold")

    legend = Text()
    for name, color in colors.items():
        legend.append("■ ", style=color)
        legend.append(f"{name}  ")
    if any(s.process_name is None for s in segments):
        legend.append(f"{IDLE_MARK} idle", style="dim")

    panel = Panel(
        Group(bars, labels, legend),
        title="Gantt Chart",
        subtitle=f"makespan {timeline[-1].end}",
        expand=False,
    )
    return panel, marks
