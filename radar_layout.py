# radar_layout.py
# Ring-stack chart layout: magnitudes -> arc segments, label boxes pushed clear
# of the ring stack, guidelines trimmed to the label edge.
# One pass is a pure function of (categories, magnitudes, canvas size, config);
# results are frozen records and are replaced wholesale on every pass.

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from label_text import TextLayout, two_line_layout
from radar_config import CONFIG, Category, ChartConfig, ChartMetrics
from radar_geometry import (Point, box_distance, describe_arc, inward_half_extent, polar_to_cartesian,
                            ray_box_entry)


# =======================
# Records
# =======================
@dataclass(frozen=True)
class RingSegment:
    category: int
    level: int
    radius: float
    start_angle: float
    end_angle: float
    active: bool
    color: str
    stroke_width: float
    path: str


@dataclass(frozen=True)
class Placement:
    center_radius: float
    inward_extent: float
    center: Point
    x: float
    y: float
    clamp_offset_x: float
    clamp_offset_y: float


@dataclass(frozen=True)
class LabelBox:
    category: int
    label: str
    icon: str
    angle: float
    center_radius: float
    inward_extent: float
    center: Point
    x: float
    y: float
    width: float
    height: float
    clamp_offset_x: float
    clamp_offset_y: float
    lines: Tuple[str, str]
    font_size: float
    icon_size: float
    line_height: float


@dataclass(frozen=True)
class Guideline:
    category: int
    start: Point
    end: Point
    start_radius: float
    end_radius: float
    color: str


@dataclass(frozen=True)
class CenterBadge:
    center: Point
    radius: float
    average: float
    percent: int


@dataclass(frozen=True)
class Pointer:
    category: int
    angle: float
    length: float
    width: float
    base: float

    def outline(self) -> List[Point]:
        """Arrow polygon pointing straight up from the origin (rotate by `angle` to place it)."""
        return [
            (0.0, -self.length),
            (-self.width, -self.length * 0.12),
            (-self.width * 0.45, self.base),
            (self.width * 0.45, self.base),
            (self.width, -self.length * 0.12),
        ]


@dataclass(frozen=True)
class ChartLayout:
    size: float
    center: Point
    magnitudes: Tuple[int, ...]
    segments: Tuple[RingSegment, ...] = ()
    guidelines: Tuple[Guideline, ...] = ()
    labels: Tuple[LabelBox, ...] = ()
    badge: Optional[CenterBadge] = None
    pointer: Optional[Pointer] = None

    @property
    def is_empty(self) -> bool:
        return not (self.segments or self.guidelines or self.labels)

    def segments_for(self, category: int) -> List[RingSegment]:
        return [s for s in self.segments if s.category == category]

    def active_count(self, category: int) -> int:
        return sum(1 for s in self.segments if s.category == category and s.active)


# =======================
# Magnitudes
# =======================
def clamp_magnitude(value, max_level: int, default: int = 2) -> int:
    """
    Clamp to [0, max_level] and drop the fraction (3.6 fills 3 rings).
    NaN and anything non-numeric become the (clamped) default; +-inf clamp like any other number.
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        v = float(default)
    if math.isnan(v):
        v = float(default)
    v = max(0.0, min(float(max_level), v))
    return int(math.floor(v))


def align_magnitudes(magnitudes: Sequence, count: int, max_level: int, default: int = 2) -> List[int]:
    """One clamped magnitude per category: missing entries get the default, extras are dropped."""
    values = list(magnitudes or [])[:count]
    values += [default] * (count - len(values))
    return [clamp_magnitude(v, max_level, default) for v in values]


# =======================
# Rings
# =======================
def band_color(fraction: float, bands: Sequence[Tuple[float, str]]) -> str:
    for threshold, color in sorted(bands, reverse=True):
        if fraction >= threshold - 1e-9:
            return color
    return sorted(bands)[0][1]


def segment_color(level: int, magnitude: int, config: ChartConfig) -> str:
    if level >= magnitude:
        return config.inactive_color
    if config.color_mode == "level":
        palette = config.level_palette
        return palette[min(level, len(palette) - 1)]
    return band_color(magnitude / max(1, config.max_level), config.bands)


def sector_gap_deg(radius: float, sector_angle: float, config: ChartConfig) -> float:
    """
    Angular gap between neighbouring stacks at this ring.
    "pixel": constant arc length gap_px (outer rings get a smaller angle);
    "angle": constant gap_deg.
    """
    if config.gap_policy == "angle":
        gap = config.gap_deg
    elif radius > 0:
        gap = math.degrees(config.gap_px / radius)
    else:
        gap = sector_angle
    return min(max(0.0, gap), sector_angle)


def layout_rings(
    categories: Sequence[Category],
    magnitudes: Sequence[int],
    metrics: ChartMetrics,
    config: ChartConfig,
) -> List[RingSegment]:
    if not categories:
        return []
    c = metrics.center
    sector = 360.0 / len(categories)
    out: List[RingSegment] = []
    for i, (cat, mag) in enumerate(zip(categories, magnitudes)):
        for level in range(metrics.max_level):
            r = metrics.ring_radius(level)
            gap = sector_gap_deg(r, sector, config)
            start = cat.angle - sector / 2 + gap / 2
            end = cat.angle + sector / 2 - gap / 2
            out.append(RingSegment(
                category=i,
                level=level,
                radius=r,
                start_angle=start,
                end_angle=end,
                active=level < mag,
                color=segment_color(level, mag, config),
                stroke_width=metrics.bar_width,
                path=describe_arc(c, c, r, start, end),
            ))
    return out


# =======================
# Label boxes
# =======================
def label_text_layout(label: str, metrics: ChartMetrics, config: ChartConfig) -> TextLayout:
    return two_line_layout(
        label,
        box_width=metrics.icon_size * config.box_width_factor,
        start_font_size=metrics.font_size,
        min_font_size=config.min_font_size,
        padding=config.text_padding,
        char_width_ratio=config.char_width_ratio,
        shrink_factor=config.shrink_factor,
        max_iterations=config.max_shrink_steps,
    )


def label_box_size(text: TextLayout, metrics: ChartMetrics, config: ChartConfig) -> Tuple[float, float]:
    """Icon disc on top, up to two text lines below, padding all round."""
    width = metrics.icon_size * config.box_width_factor
    n_lines = sum(1 for line in text.lines if line)
    height = 2 * config.text_padding + metrics.icon_size * config.icon_disc_factor
    if n_lines:
        height += max(4.0, text.font_size * 0.3) + n_lines * text.font_size * config.line_height
    return max(0.0, width), max(0.0, height)


def place_label(
    angle: float,
    nominal_radius: float,
    width: float,
    height: float,
    avoid_radius: float,
    safety_gap: float,
    center: float,
    canvas: float,
) -> Placement:
    """
    Push the box outward until its inward edge clears avoid_radius + safety_gap
    (never pull it inward of nominal_radius), then soft-clamp it into the canvas
    by a quarter of the overflowing dimension. A nudge that would bring any
    part of the box inside the clearance disc is skipped for that axis.
    """
    inward = inward_half_extent(width / 2, height / 2, angle)
    radius = max(nominal_radius, avoid_radius + safety_gap + inward)
    px, py = polar_to_cartesian(center, center, radius, angle)
    x, y = px - width / 2, py - height / 2

    dx = dy = 0.0
    if x < 0:
        dx = width / 4
    elif x + width > canvas:
        dx = -width / 4
    if y < 0:
        dy = height / 4
    elif y + height > canvas:
        dy = -height / 4

    clear = avoid_radius + safety_gap - 1e-9
    if dx and box_distance(center, center, x + dx, y, width, height) < clear:
        dx = 0.0
    if dy and box_distance(center, center, x + dx, y + dy, width, height) < clear:
        dy = 0.0

    return Placement(
        center_radius=radius,
        inward_extent=inward,
        center=(px, py),
        x=x + dx,
        y=y + dy,
        clamp_offset_x=dx,
        clamp_offset_y=dy,
    )


def label_anchors(box: LabelBox, config: ChartConfig) -> Tuple[Point, float, List[Tuple[int, str, float]]]:
    """Icon disc center and radius, plus (line index, text, baseline y) per non-empty line."""
    disc = box.icon_size * config.icon_disc_factor
    cx = box.x + box.width / 2
    icon_center = (cx, box.y + config.text_padding + disc / 2)
    text_top = box.y + config.text_padding + disc + max(4.0, box.font_size * 0.3)
    lines = [
        (i, line, text_top + box.font_size + i * box.font_size * box.line_height)
        for i, line in enumerate(box.lines) if line
    ]
    return icon_center, disc / 2, lines


# =======================
# Guidelines
# =======================
def trim_guideline(
    angle: float,
    center: float,
    start_radius: float,
    label_radius: float,
    inward_extent: float,
    box: Optional[Tuple[float, float, float, float]] = None,
) -> Tuple[Point, Point, float, float]:
    """
    From the outer ring edge to the label box's inward touch point, on the category ray.
    With the final (x, y, w, h) box, the line also stops where the ray enters a
    box that the canvas clamp moved toward the center.
    """
    end_radius = label_radius - inward_extent
    if box is not None:
        entry = ray_box_entry(center, center, angle, *box)
        if entry is not None:
            end_radius = min(end_radius, entry)
    end_radius = min(max(end_radius, start_radius), max(label_radius, start_radius))
    start = polar_to_cartesian(center, center, start_radius, angle)
    end = polar_to_cartesian(center, center, end_radius, angle)
    return start, end, start_radius, end_radius


# =======================
# Full pass
# =======================
def _canvas_size(size) -> float:
    try:
        s = float(size)
    except (TypeError, ValueError):
        return 0.0
    return s if math.isfinite(s) and s > 0 else 0.0


def compute_layout(
    categories: Sequence[Category],
    magnitudes: Sequence,
    size,
    config: ChartConfig | None = None,
) -> ChartLayout:
    config = config or CONFIG
    s = _canvas_size(size)
    mags = align_magnitudes(magnitudes, len(categories), config.max_level, config.default_magnitude)
    if s <= 0 or not categories or config.max_level < 1:
        return ChartLayout(size=s, center=(s / 2, s / 2), magnitudes=tuple(mags))

    m = config.metrics(s)
    c = m.center
    segments = layout_rings(categories, mags, m, config)
    avoid = m.avoid_radius

    labels: List[LabelBox] = []
    guidelines: List[Guideline] = []
    for i, cat in enumerate(categories):
        text = label_text_layout(cat.label, m, config)
        w, h = label_box_size(text, m, config)
        p = place_label(cat.angle, m.label_radius, w, h, avoid, config.safety_gap, c, s)
        labels.append(LabelBox(
            category=i,
            label=cat.label,
            icon=cat.icon,
            angle=cat.angle,
            center_radius=p.center_radius,
            inward_extent=p.inward_extent,
            center=p.center,
            x=p.x,
            y=p.y,
            width=w,
            height=h,
            clamp_offset_x=p.clamp_offset_x,
            clamp_offset_y=p.clamp_offset_y,
            lines=text.lines,
            font_size=text.font_size,
            icon_size=m.icon_size,
            line_height=config.line_height,
        ))
        start, end, r0, r1 = trim_guideline(cat.angle, c, avoid, p.center_radius, p.inward_extent,
                                          box=(p.x, p.y, w, h))
        guidelines.append(Guideline(
            category=i, start=start, end=end, start_radius=r0, end_radius=r1,
            color=config.guideline_color,
        ))

    avg = sum(mags) / len(mags)
    badge = CenterBadge(
        center=(c, c),
        radius=m.center_radius,
        average=avg,
        percent=int(math.floor(avg / config.max_level * 100 + 0.5)),
    )
    low = mags.index(min(mags))
    pointer = Pointer(
        category=low,
        angle=categories[low].angle,
        length=m.pointer_length,
        width=m.pointer_width,
        base=m.pointer_base,
    )

    return ChartLayout(
        size=s,
        center=(c, c),
        magnitudes=tuple(mags),
        segments=tuple(segments),
        guidelines=tuple(guidelines),
        labels=tuple(labels),
        badge=badge,
        pointer=pointer,
    )
