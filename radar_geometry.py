# radar_geometry.py
# Polar helpers for the ring-stack chart.
# Angles are in degrees, 0 = straight up (12 o'clock), increasing clockwise,
# in screen coordinates (y grows downwards) so results drop straight into SVG.

import math
from typing import Optional, Tuple

Point = Tuple[float, float]


# =======================
# Polar <-> cartesian
# =======================
def radial_unit(angle_deg: float) -> Point:
    """Unit vector pointing outward from the center along angle_deg."""
    rad = math.radians(angle_deg - 90.0)
    return math.cos(rad), math.sin(rad)


def polar_to_cartesian(cx: float, cy: float, r: float, angle_deg: float) -> Point:
    ux, uy = radial_unit(angle_deg)
    return cx + r * ux, cy + r * uy


def angle_of(cx: float, cy: float, x: float, y: float) -> float:
    """Inverse of polar_to_cartesian for the angle: returns degrees in [0, 360)."""
    a = math.degrees(math.atan2(y - cy, x - cx)) + 90.0
    return a % 360.0


def describe_arc(cx: float, cy: float, r: float, start_deg: float, end_deg: float) -> str:
    """
    SVG path for the arc between two angles.
    The path runs from the end angle back to the start angle (sweep flag 0),
    so the large-arc flag only depends on the span.
    """
    x0, y0 = polar_to_cartesian(cx, cy, r, end_deg)
    x1, y1 = polar_to_cartesian(cx, cy, r, start_deg)
    large = 0 if (end_deg - start_deg) <= 180.0 else 1
    return f"M {x0:.3f} {y0:.3f} A {r:.3f} {r:.3f} 0 {large} 0 {x1:.3f} {y1:.3f}"


# =======================
# Support function
# =======================
def inward_half_extent(half_w: float, half_h: float, angle_deg: float) -> float:
    """
    How far an axis-aligned box reaches toward the chart center when its
    center sits on the ray at angle_deg: |ux|*hw + |uy|*hh.
    """
    ux, uy = radial_unit(angle_deg)
    return abs(ux) * max(0.0, half_w) + abs(uy) * max(0.0, half_h)


# =======================
# Boxes
# =======================
def box_distance(cx: float, cy: float, x: float, y: float, w: float, h: float) -> float:
    """Distance from (cx, cy) to the nearest point of the box; 0 when inside."""
    dx = max(x - cx, 0.0, cx - (x + w))
    dy = max(y - cy, 0.0, cy - (y + h))
    return math.hypot(dx, dy)


def ray_box_entry(cx: float, cy: float, angle_deg: float,
                  x: float, y: float, w: float, h: float) -> Optional[float]:
    """Distance along the ray from (cx, cy) at angle_deg to where it enters the box, None on a miss."""
    ux, uy = radial_unit(angle_deg)
    near, far = 0.0, math.inf
    for origin, d, lo, hi in ((cx, ux, x, x + w), (cy, uy, y, y + h)):
        if abs(d) < 1e-12:
            if origin < lo or origin > hi:
                return None
            continue
        t1, t2 = (lo - origin) / d, (hi - origin) / d
        near = max(near, min(t1, t2))
        far = min(far, max(t1, t2))
    return near if near <= far else None
