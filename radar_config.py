# radar_config.py
# Chart configuration: Configs/config.toml (optional) + sane fallbacks.
# Everything the engine tunes (ring count, ratios, gaps, text heuristics,
# colors, categories) comes from here, never from constants inside the engine.

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple
try:
    import tomllib  # py3.11+
except Exception:
    import tomli as tomllib  # type: ignore

# --- anchor everything to this file's folder ---
HERE = Path(__file__).parent


def _load_cfg(path: str | None = None) -> dict:
    cfg_path = Path(path) if path else HERE / "Configs" / "config.toml"
    if cfg_path.exists():
        with open(cfg_path, "rb") as f:
            return tomllib.load(f)
    return {}


_CFG = _load_cfg()

EXCEL_PATH = str(HERE / _CFG.get("paths", {}).get("excel", "RadarData.csv"))
CHART_DIR  = str(HERE / _CFG.get("paths", {}).get("chart_dir", "charts"))
PDF_DIR    = str(HERE / _CFG.get("paths", {}).get("pdf_dir", "chart_pdfs"))
ASSETS_DIR = str(HERE / _CFG.get("paths", {}).get("assets", "assets"))

FONT_FAMILY   = _CFG.get("fonts", {}).get("family", "system-ui, -apple-system, sans-serif")
PDF_FONT      = _CFG.get("fonts", {}).get("pdf_regular", "Helvetica")
PDF_FONT_BOLD = _CFG.get("fonts", {}).get("pdf_bold", "Helvetica-Bold")


# =======================
# Categories
# =======================
@dataclass(frozen=True)
class Category:
    label: str
    icon: str
    angle: float
    key: str = ""
    aliases: Tuple[str, ...] = ()


DEFAULT_CATEGORIES = [
    {"key": "koerper_bewegung", "label": "Bewegung", "icon": "bewegung.svg"},
    {"key": "ernaehrung_genuss", "label": "Ernährung & Genuss", "icon": "ernaehrung_genuss.svg"},
    {"key": "stress_erholung", "label": "Stress & Erholung", "icon": "stress_erholung.svg"},
    {"key": "geist_emotionen", "label": "Geist & Emotion", "icon": "geist_emotion.svg",
     "aliases": ["geist_emotion"]},
    {"key": "lebenssinn_qualitaet", "label": "Lebenssinn & -qualität", "icon": "lebenssinn_qualitaet.svg"},
    {"key": "umwelt_soziales", "label": "Umwelt & Soziales", "icon": "umwelt_soziales.svg"},
]


def build_categories(entries: List[dict], assets_dir: str | None = None) -> List[Category]:
    """
    Turn config entries into Category records. A missing angle means even
    spacing by position (index * 360 / count), starting at 12 o'clock.
    """
    entries = list(entries or [])
    if not entries:
        raise ValueError("At least one category is required.")
    step = 360.0 / len(entries)
    out: List[Category] = []
    seen: Dict[float, str] = {}
    for i, e in enumerate(entries):
        label = str(e.get("label", "")).strip()
        key = str(e.get("key", "") or label).strip()
        angle = e.get("angle")
        angle = (float(angle) if angle is not None else i * step) % 360.0
        norm = round(angle, 6)
        if norm in seen:
            raise ValueError(f"Categories '{seen[norm]}' and '{key}' share the angle {angle}°.")
        seen[norm] = key
        icon = str(e.get("icon", ""))
        if icon and assets_dir and not Path(icon).is_absolute() and "://" not in icon:
            icon = str(Path(assets_dir) / icon)
        out.append(Category(
            label=label,
            icon=icon,
            angle=angle,
            key=key,
            aliases=tuple(str(a) for a in (e.get("aliases") or [])),
        ))
    return out


def load_categories(cfg: dict | None = None) -> List[Category]:
    cfg = _CFG if cfg is None else cfg
    return build_categories(cfg.get("categories") or DEFAULT_CATEGORIES, ASSETS_DIR)


# =======================
# Chart tuning
# =======================
DEFAULT_BANDS = (
    (0.5, "#2E9E44"),  # green
    (0.3, "#FFBF00"),  # amber
    (0.2, "#FF8000"),  # orange
    (0.0, "#FF0000"),  # red
)

LEVEL_PALETTE = (
    "#FF0000", "#FF4000", "#FF8000", "#FFBF00",
    "#BFFF00", "#80FF00", "#40FF00", "#20C000", "#006400",
)


@dataclass(frozen=True)
class ChartMetrics:
    """Pixel sizes resolved for one canvas size."""
    size: float
    center: float
    scale: float
    base_radius: float
    bar_width: float
    ring_gap: float
    label_radius: float
    icon_size: float
    font_size: float
    center_radius: float
    pointer_length: float
    pointer_width: float
    pointer_base: float
    max_level: int

    def ring_radius(self, level: int) -> float:
        return self.base_radius + level * (self.bar_width + self.ring_gap)

    @property
    def avoid_radius(self) -> float:
        """Outer edge of the outermost ring."""
        return self.ring_radius(self.max_level - 1) + self.bar_width / 2


@dataclass(frozen=True)
class ChartConfig:
    max_level: int = 9
    default_magnitude: int = 2

    # ring stack (fractions of the canvas size)
    radius_ratio: float = 0.095
    bar_width_ratio: float = 0.021
    min_bar_width: float = 2.0
    ring_gap_ratio: float = 0.004

    # angular gap between neighbouring ring stacks
    gap_policy: str = "pixel"   # "pixel" | "angle"
    gap_px: float = 6.0
    gap_deg: float = 4.0

    # labels
    label_radius_ratio: float = 0.48
    icon_size_ratio: float = 0.08
    icon_size_min: float = 24.0
    icon_size_max: float = 48.0
    font_size_ratio: float = 0.024
    font_size_floor: float = 10.0
    min_font_size: float = 8.0
    safety_gap: float = 8.0
    box_width_factor: float = 2.8
    icon_disc_factor: float = 1.4
    line_height: float = 1.2
    text_padding: float = 4.0
    char_width_ratio: float = 0.6
    shrink_factor: float = 0.92
    max_shrink_steps: int = 10

    # center badge + pointer
    center_radius_ratio: float = 0.07
    center_radius_min: float = 15.0
    pointer_length_ratio: float = 0.055
    pointer_width_ratio: float = 0.024
    pointer_base_ratio: float = 0.020

    # colors
    color_mode: str = "magnitude"   # "magnitude" | "level"
    bands: Tuple[Tuple[float, str], ...] = DEFAULT_BANDS
    level_palette: Tuple[str, ...] = LEVEL_PALETTE
    inactive_color: str = "#E0E0E0"
    guideline_color: str = "#CCCCCC"

    # (canvas size below which, scale factor)
    breakpoints: Tuple[Tuple[float, float], ...] = ((480.0, 0.8), (768.0, 0.9))

    @classmethod
    def from_dict(cls, cfg: dict | None = None) -> "ChartConfig":
        chart = dict((cfg or {}).get("chart", {}) or {})
        kwargs = {}
        for name in cls.__dataclass_fields__:
            if name in ("bands", "level_palette", "breakpoints") or name not in chart:
                continue
            kwargs[name] = chart[name]
        if chart.get("bands"):
            kwargs["bands"] = tuple(
                sorted(((float(b["threshold"]), str(b["color"])) for b in chart["bands"]),
                       reverse=True)
            )
        if chart.get("level_palette"):
            kwargs["level_palette"] = tuple(str(c) for c in chart["level_palette"])
        if chart.get("breakpoints"):
            kwargs["breakpoints"] = tuple(
                sorted((float(limit), float(factor)) for limit, factor in chart["breakpoints"])
            )
        return cls(**kwargs)

    def scale_for(self, size: float) -> float:
        for limit, factor in self.breakpoints:
            if size < limit:
                return factor
        return 1.0

    def metrics(self, size: float) -> ChartMetrics:
        s = max(0.0, float(size)) if math.isfinite(float(size)) else 0.0
        k = self.scale_for(s)
        icon = min(max(s * self.icon_size_ratio * k, self.icon_size_min), self.icon_size_max, s / 4)
        return ChartMetrics(
            size=s,
            center=s / 2,
            scale=k,
            base_radius=s * self.radius_ratio * k,
            bar_width=max(s * self.bar_width_ratio * k, self.min_bar_width),
            ring_gap=s * self.ring_gap_ratio * k,
            label_radius=s * self.label_radius_ratio * k,
            icon_size=icon,
            font_size=max(s * self.font_size_ratio * k, self.font_size_floor),
            center_radius=max(s * self.center_radius_ratio * k, self.center_radius_min),
            pointer_length=s * self.pointer_length_ratio * k,
            pointer_width=s * self.pointer_width_ratio * k,
            pointer_base=s * self.pointer_base_ratio * k,
            max_level=int(self.max_level),
        )


CONFIG = ChartConfig.from_dict(_CFG)
