# radar_chart.py
# Ring-stack radar chart (SVG): concentric arc bars per category, guidelines,
# icon + two-line labels pushed clear of the rings, average badge in the middle
# and a pointer at the weakest category.
# Produces ONE chart per row of RadarData.xlsx (or a .csv with the same columns).
# Requires: pip install svgwrite pandas openpyxl  (optional: cairosvg if rsvg-convert not available)

import argparse
import os
import shutil
from pathlib import Path
from typing import List, Sequence, Tuple

import svgwrite

from radar_config import CHART_DIR, CONFIG, EXCEL_PATH, FONT_FAMILY, Category, ChartConfig, load_categories
from radar_inputs import magnitudes_from_sheet
from radar_layout import ChartLayout, LabelBox, compute_layout, label_anchors
from reveal import RevealSequence

BADGE_FILL = "#F6E2CA"
BADGE_STROKE = "#3D5241"
ICON_DISC = "#F6E2CA"
TEXT_COLOR = "#000000"


# =======================
# Text helpers
# =======================
def _add_two_line_label_centered(
    dwg,
    parent,
    box: LabelBox,
    config: ChartConfig,
    font_family,
    fill=TEXT_COLOR,
):
    """Both lines share the box's center x; baselines stack below the icon disc."""
    (x, _), _, lines = label_anchors(box, config)
    if not lines:
        return

    text_node = dwg.text(
        "",
        insert=(x, 0),
        text_anchor="middle",
        fill=fill,
        font_family=font_family,
        font_weight="500",
    )
    for i, line, baseline in lines:
        t = dwg.tspan(line, x=[x], y=[baseline], font_size=f"{box.font_size:.2f}")
        if i == 1:
            t["opacity"] = 0.85
        text_node.add(t)
    parent.add(text_node)


def _add_icon(dwg, parent, box: LabelBox, config: ChartConfig):
    (cx, cy), disc_r, _ = label_anchors(box, config)
    parent.add(dwg.circle(center=(cx, cy), r=disc_r, fill=ICON_DISC,
                          stroke="rgb(61,82,65)", stroke_opacity=0.1, stroke_width=1))
    if box.icon:
        parent.add(dwg.image(
            href=box.icon,
            insert=(cx - box.icon_size / 2, cy - box.icon_size / 2),
            size=(box.icon_size, box.icon_size),
        ))


# =======================
# Renderer
# =======================
def chart_svg(
    layout: ChartLayout,
    config: ChartConfig = CONFIG,
    svg_path: str = "chart.svg",
    font_family: str = FONT_FAMILY,
    reveal: RevealSequence | None = None,
    show_badge: bool = True,
    show_pointer: bool = True,
) -> svgwrite.Drawing:
    """
    Draw a computed layout. With `reveal`, only the steps it has shown so far
    are drawn (ring levels, then guidelines, then labels).
    A degenerate layout gives an empty canvas.
    """
    size = layout.size
    dwg = svgwrite.Drawing(svg_path, size=(size, size), profile="full")
    dwg.attribs["viewBox"] = f"0 0 {size} {size}"
    if layout.is_empty:
        return dwg

    cx, cy = layout.center

    if show_badge and layout.badge:
        b = layout.badge
        dwg.add(dwg.circle(center=b.center, r=b.radius, fill=BADGE_FILL, stroke=BADGE_STROKE, stroke_width=2))
        dwg.add(dwg.text(
            f"{b.percent}%",
            insert=b.center,
            text_anchor="middle",
            dominant_baseline="middle",
            font_size=f"{max(b.radius * 0.8, 1):.2f}",
            font_weight="bold",
            font_family=font_family,
        ))

    rings = dwg.g(id="rings")
    for seg in layout.segments:
        if reveal and not reveal.is_visible("rings", seg.level):
            continue
        rings.add(dwg.path(
            d=seg.path,
            stroke=seg.color,
            stroke_width=seg.stroke_width,
            fill="none",
            stroke_linecap="butt",
        ))
    dwg.add(rings)

    guides = dwg.g(id="guidelines")
    if not reveal or reveal.is_visible("guidelines"):
        for g in layout.guidelines:
            guides.add(dwg.line(start=g.start, end=g.end, stroke=g.color, stroke_width=1))
    dwg.add(guides)

    if show_pointer and layout.pointer:
        p = layout.pointer
        arrow = dwg.g(id="pointer", transform=f"translate({cx:.3f},{cy:.3f}) rotate({p.angle:.3f})")
        arrow.add(dwg.polygon(p.outline(),
                              fill="#FF6B6B", stroke="#AA4444", stroke_width=0.5))
        arrow.add(dwg.circle(center=(0, 0), r=max(size * 0.013, 4), fill="#CC5555",
                             stroke="#AA4444", stroke_width=0.5))
        dwg.add(arrow)

    labels = dwg.g(id="labels")
    for box in layout.labels:
        if reveal and not reveal.is_visible("label", box.category):
            continue
        _add_icon(dwg, labels, box, config)
        _add_two_line_label_centered(dwg, labels, box, config, font_family)
    dwg.add(labels)

    return dwg


def save_chart_svg(
    svg_path: str,
    categories: Sequence[Category],
    magnitudes: Sequence,
    size: float = 600,
    config: ChartConfig = CONFIG,
) -> ChartLayout:
    layout = compute_layout(categories, magnitudes, size, config)
    chart_svg(layout, config, svg_path=svg_path).save()
    return layout


# =======================
# IO
# =======================
def _safe_slug(text: str) -> str:
    s = "".join(ch if ch.isalnum() else "_" for ch in str(text).strip())
    while "__" in s:
        s = s.replace("__", "_")
    return s.strip("_") or "chart"


def _to_png(svg_path: str, png_path: str):
    """Convert SVG → PNG. Prefer rsvg-convert; fallback to cairosvg if installed."""
    rsvg = shutil.which("rsvg-convert")
    if rsvg:
        os.system(f'"{rsvg}" "{svg_path}" -a -f png -o "{png_path}"')
        return
    try:
        import cairosvg  # type: ignore
        cairosvg.svg2png(url=svg_path, write_to=png_path)
    except Exception as exc:
        print(f"[warn] PNG not created for {svg_path}: {exc}")


# =======================
# Spreadsheet → multiple charts
# =======================
def generate_charts_from_sheet(
    excel_path: str = EXCEL_PATH,
    out_dir: str = CHART_DIR,
    sheet_name: str | None = None,
    name_col: str = "Name",
    *,
    size: int = 600,
    png: bool = True,
    categories: Sequence[Category] | None = None,
    config: ChartConfig = CONFIG,
):
    categories = list(categories) if categories is not None else load_categories()
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    rows = magnitudes_from_sheet(excel_path, categories, sheet_name, name_col,
                                 config.max_level, config.default_magnitude)

    emitted: List[Tuple[str, str, str]] = []
    for name, mags in rows:
        base = _safe_slug(name)
        svg_path = os.path.join(out_dir, f"{base}.svg")
        png_path = os.path.join(out_dir, f"{base}.png")
        try:
            save_chart_svg(svg_path, categories, mags, size=size, config=config)
        except OSError as exc:
            print(f"[warn] {name}: could not write {svg_path}: {exc}")
            continue
        if png:
            _to_png(svg_path, png_path)
        emitted.append((name, svg_path, png_path))
    return emitted


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render one radar chart per spreadsheet row.")
    parser.add_argument("excel", nargs="?", default=EXCEL_PATH, help="Spreadsheet (.xlsx or .csv)")
    parser.add_argument("--out", default=CHART_DIR, help="Output folder")
    parser.add_argument("--sheet", default=None, help="Sheet name (first sheet by default)")
    parser.add_argument("--name-col", default="Name", help="Column used for file names")
    parser.add_argument("--size", type=int, default=600, help="Canvas size in px (square)")
    parser.add_argument("--no-png", action="store_true", help="Skip PNG conversion")
    args = parser.parse_args(argv)

    results = generate_charts_from_sheet(args.excel, args.out, args.sheet, args.name_col,
                                         size=args.size, png=not args.no_png)
    print(f"Emitted {len(results)} charts to '{args.out}'")
    for name, svg, png in results:
        print(f"- {name}: {os.path.basename(svg)}  |  {os.path.basename(png)}")


if __name__ == "__main__":
    main()
