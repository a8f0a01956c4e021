# build_chart_pdfs.py
# Paint radar charts straight onto PDF pages with reportlab (one page per
# spreadsheet row) and merge them into a single RadarCharts.pdf with pypdf.
# - Same layout as the SVG charts; only the y axis is flipped for PDF space
# - Optional TTF fonts from config [fonts] (falls back to Helvetica)

import io
import math
from pathlib import Path
from typing import List, Optional, Sequence

from reportlab.pdfgen import canvas
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.lib.colors import HexColor
from pypdf import PdfReader, PdfWriter

from radar_config import (_CFG, CONFIG, EXCEL_PATH, HERE, PDF_DIR, PDF_FONT, PDF_FONT_BOLD,
                          Category, ChartConfig, load_categories)
from radar_inputs import magnitudes_from_sheet
from radar_layout import ChartLayout, compute_layout, label_anchors

# ========= CONFIG (from config.toml, with sane defaults) =========
FONT_REG_PATH  = _CFG.get("fonts", {}).get("pdf_regular_path")
FONT_BOLD_PATH = _CFG.get("fonts", {}).get("pdf_bold_path")

BADGE_FILL   = HexColor("#F6E2CA")
BADGE_STROKE = HexColor("#3D5241")
ICON_DISC    = HexColor("#F6E2CA")
POINTER_FILL = HexColor("#FF6B6B")
POINTER_EDGE = HexColor("#AA4444")

RASTER_ICONS = (".png", ".jpg", ".jpeg", ".gif")


# ========= FONTS =========
def register_fonts():
    """Register the configured TTFs; the built-in Type1 fonts need no registration."""
    for name, rel in ((PDF_FONT, FONT_REG_PATH), (PDF_FONT_BOLD, FONT_BOLD_PATH)):
        if not rel:
            continue
        try:
            pdfmetrics.registerFont(TTFont(name, str(HERE / rel)))
        except Exception as exc:
            print(f"[warn] font {name} not registered from {rel}: {exc}")


def _font(name: str, fallback: str) -> str:
    return name if name in pdfmetrics.getRegisteredFontNames() or name in pdfmetrics.standardFonts else fallback


# ========= GEOMETRY =========
def _rotate(px: float, py: float, angle_deg: float):
    """Clockwise rotation in screen space (same sense as SVG rotate())."""
    a = math.radians(angle_deg)
    return px * math.cos(a) - py * math.sin(a), px * math.sin(a) + py * math.cos(a)


# ========= PAINT =========
def paint_chart_pdf(layout: ChartLayout, config: ChartConfig = CONFIG, title: Optional[str] = None) -> bytes:
    side = max(layout.size, 1.0)
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(side, side))
    if title:
        c.setTitle(title)

    def Y(y: float) -> float:
        return side - y

    font = _font(PDF_FONT, "Helvetica")
    font_bold = _font(PDF_FONT_BOLD, "Helvetica-Bold")

    if not layout.is_empty:
        cx, cy = layout.center

        if layout.badge:
            b = layout.badge
            c.setFillColor(BADGE_FILL)
            c.setStrokeColor(BADGE_STROKE)
            c.setLineWidth(2)
            c.circle(cx, Y(cy), b.radius, stroke=1, fill=1)
            fs = max(b.radius * 0.8, 1)
            c.setFillColor(HexColor("#000000"))
            c.setFont(font_bold, fs)
            c.drawCentredString(cx, Y(cy) - fs * 0.35, f"{b.percent}%")

        # rings: PDF angles run counter-clockwise from 3 o'clock
        c.setLineCap(0)
        for seg in layout.segments:
            r = seg.radius
            c.setStrokeColor(HexColor(seg.color))
            c.setLineWidth(seg.stroke_width)
            c.arc(cx - r, Y(cy) - r, cx + r, Y(cy) + r,
                  startAng=90.0 - seg.end_angle, extent=seg.end_angle - seg.start_angle)

        c.setLineWidth(1)
        for g in layout.guidelines:
            c.setStrokeColor(HexColor(g.color))
            c.line(g.start[0], Y(g.start[1]), g.end[0], Y(g.end[1]))

        if layout.pointer:
            p = layout.pointer
            pts = [_rotate(px, py, p.angle) for px, py in p.outline()]
            path = c.beginPath()
            path.moveTo(cx + pts[0][0], Y(cy + pts[0][1]))
            for px, py in pts[1:]:
                path.lineTo(cx + px, Y(cy + py))
            path.close()
            c.setFillColor(POINTER_FILL)
            c.setStrokeColor(POINTER_EDGE)
            c.setLineWidth(0.5)
            c.drawPath(path, stroke=1, fill=1)

        for box in layout.labels:
            (ix, iy), disc_r, lines = label_anchors(box, config)
            c.setFillColor(ICON_DISC)
            c.setStrokeColor(BADGE_STROKE)
            c.setLineWidth(0.5)
            c.circle(ix, Y(iy), disc_r, stroke=1, fill=1)
            if box.icon and Path(box.icon).suffix.lower() in RASTER_ICONS and Path(box.icon).exists():
                s = box.icon_size
                c.drawImage(box.icon, ix - s / 2, Y(iy) - s / 2, width=s, height=s, mask="auto")

            c.setFillColor(HexColor("#000000"))
            c.setFont(font, box.font_size)
            for _, line, baseline in lines:
                c.drawCentredString(ix, Y(baseline), line)

    c.showPage()
    c.save()
    buf.seek(0)
    return buf.read()


def write_chart_pdf(out_path: Path, categories: Sequence[Category], magnitudes: Sequence,
                    size: float = 600, config: ChartConfig = CONFIG, title: Optional[str] = None) -> Path:
    layout = compute_layout(categories, magnitudes, size, config)
    with open(out_path, "wb") as f:
        f.write(paint_chart_pdf(layout, config, title))
    return out_path


def merge_all_into_one(paths: List[Path], out_pdf: Path) -> None:
    writer = PdfWriter()
    for p in paths:
        try:
            r = PdfReader(str(p))
            for page in r.pages:
                writer.add_page(page)
        except Exception as e:
            print(f"[warn] Skipping {Path(p).name} while building {Path(out_pdf).name}: {e}")
    with open(out_pdf, "wb") as f:
        writer.write(f)


# ========= MAIN =========
def generate_chart_pdfs(
    excel_path: str = EXCEL_PATH,
    out_dir: str = PDF_DIR,
    sheet_name: str | None = None,
    name_col: str = "Name",
    size: float = 600,
    categories: Sequence[Category] | None = None,
    config: ChartConfig = CONFIG,
) -> List[Path]:
    register_fonts()
    categories = list(categories) if categories is not None else load_categories()
    outdir = Path(out_dir)
    outdir.mkdir(parents=True, exist_ok=True)

    rows = magnitudes_from_sheet(excel_path, categories, sheet_name, name_col,
                                 config.max_level, config.default_magnitude)
    written: List[Path] = []
    for name, mags in rows:
        safe = "".join(ch for ch in name if ch.isalnum() or ch in (" ", "_", "-", ".")).strip().replace(" ", "_")
        out_path = outdir / f"{safe or 'chart'}_radar.pdf"
        try:
            write_chart_pdf(out_path, categories, mags, size, config, title=name)
        except OSError as exc:
            print(f"[warn] {name}: could not write {out_path}: {exc}")
            continue
        written.append(out_path)
        print(f"[OK] {name} -> {out_path}")

    if written:
        master = outdir / "RadarCharts.pdf"
        merge_all_into_one(written, master)
        print(f"[OK] merged {len(written)} chart(s) -> {master}")
    return written


def main():
    generate_chart_pdfs()


if __name__ == "__main__":
    main()
