"""Smoke tests for the SVG and PDF renderers and the spreadsheet batch runs."""

import io

from pypdf import PdfReader

from build_chart_pdfs import generate_chart_pdfs, merge_all_into_one, paint_chart_pdf
from radar_chart import _safe_slug, chart_svg, generate_charts_from_sheet, save_chart_svg
from radar_layout import compute_layout
from reveal import RevealSequence
from tests._data import SCENARIO_MAGNITUDES


def _svg(layout, config, **kw):
    return chart_svg(layout, config, **kw).tostring()


# =======================
# SVG
# =======================
def test_svg_draws_every_segment(layout, config):
    svg = _svg(layout, config)
    assert svg.count("<path") == len(layout.segments) == 54
    assert svg.count("<line") == 6
    assert "48%" in svg
    assert 'id="pointer"' in svg
    assert "Bewegung" in svg


def test_svg_empty_layout(categories, config):
    empty = compute_layout(categories, SCENARIO_MAGNITUDES, 0, config)
    svg = _svg(empty, config)
    assert "<path" not in svg
    assert "<text" not in svg


def test_svg_respects_reveal(layout, config):
    seq = RevealSequence.from_layout(layout)
    seq.advance_to(0)
    svg = _svg(layout, config, reveal=seq)
    assert svg.count("<path") == 6
    assert "<line" not in svg
    assert "Bewegung" not in svg


def test_svg_without_badge_or_pointer(layout, config):
    svg = _svg(layout, config, show_badge=False, show_pointer=False)
    assert "48%" not in svg
    assert 'id="pointer"' not in svg


def test_save_chart_svg(tmp_path, categories, config):
    out = tmp_path / "chart.svg"
    layout = save_chart_svg(str(out), categories, SCENARIO_MAGNITUDES, size=480, config=config)
    assert out.exists()
    assert layout.size == 480
    assert out.read_text(encoding="utf-8").startswith("<?xml")


def test_safe_slug():
    assert _safe_slug("Anna Müller / 2024") == "Anna_Müller_2024"
    assert _safe_slug("  ") == "chart"


# =======================
# PDF
# =======================
def test_pdf_single_page(layout, config):
    data = paint_chart_pdf(layout, config, title="Anna")
    assert data.startswith(b"%PDF")
    reader = PdfReader(io.BytesIO(data))
    assert len(reader.pages) == 1
    assert float(reader.pages[0].mediabox.width) == 600


def test_pdf_empty_layout(categories, config):
    empty = compute_layout(categories, SCENARIO_MAGNITUDES, 0, config)
    assert paint_chart_pdf(empty, config).startswith(b"%PDF")


def test_merge_pdfs(tmp_path, layout, config):
    paths = []
    for name in ("a", "b"):
        p = tmp_path / f"{name}.pdf"
        p.write_bytes(paint_chart_pdf(layout, config))
        paths.append(p)
    out = tmp_path / "all.pdf"
    merge_all_into_one(paths, out)
    assert len(PdfReader(str(out)).pages) == 2


# =======================
# Batch
# =======================
def test_charts_from_sheet(tmp_path, sample_csv, categories, config):
    out = tmp_path / "charts"
    emitted = generate_charts_from_sheet(str(sample_csv), str(out), png=False,
                                         categories=categories, config=config)
    assert [name for name, _, _ in emitted] == ["Anna", "Ben"]
    assert (out / "Anna.svg").exists()
    assert (out / "Ben.svg").exists()


def test_pdfs_from_sheet(tmp_path, sample_csv, categories, config):
    out = tmp_path / "pdfs"
    written = generate_chart_pdfs(str(sample_csv), str(out), categories=categories, config=config)
    assert [p.name for p in written] == ["Anna_radar.pdf", "Ben_radar.pdf"]
    assert len(PdfReader(str(out / "RadarCharts.pdf")).pages) == 2
