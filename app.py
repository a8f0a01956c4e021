#!/usr/bin/env python3
"""
Streamlit UI for the ring-stack radar chart.

Magnitudes come from the page's query parameters (?koerper_bewegung=7&...)
and can be adjusted with the sidebar sliders. The chart is drawn as SVG,
optionally revealed step by step (rings outward, then guidelines, then
labels), and offered as SVG or PDF download.

A spreadsheet with one row per person can also be uploaded: every row
becomes an SVG chart (zipped) and a PDF page (merged into RadarCharts.pdf).
"""
from __future__ import annotations
import time
import traceback
import zipfile
from dataclasses import replace
from pathlib import Path
from typing import List

import pandas as pd
import streamlit as st

from build_chart_pdfs import generate_chart_pdfs, paint_chart_pdf
from radar_chart import chart_svg, generate_charts_from_sheet
from radar_config import CONFIG, ChartConfig, load_categories
from radar_inputs import parse_query
from radar_layout import ChartLayout, compute_layout
from reveal import TIMINGS, RevealSequence

# ----------------------------
# Project layout & constants
# ----------------------------
HERE = Path(__file__).resolve().parent
RUNS_DIR = HERE / "runs"

GAP_POLICIES = ["pixel", "angle"]
COLOR_MODES = ["magnitude", "level"]

# ----------------------------
# Helpers
# ----------------------------

def log(msg: str) -> None:
    st.session_state.setdefault("log", [])
    st.session_state.log.append(msg)


def reset_log() -> None:
    st.session_state["log"] = []


def render_svg(layout: ChartLayout, config: ChartConfig, reveal: RevealSequence | None = None) -> str:
    return chart_svg(layout, config, reveal=reveal).tostring()


def show_svg(target, svg: str) -> None:
    target.markdown(f'<div style="display:flex;justify-content:center">{svg}</div>',
                    unsafe_allow_html=True)


def play_reveal(target, layout: ChartLayout, config: ChartConfig) -> None:
    """Redraw the chart once per reveal step, waiting out each step's start offset."""
    seq = RevealSequence.from_layout(layout, TIMINGS)
    started = time.monotonic()
    for start_ms in seq.schedule():
        wait = start_ms / 1000.0 - (time.monotonic() - started)
        if wait > 0:
            time.sleep(wait)
        seq.advance_to(start_ms)
        show_svg(target, render_svg(layout, config, seq))


def zip_files(paths: List[Path], zip_path: Path) -> None:
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as z:
        for p in paths:
            z.write(p, arcname=p.name)

# ----------------------------
# Batch (spreadsheet upload)
# ----------------------------

def run_batch(uploaded, config: ChartConfig, size: int, sheet_name: str, name_col: str) -> None:
    run_root = RUNS_DIR / pd.Timestamp.now(tz=None).strftime("%Y%m%d_%H%M%S")
    run_root.mkdir(parents=True, exist_ok=True)
    suffix = Path(uploaded.name).suffix.lower() or ".xlsx"
    source = run_root / f"source{suffix}"
    with open(source, "wb") as f:
        f.write(uploaded.read())

    categories = load_categories()
    sheet = sheet_name or None
    log("▶️ Rendering SVG charts …")
    emitted = generate_charts_from_sheet(str(source), str(run_root / "charts"), sheet, name_col,
                                         size=size, png=False, categories=categories, config=config)
    log(f"✅ {len(emitted)} SVG chart(s).")

    log("▶️ Painting PDF charts …")
    pdfs = generate_chart_pdfs(str(source), str(run_root / "pdfs"), sheet, name_col,
                               size=size, categories=categories, config=config)
    log(f"✅ {len(pdfs)} PDF chart(s).")

    svg_paths = [Path(svg) for _, svg, _ in emitted]
    if svg_paths:
        zip_path = run_root / "RadarCharts_svg.zip"
        zip_files(svg_paths, zip_path)
        st.download_button(
            "Download all SVG charts (ZIP)",
            data=zip_path.read_bytes(),
            file_name=zip_path.name,
            mime="application/zip",
            use_container_width=True,
        )
    master = run_root / "pdfs" / "RadarCharts.pdf"
    if master.exists():
        st.download_button(
            "Download RadarCharts.pdf (all‑in‑one)",
            data=master.read_bytes(),
            file_name=master.name,
            mime="application/pdf",
            use_container_width=True,
        )

# ----------------------------
# Streamlit UI
# ----------------------------

def main() -> None:
    st.set_page_config(page_title="Radar Chart", page_icon="🎯", layout="centered")
    if "log" not in st.session_state:
        reset_log()

    categories = load_categories()
    initial = parse_query(st.query_params.to_dict(), categories, CONFIG.max_level, CONFIG.default_magnitude)

    st.title("Radar Chart")
    st.caption("Values come from the link; adjust them in the sidebar.")

    with st.sidebar:
        st.header("Values")
        values = [
            st.slider(cat.label, 0, CONFIG.max_level, initial[i], key=f"mag_{cat.key}")
            for i, cat in enumerate(categories)
        ]
        st.header("Options")
        size = st.slider("Canvas size (px)", 240, 1200, 600, step=20)
        gap_policy = st.selectbox("Ring gap", GAP_POLICIES, index=GAP_POLICIES.index(CONFIG.gap_policy)
                                  if CONFIG.gap_policy in GAP_POLICIES else 0)
        color_mode = st.selectbox("Colors", COLOR_MODES, index=COLOR_MODES.index(CONFIG.color_mode)
                                  if CONFIG.color_mode in COLOR_MODES else 0)
        animate = st.toggle("Animate reveal", value=False)

    config = replace(CONFIG, gap_policy=gap_policy, color_mode=color_mode)
    layout = compute_layout(categories, values, size, config)

    chart_area = st.empty()
    if animate:
        play_reveal(chart_area, layout, config)
    else:
        show_svg(chart_area, render_svg(layout, config))

    if layout.badge and layout.pointer:
        cols = st.columns(2)
        cols[0].metric("Average", f"{layout.badge.percent}%")
        cols[1].metric("Lowest", categories[layout.pointer.category].label)

    dl = st.columns(2)
    with dl[0]:
        st.download_button("Download SVG", data=render_svg(layout, config),
                           file_name="radar.svg", mime="image/svg+xml", use_container_width=True)
    with dl[1]:
        st.download_button("Download PDF", data=paint_chart_pdf(layout, config, title="Radar"),
                           file_name="radar.pdf", mime="application/pdf", use_container_width=True)

    st.divider()
    st.write("### Batch")
    uploaded = st.file_uploader("Upload spreadsheet (.xlsx / .csv)", type=["xlsx", "csv"],
                                accept_multiple_files=False)
    bcols = st.columns(2)
    sheet_name = bcols[0].text_input("Sheet name (blank = first)", value="")
    name_col = bcols[1].text_input("Name column", value="Name")
    run = st.button("Build charts", type="primary", use_container_width=True, disabled=uploaded is None)

    st.write("### Log")
    log_area = st.empty()
    log_area.code("\n".join(st.session_state.log) or "Ready.", language="text")

    if not run:
        return

    reset_log()
    try:
        run_batch(uploaded, config, size, sheet_name, name_col)
    except Exception as e:
        st.error("Run failed. See log below.")
        log(f"❌ Fatal error: {e}\n{traceback.format_exc()}")

    log_area.code("\n".join(st.session_state.log), language="text")


if __name__ == "__main__":
    main()
