# label_text.py
# Two-line label wrapping with iterative font shrink.
# Widths are estimated with a fixed average character width (ratio * font size);
# the greedy wrap mirrors the cover-page fund wrapping, limited to two lines.

import math
import re
from dataclasses import dataclass
from typing import List, Tuple

MARKER = "…"

# a hyphen with a non-space, non-hyphen character on both sides
_INNER_HYPHEN = re.compile(r"(?<=[^\s-])(-)(?=[^\s-])")


@dataclass(frozen=True)
class TextLayout:
    lines: Tuple[str, str]
    font_size: float
    fits: bool
    chars_per_line: int


# =======================
# Tokens
# =======================
def _split_word(word: str) -> List[str]:
    return [p for p in _INNER_HYPHEN.split(word) if p]


def tokenize(label: str) -> List[str]:
    """
    Split on whitespace; compound words also split at internal hyphens,
    e.g. "Stress-Erholung" -> ["Stress", "-", "Erholung"].
    """
    tokens: List[str] = []
    for word in str(label or "").split():
        tokens.extend(_split_word(word))
    return tokens


def _units(label: str) -> List[Tuple[str, bool]]:
    """
    Break units as (text, glued). A hyphen rides with the fragment before it
    and the fragment after it follows without a space.
    """
    units: List[Tuple[str, bool]] = []
    for word in str(label or "").split():
        parts: List[str] = []
        for p in tokenize(word):
            if p == "-" and parts:
                parts[-1] += p
            else:
                parts.append(p)
        for i, p in enumerate(parts):
            units.append((p, i > 0))
    return units


# =======================
# Measuring
# =======================
def text_width(text: str, font_size: float, char_width_ratio: float = 0.6) -> float:
    return len(text) * font_size * char_width_ratio


def chars_per_line(box_width: float, font_size: float, padding: float = 4.0,
                   char_width_ratio: float = 0.6) -> int:
    usable = box_width - 2 * padding
    char_w = font_size * char_width_ratio
    if usable <= 0 or char_w <= 0:
        return 0
    return int(math.floor(usable / char_w + 1e-9))


def _truncate(text: str, budget: int, marker: str) -> str:
    if len(text) <= budget:
        return text
    keep = max(0, budget - len(marker))
    return text[:keep].rstrip() + marker


# =======================
# Packing
# =======================
def _pack(units: List[Tuple[str, bool]], budget: int, marker: str) -> Tuple[List[str], bool]:
    """Greedy fill of line 1 then line 2. Returns (lines, fits)."""
    lines = [""]
    fits = True
    queue = list(units)
    while queue:
        text, glued = queue.pop(0)
        line = lines[-1]
        sep = "" if (glued or not line) else " "
        candidate = line + sep + text
        if len(candidate) <= budget:
            lines[-1] = candidate
            continue

        if not line or len(lines) == 2:
            fits = False
        if len(lines) < 2:
            if line:
                lines.append("")
                queue.insert(0, (text, glued))
            else:
                # single token wider than the line: hard split
                head = max(0, budget - len(marker))
                lines[-1] = text[:head] + marker
                lines.append("")
                queue.insert(0, (text[head:], True))
            continue

        # overflow on the last line
        lines[-1] = _truncate(candidate, budget, marker)
        break

    while len(lines) < 2:
        lines.append("")
    return lines, fits


def _fold_marker_line(lines: List[str], budget: int, marker: str) -> List[str]:
    if lines[1] != marker:
        return lines
    first = lines[0]
    if not first.endswith(marker):
        if len(first) + len(marker) > budget:
            first = first[:max(0, budget - len(marker))].rstrip()
        first += marker
    return [first, ""]


def two_line_layout(
    label: str,
    box_width: float,
    start_font_size: float,
    min_font_size: float,
    padding: float = 4.0,
    char_width_ratio: float = 0.6,
    shrink_factor: float = 0.92,
    max_iterations: int = 10,
    marker: str = MARKER,
) -> TextLayout:
    """
    Wrap label into exactly two lines that fit box_width (minus padding on both
    sides), shrinking the font by shrink_factor until it fits or the minimum
    size / iteration bound is reached. Never raises: leftovers are cut with the
    marker.
    """
    font_size = float(start_font_size)
    floor_size = min(float(min_font_size), font_size)
    units = _units(label)
    if not units:
        return TextLayout(("", ""), font_size,
                          True, chars_per_line(box_width, font_size, padding, char_width_ratio))

    iterations = max(1, int(max_iterations))
    lines, fits, budget = ["", ""], False, 0
    for step in range(iterations):
        budget = chars_per_line(box_width, font_size, padding, char_width_ratio)
        if budget >= 1:
            lines, fits = _pack(units, budget, marker)
        else:
            lines, fits = ["", ""], False
        if fits or font_size <= floor_size or step == iterations - 1:
            break
        font_size = max(floor_size, font_size * shrink_factor)

    if budget >= 1:
        lines = _fold_marker_line(lines, budget, marker)
    return TextLayout((lines[0], lines[1]), font_size, fits, budget)
