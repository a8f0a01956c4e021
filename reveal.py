# reveal.py
# Presentation-side state for one chart: debounced resize handling and the
# reveal order (rings outward level by level, then guidelines, then labels).
# Everything is single-threaded and clock-injected; callers pass `now` in
# seconds (defaults to time.monotonic()).

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from radar_config import _CFG, CONFIG, Category, ChartConfig
from radar_layout import ChartLayout, compute_layout


@dataclass(frozen=True)
class RevealTimings:
    ring_step_ms: float = 120.0
    guideline_ms: float = 400.0
    label_step_ms: float = 350.0
    resize_debounce_ms: float = 100.0
    resize_min_delta: float = 5.0

    @classmethod
    def from_dict(cls, cfg: dict | None = None) -> "RevealTimings":
        section = (cfg or {}).get("reveal", {}) or {}
        return cls(**{k: float(v) for k, v in section.items() if k in cls.__dataclass_fields__})


TIMINGS = RevealTimings.from_dict(_CFG)


# =======================
# Resize debounce
# =======================
class ResizeDebouncer:
    """
    Coalesce bursts of resize notifications: only the last size is applied, once
    no new notification arrived for `window_s`, and only if it differs from the
    last applied size by more than `min_delta`.
    """

    def __init__(self, window_s: float = 0.1, min_delta: float = 5.0,
                 clock: Callable[[], float] = time.monotonic):
        self.window_s = window_s
        self.min_delta = min_delta
        self.clock = clock
        self.pending: Optional[float] = None
        self.deadline: Optional[float] = None
        self.applied: Optional[float] = None

    @property
    def is_pending(self) -> bool:
        return self.pending is not None

    def notify(self, size: float, now: float | None = None) -> None:
        now = self.clock() if now is None else now
        self.pending = float(size)
        self.deadline = now + self.window_s

    def poll(self, now: float | None = None) -> Optional[float]:
        if self.pending is None:
            return None
        now = self.clock() if now is None else now
        if now < self.deadline:
            return None
        size, self.pending, self.deadline = self.pending, None, None
        if self.applied is not None and abs(size - self.applied) <= self.min_delta:
            return None
        self.applied = size
        return size

    def cancel(self) -> None:
        self.pending = None
        self.deadline = None


# =======================
# Reveal sequence
# =======================
@dataclass(frozen=True)
class RevealStep:
    kind: str        # "rings" | "guidelines" | "label"
    index: int       # ring level / label category; -1 for guidelines
    start_ms: float


class RevealSequence:
    def __init__(self, steps: Sequence[RevealStep]):
        self.steps = tuple(steps)
        self.shown = 0
        self.cancelled = False

    @classmethod
    def from_layout(cls, layout: ChartLayout, timings: RevealTimings = TIMINGS) -> "RevealSequence":
        steps: List[RevealStep] = []
        t = 0.0
        for level in sorted({s.level for s in layout.segments}):
            steps.append(RevealStep("rings", level, t))
            t += timings.ring_step_ms
        if layout.guidelines:
            steps.append(RevealStep("guidelines", -1, t))
            t += timings.guideline_ms
        for box in layout.labels:
            steps.append(RevealStep("label", box.category, t))
            t += timings.label_step_ms
        return cls(steps)

    def schedule(self) -> List[float]:
        return [s.start_ms for s in self.steps]

    @property
    def done(self) -> bool:
        return self.shown >= len(self.steps)

    def advance_to(self, elapsed_ms: float) -> int:
        if not self.cancelled:
            due = sum(1 for s in self.steps if s.start_ms <= elapsed_ms)
            self.shown = max(self.shown, due)
        return self.shown

    def is_visible(self, kind: str, index: int = -1) -> bool:
        for step in self.steps[:self.shown]:
            if step.kind == kind and (kind == "guidelines" or step.index == index):
                return True
        return False

    def reset(self) -> None:
        self.shown = 0
        self.cancelled = False

    def cancel(self) -> None:
        self.shown = 0
        self.cancelled = True


# =======================
# Session
# =======================
class ChartSession:
    """
    Owns the current layout plus its debouncer and reveal sequence.
    New magnitudes relayout synchronously; resizes go through the debouncer and
    are applied on tick(). Either way the reveal starts over.
    """

    def __init__(
        self,
        categories: Sequence[Category],
        magnitudes: Sequence = (),
        size: float = 0.0,
        config: ChartConfig | None = None,
        timings: RevealTimings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.categories = list(categories)
        self.magnitudes = list(magnitudes)
        self.size = float(size)
        self.config = config or CONFIG
        self.timings = timings or TIMINGS
        self.clock = clock
        self.closed = False
        self.debouncer = ResizeDebouncer(
            self.timings.resize_debounce_ms / 1000.0, self.timings.resize_min_delta, clock
        )
        if self.size > 0:
            self.debouncer.applied = self.size
        self.layout: ChartLayout
        self.reveal: RevealSequence
        self.reveal_started = 0.0
        self._relayout(None)

    def _relayout(self, now: float | None) -> None:
        self.layout = compute_layout(self.categories, self.magnitudes, self.size, self.config)
        self.reveal = RevealSequence.from_layout(self.layout, self.timings)
        self.reveal_started = self.clock() if now is None else now

    def set_magnitudes(self, magnitudes: Sequence, now: float | None = None) -> ChartLayout:
        if self.closed:
            return self.layout
        self.magnitudes = list(magnitudes)
        self._relayout(now)
        return self.layout

    def notify_resize(self, size: float, now: float | None = None) -> None:
        if not self.closed:
            self.debouncer.notify(size, now)

    def tick(self, now: float | None = None) -> bool:
        """Apply a settled resize (if any) and advance the reveal. True when relaid out."""
        if self.closed:
            return False
        now = self.clock() if now is None else now
        size = self.debouncer.poll(now)
        relaid = size is not None
        if relaid:
            self.size = size
            self._relayout(now)
        self.reveal.advance_to((now - self.reveal_started) * 1000.0)
        return relaid

    def teardown(self) -> None:
        self.debouncer.cancel()
        self.reveal.cancel()
        self.closed = True
