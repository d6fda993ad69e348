"""
PlotlyPane.py: Plotly FigureWidget pane that reports pointer drags and size

This module hosts the floor plan's Plotly `FigureWidget` inside an ipywidgets
layout and acts as the pointer source for the viewport controller.

Public API
----------

- `PointerDriver`
    An `anywidget.AnyWidget` whose frontend JavaScript attaches to the host
    container of the Plotly figure. It

      (a) forwards `pointerdown`, `pointermove` and `pointerup` events as
          host-relative pixel coordinates,
      (b) observes the host with a `ResizeObserver`, resizes the Plotly DOM
          to the host's pixel size and reports that size back to Python.

    The driver node itself is hidden (`display: none`).

- `PlotlyPaneStyle`
    Frozen dataclass with the wrapper's visual options.

- `PlotlyPane`
    Python wrapper that assembles the host box (figure + driver) and a styled
    outer box, and exposes `.widget` for embedding.

Message protocol
----------------

Frontend -> Python custom messages (all coordinates in CSS pixels):

    {"type": "pointer", "kind": "down", "x": 120.0, "y": 48.5}
    {"type": "pointer", "kind": "move", "x": 131.0, "y": 40.0}
    {"type": "pointer", "kind": "up"}
    {"type": "size", "width": 640, "height": 480}

Python -> frontend:

    {"type": "reflow"}    re-measure the host and report its size again

Malformed messages are dropped with a debug log entry.

Key contract
------------

The pane must receive a real pixel height from some ancestor layout
(`"70vh"`, `"480px"`, ...). Until the host has a non-zero size no `size`
message is sent, and the viewport stays "not ready".
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

import anywidget
import ipywidgets as W
import traitlets

from .subscriptions import EventSource, Subscription

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = ["PointerDriver", "PointerEvent", "SurfaceSize", "PlotlyPaneStyle", "PlotlyPane"]

POINTER_KINDS = ("down", "move", "up")


@dataclass(frozen=True)
class PointerEvent:
    """One pointer event from the render surface (host-relative pixels)."""

    kind: str
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class SurfaceSize:
    """Pixel size of the render surface."""

    width: float
    height: float


def _finite(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class PointerDriver(anywidget.AnyWidget):
    """
    Frontend pointer and size source for a Plotly DOM subtree.

    Traitlets (synced to frontend)
    ------------------------------
    debounce_ms:
        Debounce delay for size reports (milliseconds).
    min_delta_px:
        Minimum pixel change in width or height before a new size is reported.
    capture_pointer:
        If True, the host captures the pointer on `pointerdown` so a drag keeps
        reporting moves (and its final `pointerup`) when the cursor leaves the
        plot.
    debug_js:
        If True, enables console logging from the frontend driver.

    Python-side listeners
    ---------------------
    Use `observe_pointer(callback)` and `observe_size(callback)`; each returns a
    `Subscription` that detaches the callback when closed.
    """

    debounce_ms = traitlets.Int(60).tag(sync=True)
    min_delta_px = traitlets.Int(2).tag(sync=True)
    capture_pointer = traitlets.Bool(True).tag(sync=True)
    debug_js = traitlets.Bool(False).tag(sync=True)

    _esm = r"""
    function clampInt(x, dflt) {
      let n = Number(x);
      return Number.isFinite(n) ? Math.trunc(n) : dflt;
    }

    function safeLog(enabled, ...args) {
      if (enabled) console.log("[PointerDriver]", ...args);
    }

    function pxSizeOf(el) {
      const r = el.getBoundingClientRect();
      return { w: Math.round(r.width), h: Math.round(r.height) };
    }

    function findPlotEl(host) {
      if (!host) return null;
      return host.querySelector(".js-plotly-plot");
    }

    async function plotlyResize(plotEl, size) {
      plotEl.style.width = `${size.w}px`;
      plotEl.style.height = `${size.h}px`;
      const pc = plotEl.querySelector(".plot-container");
      if (pc) pc.style.height = `${size.h}px`;
      try {
        const P = window.Plotly;
        if (P && P.Plots && typeof P.Plots.resize === "function") {
          return await P.Plots.resize(plotEl);
        }
      } catch (e) {}
      window.dispatchEvent(new Event("resize"));
    }

    export default {
      render({ model, el }) {
        el.style.display = "none";
        const debug = () => !!model.get("debug_js");

        const host = el.parentElement;
        if (!host) {
          safeLog(debug(), "No host found; driver inactive.");
          return;
        }
        host.style.touchAction = "none";

        let last = { w: 0, h: 0 };
        let timer = null;
        let dragging = false;

        function relative(ev) {
          const r = host.getBoundingClientRect();
          return { x: ev.clientX - r.left, y: ev.clientY - r.top };
        }

        function onDown(ev) {
          if (ev.button !== undefined && ev.button !== 0) return;
          dragging = true;
          if (model.get("capture_pointer") && host.setPointerCapture) {
            try { host.setPointerCapture(ev.pointerId); } catch (e) {}
          }
          const p = relative(ev);
          model.send({ type: "pointer", kind: "down", x: p.x, y: p.y });
        }

        function onMove(ev) {
          if (!dragging) return;
          const p = relative(ev);
          model.send({ type: "pointer", kind: "move", x: p.x, y: p.y });
        }

        function onUp(ev) {
          if (!dragging) return;
          dragging = false;
          if (host.releasePointerCapture) {
            try { host.releasePointerCapture(ev.pointerId); } catch (e) {}
          }
          model.send({ type: "pointer", kind: "up" });
        }

        async function report(reason, force) {
          const cur = pxSizeOf(host);
          if (!(cur.w > 0 && cur.h > 0)) return;
          const minDelta = clampInt(model.get("min_delta_px"), 2);
          const changed = Math.abs(cur.w - last.w) >= minDelta || Math.abs(cur.h - last.h) >= minDelta;
          if (!changed && !force) return;
          last = cur;
          const plotEl = findPlotEl(host);
          if (plotEl) await plotlyResize(plotEl, cur);
          safeLog(debug(), "size", reason, cur);
          model.send({ type: "size", width: cur.w, height: cur.h });
        }

        function schedule(reason, force) {
          if (timer) clearTimeout(timer);
          const wait = clampInt(model.get("debounce_ms"), 60);
          timer = setTimeout(() => { report(reason, force); }, wait);
        }

        host.addEventListener("pointerdown", onDown);
        host.addEventListener("pointermove", onMove);
        host.addEventListener("pointerup", onUp);
        host.addEventListener("pointercancel", onUp);

        const ro = new ResizeObserver(() => schedule("ResizeObserver", false));
        ro.observe(host);

        const mo = new MutationObserver(() => {
          if (findPlotEl(host)) schedule("MutationObserver", true);
        });
        mo.observe(host, { childList: true, subtree: true });

        const onMsg = (msg) => {
          if (msg && msg.type === "reflow") schedule("msg:reflow", true);
        };
        model.on("msg:custom", onMsg);

        schedule("init", true);

        return () => {
          try { if (timer) clearTimeout(timer); } catch (e) {}
          try { ro.disconnect(); } catch (e) {}
          try { mo.disconnect(); } catch (e) {}
          try { model.off("msg:custom", onMsg); } catch (e) {}
          host.removeEventListener("pointerdown", onDown);
          host.removeEventListener("pointermove", onMove);
          host.removeEventListener("pointerup", onUp);
          host.removeEventListener("pointercancel", onUp);
        };
      }
    };
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._pointer_events: EventSource[PointerEvent] = EventSource("pointer")
        self._size_events: EventSource[SurfaceSize] = EventSource("surface size")
        self.on_msg(self._on_frontend_msg)

    def observe_pointer(self, callback: Callable[[PointerEvent], Any]) -> Subscription:
        """Call ``callback(event)`` for every pointer event from the frontend."""
        return self._pointer_events.subscribe(callback)

    def observe_size(self, callback: Callable[[SurfaceSize], Any]) -> Subscription:
        """Call ``callback(size)`` whenever the frontend reports a new size."""
        return self._size_events.subscribe(callback)

    def reflow(self) -> None:
        """
        Ask the frontend to re-measure the host and report its size.

        Use this after layout changes made from Python that the browser
        observers might miss.
        """
        self.send({"type": "reflow"})

    def _on_frontend_msg(self, _widget: Any, content: Any, buffers: Any) -> None:
        """Decode one custom message from the frontend and dispatch it."""
        if not isinstance(content, dict):
            logger.debug(f"ignoring non-dict frontend message {content!r}")
            return
        msg_type = content.get("type")
        if msg_type == "pointer":
            event = self._decode_pointer(content)
            if event is not None:
                self._pointer_events.emit(event)
        elif msg_type == "size":
            width = _finite(content.get("width"))
            height = _finite(content.get("height"))
            if width is None or height is None:
                logger.debug(f"ignoring malformed size message {content!r}")
                return
            self._size_events.emit(SurfaceSize(width=width, height=height))
        else:
            logger.debug(f"ignoring unknown frontend message {content!r}")

    @staticmethod
    def _decode_pointer(content: dict) -> Optional[PointerEvent]:
        kind = content.get("kind")
        if kind not in POINTER_KINDS:
            logger.debug(f"ignoring pointer message with kind {kind!r}")
            return None
        if kind == "up":
            return PointerEvent(kind="up")
        x = _finite(content.get("x"))
        y = _finite(content.get("y"))
        if x is None or y is None:
            logger.debug(f"ignoring pointer message without coordinates {content!r}")
            return None
        return PointerEvent(kind=kind, x=x, y=y)


@dataclass(frozen=True)
class PlotlyPaneStyle:
    """
    Visual styling options for `PlotlyPane`.

    Parameters
    ----------
    padding_px:
        Inner padding (in pixels) applied by the outer wrapper.
    border:
        CSS border string (e.g. "1px solid #ddd").
    border_radius_px:
        Corner radius in pixels.
    overflow:
        Overflow policy for the wrapper.
    """

    padding_px: int = 0
    border: str = "1px solid #ddd"
    border_radius_px: int = 8
    overflow: str = "hidden"


class PlotlyPane:
    """
    Styled plot area for a Plotly `FigureWidget` that doubles as a pointer source.

    Parameters
    ----------
    figw:
        The widget that renders the Plotly figure.
    style:
        `PlotlyPaneStyle` for the outer wrapper.
    debounce_ms:
        Debounce delay for size reports (milliseconds).
    min_delta_px:
        Ignore size jitter smaller than this threshold.
    debug_js:
        Enable frontend console logs for troubleshooting.

    Attributes
    ----------
    driver:
        The underlying `PointerDriver` instance.
    """

    def __init__(
        self,
        figw: W.Widget,
        *,
        style: PlotlyPaneStyle = PlotlyPaneStyle(),
        debounce_ms: int = 60,
        min_delta_px: int = 2,
        debug_js: bool = False,
    ):
        self.driver = PointerDriver(
            debounce_ms=debounce_ms,
            min_delta_px=min_delta_px,
            debug_js=debug_js,
        )

        # Host container: owns pixel height (via outer layout) and receives pointer events.
        self._host = W.Box(
            [figw, self.driver],
            layout=W.Layout(
                width="100%",
                height="100%",
                min_width="0",
                min_height="0",
                display="flex",
                flex_flow="column",
                overflow="hidden",
            ),
        )

        self._wrap = W.Box(
            [self._host],
            layout=W.Layout(
                width="100%",
                height="100%",
                min_width="0",
                min_height="0",
                padding=f"{int(style.padding_px)}px",
                border=style.border,
                border_radius=f"{int(style.border_radius_px)}px",
                overflow=style.overflow,
                box_sizing="border-box",
            ),
        )

    @property
    def widget(self) -> W.Widget:
        """The outer wrapper box to embed in a layout."""
        return self._wrap

    def reflow(self) -> None:
        """Ask the frontend to re-measure and report the pane size."""
        self.driver.reflow()
