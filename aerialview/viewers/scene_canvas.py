# -*- coding: utf-8 -*-
"""
SceneCanvas - Live preview of a SceneCompositor.

Provides a QGraphicsView that redraws the compositor's latest state on
a timer. The redraw loop only reads published states and re-renders
when the state generation changes; parameter updates and exports never
touch what the canvas is drawing.

Dependencies
------------
PyQt6

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
import logging
from typing import Any, Optional

# Third-party
import numpy as np

try:
    from PyQt6.QtWidgets import QGraphicsView, QGraphicsScene, QGraphicsPixmapItem
    from PyQt6.QtGui import QImage, QPixmap, QPainter
    from PyQt6.QtCore import Qt, QTimer, pyqtSignal as Signal

    _QT_AVAILABLE = True
except ImportError:
    _QT_AVAILABLE = False

from aerialview.core.exceptions import AerialViewError, NotReady
from aerialview.core.renderer import fit_to_box

logger = logging.getLogger(__name__)


def as_display_frame(frame: np.ndarray) -> np.ndarray:
    """Return a C-contiguous (H, W, 4) uint8 copy suitable for QImage.

    Raises
    ------
    ValueError
        If ``frame`` is not an (H, W, 4) uint8 array.
    """
    if frame.ndim != 3 or frame.shape[2] != 4 or frame.dtype != np.uint8:
        raise ValueError(
            f"Expected (H, W, 4) uint8 frame, got {frame.shape} {frame.dtype}"
        )
    return np.ascontiguousarray(frame)


def rgba_to_qimage(frame: np.ndarray) -> Any:
    """Convert an (H, W, 4) uint8 frame to a QImage.

    Returns
    -------
    QImage
    """
    if not _QT_AVAILABLE:
        raise ImportError("Qt is required for rgba_to_qimage")

    display = as_display_frame(frame)
    h, w, _ = display.shape
    return QImage(display.data, w, h, 4 * w, QImage.Format.Format_RGBA8888).copy()


if _QT_AVAILABLE:

    class SceneCanvas(QGraphicsView):
        """Preview widget driven by a SceneCompositor.

        Parameters
        ----------
        compositor : SceneCompositor
            Source of published scene states.
        interval_ms : int
            Redraw loop period in milliseconds.
        parent : Optional[QWidget]
            Parent widget.

        Signals
        -------
        frame_rendered(int)
            Emitted with the state generation after each redraw.
        render_failed(str)
            Emitted with the error message when a redraw fails.
        """

        frame_rendered = Signal(int)
        render_failed = Signal(str)

        _ZOOM_FACTOR = 1.15

        def __init__(
            self,
            compositor: Any,
            interval_ms: int = 100,
            parent: Optional[Any] = None,
        ) -> None:
            super().__init__(parent)

            self._compositor = compositor
            self._drawn_generation: Optional[int] = None

            self._scene = QGraphicsScene(self)
            self.setScene(self._scene)
            self._pixmap_item = QGraphicsPixmapItem()
            self._scene.addItem(self._pixmap_item)

            self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
            self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            self.setTransformationAnchor(
                QGraphicsView.ViewportAnchor.AnchorUnderMouse
            )
            self.setBackgroundBrush(Qt.GlobalColor.lightGray)

            self._timer = QTimer(self)
            self._timer.setInterval(interval_ms)
            self._timer.timeout.connect(self.redraw)
            self._timer.start()

        @property
        def drawn_generation(self) -> Optional[int]:
            """Generation of the state currently on screen."""
            return self._drawn_generation

        def stop(self) -> None:
            """Stop the redraw loop."""
            self._timer.stop()

        def redraw(self, force: bool = False) -> None:
            """Render the latest state if it changed since the last draw."""
            state = self._compositor.state
            if not force and state.generation == self._drawn_generation:
                return
            if not state.ready:
                return

            try:
                frame = self._compositor.preview()
            except NotReady:
                return
            except AerialViewError as e:
                logger.warning("Preview render failed: %s", e)
                self.render_failed.emit(str(e))
                return

            self._pixmap_item.setPixmap(QPixmap.fromImage(rgba_to_qimage(frame)))
            self._scene.setSceneRect(self._pixmap_item.boundingRect())
            self._drawn_generation = state.generation
            self.frame_rendered.emit(state.generation)

        def fit_in_view(self) -> None:
            """Zoom to fit the preview in the viewport."""
            self.fitInView(
                self._pixmap_item,
                Qt.AspectRatioMode.KeepAspectRatio,
            )

        def wheelEvent(self, event: Any) -> None:
            """Zoom in/out on scroll wheel."""
            delta = event.angleDelta().y()
            if delta > 0:
                factor = self._ZOOM_FACTOR
            elif delta < 0:
                factor = 1.0 / self._ZOOM_FACTOR
            else:
                return
            self.scale(factor, factor)

        def mouseDoubleClickEvent(self, event: Any) -> None:
            """Fit to view on double-click."""
            self.fit_in_view()

else:
    # Stubs when Qt is not available
    class SceneCanvas:  # type: ignore[no-redef]
        """Stub when Qt is unavailable."""

        def __init__(self, *args: Any, **kwargs: Any) -> None:
            raise ImportError("Qt is required for SceneCanvas")


__all__ = ["as_display_frame", "rgba_to_qimage", "fit_to_box", "SceneCanvas"]
