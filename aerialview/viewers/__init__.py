# -*- coding: utf-8 -*-
"""
Viewers Module - Optional Qt preview for aerialview scenes.

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

from aerialview.viewers.scene_canvas import SceneCanvas, fit_to_box, rgba_to_qimage


def show(compositor, *, title=None, block=True):
    """Open a preview window for a SceneCompositor.

    Parameters
    ----------
    compositor : SceneCompositor
        Scene to preview. Parameter updates made while the window is
        open appear on the next redraw.
    title : str, optional
        Window title.
    block : bool
        If ``True`` (default), block until the window is closed.

    Returns
    -------
    SceneCanvas
        The preview widget.
    """
    import sys

    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    created_app = False
    if app is None:
        app = QApplication(sys.argv)
        created_app = True

    canvas = SceneCanvas(compositor)
    canvas.setWindowTitle(f"aerialview — {title}" if title else "aerialview")
    canvas.redraw(force=True)
    canvas.show()

    if block:
        if created_app:
            app.exec()
        else:
            from PyQt6.QtCore import QEventLoop
            loop = QEventLoop()
            original_close = canvas.closeEvent

            def _on_close(event):
                original_close(event)
                loop.quit()

            canvas.closeEvent = _on_close
            loop.exec()

    return canvas


__all__ = ["SceneCanvas", "fit_to_box", "rgba_to_qimage", "show"]
