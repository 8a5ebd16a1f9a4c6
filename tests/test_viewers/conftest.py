# -*- coding: utf-8 -*-
"""
Conftest for preview widget tests.

Provides a QApplication fixture on the offscreen platform.

Author
------
Steven Siebert

Created
-------
2026-10-19
"""

import os
import sys

import pytest


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication for the test session."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    try:
        from PyQt6.QtWidgets import QApplication
    except ImportError:
        pytest.skip("Qt not available")
        return

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
