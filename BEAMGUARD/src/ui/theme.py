import sys

from PyQt5 import QtWidgets

# Dark theme palette
COLOR_BG_DARK = "#1e1e1e"        # Main Background
COLOR_BG_LIGHT = "#2b2b2b"       # Panels, Inputs
COLOR_BORDER = "#3d3d3d"
COLOR_TEXT = "#e0e0e0"
COLOR_TEXT_DIM = "#888888"

# Accents
COLOR_ACCENT = "#007acc"
COLOR_DANGER = "#da3633"

HEX_TEXT_DIM = COLOR_TEXT_DIM

# Stage drawing
HEX_GRID = "#333333"
HEX_FLOOR = "#666666"
HEX_FIXTURE = "#22c55e"
HEX_FIXTURE_EDGE = "#16a34a"
HEX_PERFORMER = "#3b82f6"
HEX_PERFORMER_BODY = "#60a5fa"
HEX_SAFETY_LINE = "#00ffff"
HEX_UPPER_MARK = "#ff6b6b"
HEX_LOWER_MARK = "#ffa94d"
RGBA_BEAM_FILL = (255, 255, 0, 50)
HEX_BEAM_EDGE = "#ffff00"


def get_plot_colors():
    """Returns a dict of standard colors for PyQtGraph to match the theme."""
    return {
        'background': COLOR_BG_DARK,
        'grid': HEX_GRID,
    }


def apply_theme(app: QtWidgets.QApplication):
    """Applies the global QSS stylesheet to the application."""

    if sys.platform.startswith("win"):
        font_stack = '"Segoe UI", "Arial", sans-serif'
    elif sys.platform == "darwin":
        font_stack = '"SF Pro Text", "Helvetica Neue", "Arial", sans-serif'
    else:
        font_stack = '"DejaVu Sans", "Liberation Sans", "Arial", sans-serif'

    qss = f"""
    QMainWindow, QWidget {{
        background-color: {COLOR_BG_DARK};
        color: {COLOR_TEXT};
        font-family: {font_stack};
        font-size: 13px;
    }}

    QGroupBox {{
        background-color: {COLOR_BG_DARK};
        border: 1px solid {COLOR_BORDER};
        border-radius: 4px;
        margin-top: 1.2em;
        padding-top: 10px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        subcontrol-position: top left;
        left: 10px;
        color: {COLOR_TEXT_DIM};
        font-weight: bold;
        background-color: {COLOR_BG_DARK};
        padding: 0 3px;
    }}

    QLabel {{
        color: {COLOR_TEXT};
        border: none;
    }}
    QLabel[class="value"] {{
        color: #67e8f9;
        font-family: monospace;
    }}
    QLabel[class="fixed"] {{
        background-color: #3d3000;
        border: 1px solid #a16207;
        border-radius: 3px;
        color: #fde68a;
        font-weight: bold;
        padding: 6px;
    }}
    QLabel[class="banner"] {{
        background-color: #450a0a;
        border: 2px solid {COLOR_DANGER};
        border-radius: 4px;
        color: #fecaca;
        font-weight: bold;
        padding: 8px;
    }}

    QSlider::groove:horizontal {{
        background: {COLOR_BG_LIGHT};
        border: 1px solid {COLOR_BORDER};
        height: 6px;
        border-radius: 3px;
    }}
    QSlider::handle:horizontal {{
        background: {COLOR_ACCENT};
        border: 1px solid #005a9e;
        width: 14px;
        margin: -5px 0;
        border-radius: 7px;
    }}
    QSlider::sub-page:horizontal {{
        background: #005a9e;
        border-radius: 3px;
    }}

    QPushButton {{
        background-color: {COLOR_BG_LIGHT};
        border: 1px solid {COLOR_BORDER};
        color: {COLOR_TEXT};
        padding: 5px 12px;
        border-radius: 4px;
        font-weight: 500;
    }}
    QPushButton:hover {{
        background-color: #3e3e3e;
        border-color: #555;
    }}
    """

    app.setStyleSheet(qss)
