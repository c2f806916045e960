"""
Event chip for displaying one event inside a day cell.

Shows the event title on a colored background; the full event details are
in the tooltip.
"""

from html import escape
from typing import Optional

from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QFrame, QSizePolicy
from PySide6.QtCore import Qt, Signal, QSize
from PySide6.QtGui import QFont, QFontMetrics, QMouseEvent

from calgrid_core.config import LayoutConfig, ColorsConfig
from calgrid_core.model import ResolvedEvent

# Module-level configs (set by MainWindow at startup)
_layout_config: LayoutConfig = LayoutConfig()
_colors_config: ColorsConfig = ColorsConfig()


def set_event_layout_config(config: LayoutConfig):
    """Set the layout configuration for event chips."""
    global _layout_config
    _layout_config = config


def set_event_colors_config(config: ColorsConfig):
    """Set the colors configuration for event chips."""
    global _colors_config
    _colors_config = config


def get_text_font() -> QFont:
    return QFont(_layout_config.interface_font, max(6, _layout_config.interface_font_size - 2))


def _rgb(hex_color: str) -> Optional[tuple[int, int, int]]:
    """'#rgb' or '#rrggbb' as an (r, g, b) tuple, None if malformed."""
    color = hex_color.lstrip('#')
    if len(color) == 3:
        color = ''.join(c * 2 for c in color)
    if len(color) != 6:
        return None
    try:
        return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


def get_contrasting_text_color(bg_color: str) -> str:
    """Black or white, whichever reads better on bg_color."""
    rgb = _rgb(bg_color)
    if rgb is None:
        return "#000000"
    r, g, b = rgb
    return "#000000" if (0.299 * r + 0.587 * g + 0.114 * b) / 255 > 0.5 else "#ffffff"


def lighten_color(hex_color: str, factor: float = 0.3) -> str:
    """Blend hex_color towards white by factor."""
    rgb = _rgb(hex_color)
    if rgb is None:
        return hex_color
    return "#" + "".join(f"{int(min(255, c + (255 - c) * factor)):02x}" for c in rgb)


def event_color(event: ResolvedEvent) -> str:
    """The event's own 'color' field, or the configured chip color."""
    color = event.get('color')
    return color if isinstance(color, str) and color.startswith('#') else _colors_config.event_chip


def _sanitize_text(text: str) -> str:
    """Convert line breaks to spaces for single-line display."""
    return ' '.join(text.split()) if text else text


class EventChip(QFrame):
    """Compact single-line widget for one event in a day cell."""

    clicked = Signal(object)

    def __init__(self, event: ResolvedEvent, parent: QWidget = None):
        super().__init__(parent)
        self.event = event

        layout = QVBoxLayout(self)
        layout.setContentsMargins(3, 0, 3, 0)
        layout.setSpacing(0)

        self.title_label = QLabel(_sanitize_text(event.title))
        self.title_label.setTextFormat(Qt.PlainText)
        self.title_label.setWordWrap(False)
        self.title_label.setFont(get_text_font())
        layout.addWidget(self.title_label)

        self.setFrameStyle(QFrame.StyledPanel | QFrame.Plain)
        self.setCursor(Qt.PointingHandCursor)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self._setup_tooltip()
        self._apply_style()

    def _setup_tooltip(self):
        event = self.event
        lines = [f"<b>{escape(event.title)}</b>"]

        start, end = event.start, event.end
        if start.date() == end.date():
            if (start.hour, start.minute) != (0, 0):
                lines.append(f"{start.strftime('%H:%M')} - {end.strftime('%H:%M')}")
        else:
            lines.append(f"{start.strftime('%Y-%m-%d')} - {end.strftime('%Y-%m-%d')}")

        location = event.get('location')
        if location:
            lines.append(f"📍 {escape(str(location))}")

        description = event.get('description')
        if description:
            if len(description) > 200:
                description = description[:200] + "..."
            lines.append(f"<br>{escape(str(description))}")

        self.setToolTip("<br>".join(lines))

    def _apply_style(self):
        bg_color = event_color(self.event)
        text_color = get_contrasting_text_color(lighten_color(bg_color, 0.4))
        self.setStyleSheet(f"""
            EventChip {{
                background-color: {lighten_color(bg_color, 0.4)};
                border: none;
                border-left: 3px solid {bg_color};
                border-radius: 2px;
            }}
            EventChip:hover {{
                background-color: {lighten_color(bg_color, 0.2)};
            }}
            QLabel {{
                color: {text_color};
                background: transparent;
            }}
        """)

    def mousePressEvent(self, mouse_event: QMouseEvent) -> None:
        if mouse_event.button() == Qt.LeftButton:
            self.clicked.emit(self.event)
        super().mousePressEvent(mouse_event)

    def sizeHint(self) -> QSize:
        fm = QFontMetrics(self.title_label.font())
        return QSize(80, fm.height() + 2)
