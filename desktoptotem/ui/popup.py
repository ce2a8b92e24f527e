"""The totem: a compact window listing the most used apps."""
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QInputDialog, QLayoutItem
)
from PyQt5.QtGui import QIcon
from PyQt5.QtCore import Qt, QSize
from typing import List
from ..models import DisplayItem
from ..tracking.tracker import UsageTracker


class TotemPopup(QWidget):
    """
    Ranked list of apps with quick notes.

    Hides when focus is lost, like a native tray popup, unless pinned; a
    pinned totem stays above other windows.
    """

    ICON_SIZE = 24

    def __init__(self, tracker: UsageTracker) -> None:
        super().__init__()
        self.tracker = tracker
        self.items: List[DisplayItem] = []

        self.setWindowTitle("Desktop Totem")
        self.setMinimumWidth(220)
        self.setMaximumWidth(320)

        self.main_layout = QVBoxLayout()
        self.main_layout.setContentsMargins(8, 8, 8, 8)
        self.setLayout(self.main_layout)

        self.header = QLabel("<b>Most used</b>")
        self.main_layout.addWidget(self.header)

        self.list_widget = QWidget()
        self.list_layout = QVBoxLayout()
        self.list_layout.setContentsMargins(0, 0, 0, 0)
        self.list_widget.setLayout(self.list_layout)
        self.main_layout.addWidget(self.list_widget)

        self.set_pinned(self.tracker.always_on_top)
        self.update_items(self.tracker.items)

    def set_pinned(self, pinned: bool) -> None:
        """Switch between auto-hiding popup and always-on-top window."""
        was_visible = self.isVisible()
        if pinned:
            self.setWindowFlags(Qt.Tool | Qt.WindowStaysOnTopHint)  # pyright: ignore[reportAttributeAccessIssue, reportUnknownArgumentType, reportUnknownMemberType]
        else:
            self.setWindowFlags(Qt.Popup | Qt.FramelessWindowHint)  # pyright: ignore[reportAttributeAccessIssue, reportUnknownArgumentType, reportUnknownMemberType]
        # setWindowFlags hides the window
        if was_visible:
            self.show()

    def update_items(self, items: List[DisplayItem]) -> None:
        """Rebuild the rows for a newly published list."""
        self.items = items

        while self.list_layout.count():
            child: QLayoutItem | None = self.list_layout.takeAt(0)
            if child:
                w = child.widget()
                if w:
                    w.deleteLater()

        if not items:
            empty = QLabel("<i>Nothing yet. Use your apps and they will appear here.</i>")
            empty.setWordWrap(True)
            empty.setStyleSheet("color: gray;")
            self.list_layout.addWidget(empty)
            return

        for item in items:
            self.list_layout.addWidget(self._make_row(item))

    def _make_row(self, item: DisplayItem) -> QWidget:
        row = QWidget()
        layout = QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        row.setLayout(layout)

        note = self.tracker.note(item)

        open_button = QPushButton(QIcon.fromTheme(item.icon), item.name)
        open_button.setIconSize(QSize(self.ICON_SIZE, self.ICON_SIZE))
        open_button.setFlat(True)
        open_button.setStyleSheet("text-align: left;")
        tooltip = f"Score: {item.score}"
        if note:
            tooltip += f"\n\n{note}"
        open_button.setToolTip(tooltip)
        open_button.clicked.connect(lambda _=False, i=item: self.tracker.open_item(i))
        layout.addWidget(open_button, 1)

        note_button = QPushButton("✎" if note else "+")
        note_button.setFixedWidth(28)
        note_button.setToolTip("Edit note" if note else "Add note")
        note_button.clicked.connect(lambda _=False, i=item: self.edit_note(i))
        layout.addWidget(note_button)

        return row

    def edit_note(self, item: DisplayItem) -> None:
        """Ask for note text; an empty note removes it."""
        text, ok = QInputDialog.getMultiLineText(
            self, "Quick note", f"Note for {item.name}:", self.tracker.note(item) or ""
        )
        if ok:
            self.tracker.set_note(text, item)
