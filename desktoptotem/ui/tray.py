"""System tray entry point of the totem."""
from typing import List, Optional
from PyQt5.QtWidgets import QSystemTrayIcon, QMenu, QAction, QApplication, QMessageBox
from PyQt5.QtGui import QIcon, QCursor
from PyQt5.QtCore import QTimer, QObject, Qt, pyqtSignal
from .popup import TotemPopup
from . import config_dialog
from ..config import POLL_INTERVAL_MS, settings
from ..events import EventContext, TrackerEvent
from ..models import DisplayItem
from ..tracking.tracker import UsageTracker
from ..tracking.watcher import ActivationWatcher

TRAY_ICON = "view-list-icons"


class TrackerBridge(QObject):
    """
    Re-emits tracker notifications as a Qt signal.

    Changes made on the dashboard thread are then delivered on the GUI
    thread through Qt's queued connections.
    """
    items_changed = pyqtSignal(list)

    def __init__(self, tracker: UsageTracker, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.tracker = tracker
        tracker.subscribe(self._on_items_changed)
        # Note markers are part of each row
        tracker.events.register(TrackerEvent.NOTE_CHANGED, self._on_note_changed)

    def _on_items_changed(self, context: EventContext) -> None:
        self.items_changed.emit(context.items)  # type: ignore[attr-defined]

    def _on_note_changed(self, context: EventContext) -> None:
        self.items_changed.emit(self.tracker.items)


class TrayApp:
    """
    Main system tray application.

    Owns the refresh and activation timers for the lifetime of the session.
    """

    def __init__(self, tracker: UsageTracker) -> None:
        self.tracker = tracker
        self.watcher = ActivationWatcher(tracker)
        self.web_port: Optional[int] = None

        self.bridge = TrackerBridge(tracker)
        self.popup = TotemPopup(tracker)
        self.bridge.items_changed.connect(self.popup.update_items)  # pyright: ignore[reportGeneralTypeIssues]
        # Queued: the menu is cleared while one of its actions may be firing
        self.bridge.items_changed.connect(self.rebuild_menu, Qt.QueuedConnection)  # pyright: ignore[reportGeneralTypeIssues, reportAttributeAccessIssue]

        self.tray_icon = QSystemTrayIcon()
        self.tray_icon.setIcon(QIcon.fromTheme(TRAY_ICON))
        self.tray_icon.setToolTip("Desktop Totem: your most-used apps")
        self.tray_icon.activated.connect(self.on_tray_activated)  # pyright: ignore[reportGeneralTypeIssues]

        self.menu = QMenu()
        self.rebuild_menu(tracker.items)
        self.tray_icon.setContextMenu(self.menu)

        # Periodic reconciliation with the desktop
        self.refresh_timer = QTimer()
        self.refresh_timer.timeout.connect(self.tracker.refresh)  # pyright: ignore[reportGeneralTypeIssues]
        self.refresh_timer.start(settings.refresh_interval_seconds * 1000)

        # Foreground application switches
        self.activation_timer = QTimer()
        self.activation_timer.timeout.connect(self.watcher.poll)  # pyright: ignore[reportGeneralTypeIssues]

        if self.watcher.platform.supports_window_tracking:
            self.watcher.start()
            self.activation_timer.start(POLL_INTERVAL_MS)
        else:
            print(f"Warning: activation tracking unavailable on {self.watcher.platform.name} "
                  f"(window tracking not supported)")

        if settings.web_enabled:
            self.start_web_server()

        self.tracker.refresh()
        self.tray_icon.show()

        if self.tracker.needs_onboarding():
            self.show_onboarding()

    def rebuild_menu(self, items: List[DisplayItem]) -> None:
        """Recreate the context menu for a newly published list."""
        self.menu.clear()

        if items:
            for item in items:
                label = f"{item.name}  ✎" if self.tracker.has_note(item) else item.name
                action: QAction = self.menu.addAction(QIcon.fromTheme(item.icon), label)  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
                action.setToolTip(f"Score: {item.score}")
                action.triggered.connect(lambda _=False, i=item: self.tracker.open_item(i))
        else:
            empty: QAction = self.menu.addAction("No apps tracked yet")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
            empty.setEnabled(False)
        self.menu.addSeparator()

        show_action: QAction = self.menu.addAction("Show Totem")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
        show_action.triggered.connect(self.show_popup)

        refresh_action: QAction = self.menu.addAction("Refresh")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
        refresh_action.triggered.connect(self.tracker.refresh)

        reset_action: QAction = self.menu.addAction("Reset Counts...")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
        reset_action.triggered.connect(self.confirm_reset)

        pin_action: QAction = self.menu.addAction("Pin Totem on Top")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
        pin_action.setCheckable(True)
        pin_action.setChecked(self.tracker.always_on_top)
        pin_action.toggled.connect(self.set_pinned)
        self.menu.addSeparator()

        settings_action: QAction = self.menu.addAction("Settings...")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
        settings_action.triggered.connect(self.open_settings)

        exit_action: QAction = self.menu.addAction("Exit")  # pyright: ignore[reportUnknownMemberType, reportAssignmentType]
        exit_action.triggered.connect(self.quit_app)

    def show_popup(self) -> None:
        self.popup.show()
        self.popup.activateWindow()

    def hide_popup(self) -> None:
        self.popup.hide()

    def on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        """Left click toggles the totem, right click shows the menu."""
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            if self.popup.isVisible():
                self.hide_popup()
            else:
                self.show_popup()
        elif reason == QSystemTrayIcon.ActivationReason.Context:
            self.menu.popup(QCursor.pos())

    def set_pinned(self, pinned: bool) -> None:
        self.tracker.always_on_top = pinned
        self.popup.set_pinned(pinned)
        print(f"Pin toggled to: {pinned}")

    def confirm_reset(self) -> None:
        answer = QMessageBox.question(
            None, "Reset Counts",
            "Forget all usage and start counting from now?",
        )
        if answer == QMessageBox.StandardButton.Yes:
            self.tracker.reset_counts()

    def show_onboarding(self) -> None:
        """First run: explain that the list fills up as apps get used."""
        self.tray_icon.showMessage(
            "Welcome to Desktop Totem",
            "Your most-used apps will appear here as you use them. "
            "Click the icon to open the totem.",
            QIcon.fromTheme(TRAY_ICON), 10000,
        )
        self.tracker.mark_onboarding_seen()

    def start_web_server(self) -> None:
        if self.web_port:
            return
        from ..web.server import start_server
        try:
            self.web_port = start_server(self.tracker, settings.web_port)
        except RuntimeError as e:
            print(f"Dashboard API failed to start: {e}")

    def open_settings(self) -> None:
        """Open settings dialog and apply the new values."""
        dialog = config_dialog.ConfigDialog()
        if dialog.exec_():
            settings.reload()
            self.refresh_timer.setInterval(settings.refresh_interval_seconds * 1000)
            if settings.web_enabled:
                self.start_web_server()
            self.tracker.refresh()

    def quit_app(self) -> None:
        """Stop timers and quit the application."""
        self.refresh_timer.stop()
        self.activation_timer.stop()
        self.watcher.stop()
        self.tray_icon.hide()
        app_instance = QApplication.instance()
        if app_instance:
            app_instance.quit()
