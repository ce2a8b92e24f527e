"""Configuration dialog for user settings."""
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QSpinBox, QCheckBox,
    QDialogButtonBox, QLabel, QWidget
)
from PyQt5.QtCore import Qt
from typing import Optional
from ..config import load_user_config, save_user_config, settings


class ConfigDialog(QDialog):
    """Dialog for configuring Desktop Totem settings."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Desktop Totem Settings")
        self.setWindowFlags(self.windowFlags() & ~Qt.WindowContextHelpButtonHint)  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue, reportUnknownArgumentType]
        self.setMinimumWidth(350)

        self.user_config = load_user_config(settings.config_path)

        layout = QVBoxLayout()
        self.setLayout(layout)
        form = QFormLayout()

        self.items_spin = QSpinBox()
        self.items_spin.setMinimum(1)
        self.items_spin.setMaximum(25)
        self.items_spin.setSuffix(" apps")
        self.items_spin.setValue(settings.max_items)
        form.addRow("Show up to:", self.items_spin)

        self.refresh_spin = QSpinBox()
        self.refresh_spin.setMinimum(30)
        self.refresh_spin.setMaximum(3600)
        self.refresh_spin.setSuffix(" seconds")
        self.refresh_spin.setValue(settings.refresh_interval_seconds)
        form.addRow("Refresh every:", self.refresh_spin)

        refresh_help = QLabel("The app in front gains a little score on every refresh")
        refresh_help.setStyleSheet("color: gray; font-size: 10px;")
        form.addRow("", refresh_help)

        self.web_check = QCheckBox("Serve the list on localhost")
        self.web_check.setChecked(settings.web_enabled)
        form.addRow("Dashboard API:", self.web_check)

        layout.addLayout(form)
        layout.addSpacing(20)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel  # pyright: ignore[reportArgumentType, reportCallIssue]
        )
        buttons.accepted.connect(self.save_and_close)  # pyright: ignore[reportUnknownMemberType]
        buttons.rejected.connect(self.reject)  # pyright: ignore[reportUnknownMemberType]
        layout.addWidget(buttons)

    def save_and_close(self) -> None:
        """Save settings, keeping keys this dialog does not edit."""
        config = dict(self.user_config)
        config.update({
            'max_items': self.items_spin.value(),
            'refresh_interval_seconds': self.refresh_spin.value(),
            'web_enabled': self.web_check.isChecked(),
        })
        save_user_config(config, settings.config_path)
        self.accept()
