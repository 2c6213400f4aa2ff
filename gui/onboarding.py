"""First-run screen shown until a papers folder is chosen."""

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget


class OnboardingScreen(QWidget):
    """Welcome text and a Select Folder button."""

    folder_requested = Signal()

    def __init__(self) -> None:
        super().__init__()
        layout = QVBoxLayout(self)
        layout.addStretch()

        title = QLabel("Welcome to Lectern")
        title.setStyleSheet("font-size: 26px; font-weight: bold;")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        blurb = QLabel(
            "Your personal library for research papers.\n"
            "Highlight, organize, and focus."
        )
        blurb.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(blurb)

        layout.addSpacing(24)

        btn = QPushButton("Select Folder")
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.setMinimumHeight(40)
        btn.clicked.connect(self.folder_requested.emit)
        layout.addWidget(btn, alignment=Qt.AlignmentFlag.AlignCenter)

        layout.addStretch()
