"""Configuration validation logic.

Keeps folder and settings checks out of MainWindow.
"""

import logging
from typing import Optional, Tuple

from core.config import Config
from core.folder_reference import FolderReference

logger = logging.getLogger(__name__)


class ConfigValidator:
    """Pure validation logic for configuration objects."""

    @staticmethod
    def validate_folder(config: Config) -> Tuple[bool, Optional[str]]:
        """Check that the saved papers folder can be watched.

        Args:
            config: Configuration object to validate

        Returns:
            Tuple of (is_valid, error_message).
            If valid, error_message is None.
        """
        reference = FolderReference.from_string(config.papers_folder)
        if reference is None:
            return False, "No papers folder chosen yet."

        if reference.resolve() is None:
            return False, (
                f"Papers folder is missing or unreadable: {reference.to_string()}"
            )

        return True, None

    @staticmethod
    def validate_rendering(config: Config) -> Tuple[bool, Optional[str]]:
        """Check viewer and watcher numeric settings.

        Returns:
            Tuple of (is_valid, error_message).
        """
        if not 36 <= config.render_dpi <= 600:
            return False, "Render DPI must be between 36 and 600."

        if config.poll_interval_ms < 0:
            return False, "Poll interval cannot be negative."

        return True, None

    @staticmethod
    def repair_rendering(config: Config) -> bool:
        """Reset invalid rendering settings to their defaults, in place.

        Returns:
            True if config was changed.
        """
        is_valid, error_msg = ConfigValidator.validate_rendering(config)
        if is_valid:
            return False

        defaults = Config()
        logger.warning(
            "%s Using defaults: render_dpi=%d, poll_interval_ms=%d",
            error_msg, defaults.render_dpi, defaults.poll_interval_ms,
        )
        config.render_dpi = defaults.render_dpi
        config.poll_interval_ms = defaults.poll_interval_ms
        return True
