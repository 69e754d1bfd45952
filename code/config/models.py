"""
Configuration dataclasses for the search-param engine and the demo app.

This module provides typed configuration classes for various app components.
"""

from dataclasses import dataclass, field

# Browsers throttle history updates pushed faster than this
MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS = 300


@dataclass
class SyncConfig:
    """Configuration for URL search-param synchronization."""

    # Parameters kept when navigating to a different path
    keep: list[str] = field(default_factory=list)

    # Minimum delay between two history pushes (ms); negative commits synchronously
    minimum_delay: int = MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS

    # Number of per-location handles kept in memory (None = unbounded)
    max_cached_handles: int | None = 64

    def validate(self) -> None:
        """
        Check the configuration values.

        Raises:
            ValueError: If a value is out of range
        """
        if isinstance(self.minimum_delay, bool) or not isinstance(self.minimum_delay, int):
            raise ValueError(f"minimum_delay must be an integer, got {self.minimum_delay!r}")
        if self.max_cached_handles is not None and self.max_cached_handles < 1:
            raise ValueError(
                f"max_cached_handles must be positive or None, got {self.max_cached_handles!r}"
            )
        for name in self.keep:
            if not isinstance(name, str) or not name:
                raise ValueError(f"keep entries must be non-empty strings, got {name!r}")


@dataclass
class AppConfig:
    """
    Main application configuration.

    Modify this class to adapt the demo app.
    """

    # App metadata
    app_title: str = "URL Param Sync Explorer"
    doc_title: str = "URL Param Sync Explorer"

    # Sub-configurations
    sync: SyncConfig = field(default_factory=lambda: SyncConfig(keep=["theme"]))

    # Pages of the demo app, as (path, title)
    pages: list[tuple[str, str]] = field(
        default_factory=lambda: [("/", "Search"), ("/settings", "Settings")]
    )
