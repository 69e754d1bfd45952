"""
Tests for configuration module, focusing on SyncConfig.

Run with:
    pytest code/tests/test_config.py -v
Or:
    python code/tests/test_config.py
"""

import sys
from pathlib import Path

# Add code directory to path for imports
code_dir = Path(__file__).parent.parent
sys.path.insert(0, str(code_dir))

import pytest


class TestSyncConfig:
    """Test the SyncConfig dataclass."""

    def test_init_with_defaults(self):
        """Test initialization with default parameters."""
        from config import MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS, SyncConfig

        config = SyncConfig()

        assert config.keep == []
        assert config.minimum_delay == MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS == 300
        assert config.max_cached_handles == 64
        config.validate()

    def test_init_with_custom_params(self):
        """Test initialization with custom parameters."""
        from config import SyncConfig

        config = SyncConfig(keep=["lang", "theme"], minimum_delay=-1, max_cached_handles=None)

        assert config.keep == ["lang", "theme"]
        assert config.minimum_delay == -1
        assert config.max_cached_handles is None
        config.validate()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"minimum_delay": 1.5},
            {"minimum_delay": True},
            {"max_cached_handles": 0},
            {"keep": [""]},
            {"keep": [3]},
        ],
    )
    def test_validate_rejects_invalid_values(self, kwargs):
        """Test that out-of-range values are rejected."""
        from config import SyncConfig

        with pytest.raises(ValueError):
            SyncConfig(**kwargs).validate()

    def test_keep_lists_are_independent(self):
        """Test that default keep lists are not shared between instances."""
        from config import SyncConfig

        first = SyncConfig()
        first.keep.append("a")

        assert SyncConfig().keep == []


class TestAppConfig:
    """Test the AppConfig class."""

    def test_default_config_keeps_theme(self):
        """Test that DEFAULT_CONFIG keeps the theme across pages."""
        from config import DEFAULT_CONFIG, AppConfig

        assert isinstance(DEFAULT_CONFIG, AppConfig)
        assert DEFAULT_CONFIG.sync.keep == ["theme"]
        assert ("/settings", "Settings") in DEFAULT_CONFIG.pages

    def test_context_from_config(self):
        """Test building a ParamContext from a SyncConfig."""
        from config import SyncConfig
        from core import ManualTimers, MemoryHistory, ParamContext

        config = SyncConfig(keep=["a"], minimum_delay=2000, max_cached_handles=8)
        context = ParamContext.from_config(config, history=MemoryHistory("/"), timers=ManualTimers())

        assert context.keep == ["a"]
        assert context.minimum_delay == 2000
        assert context.rate_limiter.minimum_delay == 2000
        assert context.max_cached_handles == 8

    def test_context_from_invalid_config_raises(self):
        """Test that an invalid config is rejected before building a context."""
        from config import SyncConfig
        from core import ManualTimers, MemoryHistory, ParamContext

        with pytest.raises(ValueError):
            ParamContext.from_config(
                SyncConfig(max_cached_handles=0),
                history=MemoryHistory("/"),
                timers=ManualTimers(),
            )


class TestLauncher:
    """Test the `panel serve` launcher."""

    def test_build_command(self):
        """Test the command line built from launcher arguments."""
        from run_app import APP_PATH, build_command

        cmd = build_command(["--port", "7000", "--dev"])

        assert cmd[1:4] == ["-m", "panel", "serve"]
        assert str(APP_PATH) in cmd
        assert cmd[cmd.index("--port") + 1] == "7000"
        assert "--dev" in cmd


def run_tests():
    """Run tests without pytest."""
    print("Running config tests...")
    TestSyncConfig().test_init_with_defaults()
    TestSyncConfig().test_init_with_custom_params()
    TestSyncConfig().test_keep_lists_are_independent()
    TestAppConfig().test_default_config_keeps_theme()
    TestAppConfig().test_context_from_config()
    TestLauncher().test_build_command()
    print("\nAll tests passed!")


if __name__ == "__main__":
    run_tests()
