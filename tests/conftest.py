"""Root test configuration for the membership reader.

Clears MEMBERSHIP_* environment variables and points the default config search
paths into a per-test temporary directory, so a developer's own
`.membership/config.yaml` never leaks into the suite.

Logger caching is disabled so structlog.testing.capture_logs() can intercept
events from module-level loggers in any test.
"""

import os
import sys

import pytest
import structlog

from membership.utils.logger import configure_logging

configure_logging(log_level="DEBUG", stream=sys.stderr)
structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture(autouse=True)
def isolate_membership_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Remove config env overrides and redirect default config paths."""
    for name in list(os.environ):
        if name.startswith("MEMBERSHIP_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "membership.config.DEFAULT_CONFIG_PATHS",
        [str(tmp_path / "no-such-dir" / "config.yaml")],
    )


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path and return its path as a string.

    Content is written exactly as given: no trailing newline is added.
    """

    def _write(name: str, *chunks: str) -> str:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline="") as fh:
            for chunk in chunks:
                fh.write(chunk)
        return str(path)

    return _write
