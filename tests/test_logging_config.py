"""Tests for beaconkit.logging_config."""

from __future__ import annotations

import logging

import pytest

from beaconkit.exceptions import ConfigError
from beaconkit.logging_config import setup_logging


class TestSetupLogging:
    def test_returns_numeric_level(self) -> None:
        assert setup_logging("info") == logging.INFO
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown log level"):
            setup_logging("chatty")

    def test_records_reach_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        setup_logging("DEBUG")
        logging.getLogger("beaconkit.plugin").debug("Beacon plugin torn down")
        err = capfd.readouterr().err
        assert "[DEBUG] beaconkit.plugin: Beacon plugin torn down" in err
