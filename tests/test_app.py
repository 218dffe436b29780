"""
Tests for the interactive entry point's startup checks.
"""

import pytest
from typer.testing import CliRunner

from app.main import app


runner = CliRunner()


class TestStartup:
    """Tests for settings validation before the loop starts."""

    def test_invalid_settings_stop_startup(self, monkeypatch):
        """Test a bad setting is reported and the app exits non-zero."""
        monkeypatch.setenv("SUPPORTBANK_LOG_LEVEL", "loud")

        result = runner.invoke(app, [], input="Quit\n")

        assert result.exit_code == 1
        assert "Invalid logging settings" in result.output

    def test_invalid_ledger_setting(self, monkeypatch):
        """Test an out-of-range ledger setting is reported."""
        monkeypatch.setenv("SUPPORTBANK_EXPORT_INDENT", "99")

        result = runner.invoke(app, [], input="Quit\n")

        assert result.exit_code == 1
        assert "Invalid ledger settings" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
