"""
Tests for the ndbc-data command line interface.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ndbc.cli import EXIT_FAILURE, EXIT_SUCCESS, LabeledFormatter, main, setup_logging
from ndbc.models import BatchResult, OutcomeKind, StationOutcome
from ndbc.sync import AsyncSyncBridge


def _result(*outcomes, metadata_ok=True, metadata_error=""):
    return BatchResult(
        outcomes=list(outcomes), metadata_ok=metadata_ok, metadata_error=metadata_error
    )


GOOD = StationOutcome.done("46042", Path("data/46042.parquet"), 3)
GONE = StationOutcome.failed("GONE1", OutcomeKind.UNAVAILABLE, "data unavailable (404)")


class TestMain:
    """Test argument handling and exit codes."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for var in ("NDBC_OUT_DIR", "NDBC_TIMEOUT", "NDBC_MAX_CONCURRENT", "NDBC_LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_partial_success_exits_zero(self, mock_run, capsys):
        mock_run.sync.return_value = _result(GOOD, GONE)

        assert main(["46042", "GONE1"]) == EXIT_SUCCESS

        err = capsys.readouterr().err
        assert "Warnings:" in err
        assert "- GONE1: data unavailable (404)" in err

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_all_failed_exits_one(self, mock_run):
        mock_run.sync.return_value = _result(GONE)

        assert main(["GONE1"]) == EXIT_FAILURE

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_no_warnings_block_on_clean_run(self, mock_run, capsys):
        mock_run.sync.return_value = _result(GOOD)

        assert main(["46042"]) == EXIT_SUCCESS
        assert "Warnings:" not in capsys.readouterr().err

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_metadata_failure_listed_but_not_fatal(self, mock_run, capsys):
        mock_run.sync.return_value = _result(
            GOOD, metadata_ok=False, metadata_error="station metadata parse error"
        )

        assert main(["46042"]) == EXIT_SUCCESS
        assert "- station metadata: station metadata parse error" in capsys.readouterr().err

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_options_reach_config(self, mock_run):
        mock_run.sync.return_value = _result(GOOD)

        main(["46042", "42040", "-o", "out", "--concurrency", "3", "--no-metadata-check"])

        args, kwargs = mock_run.sync.call_args
        assert args[0] == ["46042", "42040"]
        assert kwargs["config"].out_dir == "out"
        assert kwargs["config"].max_concurrent == 3
        assert kwargs["check_metadata"] is False

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_env_out_dir(self, mock_run, monkeypatch):
        monkeypatch.setenv("NDBC_OUT_DIR", "env-out")
        mock_run.sync.return_value = _result(GOOD)

        main(["46042"])

        assert mock_run.sync.call_args.kwargs["config"].out_dir == "env-out"

    @patch("ndbc.cli.run_batch", new_callable=MagicMock)
    def test_invalid_config_exits_one(self, mock_run, monkeypatch):
        monkeypatch.setenv("NDBC_TIMEOUT", "soon")

        assert main(["46042"]) == EXIT_FAILURE
        mock_run.sync.assert_not_called()

    def test_requires_a_station(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


class TestLogging:
    """Test logger setup."""

    def test_labels(self):
        record = logging.LogRecord("ndbc", logging.WARNING, "", 0, "careful", None, None)
        assert LabeledFormatter().format(record) == "WARN careful"

    def test_setup_is_idempotent(self):
        logger = setup_logging()
        setup_logging("DEBUG")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False


class TestAsyncSyncBridge:
    """Test the sync bridge."""

    def test_runs_coroutine(self):
        async def double(x):
            return x * 2

        assert AsyncSyncBridge.run_async(double, args=(4,)) == 8

    @pytest.mark.asyncio
    async def test_refuses_inside_running_loop(self):
        async def noop():
            return None

        with pytest.raises(RuntimeError, match="existing asyncio event loop"):
            AsyncSyncBridge.run_async(noop)
