"""Tests for logging setup and CLI error helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
import typer
from rich.logging import RichHandler

from gitscope.utils.cli_utils import exit_with_error, handle_keyboard_interrupt
from gitscope.utils.log_setup import setup_logging

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
	"""Put the root logger's handlers and level back after the test."""
	root = logging.getLogger()
	handlers = root.handlers[:]
	level = root.level
	yield
	for handler in root.handlers[:]:
		root.removeHandler(handler)
		if handler not in handlers:
			handler.close()
	for handler in handlers:
		root.addHandler(handler)
	root.setLevel(level)


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logger")
class TestSetupLogging:
	"""Test cases for setup_logging."""

	def test_console_handler_levels(self) -> None:
		"""Verbose mode logs DEBUG to the console, otherwise WARNING."""
		setup_logging(is_verbose=True)
		handlers = logging.getLogger().handlers
		assert len(handlers) == 1
		assert isinstance(handlers[0], RichHandler)
		assert handlers[0].level == logging.DEBUG

		setup_logging(is_verbose=False)
		handlers = logging.getLogger().handlers
		assert len(handlers) == 1
		assert handlers[0].level == logging.WARNING

	def test_file_logging(self, tmp_path: Path) -> None:
		"""A log file receives DEBUG records even when the console does not."""
		log_file = tmp_path / "logs" / "gitscope.log"
		setup_logging(is_verbose=False, log_file_path=log_file)

		logging.getLogger("gitscope.test").debug("hello from the test")
		for handler in logging.getLogger().handlers:
			handler.flush()

		assert logging.getLogger().level == logging.DEBUG
		assert "hello from the test" in log_file.read_text(encoding="utf-8")

	def test_unwritable_log_file(self, tmp_path: Path) -> None:
		"""A log path that cannot be created leaves console logging in place."""
		blocker = tmp_path / "blocker"
		blocker.write_text("not a directory", encoding="utf-8")

		setup_logging(is_verbose=False, log_file_path=blocker / "gitscope.log")

		handlers = logging.getLogger().handlers
		assert len(handlers) == 1
		assert isinstance(handlers[0], RichHandler)


@pytest.mark.unit
class TestErrorHelpers:
	"""Test cases for the CLI error helpers."""

	def test_exit_with_error(self) -> None:
		"""An error summary is shown and the command exits with the code."""
		with patch("gitscope.utils.cli_utils.display_error_summary") as mock_summary:
			with pytest.raises(typer.Exit) as excinfo:
				exit_with_error("Something failed", exit_code=3, exception=ValueError("boom"))

		assert excinfo.value.exit_code == 3
		shown = mock_summary.call_args[0][0]
		assert "Something failed" in shown
		assert "boom" in shown

	def test_exception_text_not_repeated(self) -> None:
		"""An exception whose text is the message is not shown twice."""
		error = ValueError("Reference not found: main")
		with patch("gitscope.utils.cli_utils.display_error_summary") as mock_summary:
			with pytest.raises(typer.Exit):
				exit_with_error(str(error), exception=error)

		mock_summary.assert_called_once_with("Reference not found: main")

	def test_keyboard_interrupt(self) -> None:
		"""Ctrl-C exits with 130."""
		with pytest.raises(typer.Exit) as excinfo:
			handle_keyboard_interrupt()
		assert excinfo.value.exit_code == 130
