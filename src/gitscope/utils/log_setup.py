"""
Logging for gitscope.

Records go to stderr through rich. With ``--save-log`` a DEBUG-level copy of
every record is appended to a file as well.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console(stderr=True)

LOG_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


def setup_logging(is_verbose: bool = False, log_file_path: Path | str | None = None) -> None:
	"""
	Configure the root logger.

	Args:
	    is_verbose: Show DEBUG records on the console instead of WARNING and up.
	    log_file_path: File that receives every record, or None for console only.

	"""
	console_level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	root_logger.setLevel(logging.DEBUG if log_file_path else console_level)
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	root_logger.addHandler(
		RichHandler(
			level=console_level,
			console=console,
			rich_tracebacks=True,
			show_time=is_verbose,
			show_path=is_verbose,
		)
	)

	if not log_file_path:
		return
	path = Path(log_file_path)
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	except OSError as e:
		root_logger.warning("Cannot write log file %s: %s", path, e)
		return
	file_handler.setLevel(logging.DEBUG)
	file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
	root_logger.addHandler(file_handler)
	root_logger.debug("Logging to file: %s", path)


def log_environment_info() -> None:
	"""Log versions of gitscope, pygit2/libgit2 and Python."""
	import platform

	import pygit2

	from gitscope import __version__

	logger = logging.getLogger(__name__)
	logger.info("gitscope version: %s", __version__)
	logger.info("pygit2 version: %s (libgit2 %s)", pygit2.__version__, pygit2.LIBGIT2_VERSION)
	logger.info("Python version: %s", platform.python_version())
	logger.info("Platform: %s", platform.platform())


def display_error_summary(error_message: str) -> None:
	"""Print ``error_message`` on stderr between two red rules."""
	console.print()
	console.print(Rule(Text("Error", style="bold red"), style="red"))
	console.print(error_message, markup=False, highlight=False)
	console.print(Rule(style="red"))
