"""Command-line interface package for gitscope."""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from gitscope import __version__
from gitscope.utils.log_setup import log_environment_info, setup_logging

from .cli_types import ConfigOpt, RepoOpt
from .diff_cmd import register_command as register_diff_command
from .list_cmd import register_command as register_list_command
from .push_cmd import register_command as register_push_command
from .status_cmd import register_command as register_status_command

logger = logging.getLogger(__name__)

# Initialize the main CLI app
app = typer.Typer(
	help=f"gitscope - Read-only insight into a git repository\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)

# --- Global Options Callback ---


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"gitscope version: {__version__}")
		raise typer.Exit


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	is_output_log: Annotated[
		bool,
		typer.Option(
			"--save-log",
			help="Enable logging to a file. Logs to logs/gitscope_{datetime}.log.",
		),
	] = False,
	config_file: ConfigOpt = None,
	repo_path: RepoOpt = None,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options and logging setup."""
	ctx.meta["is_verbose"] = is_verbose
	ctx.meta["is_output_log"] = is_output_log
	ctx.meta["config_file"] = config_file
	ctx.meta["repo_path"] = repo_path

	log_file_path_to_use: Path | None = None
	if is_output_log:
		log_dir = Path("logs")
		log_dir.mkdir(parents=True, exist_ok=True)
		current_time = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path_to_use = log_dir / f"gitscope_{current_time}.log"

	setup_logging(is_verbose=is_verbose, log_file_path=log_file_path_to_use)
	if is_verbose or is_output_log:
		log_environment_info()


# --- Register commands ---

register_status_command(app)
register_list_command(app)
register_diff_command(app)
register_push_command(app)


# --- Main Entry Point ---
def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
