"""Implementation of the status command."""

from __future__ import annotations

import logging

import typer

from gitscope.cli.session import open_session
from gitscope.config.config_loader import ConfigError
from gitscope.git.errors import GitScopeError
from gitscope.git.report import build_report
from gitscope.ui.nodes import render
from gitscope.ui.views import status_document
from gitscope.utils.cli_utils import exit_with_error, handle_keyboard_interrupt

logger = logging.getLogger(__name__)


def register_command(app: typer.Typer) -> None:
	"""Register the status command with the CLI app."""

	@app.command(name="status")
	def status_command(ctx: typer.Context) -> None:
		"""Show the branch, its divergence from upstream, any operation in progress and changed paths."""
		_status_command_impl(ctx)


def _status_command_impl(ctx: typer.Context) -> None:
	try:
		session = open_session(ctx)
		config = session.config.get
		report = build_report(
			session.store,
			status_options=session.config.status_options(),
			todo_path=config.sequencer.todo_path,
		)
		render_config = session.render_config
		session.console.print(render(status_document(report, width=render_config.width), render_config), soft_wrap=True)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (GitScopeError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
