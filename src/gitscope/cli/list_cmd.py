"""Implementation of the list command."""

from __future__ import annotations

import logging

import typer

from gitscope.cli.cli_types import LimitOpt, ShortFlag
from gitscope.cli.session import open_session
from gitscope.config.config_loader import ConfigError
from gitscope.git.errors import GitScopeError
from gitscope.git.history import list_commits
from gitscope.ui.nodes import render
from gitscope.ui.views import log_document
from gitscope.utils.cli_utils import exit_with_error, handle_keyboard_interrupt

logger = logging.getLogger(__name__)


def register_command(app: typer.Typer) -> None:
	"""Register the list command with the CLI app."""

	@app.command(name="list")
	def list_command(
		ctx: typer.Context,
		revision: str = typer.Argument("HEAD", help="Revision to start listing from"),
		limit: LimitOpt = None,
		short: ShortFlag = False,
	) -> None:
		"""List recent commits, marking signed ones."""
		_list_command_impl(ctx, revision, limit, short)


def _list_command_impl(ctx: typer.Context, revision: str, limit: int | None, short: bool) -> None:
	try:
		session = open_session(ctx)
		log_config = session.config.get.log
		effective_limit = log_config.limit if limit is None else limit
		entries = list_commits(session.store, start=revision, limit=effective_limit)
		if not entries:
			return
		render_config = session.render_config
		document = log_document(entries, width=render_config.width, short=short or log_config.short)
		session.console.print(render(document, render_config), soft_wrap=True)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (GitScopeError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
