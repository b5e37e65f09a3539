"""Per-invocation state shared by all commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console

from gitscope.config.config_loader import ConfigLoader
from gitscope.git.store import PygitObjectStore
from gitscope.ui.nodes import RenderConfig

if TYPE_CHECKING:
	from pathlib import Path

	import typer

logger = logging.getLogger(__name__)


@dataclass
class Session:
	"""Repository, configuration and output console for one command."""

	store: PygitObjectStore
	config: ConfigLoader
	console: Console

	@property
	def render_config(self) -> RenderConfig:
		"""Rendering settings from the ``ui`` config section."""
		ui = self.config.get.ui
		return RenderConfig(color=ui.color, width=ui.summary_width)


def open_session(ctx: typer.Context) -> Session:
	"""
	Discover the repository and load configuration for a command.

	Args:
		ctx: The typer context carrying the global ``--repo`` and ``--config`` options.

	Returns:
		Session: Ready-to-use command state.

	Raises:
		NotFoundError: If no repository is found.
		ConfigParsingError: If the configuration file is invalid.

	"""
	repo_path: Path | None = ctx.meta.get("repo_path")
	config_file: Path | None = ctx.meta.get("config_file")

	store = PygitObjectStore.discover(repo_path)
	config = ConfigLoader.get_instance(config_file=config_file, reload=True, repo_root=store.workdir)
	console = Console(highlight=False, no_color=not config.get.ui.color)
	logger.debug("Session opened for %s (config: %s)", store.git_dir, config.config_file)
	return Session(store=store, config=config, console=console)
