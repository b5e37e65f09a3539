"""Implementation of the diff command."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

import typer

from gitscope.cli.cli_types import PathspecArg, StagedFlag, StatFlag
from gitscope.cli.session import open_session
from gitscope.config.config_loader import ConfigError
from gitscope.git.diff import DiffEmitter, Snapshot
from gitscope.git.errors import GitScopeError
from gitscope.ui.nodes import render
from gitscope.ui.views import patch_line_node, stats_document
from gitscope.utils.cli_utils import exit_with_error, handle_keyboard_interrupt

logger = logging.getLogger(__name__)


def register_command(app: typer.Typer) -> None:
	"""Register the diff command with the CLI app."""

	@app.command(name="diff")
	def diff_command(
		ctx: typer.Context,
		pathspec: PathspecArg = None,
		staged: StagedFlag = False,
		stat: StatFlag = False,
	) -> None:
		"""Show unstaged changes, or staged ones with --staged."""
		_diff_command_impl(ctx, tuple(pathspec or ()), staged, stat)


def repo_relative_pathspec(pathspec: tuple[str, ...], cwd: Path, workdir: Path | None) -> tuple[str, ...]:
	"""
	Rewrite pathspec elements given relative to ``cwd`` as repository-root paths.

	Args:
		pathspec: Elements as typed on the command line.
		cwd: Directory the elements are relative to.
		workdir: Working tree root, or None for a bare repository.

	Returns:
		The elements relative to ``workdir``. They are returned unchanged when
		``cwd`` is outside the working tree.

	"""
	if workdir is None:
		return pathspec
	root = workdir.resolve()
	try:
		prefix = cwd.resolve().relative_to(root).as_posix()
	except ValueError:
		logger.debug("%s is outside the working tree, using pathspec as given", cwd)
		return pathspec

	elements = []
	for element in pathspec:
		if Path(element).is_absolute():
			try:
				relative = Path(element).resolve().relative_to(root).as_posix()
			except ValueError:
				msg = f"{element} is outside the repository at {root}"
				raise typer.BadParameter(msg) from None
		else:
			relative = posixpath.join(prefix, element)
		elements.append(posixpath.normpath(relative))
	return tuple(elements)


def _diff_command_impl(ctx: typer.Context, pathspec: tuple[str, ...], staged: bool, stat: bool) -> None:
	try:
		session = open_session(ctx)
		cwd = ctx.meta.get("repo_path") or Path.cwd()
		pathspec = repo_relative_pathspec(pathspec, Path(cwd), session.store.workdir)
		options = session.config.diff_options(pathspec)
		emitter = DiffEmitter(session.store)
		if staged:
			# an unborn branch stages against the empty tree
			result = emitter.diff(session.store.head().target, Snapshot.INDEX, options)
		else:
			result = emitter.diff(Snapshot.INDEX, Snapshot.WORKDIR, options)

		render_config = session.render_config
		if stat:
			stats = result.stats()
			if stats.files:
				session.console.print(render(stats_document(stats), render_config), soft_wrap=True)
			return
		for line in result.lines():
			session.console.print(render(patch_line_node(line), render_config), soft_wrap=True)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (GitScopeError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
