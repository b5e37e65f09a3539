"""Implementation of the check-push command."""

from __future__ import annotations

import logging

import typer

from gitscope.cli.cli_types import AdvertisedOpt, ExpectedOpt
from gitscope.cli.session import open_session
from gitscope.config.config_loader import ConfigError
from gitscope.git.errors import GitScopeError
from gitscope.git.graph import DivergenceWalker
from gitscope.git.models import SHA1_HEX_LENGTH, CommitRef, PushUpdate
from gitscope.git.push import PushGuard
from gitscope.git.report import LOCAL_BRANCH_PREFIX, describe_head
from gitscope.utils.cli_utils import exit_with_error, handle_keyboard_interrupt

logger = logging.getLogger(__name__)


def _parse_full_oid(value: str, option: str) -> CommitRef:
	try:
		ref = CommitRef(value)
	except ValueError as e:
		msg = f"{option} expects a hex object id, got {value!r}"
		raise typer.BadParameter(msg) from e
	if len(ref.oid) < SHA1_HEX_LENGTH:
		msg = f"{option} expects a full {SHA1_HEX_LENGTH}-character object id, got {value!r}"
		raise typer.BadParameter(msg)
	return ref


def register_command(app: typer.Typer) -> None:
	"""Register the check-push command with the CLI app."""

	@app.command(name="check-push")
	def check_push_command(
		ctx: typer.Context,
		expected: ExpectedOpt = None,
		advertised: AdvertisedOpt = None,
	) -> None:
		"""Check that pushing the current branch would not overwrite unseen remote commits."""
		advertised_ref = _parse_full_oid(advertised, "--advertised") if advertised else None
		_check_push_command_impl(ctx, expected, advertised_ref)


def _check_push_command_impl(ctx: typer.Context, expected: str | None, advertised: CommitRef | None) -> None:
	try:
		session = open_session(ctx)
		store = session.store
		branch = describe_head(store)
		if branch.name is None or branch.head is None:
			exit_with_error("check-push needs a local branch with at least one commit")
			return

		guard = PushGuard(store.resolve_ref(expected)) if expected else PushGuard.for_branch(store, branch.name)

		if advertised is None:
			advertised = store.advertised_tip(branch.name)
			if advertised is None:
				exit_with_error(f"{branch.name} has no upstream to negotiate with, pass --advertised")
				return

		update = PushUpdate(src=advertised, dst=branch.head, refname=f"{LOCAL_BRANCH_PREFIX}{branch.name}")
		guard.check([update])

		if update.src.is_zero:
			kind = "new branch"
		elif guard.expected is None:
			kind = "unchecked"
		elif DivergenceWalker(store).is_fast_forward(update.src, update.dst):
			kind = "fast-forward"
		else:
			kind = "forced update"
		session.console.print(
			f"[green]✓[/green] Push of {branch.name} is safe ({update.src.short()} -> {update.dst.short()}, {kind})"
		)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (GitScopeError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
