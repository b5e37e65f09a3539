"""Exception hierarchy for repository analysis."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from collections.abc import Sequence

	from gitscope.git.models import CommitRef, PushUpdate


class GitScopeError(Exception):
	"""Base exception for all analysis errors."""


class NotFoundError(GitScopeError):
	"""A requested ref, commit or file does not exist."""


class UnrelatedHistoryError(GitScopeError):
	"""Two tips share no common ancestor."""

	def __init__(self, local: CommitRef, remote: CommitRef) -> None:
		"""Initialize with the two tips that failed to meet."""
		self.local = local
		self.remote = remote
		super().__init__(f"No merge base between {local.short()} and {remote.short()}: histories are unrelated")


class MalformedStateError(GitScopeError):
	"""On-disk state (sequencer file, path name) could not be parsed or decoded."""


class NegotiationRejectedError(GitScopeError):
	"""A push would overwrite remote state that differs from the expected tip."""

	def __init__(self, expected: CommitRef, updates: Sequence[PushUpdate]) -> None:
		"""Initialize with the expected tip and the advertised updates."""
		self.expected = expected
		self.updates = tuple(updates)
		advertised = ", ".join(f"{u.refname}@{u.src.short()}" for u in self.updates) or "nothing"
		super().__init__(f"Remote has moved: expected {expected.short()}, remote advertised {advertised}")
