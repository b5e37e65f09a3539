"""Divergence between a local tip and its upstream."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitscope.git.errors import UnrelatedHistoryError
from gitscope.git.models import CommitRef, DivergenceSet

if TYPE_CHECKING:
	from gitscope.git.models import PullAction
	from gitscope.git.store import ObjectStore

logger = logging.getLogger(__name__)


class DivergenceWalker:
	"""Computes merge bases and the commits unique to each side."""

	def __init__(self, store: ObjectStore) -> None:
		"""Initialize with the object store to walk."""
		self.store = store

	def _unique_commits(self, tip: CommitRef, base: CommitRef) -> tuple[CommitRef, ...]:
		"""Commits reachable from ``tip`` but not from ``base``, each visited once."""
		seen: set[CommitRef] = set()
		commits: list[CommitRef] = []
		for commit in self.store.walk(tip, pruned_from=base):
			if commit in seen:
				continue
			seen.add(commit)
			commits.append(commit)
		return tuple(commits)

	def ahead_behind(self, local: CommitRef, remote: CommitRef) -> DivergenceSet:
		"""
		Enumerate the commits unique to ``local`` (ahead) and to ``remote`` (behind).

		Args:
			local: Tip of the local branch.
			remote: Tip of the upstream branch.

		Returns:
			DivergenceSet: Both sides newest first, relative to their merge base.

		Raises:
			UnrelatedHistoryError: If the tips have no common ancestor.
			NotFoundError: If a commit cannot be loaded from the store.

		"""
		if local == remote:
			return DivergenceSet(merge_base=local)

		base = self.store.merge_base(local, remote)
		if base is None:
			raise UnrelatedHistoryError(local, remote)

		ahead = self._unique_commits(local, base)
		behind = self._unique_commits(remote, base)
		logger.debug(
			"Divergence %s..%s (base %s): %d ahead, %d behind",
			local.short(),
			remote.short(),
			base.short(),
			len(ahead),
			len(behind),
		)
		return DivergenceSet(merge_base=base, ahead=ahead, behind=behind)

	def pull_action(self, local: CommitRef, remote: CommitRef) -> PullAction:
		"""Decide how a pull from ``remote`` would integrate into ``local``."""
		return self.ahead_behind(local, remote).pull_action

	def is_fast_forward(self, old: CommitRef, new: CommitRef) -> bool:
		"""Whether moving a ref from ``old`` to ``new`` rewrites no history."""
		if old == new:
			return True
		return self.store.merge_base(old, new) == old


def ahead_behind(store: ObjectStore, local: CommitRef, remote: CommitRef) -> DivergenceSet:
	"""Shortcut for ``DivergenceWalker(store).ahead_behind(local, remote)``."""
	return DivergenceWalker(store).ahead_behind(local, remote)
