"""Lost-update protection for pushes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitscope.git.errors import NegotiationRejectedError

if TYPE_CHECKING:
	from collections.abc import Sequence

	from gitscope.git.models import CommitRef, PushUpdate
	from gitscope.git.store import PygitObjectStore

logger = logging.getLogger(__name__)


def check(expected: CommitRef | None, updates: Sequence[PushUpdate]) -> None:
	"""
	Verify the remote still points where we think it does.

	Args:
		expected: The remote tip we last saw, or ``None`` to skip the check.
		updates: Ref updates advertised during push negotiation.

	Raises:
		NegotiationRejectedError: If no update starts from ``expected`` and at
			least one update would overwrite an existing remote ref.

	"""
	if expected is None:
		return
	if any(update.src == expected for update in updates):
		logger.debug("Push negotiation accepted: remote at expected %s", expected.short())
		return
	# every ref is being created, nothing to overwrite
	if all(update.src.is_zero for update in updates):
		logger.debug("Push negotiation accepted: creating %d new ref(s)", len(updates))
		return
	logger.warning("Push rejected: remote moved away from %s", expected.short())
	raise NegotiationRejectedError(expected, updates)


class PushGuard:
	"""Holds the expected remote tip for one push attempt."""

	def __init__(self, expected: CommitRef | None) -> None:
		"""Initialize with the compare oid (``None`` disables the check)."""
		self.expected = expected

	@classmethod
	def for_branch(cls, store: PygitObjectStore, branch: str) -> PushGuard:
		"""Guard a push of ``branch`` against its upstream's last known tip."""
		return cls(expected_from_upstream(store, branch))

	def check(self, updates: Sequence[PushUpdate]) -> None:
		"""Apply ``check`` with this guard's expected tip."""
		check(self.expected, updates)


def expected_from_upstream(store: PygitObjectStore, branch: str) -> CommitRef | None:
	"""
	The compare oid for pushing ``branch``.

	Returns:
		Target of the branch's remote-tracking ref, or ``None`` when the branch
		has no upstream yet (the push will create it).

	"""
	upstream = store.upstream_of(branch)
	if upstream is None:
		return None
	return upstream.target
