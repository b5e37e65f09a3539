"""Commit listing for the ``list`` command."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from gitscope.git.models import CommitMeta, CommitRef
	from gitscope.git.store import ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
	"""A listed commit."""

	ref: CommitRef
	meta: CommitMeta

	@property
	def is_signed(self) -> bool:
		"""Whether the commit carries a signature."""
		return self.meta.is_signed


def list_commits(store: ObjectStore, start: str = "HEAD", limit: int = 20) -> list[LogEntry]:
	"""
	List the most recent commits reachable from ``start``.

	Args:
		store: Repository to read.
		start: Ref name or revision to start from.
		limit: Maximum number of commits; 0 means no limit.

	Returns:
		Entries newest first.

	Raises:
		NotFoundError: If ``start`` does not resolve.

	"""
	tip = store.resolve_ref(start)
	walk = store.walk(tip)
	if limit > 0:
		walk = itertools.islice(walk, limit)
	entries = [LogEntry(ref=ref, meta=store.read_commit(ref)) for ref in walk]
	logger.debug("Listed %d commits from %s", len(entries), start)
	return entries
