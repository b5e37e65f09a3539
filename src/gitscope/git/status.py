"""
Working-copy status classification.

Status is the union of two diffs: HEAD tree against the index (staged) and
the index against the working tree (unstaged). Rename/copy detection runs on
each diff independently, after libgit2 has paired additions with deletions,
so a moved file surfaces as a single renamed entry.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pygit2.enums import DeltaStatus, DiffFind, DiffOption

from gitscope.git.errors import MalformedStateError
from gitscope.git.models import ChangeKind, Location, StatusEntry

if TYPE_CHECKING:
	from pygit2 import Diff, DiffDelta, Index

	from gitscope.git.store import PygitObjectStore

logger = logging.getLogger(__name__)

_DELTA_KINDS: dict[DeltaStatus, ChangeKind] = {
	DeltaStatus.ADDED: ChangeKind.NEW,
	DeltaStatus.UNTRACKED: ChangeKind.NEW,
	DeltaStatus.COPIED: ChangeKind.NEW,
	DeltaStatus.MODIFIED: ChangeKind.MODIFIED,
	DeltaStatus.RENAMED: ChangeKind.RENAMED,
	DeltaStatus.DELETED: ChangeKind.DELETED,
	DeltaStatus.TYPECHANGE: ChangeKind.TYPE_CHANGED,
}


@dataclass(frozen=True)
class StatusOptions:
	"""Knobs for status classification."""

	include_ignored: bool = False
	include_untracked: bool = True
	recurse_untracked_dirs: bool = True
	detect_renames: bool = True
	detect_copies: bool = True
	rename_threshold: int = 50
	exclude_submodules: bool = True

	def diff_flags(self, *, workdir: bool) -> DiffOption:
		"""pygit2 diff flags for one side of the comparison."""
		flags = DiffOption.INCLUDE_TYPECHANGE
		if self.exclude_submodules:
			flags |= DiffOption.IGNORE_SUBMODULES
		if workdir and self.include_untracked:
			flags |= DiffOption.INCLUDE_UNTRACKED
			if self.recurse_untracked_dirs:
				flags |= DiffOption.RECURSE_UNTRACKED_DIRS
		if workdir and self.include_ignored:
			flags |= DiffOption.INCLUDE_IGNORED | DiffOption.RECURSE_IGNORED_DIRS
		return flags

	def find_flags(self, *, workdir: bool) -> DiffFind:
		"""pygit2 similarity flags for one side of the comparison."""
		flags = DiffFind.FIND_RENAMES
		if self.detect_copies:
			flags |= DiffFind.FIND_COPIES
		if workdir and self.include_untracked:
			flags |= DiffFind.FIND_FOR_UNTRACKED
		return flags


def decode_path(raw: bytes) -> str:
	"""
	Decode a repository path strictly as UTF-8.

	Raises:
		MalformedStateError: If the bytes are not valid UTF-8.

	"""
	try:
		return raw.decode("utf-8")
	except UnicodeDecodeError as e:
		msg = f"Path is not valid UTF-8: {raw!r}"
		raise MalformedStateError(msg) from e


def change_kind(status: int) -> ChangeKind:
	"""Map a libgit2 delta status to a change kind."""
	return _DELTA_KINDS.get(DeltaStatus(status), ChangeKind.UNKNOWN)


def classify_delta(delta: DiffDelta, location: Location) -> StatusEntry | None:
	"""
	Turn one diff delta into a status entry.

	Returns:
		The entry, or ``None`` for unmodified deltas.

	"""
	status = DeltaStatus(delta.status)
	if status == DeltaStatus.UNMODIFIED:
		return None
	change = change_kind(status)
	path = decode_path(delta.new_file.raw_path)
	old_path = None
	if status in (DeltaStatus.RENAMED, DeltaStatus.COPIED):
		old_path = decode_path(delta.old_file.raw_path)
	return StatusEntry(path=path, location=location, change=change, old_path=old_path)


class StatusClassifier:
	"""Classifies staged and unstaged changes of a working copy."""

	def __init__(self, store: PygitObjectStore, options: StatusOptions | None = None) -> None:
		"""
		Initialize the classifier.

		Args:
			store: Repository to inspect.
			options: Classification options, defaults if omitted.

		"""
		self.store = store
		self.options = options or StatusOptions()

	def _detect_similar(self, diff: Diff, *, workdir: bool) -> None:
		if not self.options.detect_renames:
			return
		threshold = self.options.rename_threshold
		diff.find_similar(
			flags=self.options.find_flags(workdir=workdir),
			rename_threshold=threshold,
			copy_threshold=threshold,
		)

	def _entries(self, diff: Diff, location: Location) -> list[StatusEntry]:
		entries = []
		for delta in diff.deltas:
			entry = classify_delta(delta, location)
			if entry is not None:
				entries.append(entry)
		return entries

	def _unborn_entries(self, index: Index) -> list[StatusEntry]:
		"""With no HEAD commit every index entry is a staged addition."""
		entries = []
		for entry in index:
			try:
				path = entry.path
			except UnicodeDecodeError as e:
				msg = "Index contains a path that is not valid UTF-8"
				raise MalformedStateError(msg) from e
			entries.append(StatusEntry(path=path, location=Location.INDEX, change=ChangeKind.NEW))
		return entries

	def staged(self) -> list[StatusEntry]:
		"""Differences between the HEAD tree and the index."""
		head = self.store.head()
		if head.target is None:
			return self._unborn_entries(self.store.index())
		tree = self.store.read_tree(head.target)
		diff = self.store.diff_tree_to_index(tree, flags=self.options.diff_flags(workdir=False))
		self._detect_similar(diff, workdir=False)
		return self._entries(diff, Location.INDEX)

	def unstaged(self) -> list[StatusEntry]:
		"""Differences between the index and the working tree."""
		diff = self.store.diff_index_to_workdir(flags=self.options.diff_flags(workdir=True))
		self._detect_similar(diff, workdir=True)
		return self._entries(diff, Location.WORKING_TREE)

	def classify(self) -> list[StatusEntry]:
		"""
		Classify every changed path.

		Returns:
			Staged entries followed by unstaged entries, each group in the
			diff's path order. A path changed on both sides appears twice.

		Raises:
			MalformedStateError: If any path is not valid UTF-8.

		"""
		entries = self.staged() + self.unstaged()
		logger.debug("Classified %d status entries", len(entries))
		return entries


def classify(store: PygitObjectStore, options: StatusOptions | None = None) -> list[StatusEntry]:
	"""Shortcut for ``StatusClassifier(store, options).classify()``."""
	return StatusClassifier(store, options).classify()
