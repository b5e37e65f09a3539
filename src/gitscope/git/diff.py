"""
Diff statistics and patch emission.

``DiffEmitter.diff`` prepares a diff between two snapshots without generating
any patch text. Callers then ask the returned ``DiffResult`` for aggregate
statistics, for a lazy stream of patch lines, or both.

"""

from __future__ import annotations

import fnmatch
import logging
import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pygit2.enums import DeltaStatus, DiffFind, DiffOption

from gitscope.git.models import CommitRef, DiffStats, FileDelta, LineOrigin, PatchLine
from gitscope.git.status import change_kind, decode_path

if TYPE_CHECKING:
	from collections.abc import Iterator

	from pygit2 import Diff, DiffDelta, Patch

	from gitscope.git.store import PygitObjectStore

logger = logging.getLogger(__name__)

_LINE_ORIGINS = {
	" ": LineOrigin.CONTEXT,
	"+": LineOrigin.ADDITION,
	"-": LineOrigin.DELETION,
}


class Snapshot(str, Enum):
	"""Non-commit sides of a diff."""

	INDEX = "index"
	WORKDIR = "workdir"


class WhitespaceMode(str, Enum):
	"""How whitespace differences are treated."""

	NONE = "none"
	IGNORE_ALL = "ignore_all"
	IGNORE_CHANGE = "ignore_change"
	IGNORE_EOL = "ignore_eol"


_WHITESPACE_FLAGS = {
	WhitespaceMode.NONE: DiffOption.NORMAL,
	WhitespaceMode.IGNORE_ALL: DiffOption.IGNORE_WHITESPACE,
	WhitespaceMode.IGNORE_CHANGE: DiffOption.IGNORE_WHITESPACE_CHANGE,
	WhitespaceMode.IGNORE_EOL: DiffOption.IGNORE_WHITESPACE_EOL,
}


@dataclass(frozen=True)
class DiffOptions:
	"""Options for a single diff invocation."""

	pathspec: tuple[str, ...] = ()
	whitespace: WhitespaceMode = WhitespaceMode.IGNORE_ALL
	context_lines: int = 3
	include_untracked: bool = True
	detect_renames: bool = True
	detect_copies: bool = True
	force_text: bool = True

	def flags(self) -> DiffOption:
		"""pygit2 diff flags for these options."""
		flags = _WHITESPACE_FLAGS[self.whitespace] | DiffOption.IGNORE_SUBMODULES
		if self.force_text:
			flags |= DiffOption.FORCE_TEXT
		if self.include_untracked:
			flags |= DiffOption.INCLUDE_UNTRACKED | DiffOption.RECURSE_UNTRACKED_DIRS | DiffOption.SHOW_UNTRACKED_CONTENT
		return flags

	def find_flags(self) -> DiffFind:
		"""pygit2 similarity flags for these options."""
		flags = DiffFind.FIND_RENAMES
		if self.detect_copies:
			flags |= DiffFind.FIND_COPIES
		if self.include_untracked:
			flags |= DiffFind.FIND_FOR_UNTRACKED
		return flags


def matches_pathspec(path: str, pathspec: tuple[str, ...]) -> bool:
	"""
	Check a repository path against a pathspec.

	An empty pathspec matches everything. Elements are relative to the
	repository root; each one is normalised, so ``.`` and ``./src/`` work like
	``git diff`` treats them. An element matches the path itself, anything
	below it when it names a directory, or acts as a glob.

	"""
	if not pathspec:
		return True
	for element in pathspec:
		normalised = posixpath.normpath(element) if element else "."
		if normalised == ".":
			return True
		if path == normalised or path.startswith(normalised + "/"):
			return True
		if fnmatch.fnmatchcase(path, normalised):
			return True
	return False


def _delta_paths(delta: DiffDelta) -> tuple[str, str]:
	return decode_path(delta.old_file.raw_path), decode_path(delta.new_file.raw_path)


def _file_header(delta: DiffDelta) -> list[str]:
	old_path, new_path = _delta_paths(delta)
	status = DeltaStatus(delta.status)
	old_label = "/dev/null" if status in (DeltaStatus.ADDED, DeltaStatus.UNTRACKED) else f"a/{old_path}"
	new_label = "/dev/null" if status == DeltaStatus.DELETED else f"b/{new_path}"
	header = [f"diff --git a/{old_path} b/{new_path}\n"]
	if status == DeltaStatus.RENAMED:
		header.extend([f"rename from {old_path}\n", f"rename to {new_path}\n"])
	header.extend([f"--- {old_label}\n", f"+++ {new_label}\n"])
	return header


class DiffResult:
	"""
	A prepared diff.

	``stats()`` may be called any number of times. ``lines()`` is a lazy,
	forward-only stream that can be consumed once; call ``DiffEmitter.diff``
	again to start over.

	"""

	def __init__(self, diff: Diff, options: DiffOptions) -> None:
		"""Wrap a pygit2 diff with the options that produced it."""
		self._diff = diff
		self._options = options
		self._lines_taken = False

	def _patches(self) -> Iterator[Patch]:
		for patch in self._diff:
			if patch is None:
				continue
			old_path, new_path = _delta_paths(patch.delta)
			if matches_pathspec(new_path, self._options.pathspec) or matches_pathspec(
				old_path, self._options.pathspec
			):
				yield patch

	def stats(self) -> DiffStats:
		"""Aggregate insertion/deletion counts and per-path deltas."""
		files = []
		insertions = deletions = 0
		for patch in self._patches():
			_context, added, removed = patch.line_stats
			old_path, new_path = _delta_paths(patch.delta)
			status = DeltaStatus(patch.delta.status)
			files.append(
				FileDelta(
					path=new_path,
					change=change_kind(status),
					insertions=added,
					deletions=removed,
					old_path=old_path if status in (DeltaStatus.RENAMED, DeltaStatus.COPIED) else None,
					is_binary=patch.delta.is_binary,
				)
			)
			insertions += added
			deletions += removed
		return DiffStats(insertions=insertions, deletions=deletions, files=tuple(files))

	def lines(self) -> Iterator[PatchLine]:
		"""
		Stream the patch line by line.

		Raises:
			RuntimeError: If the stream was already taken.

		"""
		if self._lines_taken:
			msg = "Patch lines can only be iterated once; run the diff again"
			raise RuntimeError(msg)
		self._lines_taken = True
		return self._iter_lines()

	def _iter_lines(self) -> Iterator[PatchLine]:
		for patch in self._patches():
			delta = patch.delta
			_old_path, path = _delta_paths(delta)
			for header in _file_header(delta):
				yield PatchLine(origin=LineOrigin.FILE_HEADER, content=header, path=path)
			for hunk in patch.hunks:
				yield PatchLine(origin=LineOrigin.HUNK_HEADER, content=hunk.header, path=path)
				for line in hunk.lines:
					origin = _LINE_ORIGINS.get(line.origin)
					# end-of-file newline markers
					if origin is None:
						continue
					yield PatchLine(
						origin=origin,
						content=line.content,
						path=path,
						old_lineno=line.old_lineno,
						new_lineno=line.new_lineno,
					)

	def __iter__(self) -> Iterator[PatchLine]:
		"""Alias for ``lines()``."""
		return self.lines()


class DiffEmitter:
	"""Builds diffs between commits, the index and the working tree."""

	def __init__(self, store: PygitObjectStore) -> None:
		"""Initialize with the repository to diff."""
		self.store = store

	def _raw_diff(self, base: CommitRef | Snapshot | None, target: CommitRef | Snapshot, options: DiffOptions) -> Diff:
		flags = options.flags()
		context = options.context_lines
		if base is None or isinstance(base, CommitRef):
			tree = self.store.read_tree(base) if base is not None else None
			if isinstance(target, CommitRef):
				return self.store.diff_trees(tree, self.store.read_tree(target), flags=flags, context_lines=context)
			if target is Snapshot.INDEX:
				return self.store.diff_tree_to_index(tree, flags=flags, context_lines=context)
			return self.store.diff_tree_to_workdir(tree, flags=flags, context_lines=context)
		if base is Snapshot.INDEX and target is Snapshot.WORKDIR:
			return self.store.diff_index_to_workdir(flags=flags, context_lines=context)
		msg = f"Unsupported diff direction: {base} -> {target}"
		raise ValueError(msg)

	def diff(
		self,
		base: CommitRef | Snapshot | None,
		target: CommitRef | Snapshot,
		options: DiffOptions | None = None,
	) -> DiffResult:
		"""
		Prepare a diff from ``base`` to ``target``.

		Args:
			base: Old side: a commit, the index, or ``None`` for the empty tree.
			target: New side: a commit, the index or the working tree.
			options: Diff options, defaults if omitted.

		Returns:
			DiffResult: Statistics and a lazy patch-line stream.

		Raises:
			ValueError: If the direction is not supported (e.g. workdir -> commit).
			NotFoundError: If a commit cannot be loaded.

		"""
		options = options or DiffOptions()
		diff = self._raw_diff(base, target, options)
		if options.detect_renames:
			diff.find_similar(flags=options.find_flags())
		logger.debug("Prepared diff %s -> %s with %d deltas", base, target, len(diff))
		return DiffResult(diff, options)
