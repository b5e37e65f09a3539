"""
Object store accessor.

The analysis core talks to the repository only through the ``ObjectStore``
protocol. ``PygitObjectStore`` implements it on top of pygit2 and adds the
index/working-tree and repository-state lookups the status classifier, the
sequencer reader and the status report need.

"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from pygit2 import Commit, InvalidSpecError, discover_repository
from pygit2 import GitError as Pygit2GitError
from pygit2.enums import RepositoryState, SortMode
from pygit2.repository import Repository

from gitscope.git.errors import NotFoundError
from gitscope.git.models import CommitMeta, CommitRef, InProgress, Reference

if TYPE_CHECKING:
	from collections.abc import Iterator

	from pygit2 import Diff, Index, Tree

logger = logging.getLogger(__name__)

# libgit2 serves this object even when it is not in the object database
EMPTY_TREE_OID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

TreeHandle = Any
DiffHandle = Any

_STATE_MAP: dict[RepositoryState, InProgress] = {
	RepositoryState.MERGE: InProgress.MERGE,
	RepositoryState.REVERT: InProgress.REVERT,
	RepositoryState.REVERT_SEQUENCE: InProgress.REVERT,
	RepositoryState.CHERRYPICK: InProgress.CHERRY_PICK,
	RepositoryState.CHERRYPICK_SEQUENCE: InProgress.CHERRY_PICK,
	RepositoryState.BISECT: InProgress.BISECT,
	RepositoryState.REBASE: InProgress.REBASE,
	RepositoryState.REBASE_INTERACTIVE: InProgress.REBASE,
	RepositoryState.REBASE_MERGE: InProgress.REBASE,
	RepositoryState.APPLY_MAILBOX: InProgress.APPLY_MAILBOX,
	RepositoryState.APPLY_MAILBOX_OR_REBASE: InProgress.APPLY_MAILBOX,
}


class ObjectStore(Protocol):
	"""Capability surface the analysis core consumes."""

	def resolve_ref(self, name: str) -> CommitRef:
		"""Resolve a ref name or revision to the commit it points at."""
		...

	def read_commit(self, ref: CommitRef) -> CommitMeta:
		"""Load commit metadata."""
		...

	def read_tree(self, ref: CommitRef) -> TreeHandle:
		"""Load the root tree of a commit."""
		...

	def diff_trees(self, old: TreeHandle | None, new: TreeHandle, flags: int = 0, context_lines: int = 3) -> DiffHandle:
		"""Diff two trees; ``old=None`` means the empty tree."""
		...

	def walk(self, tip: CommitRef, pruned_from: CommitRef | None = None) -> Iterator[CommitRef]:
		"""Yield commits reachable from ``tip``, newest first, hiding ``pruned_from``'s history."""
		...

	def merge_base(self, a: CommitRef, b: CommitRef) -> CommitRef | None:
		"""Best common ancestor of two commits, or ``None`` for unrelated histories."""
		...


class PygitObjectStore:
	"""``ObjectStore`` backed by a pygit2 repository."""

	def __init__(self, repo: Repository) -> None:
		"""
		Wrap an open repository.

		Args:
			repo: The pygit2 repository to read from.

		"""
		self.repo = repo

	@classmethod
	def discover(cls, path: Path | None = None) -> PygitObjectStore:
		"""
		Open the repository containing ``path`` (defaults to the current directory).

		Raises:
			NotFoundError: If ``path`` is not inside a git repository.

		"""
		start = str(path or Path.cwd())
		git_dir = discover_repository(start)
		if git_dir is None:
			msg = f"Not a git repository: {start}"
			logger.error(msg)
			raise NotFoundError(msg)
		logger.debug("Opening repository at %s", git_dir)
		return cls(Repository(git_dir))

	@property
	def git_dir(self) -> Path:
		"""The ``.git`` directory."""
		return Path(self.repo.path)

	@property
	def workdir(self) -> Path | None:
		"""The working tree root, or ``None`` for a bare repository."""
		return Path(self.repo.workdir) if self.repo.workdir else None

	def _commit(self, ref: CommitRef) -> Commit:
		try:
			return self.repo[ref.oid].peel(Commit)
		except (KeyError, ValueError, InvalidSpecError, Pygit2GitError) as e:
			msg = f"Commit not found: {ref.oid}"
			raise NotFoundError(msg) from e

	def resolve_ref(self, name: str) -> CommitRef:
		"""
		Resolve a ref name or revision expression to a commit.

		Raises:
			NotFoundError: If the name does not resolve to a commit.

		"""
		try:
			commit = self.repo.revparse_single(name).peel(Commit)
		except (KeyError, ValueError, InvalidSpecError, Pygit2GitError) as e:
			msg = f"Reference not found: {name}"
			raise NotFoundError(msg) from e
		return CommitRef(str(commit.id))

	def read_commit(self, ref: CommitRef) -> CommitMeta:
		"""Load commit metadata for ``ref``."""
		commit = self._commit(ref)
		author = commit.author
		tz = timezone(timedelta(minutes=author.offset)) if author.offset else UTC
		signature, _signed_data = commit.gpg_signature
		return CommitMeta(
			ref=CommitRef(str(commit.id)),
			parents=tuple(CommitRef(str(oid)) for oid in commit.parent_ids),
			author=author.name,
			email=author.email,
			timestamp=datetime.fromtimestamp(author.time, tz=tz),
			message=commit.message or "",
			signature=signature or None,
		)

	def read_tree(self, ref: CommitRef) -> Tree:
		"""Root tree of the commit ``ref``."""
		return self._commit(ref).tree

	def diff_trees(self, old: Tree | None, new: Tree, flags: int = 0, context_lines: int = 3) -> Diff:
		"""Diff ``old`` against ``new``; ``old=None`` diffs from the empty tree."""
		if old is None:
			return new.diff_to_tree(flags=flags, context_lines=context_lines, swap=True)
		return old.diff_to_tree(new, flags=flags, context_lines=context_lines)

	def walk(self, tip: CommitRef, pruned_from: CommitRef | None = None) -> Iterator[CommitRef]:
		"""Yield commits reachable from ``tip`` and not from ``pruned_from``, newest first."""
		tip_commit = self._commit(tip)
		try:
			walker = self.repo.walk(tip_commit.id, SortMode.TOPOLOGICAL | SortMode.TIME)
			if pruned_from is not None:
				walker.hide(self._commit(pruned_from).id)
			for commit in walker:
				yield CommitRef(str(commit.id))
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Revision walk from {tip.short()} failed: {e}"
			raise NotFoundError(msg) from e

	def merge_base(self, a: CommitRef, b: CommitRef) -> CommitRef | None:
		"""
		Best common ancestor of ``a`` and ``b``.

		Raises:
			NotFoundError: If either history cannot be read completely.

		"""
		first, second = self._commit(a), self._commit(b)
		try:
			base = self.repo.merge_base(first.id, second.id)
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Merge base of {a.short()} and {b.short()} failed: {e}"
			raise NotFoundError(msg) from e
		if base is not None:
			return CommitRef(str(base))
		# libgit2 reports an unreadable ancestor the same way as unrelated histories
		for tip in (a, b):
			for _ in self.walk(tip):
				pass
		return None

	def head(self) -> Reference:
		"""
		Describe HEAD.

		Returns a symbolic reference for a branch checkout (``target`` is
		``None`` when the branch is unborn) or a direct one when detached.

		"""
		if self.repo.head_is_unborn:
			raw = self.repo.lookup_reference("HEAD").target
			return Reference(name="HEAD", symbolic_target=str(raw))
		head = self.repo.head
		target = CommitRef(str(head.target))
		if self.repo.head_is_detached:
			return Reference(name="HEAD", target=target)
		return Reference(name="HEAD", target=target, symbolic_target=head.name)

	def upstream_of(self, branch: str) -> Reference | None:
		"""
		Remote-tracking ref configured as ``branch``'s upstream.

		Args:
			branch: Short local branch name.

		Returns:
			The upstream ref, or ``None`` when no upstream is configured or the
			tracking ref does not exist yet.

		Raises:
			NotFoundError: If ``branch`` is not a local branch.

		"""
		local = self.repo.branches.local.get(branch)
		if local is None:
			msg = f"Local branch not found: {branch}"
			raise NotFoundError(msg)
		upstream = local.upstream
		if upstream is None:
			logger.debug("Branch %s has no upstream", branch)
			return None
		return Reference(name=upstream.name, target=CommitRef(str(upstream.target)))

	def advertised_tip(self, branch: str) -> CommitRef | None:
		"""
		Ask the upstream remote where it currently has ``branch``'s merge ref.

		Args:
			branch: Short local branch name.

		Returns:
			The advertised tip, the zero oid when the remote does not have the
			ref yet, or ``None`` when ``branch`` has no upstream configured.

		Raises:
			NotFoundError: If the remote is missing or cannot be listed.

		"""
		config = self.repo.config
		try:
			remote_name = config[f"branch.{branch}.remote"]
			merge_ref = config[f"branch.{branch}.merge"]
		except KeyError:
			logger.debug("Branch %s has no upstream to negotiate with", branch)
			return None
		try:
			heads = self.repo.remotes[remote_name].ls_remotes()
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Could not list refs of remote {remote_name}: {e}"
			raise NotFoundError(msg) from e
		for head in heads:
			if head["name"] == merge_ref:
				return CommitRef(str(head["oid"]))
		logger.debug("Remote %s does not advertise %s", remote_name, merge_ref)
		return CommitRef.zero()

	def index(self) -> Index:
		"""The on-disk index, freshly read."""
		index = self.repo.index
		index.read()
		return index

	def diff_tree_to_index(self, tree: Tree | None, flags: int = 0, context_lines: int = 3) -> Diff:
		"""Staged changes: ``tree`` against the index; ``tree=None`` diffs from the empty tree."""
		if tree is None:
			tree = self.repo[EMPTY_TREE_OID]
		return tree.diff_to_index(self.index(), flags=flags, context_lines=context_lines)

	def diff_index_to_workdir(self, flags: int = 0, context_lines: int = 3) -> Diff:
		"""Unstaged changes: the index against the working tree."""
		return self.index().diff_to_workdir(flags=flags, context_lines=context_lines)

	def diff_tree_to_workdir(self, tree: Tree | None, flags: int = 0, context_lines: int = 3) -> Diff:
		"""``tree`` against the working tree, seen through the index."""
		diff = self.diff_tree_to_index(tree, flags=flags, context_lines=context_lines)
		diff.merge(self.diff_index_to_workdir(flags=flags, context_lines=context_lines))
		return diff

	def state(self) -> InProgress | None:
		"""Multi-step operation in progress, if any."""
		return _STATE_MAP.get(RepositoryState(self.repo.state()))
