"""Value types exchanged between the analysis core and its callers."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from datetime import datetime

_HEX_DIGITS = frozenset(string.hexdigits.lower())
SHA1_HEX_LENGTH = 40
MIN_ABBREV_LENGTH = 4


@dataclass(frozen=True, order=True)
class CommitRef:
	"""
	Opaque commit identifier.

	Holds only the hex content hash. Metadata is re-resolved against the
	object store on demand, so a ``CommitRef`` outlives any repository handle.

	"""

	oid: str

	def __post_init__(self) -> None:
		"""Normalise and validate the hex id."""
		normalised = self.oid.strip().lower()
		if len(normalised) < MIN_ABBREV_LENGTH or not set(normalised) <= _HEX_DIGITS:
			msg = f"Invalid object id: {self.oid!r}"
			raise ValueError(msg)
		object.__setattr__(self, "oid", normalised)

	@classmethod
	def zero(cls, length: int = SHA1_HEX_LENGTH) -> CommitRef:
		"""Return the null oid."""
		return cls("0" * length)

	@property
	def is_zero(self) -> bool:
		"""Whether this is the null oid (ref does not exist)."""
		return set(self.oid) == {"0"}

	def short(self, length: int = 7) -> str:
		"""Abbreviated hex id."""
		return self.oid[:length]

	def __str__(self) -> str:
		"""Return the full hex id."""
		return self.oid


@dataclass(frozen=True)
class CommitMeta:
	"""Resolved commit metadata."""

	ref: CommitRef
	parents: tuple[CommitRef, ...]
	author: str
	email: str
	timestamp: datetime
	message: str
	signature: bytes | None = None

	@property
	def summary(self) -> str:
		"""First line of the commit message."""
		lines = self.message.strip().splitlines()
		return lines[0].strip() if lines else ""

	@property
	def is_signed(self) -> bool:
		"""Whether the commit carries a detached signature."""
		return bool(self.signature)

	@property
	def is_merge(self) -> bool:
		"""Whether the commit has more than one parent."""
		return len(self.parents) > 1


@dataclass(frozen=True)
class Reference:
	"""A named ref, either direct or symbolic."""

	name: str
	target: CommitRef | None = None
	symbolic_target: str | None = None

	@property
	def is_symbolic(self) -> bool:
		"""Whether the ref points at another ref name."""
		return self.symbolic_target is not None

	@property
	def shorthand(self) -> str:
		"""Human-friendly name (``main`` for ``refs/heads/main``)."""
		for prefix in ("refs/heads/", "refs/remotes/", "refs/tags/"):
			if self.name.startswith(prefix):
				return self.name[len(prefix) :]
		return self.name


@dataclass(frozen=True)
class DivergenceSet:
	"""Commits unique to each side of a merge base, newest first."""

	merge_base: CommitRef
	ahead: tuple[CommitRef, ...] = ()
	behind: tuple[CommitRef, ...] = ()

	@property
	def is_diverged(self) -> bool:
		"""Whether both sides have commits the other lacks."""
		return bool(self.ahead) and bool(self.behind)

	@property
	def is_even(self) -> bool:
		"""Whether local and remote point at the same history."""
		return not self.ahead and not self.behind

	@property
	def pull_action(self) -> PullAction:
		"""How a pull from the remote side would integrate into the local side."""
		if not self.behind:
			return PullAction.UP_TO_DATE
		if not self.ahead:
			return PullAction.FAST_FORWARD
		return PullAction.DIVERGED


class Location(str, Enum):
	"""Which side of the three-way comparison an entry belongs to."""

	INDEX = "index"  # staged: HEAD tree vs index
	WORKING_TREE = "working_tree"  # unstaged: index vs working tree


class ChangeKind(str, Enum):
	"""Classification of a single changed path."""

	NEW = "new"
	MODIFIED = "modified"
	RENAMED = "renamed"
	DELETED = "deleted"
	TYPE_CHANGED = "type_changed"
	UNKNOWN = "unknown"


@dataclass(frozen=True)
class StatusEntry:
	"""A changed path on one side of the comparison."""

	path: str
	location: Location
	change: ChangeKind
	old_path: str | None = None

	@property
	def is_staged(self) -> bool:
		"""Whether the entry reflects a difference against the index."""
		return self.location is Location.INDEX


class OpKind(str, Enum):
	"""Rebase todo verbs."""

	PICK = "pick"
	REWORD = "reword"
	EDIT = "edit"
	SQUASH = "squash"
	FIXUP = "fixup"
	EXEC = "exec"


@dataclass(frozen=True)
class SequencerOp:
	"""One remaining step of an in-progress rebase."""

	target: CommitRef
	kind: OpKind
	message: str


class InProgress(str, Enum):
	"""Multi-step operation the repository is in the middle of."""

	MERGE = "merge"
	REVERT = "revert"
	CHERRY_PICK = "cherry-pick"
	BISECT = "bisect"
	REBASE = "rebase"
	APPLY_MAILBOX = "am"


class PullAction(str, Enum):
	"""What a pull would have to do to integrate the upstream."""

	UP_TO_DATE = "up_to_date"
	FAST_FORWARD = "fast_forward"
	DIVERGED = "diverged"


@dataclass(frozen=True)
class FileDelta:
	"""Per-path line counts in a diff."""

	path: str
	change: ChangeKind
	insertions: int = 0
	deletions: int = 0
	old_path: str | None = None
	is_binary: bool = False


@dataclass(frozen=True)
class DiffStats:
	"""Aggregate insertion/deletion counts for a diff."""

	insertions: int = 0
	deletions: int = 0
	files: tuple[FileDelta, ...] = field(default_factory=tuple)

	@property
	def files_changed(self) -> int:
		"""Number of paths touched by the diff."""
		return len(self.files)


class LineOrigin(str, Enum):
	"""Origin tag of a patch line."""

	CONTEXT = " "
	ADDITION = "+"
	DELETION = "-"
	FILE_HEADER = "F"
	HUNK_HEADER = "H"


@dataclass(frozen=True)
class PatchLine:
	"""A single line of unified-diff output."""

	origin: LineOrigin
	content: str
	path: str
	old_lineno: int = -1
	new_lineno: int = -1


@dataclass(frozen=True)
class PushUpdate:
	"""A ref update advertised during push negotiation."""

	src: CommitRef
	dst: CommitRef
	refname: str
