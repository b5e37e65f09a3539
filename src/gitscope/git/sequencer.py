"""
Rebase sequencer state.

Parses the rebase todo control file into typed operations. A line is
``<verb> <commit-id> <message>``; ``exec`` lines carry a shell command
instead of a commit id. Comment lines (``#``), indented lines and blank
lines are skipped. Any other malformed line aborts the whole read.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from gitscope.git.errors import MalformedStateError, NotFoundError
from gitscope.git.models import CommitRef, InProgress, OpKind, SequencerOp

if TYPE_CHECKING:
	from gitscope.git.store import PygitObjectStore

logger = logging.getLogger(__name__)

DEFAULT_TODO_PATH = "rebase-merge/git-rebase-todo"

VERB_ALIASES: dict[str, OpKind] = {
	"p": OpKind.PICK,
	"pick": OpKind.PICK,
	"r": OpKind.REWORD,
	"reword": OpKind.REWORD,
	"e": OpKind.EDIT,
	"edit": OpKind.EDIT,
	"s": OpKind.SQUASH,
	"squash": OpKind.SQUASH,
	"f": OpKind.FIXUP,
	"fixup": OpKind.FIXUP,
	"x": OpKind.EXEC,
	"exec": OpKind.EXEC,
}


def _is_operation_line(line: str) -> bool:
	return bool(line) and not line.startswith(("#", " "))


def parse_line(line: str, lineno: int = 0) -> SequencerOp:
	"""
	Parse a single todo line.

	Args:
		line: The line, without its terminator.
		lineno: 1-based line number used in error messages.

	Returns:
		SequencerOp: The parsed operation.

	Raises:
		MalformedStateError: If the verb is unknown or the line has the wrong shape.

	"""
	head = line.split(maxsplit=1)
	verb = head[0] if head else ""
	rest = head[1] if len(head) > 1 else ""
	kind = VERB_ALIASES.get(verb)
	if kind is None:
		msg = f"Invalid rebase todo at line {lineno}: unknown operation {verb!r}"
		raise MalformedStateError(msg)

	if kind is OpKind.EXEC:
		command = rest.strip()
		if not command:
			msg = f"Invalid rebase todo at line {lineno}: exec without a command"
			raise MalformedStateError(msg)
		return SequencerOp(target=CommitRef.zero(), kind=kind, message=command)

	parts = line.split(maxsplit=2)
	if len(parts) != 3:
		msg = f"Invalid rebase todo at line {lineno}: expected 3 components, got {len(parts)}"
		raise MalformedStateError(msg)
	_verb, commit_id, message = parts
	try:
		target = CommitRef(commit_id)
	except ValueError as e:
		msg = f"Invalid rebase todo at line {lineno}: {e}"
		raise MalformedStateError(msg) from e
	return SequencerOp(target=target, kind=kind, message=message)


def parse(text: str) -> list[SequencerOp]:
	"""Parse todo file contents; fails as a whole on the first bad line."""
	return [
		parse_line(line, lineno)
		for lineno, line in enumerate(text.splitlines(), start=1)
		if _is_operation_line(line)
	]


def read(path: Path) -> list[SequencerOp]:
	"""
	Read a rebase todo file.

	Args:
		path: Location of the control file.

	Returns:
		Operations in file order.

	Raises:
		NotFoundError: If the file does not exist.
		MalformedStateError: If the file is not UTF-8 or any line is malformed.

	"""
	try:
		raw = path.read_bytes()
	except FileNotFoundError as e:
		msg = f"Sequencer file not found: {path}"
		raise NotFoundError(msg) from e
	try:
		text = raw.decode("utf-8")
	except UnicodeDecodeError as e:
		msg = f"Sequencer file is not valid UTF-8: {path}"
		raise MalformedStateError(msg) from e

	operations = parse(text)
	logger.debug("Read %d sequencer operations from %s", len(operations), path)
	return operations


class SequencerReader:
	"""Locates and reads the sequencer state of a repository."""

	def __init__(self, git_dir: Path, todo_path: str = DEFAULT_TODO_PATH) -> None:
		"""
		Initialize the reader.

		Args:
			git_dir: The repository's ``.git`` directory.
			todo_path: Control file location relative to ``git_dir``.

		"""
		self.git_dir = Path(git_dir)
		self.todo_path = todo_path

	@property
	def path(self) -> Path:
		"""Absolute path of the control file."""
		return self.git_dir / self.todo_path

	def pending(self) -> list[SequencerOp] | None:
		"""Remaining rebase steps, or ``None`` when no control file exists."""
		if not self.path.exists():
			return None
		return read(self.path)


def repository_state(store: PygitObjectStore) -> InProgress | None:
	"""Multi-step operation the repository is in the middle of, if any."""
	state = store.state()
	if state is not None:
		logger.debug("Repository is in the middle of a %s", state.value)
	return state
