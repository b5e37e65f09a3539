"""Point-in-time status report combining divergence, state and changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gitscope.git.graph import DivergenceWalker
from gitscope.git.models import InProgress, Location
from gitscope.git.sequencer import DEFAULT_TODO_PATH, SequencerReader, repository_state
from gitscope.git.status import StatusClassifier, StatusOptions

if TYPE_CHECKING:
	from gitscope.git.models import CommitRef, DivergenceSet, PullAction, SequencerOp, StatusEntry
	from gitscope.git.store import PygitObjectStore

logger = logging.getLogger(__name__)

LOCAL_BRANCH_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class BranchInfo:
	"""Where HEAD points."""

	name: str | None
	head: CommitRef | None
	summary: str = ""
	detached: bool = False

	@property
	def unborn(self) -> bool:
		"""Whether the current branch has no commits yet."""
		return self.head is None


@dataclass(frozen=True)
class StatusReport:
	"""Everything the ``status`` command shows."""

	branch: BranchInfo
	changes: list[StatusEntry] = field(default_factory=list)
	upstream: str | None = None
	divergence: DivergenceSet | None = None
	in_progress: InProgress | None = None
	sequencer: list[SequencerOp] | None = None

	@property
	def staged(self) -> list[StatusEntry]:
		"""Entries that differ between HEAD and the index."""
		return [e for e in self.changes if e.location is Location.INDEX]

	@property
	def unstaged(self) -> list[StatusEntry]:
		"""Entries that differ between the index and the working tree."""
		return [e for e in self.changes if e.location is Location.WORKING_TREE]

	@property
	def pull_action(self) -> PullAction | None:
		"""What a pull from the upstream would do, or ``None`` without an upstream."""
		return self.divergence.pull_action if self.divergence is not None else None

	@property
	def is_clean(self) -> bool:
		"""No changes on either side."""
		return not self.changes


def describe_head(store: PygitObjectStore) -> BranchInfo:
	"""Summarise HEAD as a ``BranchInfo``."""
	head = store.head()
	name = None
	if head.symbolic_target and head.symbolic_target.startswith(LOCAL_BRANCH_PREFIX):
		name = head.symbolic_target[len(LOCAL_BRANCH_PREFIX) :]
	if head.target is None:
		return BranchInfo(name=name, head=None)
	summary = store.read_commit(head.target).summary
	return BranchInfo(name=name, head=head.target, summary=summary, detached=not head.is_symbolic)


class StatusReporter:
	"""Builds a ``StatusReport`` for one repository."""

	def __init__(
		self,
		store: PygitObjectStore,
		status_options: StatusOptions | None = None,
		todo_path: str = DEFAULT_TODO_PATH,
	) -> None:
		"""
		Initialize the reporter.

		Args:
			store: Repository to analyse.
			status_options: Options for the status classifier.
			todo_path: Sequencer control file, relative to the git directory.

		"""
		self.store = store
		self.classifier = StatusClassifier(store, status_options)
		self.walker = DivergenceWalker(store)
		self.sequencer = SequencerReader(store.git_dir, todo_path)

	def build(self) -> StatusReport:
		"""
		Analyse the repository.

		Raises:
			UnrelatedHistoryError: If the branch and its upstream share no history.
			MalformedStateError: If the sequencer file or a path cannot be decoded.
			NotFoundError: If a referenced object is missing.

		"""
		branch = describe_head(self.store)

		upstream_name = None
		divergence = None
		if branch.name is not None and branch.head is not None:
			upstream = self.store.upstream_of(branch.name)
			if upstream is not None and upstream.target is not None:
				upstream_name = upstream.shorthand
				divergence = self.walker.ahead_behind(branch.head, upstream.target)

		in_progress = repository_state(self.store)
		operations = self.sequencer.pending() if in_progress is InProgress.REBASE else None

		report = StatusReport(
			branch=branch,
			changes=self.classifier.classify(),
			upstream=upstream_name,
			divergence=divergence,
			in_progress=in_progress,
			sequencer=operations,
		)
		logger.debug(
			"Status report for %s: %d changes, in progress: %s",
			branch.name or "HEAD",
			len(report.changes),
			in_progress,
		)
		return report


def build_report(
	store: PygitObjectStore,
	status_options: StatusOptions | None = None,
	todo_path: str = DEFAULT_TODO_PATH,
) -> StatusReport:
	"""Shortcut for ``StatusReporter(...).build()``."""
	return StatusReporter(store, status_options, todo_path).build()
