"""Tests for the combined status report."""

from __future__ import annotations

import pygit2
import pytest

from gitscope.git.errors import MalformedStateError
from gitscope.git.models import ChangeKind, InProgress, Location, OpKind, PullAction
from gitscope.git.report import build_report, describe_head
from tests.base import GitTestBase


@pytest.mark.git
class TestStatusReport(GitTestBase):
	"""Status reports for a real repository."""

	def test_unborn_branch(self) -> None:
		"""An empty repository reports its branch with no head."""
		report = build_report(self.store)

		assert report.branch.name == "main"
		assert report.branch.unborn
		assert report.divergence is None
		assert report.in_progress is None
		assert report.is_clean

	def test_clean_branch_without_upstream(self) -> None:
		"""A clean branch without upstream has no divergence."""
		head = self.commit_files({"a.txt": "a\n"}, "initial commit\n\nbody")
		report = build_report(self.store)

		assert report.branch.name == "main"
		assert report.branch.head == head
		assert report.branch.summary == "initial commit"
		assert not report.branch.detached
		assert report.upstream is None
		assert report.divergence is None
		assert report.pull_action is None
		assert report.is_clean

	def test_divergence_with_upstream(self) -> None:
		"""With an upstream, ahead and behind sets are computed."""
		base = self.commit_files({"a.txt": "a\n"}, "base")
		remote = self.commit_on("refs/remotes/origin/main", base, "remote work", {"a.txt": "r\n"})
		local = self.commit_files({"a.txt": "l\n"}, "local work")
		self.set_upstream("main", remote)

		report = build_report(self.store)

		assert report.upstream == "origin/main"
		assert report.divergence is not None
		assert report.divergence.merge_base == base
		assert report.divergence.ahead == (local,)
		assert report.divergence.behind == (remote,)
		assert report.pull_action is PullAction.DIVERGED

	def test_detached_head(self) -> None:
		"""A detached HEAD has no branch name and no divergence."""
		first = self.commit_files({"a.txt": "a\n"}, "first")
		self.commit_files({"a.txt": "b\n"}, "second")
		self.repo.set_head(pygit2.Oid(hex=first.oid))

		branch = describe_head(self.store)

		assert branch.detached
		assert branch.name is None
		assert branch.head == first
		assert build_report(self.store).divergence is None

	def test_changes_split_by_location(self) -> None:
		"""Staged and unstaged views partition the changes."""
		self.commit_files({"a.txt": "a\n", "b.txt": "b\n"}, "initial")
		self.write("a.txt", "a\nmore\n")
		self.stage("a.txt")
		self.write("c.txt", "c\n")

		report = build_report(self.store)

		assert [(e.path, e.change) for e in report.staged] == [("a.txt", ChangeKind.MODIFIED)]
		assert [(e.path, e.change) for e in report.unstaged] == [("c.txt", ChangeKind.NEW)]
		assert all(e.location is Location.INDEX for e in report.staged)
		assert not report.is_clean

	def test_rebase_in_progress(self) -> None:
		"""During a rebase the remaining todo steps are included."""
		head = self.commit_files({"a.txt": "a\n"}, "initial")
		rebase_dir = self.store.git_dir / "rebase-merge"
		rebase_dir.mkdir()
		(rebase_dir / "interactive").write_text("", encoding="utf-8")
		(rebase_dir / "git-rebase-todo").write_text(
			f"# comment\npick {head.oid} initial\nexec make test\n", encoding="utf-8"
		)

		report = build_report(self.store)

		assert report.in_progress is InProgress.REBASE
		assert report.sequencer is not None
		assert [op.kind for op in report.sequencer] == [OpKind.PICK, OpKind.EXEC]
		assert report.sequencer[0].target == head

	def test_malformed_todo(self) -> None:
		"""A corrupt todo file surfaces as a malformed-state error."""
		self.commit_files({"a.txt": "a\n"}, "initial")
		rebase_dir = self.store.git_dir / "rebase-merge"
		rebase_dir.mkdir()
		(rebase_dir / "git-rebase-todo").write_text("bogus 1234567 msg\n", encoding="utf-8")

		with pytest.raises(MalformedStateError):
			build_report(self.store)

	def test_no_sequencer_outside_rebase(self) -> None:
		"""Sequencer state is only read while a rebase is in progress."""
		self.commit_files({"a.txt": "a\n"}, "initial")
		assert build_report(self.store).sequencer is None
