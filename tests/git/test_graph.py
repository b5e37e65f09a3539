"""Tests for the divergence graph walker."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pygit2
import pytest

from gitscope.git.errors import NotFoundError, UnrelatedHistoryError
from gitscope.git.graph import DivergenceWalker, ahead_behind
from gitscope.git.models import CommitRef, PullAction
from gitscope.git.store import PygitObjectStore
from tests.base import GitTestBase

if TYPE_CHECKING:
	from collections.abc import Iterator


def _ref(char: str) -> CommitRef:
	return CommitRef(char * 40)


class FakeStore:
	"""In-memory commit graph: child -> parents."""

	def __init__(self, parents: dict[str, list[str]]) -> None:
		self.parents = {_ref(k): [_ref(p) for p in v] for k, v in parents.items()}

	def _ancestors(self, tip: CommitRef) -> list[CommitRef]:
		order: list[CommitRef] = []
		stack = [tip]
		while stack:
			commit = stack.pop()
			if commit in order:
				continue
			order.append(commit)
			stack.extend(self.parents[commit])
		return order

	def walk(self, tip: CommitRef, pruned_from: CommitRef | None = None) -> Iterator[CommitRef]:
		hidden = set(self._ancestors(pruned_from)) if pruned_from else set()
		yield from (c for c in self._ancestors(tip) if c not in hidden)

	def merge_base(self, a: CommitRef, b: CommitRef) -> CommitRef | None:
		theirs = set(self._ancestors(b))
		for commit in self._ancestors(a):
			if commit in theirs:
				return commit
		return None


@pytest.mark.unit
class TestDivergenceWalkerFake:
	"""Walker behaviour against an in-memory graph."""

	def test_equal_tips_short_circuit(self) -> None:
		"""Identical tips need no merge-base lookup."""
		store = MagicMock()
		result = DivergenceWalker(store).ahead_behind(_ref("a"), _ref("a"))
		assert result.merge_base == _ref("a")
		assert result.is_even
		store.merge_base.assert_not_called()

	def test_diverged_branches(self) -> None:
		"""Both sides list only their own commits."""
		store = FakeStore({"a": [], "b": ["a"], "c": ["b"], "d": ["a"]})
		result = ahead_behind(store, _ref("c"), _ref("d"))
		assert result.merge_base == _ref("a")
		assert result.ahead == (_ref("c"), _ref("b"))
		assert result.behind == (_ref("d"),)

	def test_no_duplicates_with_merge_commits(self) -> None:
		"""A commit reachable over two paths is listed once."""
		store = FakeStore({"a": [], "b": ["a"], "c": ["a"], "d": ["b", "c"]})
		result = ahead_behind(store, _ref("d"), _ref("a"))
		assert sorted(result.ahead) == sorted([_ref("b"), _ref("c"), _ref("d")])
		assert len(set(result.ahead)) == len(result.ahead)
		assert result.behind == ()

	def test_unrelated_histories(self) -> None:
		"""No merge base raises UnrelatedHistoryError."""
		store = FakeStore({"a": [], "b": []})
		with pytest.raises(UnrelatedHistoryError) as excinfo:
			ahead_behind(store, _ref("a"), _ref("b"))
		assert excinfo.value.local == _ref("a")
		assert excinfo.value.remote == _ref("b")

	def test_pull_action(self) -> None:
		"""Pull action follows the divergence shape."""
		walker = DivergenceWalker(FakeStore({"a": [], "b": ["a"], "c": ["a"]}))
		assert walker.pull_action(_ref("b"), _ref("a")) is PullAction.UP_TO_DATE
		assert walker.pull_action(_ref("a"), _ref("b")) is PullAction.FAST_FORWARD
		assert walker.pull_action(_ref("b"), _ref("c")) is PullAction.DIVERGED

	def test_is_fast_forward(self) -> None:
		"""A ref update is fast-forward only when the old tip is the merge base."""
		walker = DivergenceWalker(FakeStore({"a": [], "b": ["a"], "c": ["a"]}))
		assert walker.is_fast_forward(_ref("a"), _ref("b"))
		assert walker.is_fast_forward(_ref("b"), _ref("b"))
		assert not walker.is_fast_forward(_ref("b"), _ref("c"))


@pytest.mark.git
class TestDivergenceWalkerRepository(GitTestBase):
	"""Walker behaviour against a real repository."""

	def test_ahead_and_behind(self) -> None:
		"""Local and remote each gain commits after a common base."""
		base = self.commit_on("refs/heads/main", None, "base", {"a.txt": "a\n"})
		local1 = self.commit_on("refs/heads/main", base, "local 1", {"a.txt": "a\nl1\n"})
		local2 = self.commit_on("refs/heads/main", local1, "local 2", {"a.txt": "a\nl1\nl2\n"})
		remote1 = self.commit_on("refs/remotes/origin/main", base, "remote 1", {"a.txt": "a\nr1\n"})

		result = ahead_behind(self.store, local2, remote1)

		assert result.merge_base == base
		assert result.ahead == (local2, local1)
		assert result.behind == (remote1,)
		assert result.is_diverged

	def test_remote_behind_only(self) -> None:
		"""A remote at an ancestor of the local tip yields an empty behind set."""
		base = self.commit_on("refs/heads/main", None, "base", {"a.txt": "a\n"})
		tip = self.commit_on("refs/heads/main", base, "next", {"a.txt": "b\n"})

		result = ahead_behind(self.store, tip, base)

		assert result.merge_base == base
		assert result.ahead == (tip,)
		assert result.behind == ()

	def test_unrelated_root_commits(self) -> None:
		"""Two root commits share no history."""
		one = self.commit_on("refs/heads/main", None, "one", {"a.txt": "a\n"})
		other = self.commit_on("refs/heads/other", None, "other", {"b.txt": "b\n"})

		with pytest.raises(UnrelatedHistoryError):
			ahead_behind(self.store, one, other)

	def test_missing_ancestor(self) -> None:
		"""A lost commit object between the tips and their base is NotFoundError."""
		base = self.commit_on("refs/heads/main", None, "base", {"a.txt": "a\n"})
		middle = self.commit_on("refs/heads/main", base, "middle", {"a.txt": "m\n"})
		local = self.commit_on("refs/heads/main", middle, "local", {"a.txt": "l\n"})
		remote = self.commit_on("refs/remotes/origin/main", base, "remote", {"a.txt": "r\n"})
		self.drop_object(middle)
		store = PygitObjectStore(pygit2.Repository(str(self.repo_path)))

		with pytest.raises(NotFoundError):
			ahead_behind(store, local, remote)
