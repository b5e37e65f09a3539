"""Tests for the commit lister."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gitscope.git.errors import NotFoundError
from gitscope.git.history import list_commits
from tests.base import GitTestBase


@pytest.mark.git
class TestListCommits(GitTestBase):
	"""Listing commits from a real repository."""

	def _history(self, count: int) -> list:
		return [self.commit_files({"a.txt": f"{i}\n"}, f"commit {i}") for i in range(count)]

	def test_newest_first(self) -> None:
		"""Entries come back newest first with their metadata."""
		refs = self._history(3)
		entries = list_commits(self.store)

		assert [e.ref for e in entries] == list(reversed(refs))
		assert entries[0].meta.summary == "commit 2"
		assert entries[0].meta.author == "Test User"
		assert entries[0].meta.parents == (refs[1],)
		assert not entries[0].is_signed

	def test_limit(self) -> None:
		"""The limit caps the number of entries; zero disables it."""
		self._history(5)
		assert len(list_commits(self.store, limit=2)) == 2
		assert len(list_commits(self.store, limit=0)) == 5

	def test_start_revision(self) -> None:
		"""Listing can start from any revision."""
		refs = self._history(3)
		entries = list_commits(self.store, start="HEAD~1")
		assert [e.ref for e in entries] == [refs[1], refs[0]]

	def test_unborn_head(self) -> None:
		"""An empty repository has nothing to list."""
		with pytest.raises(NotFoundError):
			list_commits(self.store)


@pytest.mark.unit
class TestListCommitsSigned:
	"""Signature detection through the store."""

	def test_signed_flag(self) -> None:
		"""A signature on the commit marks the entry as signed."""
		meta = MagicMock(is_signed=True)
		store = MagicMock()
		store.walk.return_value = iter(["ref"])
		store.read_commit.return_value = meta

		entries = list_commits(store, limit=1)

		assert entries[0].is_signed
		store.resolve_ref.assert_called_once_with("HEAD")
