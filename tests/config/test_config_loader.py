"""Tests for configuration loading."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gitscope.config.config_loader import LOCAL_CONFIG_NAME, ConfigLoader, ConfigParsingError
from gitscope.git.diff import WhitespaceMode
from gitscope.git.sequencer import DEFAULT_TODO_PATH

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.unit
class TestConfigLoader:
	"""Test cases for ConfigLoader."""

	def test_defaults_without_file(self, tmp_path: Path) -> None:
		"""No config file means schema defaults."""
		loader = ConfigLoader(repo_root=tmp_path)

		assert loader.config_file is None
		assert loader.get.log.limit == 20
		assert loader.get.diff.whitespace is WhitespaceMode.IGNORE_ALL
		assert loader.get.sequencer.todo_path == DEFAULT_TODO_PATH
		assert loader.get.ui.color is True

	def test_local_file_overrides_defaults(self, tmp_path: Path) -> None:
		"""A .gitscope.yml in the repository root is picked up."""
		(tmp_path / LOCAL_CONFIG_NAME).write_text(
			"log:\n  limit: 5\ndiff:\n  whitespace: none\n  context_lines: 1\nstatus:\n  include_untracked: false\n",
			encoding="utf-8",
		)
		loader = ConfigLoader(repo_root=tmp_path)

		assert loader.config_file == tmp_path / LOCAL_CONFIG_NAME
		assert loader.get.log.limit == 5
		options = loader.diff_options(("src",))
		assert options.whitespace is WhitespaceMode.NONE
		assert options.context_lines == 1
		assert options.pathspec == ("src",)
		assert loader.status_options().include_untracked is False

	def test_xdg_fallback(self, tmp_path: Path, isolated_xdg_config: Path) -> None:
		"""The user config is used when the repository has none."""
		user_config = isolated_xdg_config / "gitscope" / "config.yml"
		user_config.parent.mkdir(parents=True)
		user_config.write_text("ui:\n  color: false\n", encoding="utf-8")

		loader = ConfigLoader(repo_root=tmp_path / "elsewhere")

		assert loader.config_file == user_config
		assert loader.get.ui.color is False

	def test_explicit_file_wins(self, tmp_path: Path) -> None:
		"""An explicit --config file takes precedence."""
		(tmp_path / LOCAL_CONFIG_NAME).write_text("log:\n  limit: 5\n", encoding="utf-8")
		explicit = tmp_path / "custom.yml"
		explicit.write_text("log:\n  limit: 7\n", encoding="utf-8")

		loader = ConfigLoader(config_file=explicit, repo_root=tmp_path)

		assert loader.get.log.limit == 7

	def test_missing_explicit_file_uses_defaults(self, tmp_path: Path) -> None:
		"""A missing explicit file falls back to defaults."""
		loader = ConfigLoader(config_file=tmp_path / "missing.yml", repo_root=tmp_path)
		assert loader.get.log.limit == 20

	def test_empty_file(self, tmp_path: Path) -> None:
		"""An empty YAML document is an empty config."""
		(tmp_path / LOCAL_CONFIG_NAME).write_text("", encoding="utf-8")
		assert ConfigLoader(repo_root=tmp_path).get.log.limit == 20

	@pytest.mark.parametrize(
		"content",
		[
			"log:\n  limit: -1\n",
			"diff:\n  whitespace: sometimes\n",
			"- just\n- a list\n",
			"log: [unclosed\n",
		],
	)
	def test_invalid_config(self, tmp_path: Path, content: str) -> None:
		"""Invalid values and non-mapping documents raise ConfigParsingError."""
		(tmp_path / LOCAL_CONFIG_NAME).write_text(content, encoding="utf-8")
		with pytest.raises(ConfigParsingError):
			ConfigLoader(repo_root=tmp_path)

	def test_singleton_reload(self, tmp_path: Path) -> None:
		"""get_instance returns one loader; reload picks up a new file."""
		first = ConfigLoader.get_instance(repo_root=tmp_path)
		assert ConfigLoader.get_instance() is first

		explicit = tmp_path / "custom.yml"
		explicit.write_text("log:\n  short: true\n", encoding="utf-8")
		reloaded = ConfigLoader.get_instance(config_file=explicit, reload=True)

		assert reloaded is first
		assert reloaded.get.log.short is True
