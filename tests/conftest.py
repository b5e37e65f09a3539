"""Global test fixtures and configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gitscope.config.config_loader import ConfigLoader

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path


@pytest.fixture(autouse=True)
def reset_config_loader() -> Iterator[None]:
	"""Drop the ConfigLoader singleton so no test sees another test's config."""
	ConfigLoader._instance = None
	yield
	ConfigLoader._instance = None


@pytest.fixture(autouse=True)
def isolated_xdg_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
	"""Point the user config lookup at an empty temporary directory."""
	config_home = tmp_path / "xdg-config"
	config_home.mkdir()
	monkeypatch.setattr("gitscope.config.config_loader.xdg_config_home", str(config_home))
	return config_home
