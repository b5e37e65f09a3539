"""Type definitions for CLI parameters."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

ConfigOpt = Annotated[
	Path | None,
	typer.Option(
		"--config",
		"-c",
		help="Path to config file",
	),
]

RepoOpt = Annotated[
	Path | None,
	typer.Option(
		"--repo",
		"-C",
		help="Path inside the repository to inspect (defaults to the current directory)",
	),
]

LimitOpt = Annotated[
	int | None,
	typer.Option(
		"--limit",
		"-n",
		min=0,
		help="Maximum number of commits to list (0 for unlimited, overrides config)",
	),
]

ShortFlag = Annotated[
	bool,
	typer.Option(
		"--short",
		"-s",
		help="Show only the abbreviated id and summary",
	),
]

StagedFlag = Annotated[
	bool,
	typer.Option(
		"--staged",
		help="Compare HEAD with the index instead of the index with the working tree",
	),
]

StatFlag = Annotated[
	bool,
	typer.Option(
		"--stat",
		help="Show per-file insertion and deletion counts instead of the patch",
	),
]

PathspecArg = Annotated[
	list[str] | None,
	typer.Argument(
		help="Limit the diff to these paths, directories or globs",
		show_default=False,
	),
]

ExpectedOpt = Annotated[
	str | None,
	typer.Option(
		"--expected",
		help="Revision of the remote tip the push is based on (defaults to the upstream tracking ref)",
	),
]

AdvertisedOpt = Annotated[
	str | None,
	typer.Option(
		"--advertised",
		help="Full object id the remote advertises for the branch (defaults to asking the upstream remote)",
	),
]
