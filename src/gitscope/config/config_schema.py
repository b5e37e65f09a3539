"""Pydantic schemas for gitscope configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gitscope.git.diff import WhitespaceMode
from gitscope.git.sequencer import DEFAULT_TODO_PATH


class StatusSchema(BaseModel):
	"""Status classification settings."""

	include_ignored: bool = False
	include_untracked: bool = True
	recurse_untracked_dirs: bool = True
	detect_renames: bool = True
	detect_copies: bool = True
	rename_threshold: int = Field(default=50, ge=0, le=100)
	exclude_submodules: bool = True


class DiffSchema(BaseModel):
	"""Diff command settings."""

	whitespace: WhitespaceMode = WhitespaceMode.IGNORE_ALL
	context_lines: int = Field(default=3, ge=0)
	include_untracked: bool = True
	detect_renames: bool = True
	detect_copies: bool = True
	force_text: bool = True


class LogSchema(BaseModel):
	"""List command settings."""

	limit: int = Field(default=20, ge=0)
	short: bool = False


class SequencerSchema(BaseModel):
	"""Where the rebase control file lives, relative to the git directory."""

	todo_path: str = DEFAULT_TODO_PATH


class UISchema(BaseModel):
	"""Terminal output settings."""

	color: bool = True
	summary_width: int = Field(default=75, gt=0)


class AppConfigSchema(BaseModel):
	"""Top-level configuration."""

	status: StatusSchema = Field(default_factory=StatusSchema)
	diff: DiffSchema = Field(default_factory=DiffSchema)
	log: LogSchema = Field(default_factory=LogSchema)
	sequencer: SequencerSchema = Field(default_factory=SequencerSchema)
	ui: UISchema = Field(default_factory=UISchema)
