"""
Output document model.

A document is a tree built from a closed set of node variants. ``render``
walks the tree once and produces a ``rich.text.Text``; colour is controlled
by the ``RenderConfig`` passed in, never by global state.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from rich.text import Text as RichText


class Status(str, Enum):
	"""Semantic colour of a node."""

	NEUTRAL = "neutral"
	SUCCESS = "success"
	WARNING = "warning"
	ERROR = "error"


class IconKind(str, Enum):
	"""Glyphs used in status output."""

	ARROW_UP = "↑"
	ARROW_DOWN = "↓"
	LOCK = "⚿"
	CHECK = "✓"
	WARNING = "⚠"


class IndicatorKind(str, Enum):
	"""Change markers shown next to paths."""

	NEW = "+"
	MODIFIED = "~"
	RENAMED = ">"
	DELETED = "-"
	TYPE_CHANGED = "T"
	UNKNOWN = "?"


INDENT = 2

_STATUS_STYLES = {
	Status.NEUTRAL: "",
	Status.SUCCESS: "green",
	Status.WARNING: "yellow",
	Status.ERROR: "red",
}

_INDICATOR_STYLES = {
	IndicatorKind.NEW: "green",
	IndicatorKind.MODIFIED: "yellow",
	IndicatorKind.RENAMED: "yellow",
	IndicatorKind.DELETED: "red",
	IndicatorKind.TYPE_CHANGED: "magenta",
	IndicatorKind.UNKNOWN: "bright_black",
}


@dataclass(frozen=True)
class RenderConfig:
	"""Explicit rendering settings."""

	color: bool = True
	width: int = 75


@dataclass(frozen=True)
class Text:
	"""Plain text, optionally capped to ``cap`` characters."""

	text: str
	cap: int | None = None
	style: str = ""


@dataclass(frozen=True)
class Dimmed:
	"""De-emphasised content."""

	child: Node


@dataclass(frozen=True)
class Label:
	"""Content wrapped in dimmed parentheses."""

	child: Node


@dataclass(frozen=True)
class Icon:
	"""A glyph with a semantic colour."""

	kind: IconKind
	status: Status = Status.NEUTRAL


@dataclass(frozen=True)
class Indicator:
	"""A change marker."""

	kind: IndicatorKind


@dataclass(frozen=True)
class Spacer:
	"""A single space."""


@dataclass(frozen=True)
class Block:
	"""Children rendered inline, one after another."""

	children: tuple[Node, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MultiLine:
	"""Children rendered one per line."""

	children: tuple[Node, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Column:
	"""Two cells side by side, the left one padded to ``width``."""

	left: Node
	right: Node
	width: int = 0


@dataclass(frozen=True)
class Group:
	"""A titled section with an optional count and indented body."""

	name: str
	child: Node
	count: int | None = None


Node = Text | Dimmed | Label | Icon | Indicator | Spacer | Block | MultiLine | Column | Group


def _styled(text: str, style: str, config: RenderConfig) -> RichText:
	return RichText(text, style=style if config.color and style else "")


def _indent(rendered: RichText, width: int) -> RichText:
	pad = " " * width
	lines = rendered.split("\n")
	out = RichText()
	for i, line in enumerate(lines):
		if i:
			out.append("\n")
		out.append(pad)
		out.append_text(line)
	return out


def render(node: Node, config: RenderConfig | None = None) -> RichText:
	"""
	Render a document tree.

	Args:
		node: Root of the tree.
		config: Rendering settings, defaults if omitted.

	Returns:
		The rendered, optionally styled, text.

	"""
	config = config or RenderConfig()
	match node:
		case Text(text=text, cap=cap, style=style):
			if cap is not None and len(text) > cap:
				text = text[: max(cap - 1, 0)] + "…"
			return _styled(text, style, config)
		case Dimmed(child=child):
			inner = render(child, config)
			if config.color:
				inner.stylize("dim")
			return inner
		case Label(child=child):
			out = _styled("(", "bright_black", config)
			out.append_text(render(child, config))
			out.append_text(_styled(")", "bright_black", config))
			return out
		case Icon(kind=kind, status=status):
			return _styled(kind.value, _STATUS_STYLES[status], config)
		case Indicator(kind=kind):
			return _styled(kind.value, _INDICATOR_STYLES[kind], config)
		case Spacer():
			return RichText(" ")
		case Block(children=children):
			out = RichText()
			for child in children:
				out.append_text(render(child, config))
			return out
		case MultiLine(children=children):
			return RichText("\n").join(render(child, config) for child in children)
		case Column(left=left, right=right, width=width):
			out = render(left, config)
			out.pad_right(max(width - out.cell_len, 0) + 1)
			out.append_text(render(right, config))
			return out
		case Group(name=name, child=child, count=count):
			header = _styled(name, "bold", config)
			if count is not None:
				header.append_text(_styled(f" ({count})", "bright_black", config))
			header.append("\n")
			header.append_text(_indent(render(child, config), INDENT))
			return header
	msg = f"Unknown document node: {node!r}"
	raise TypeError(msg)
