"""Builds output documents from analysis results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitscope.git.models import ChangeKind, LineOrigin, PullAction
from gitscope.ui.nodes import (
	Block,
	Column,
	Dimmed,
	Group,
	Icon,
	IconKind,
	Indicator,
	IndicatorKind,
	Label,
	MultiLine,
	Node,
	Spacer,
	Status,
	Text,
)

if TYPE_CHECKING:
	from collections.abc import Sequence

	from gitscope.git.history import LogEntry
	from gitscope.git.models import DiffStats, DivergenceSet, PatchLine, SequencerOp, StatusEntry
	from gitscope.git.report import StatusReport

_INDICATORS = {
	ChangeKind.NEW: IndicatorKind.NEW,
	ChangeKind.MODIFIED: IndicatorKind.MODIFIED,
	ChangeKind.RENAMED: IndicatorKind.RENAMED,
	ChangeKind.DELETED: IndicatorKind.DELETED,
	ChangeKind.TYPE_CHANGED: IndicatorKind.TYPE_CHANGED,
	ChangeKind.UNKNOWN: IndicatorKind.UNKNOWN,
}

_PATCH_STYLES = {
	LineOrigin.ADDITION: "green",
	LineOrigin.DELETION: "red",
	LineOrigin.HUNK_HEADER: "cyan",
	LineOrigin.FILE_HEADER: "bold",
	LineOrigin.CONTEXT: "",
}


def change_node(entry: StatusEntry) -> Node:
	"""One changed path with its marker."""
	parts: list[Node] = [Indicator(_INDICATORS[entry.change]), Spacer()]
	if entry.old_path is not None:
		parts.extend([Dimmed(Text(entry.old_path)), Text(" -> ")])
	parts.append(Text(entry.path))
	return Block(tuple(parts))


def divergence_node(upstream: str, divergence: DivergenceSet) -> Node:
	"""Ahead/behind summary against the upstream."""
	parts: list[Node] = [Text(upstream, style="cyan")]
	if divergence.is_even:
		parts.extend([Spacer(), Icon(IconKind.CHECK, Status.SUCCESS)])
		return Block(tuple(parts))
	if divergence.ahead:
		parts.extend([Spacer(), Icon(IconKind.ARROW_UP, Status.SUCCESS), Text(str(len(divergence.ahead)))])
	if divergence.behind:
		status = Status.ERROR if divergence.is_diverged else Status.WARNING
		parts.extend([Spacer(), Icon(IconKind.ARROW_DOWN, status), Text(str(len(divergence.behind)))])
	return Block(tuple(parts))


def sequencer_node(operations: Sequence[SequencerOp], width: int) -> Node:
	"""Remaining rebase steps."""
	rows: list[Node] = []
	for op in operations:
		target = Dimmed(Text(op.target.short())) if not op.target.is_zero else Dimmed(Text("-------"))
		rows.append(Block((Column(Text(op.kind.value), target, width=6), Spacer(), Text(op.message, cap=width))))
	return MultiLine(tuple(rows))


def status_document(report: StatusReport, width: int = 75) -> Node:
	"""
	Document for the ``status`` command.

	Args:
		report: The analysed repository state.
		width: Maximum length of commit summaries.

	Returns:
		Node: Root of the document.

	"""
	branch = report.branch
	if branch.unborn:
		head_line: Node = Block((Text(branch.name or "HEAD", style="bold"), Spacer(), Label(Text("no commits yet"))))
	else:
		name = Text("HEAD", style="bold yellow") if branch.detached else Text(branch.name or "HEAD", style="bold")
		head_line = Block(
			(
				name,
				Spacer(),
				Dimmed(Text(branch.head.short())),
				Spacer(),
				Text(branch.summary, cap=width),
			)
		)

	sections: list[Node] = [head_line]
	if report.upstream is not None and report.divergence is not None:
		sections.append(divergence_node(report.upstream, report.divergence))
		if report.pull_action is PullAction.DIVERGED:
			sections.append(Block((Icon(IconKind.WARNING, Status.WARNING), Spacer(), Text("branch has diverged"))))
		elif report.pull_action is PullAction.FAST_FORWARD:
			sections.append(Block((Icon(IconKind.ARROW_DOWN, Status.WARNING), Spacer(), Text("pull can fast-forward"))))

	if report.in_progress is not None:
		sections.append(
			Block((Icon(IconKind.LOCK, Status.WARNING), Spacer(), Text(f"{report.in_progress.value} in progress")))
		)
	if report.sequencer:
		sections.append(Group("Rebase todo", sequencer_node(report.sequencer, width), count=len(report.sequencer)))

	staged = report.staged
	unstaged = report.unstaged
	if staged:
		sections.append(Group("Staged", MultiLine(tuple(change_node(e) for e in staged)), count=len(staged)))
	if unstaged:
		sections.append(Group("Unstaged", MultiLine(tuple(change_node(e) for e in unstaged)), count=len(unstaged)))
	if report.is_clean:
		sections.append(Dimmed(Text("nothing to commit, working tree clean")))
	return MultiLine(tuple(sections))


def log_document(entries: Sequence[LogEntry], width: int = 75, short: bool = False) -> Node:
	"""Document for the ``list`` command."""
	rows: list[Node] = []
	for entry in entries:
		meta = entry.meta
		parts: list[Node] = [Text(entry.ref.short(), style="yellow"), Spacer()]
		if entry.is_signed:
			parts.extend([Icon(IconKind.LOCK, Status.SUCCESS), Spacer()])
		parts.append(Text(meta.summary, cap=width))
		if not short:
			when = meta.timestamp.strftime("%Y-%m-%d %H:%M")
			parts.extend([Spacer(), Label(Block((Text(meta.author), Text(", "), Text(when))))])
		rows.append(Block(tuple(parts)))
	return MultiLine(tuple(rows))


def stats_document(stats: DiffStats) -> Node:
	"""``--stat`` style summary."""
	width = max((len(f.path) for f in stats.files), default=0)
	rows: list[Node] = []
	for delta in stats.files:
		if delta.is_binary:
			counts: Node = Dimmed(Text("binary"))
		else:
			counts = Block(
				(
					Text(f"+{delta.insertions}", style="green"),
					Spacer(),
					Text(f"-{delta.deletions}", style="red"),
				)
			)
		rows.append(Block((Indicator(_INDICATORS[delta.change]), Spacer(), Column(Text(delta.path), counts, width=width))))
	noun = "file" if stats.files_changed == 1 else "files"
	rows.append(
		Dimmed(
			Text(f"{stats.files_changed} {noun} changed, {stats.insertions} insertions(+), {stats.deletions} deletions(-)")
		)
	)
	return MultiLine(tuple(rows))


def patch_line_node(line: PatchLine) -> Node:
	"""A single patch line, without its trailing newline."""
	content = line.content.rstrip("\n")
	if line.origin in (LineOrigin.ADDITION, LineOrigin.DELETION, LineOrigin.CONTEXT):
		content = line.origin.value + content
	return Text(content, style=_PATCH_STYLES[line.origin])
