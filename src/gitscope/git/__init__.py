"""Repository analysis core for gitscope."""

from gitscope.git.diff import DiffEmitter, DiffOptions, DiffResult, Snapshot, WhitespaceMode
from gitscope.git.errors import (
	GitScopeError,
	MalformedStateError,
	NegotiationRejectedError,
	NotFoundError,
	UnrelatedHistoryError,
)
from gitscope.git.graph import DivergenceWalker, ahead_behind
from gitscope.git.models import (
	ChangeKind,
	CommitMeta,
	CommitRef,
	DiffStats,
	DivergenceSet,
	InProgress,
	LineOrigin,
	Location,
	OpKind,
	PatchLine,
	PushUpdate,
	SequencerOp,
	StatusEntry,
)
from gitscope.git.report import StatusReport, build_report
from gitscope.git.status import StatusClassifier, StatusOptions, classify
from gitscope.git.store import ObjectStore, PygitObjectStore

__all__ = [
	# Value types
	"ChangeKind",
	"CommitMeta",
	"CommitRef",
	# Components
	"DiffEmitter",
	"DiffOptions",
	"DiffResult",
	"DiffStats",
	"DivergenceSet",
	"DivergenceWalker",
	# Errors
	"GitScopeError",
	"InProgress",
	"LineOrigin",
	"Location",
	"MalformedStateError",
	"NegotiationRejectedError",
	"NotFoundError",
	"ObjectStore",
	"OpKind",
	"PatchLine",
	"PushUpdate",
	"PygitObjectStore",
	"SequencerOp",
	"Snapshot",
	"StatusClassifier",
	"StatusEntry",
	"StatusOptions",
	"StatusReport",
	"UnrelatedHistoryError",
	"WhitespaceMode",
	"ahead_behind",
	"build_report",
	"classify",
]
