"""Terminal output for gitscope."""

from gitscope.ui.nodes import RenderConfig, render
from gitscope.ui.views import log_document, patch_line_node, stats_document, status_document

__all__ = ["RenderConfig", "log_document", "patch_line_node", "render", "stats_document", "status_document"]
