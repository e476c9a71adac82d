from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from seocraft import analysis
from seocraft.analysis import AnalysisError
from seocraft.models import HistoryEntry, ThemeCustomization
from seocraft.render import can_submit
from seocraft.store import ToolStore
from seocraft.themes import normalize_theme

log = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
COMPLETE = "complete"


class ToolSession:
    """State behind one rendered tool: its config, theme and latest result."""

    def __init__(self, tool_id: str, entry: HistoryEntry, theme: ThemeCustomization, store: ToolStore):
        self.tool_id = tool_id
        self.entry = entry
        self.config = entry.tool_config
        self.theme = theme
        self.store = store
        self.state = IDLE
        self.result: Optional[Dict[str, Any]] = None
        self.debug: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    @classmethod
    def load(cls, store: ToolStore, tool_id: str) -> "ToolSession":
        entry, theme = store.load_tool(tool_id)
        return cls(tool_id, entry, theme, store)

    def field_names(self):
        if self.config.fields:
            return [f.name for f in self.config.fields]
        return ["content"]

    def collect_values(self, form: Mapping[str, Any]) -> Dict[str, str]:
        return {name: str(form.get(name) or "") for name in self.field_names()}

    def invoke_analysis(self, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Run one analysis. Failures still end in COMPLETE with an error-shaped result."""
        if self.state == LOADING:
            return self.result
        if not can_submit(values):
            return self.result

        self.state = LOADING
        self.error = None
        try:
            outcome = analysis.analyze(self.config.tool_type, dict(values), self.config.dump())
            self.result = outcome["data"]
            self.debug = outcome["debug"]
        except AnalysisError as e:
            self.error = str(e)
            self.result = {"error": True, "message": str(e), "details": e.details or str(e)}
        except Exception as e:
            log.exception("analysis failed for tool id=%s", self.tool_id)
            self.error = "Failed to process. Please try again."
            self.result = {"error": True, "message": self.error, "details": repr(e)}
        finally:
            self.state = COMPLETE
        return self.result

    def update_theme(self, partial: Mapping[str, Any]) -> ThemeCustomization:
        """Merge a partial theme over the current one and persist it immediately."""
        self.theme = normalize_theme(dict(partial), self.theme)
        self.store.save_theme(self.tool_id, self.theme)
        return self.theme
