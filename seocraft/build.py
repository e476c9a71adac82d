from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Callable, Dict, Iterator, List, Optional

from seocraft.models import ThemeCustomization, ToolConfig
from seocraft.themes import TEMPLATE_NAMES, ThemeResolution

log = logging.getLogger(__name__)

try:
    BUILD_STEP_DELAY_MS = int(os.getenv("BUILD_STEP_DELAY_MS", "800") or 800)
except ValueError:
    BUILD_STEP_DELAY_MS = 800
try:
    BUILD_FINAL_DELAY_MS = int(os.getenv("BUILD_FINAL_DELAY_MS", "1000") or 1000)
except ValueError:
    BUILD_FINAL_DELAY_MS = 1000
if os.getenv("PYTEST_CURRENT_TEST"):
    BUILD_STEP_DELAY_MS = 0
    BUILD_FINAL_DELAY_MS = 0

IDLE = "idle"
INITIALIZING = "initializing"
STEP = "step"
COMPLETED = "completed"
FAILED = "failed"

CUSTOM_STEPS = [
    "Analyzing custom UI requirements from prompt",
    "Generating AI-designed interface based on specifications",
    "Optimizing custom components for tool functionality",
    "Implementing advanced UI interactions",
]

FINAL_STEPS = [
    "Optimizing performance",
    "Implementing responsive design",
    "Finalizing UI components",
    "Preparing deployment",
]


def build_steps(template: str, features: Optional[List[str]], tool_type: Optional[str]) -> List[str]:
    steps = ["Initializing project"]
    if template == "custom":
        steps.extend(CUSTOM_STEPS)
    else:
        name = TEMPLATE_NAMES.get(template, template)
        steps.extend([
            f"Applying {name} template",
            "Configuring template components",
            "Optimizing template for tool type",
        ])
    for feature in features or []:
        steps.append(f"Adding feature: {feature}")
    if tool_type:
        steps.append(f"Optimizing UI for {tool_type} functionality")
        steps.append(f"Implementing specialized {tool_type} components")
    steps.extend(FINAL_STEPS)
    return steps


def _snippet(step: str, index: int, config: ToolConfig, theme: ThemeCustomization) -> Optional[str]:
    b = theme.branding
    if index == 1:
        return (
            ":root {\n"
            f"  --primary: {b.primary_color};\n"
            f"  --secondary: {b.secondary_color};\n"
            f"  --accent: {b.accent_color};\n"
            f"  --font: {b.font_family};\n"
            "}"
        )
    if step.startswith("Implementing specialized"):
        return (
            f'<form class="tool tool-{config.tool_type}">\n'
            f"  <label>{config.input_label}</label>\n"
            f"  <textarea placeholder=\"{config.input_placeholder}\"></textarea>\n"
            f"  <button type=\"submit\">{config.button_text}</button>\n"
            "</form>"
        )
    if step.startswith("Adding feature: "):
        feature = step[len("Adding feature: "):]
        return json.dumps({"feature": feature, "enabled": True, "toolType": config.tool_type}, indent=2)
    return None


class BuildSimulator:
    """Scripted, timed build log shown while a tool is assembled.

    `run()` yields events; the only real work it wraps is the theme
    resolution callable, invoked once before the first step.
    """

    def __init__(
        self,
        tool_config: ToolConfig,
        template: str = "modern",
        features: Optional[List[str]] = None,
        sleep: Callable[[float], None] = time.sleep,
        step_delay_ms: Optional[int] = None,
        final_delay_ms: Optional[int] = None,
    ):
        self.tool_config = tool_config
        self.template = template if template in TEMPLATE_NAMES else "modern"
        self.features = list(features or [])
        self.steps = build_steps(self.template, self.features, tool_config.tool_type)
        self._sleep = sleep
        self.step_delay_ms = BUILD_STEP_DELAY_MS if step_delay_ms is None else step_delay_ms
        self.final_delay_ms = BUILD_FINAL_DELAY_MS if final_delay_ms is None else final_delay_ms
        self.state = IDLE
        self.current = 0
        self.logs: List[str] = []
        self.theme: Optional[ThemeCustomization] = None
        self.error: Optional[str] = None

    @property
    def progress(self) -> int:
        if self.state == COMPLETED:
            return 100
        return int(self.current / len(self.steps) * 100)

    def _state_event(self, **extra: Any) -> Dict[str, Any]:
        data = {"state": self.state, "index": self.current, "total": len(self.steps), "progress": self.progress}
        data.update(extra)
        return {"event": "state", "data": data}

    def _line(self, text: str) -> Dict[str, Any]:
        self.logs.append(text)
        return {"event": "log", "data": {"line": text}}

    def _wait(self, ms: int) -> None:
        if ms > 0:
            self._sleep(ms / 1000.0)

    def run(
        self,
        resolve_theme: Callable[[], ThemeResolution],
        on_complete: Optional[Callable[[ThemeCustomization], Dict[str, Any]]] = None,
    ) -> Iterator[Dict[str, Any]]:
        if self.state != IDLE:
            raise RuntimeError("build already started")
        title = self.tool_config.title or "Universal Tool"
        try:
            self.state = INITIALIZING
            yield self._state_event()
            yield self._line(f"> Starting build process for {title}")
            yield self._line(f"> Template: {TEMPLATE_NAMES[self.template]}")

            resolution = resolve_theme()
            if resolution.warning:
                yield {"event": "warning", "data": {"message": resolution.warning}}
                yield self._line(f"> Warning: {resolution.warning}")
            theme = resolution.customizations

            for i, step in enumerate(self.steps):
                self.state = STEP
                self.current = i
                yield self._state_event(step=step)
                yield self._line(f"> {step}...")
                snippet = _snippet(step, i, self.tool_config, theme)
                if snippet:
                    yield {"event": "code", "data": {"step": step, "snippet": snippet}}
                self._wait(self.step_delay_ms)
                yield self._line(f"> {step} completed")

            self.current = len(self.steps)
            yield self._line("> Build completed successfully!")
            yield self._line(f'> Tool "{title}" is ready for deployment')
            self._wait(self.final_delay_ms)

            result = on_complete(theme) if on_complete else {}
            self.theme = theme
            self.state = COMPLETED
            yield self._state_event()
            yield {"event": "complete", "data": {**result, "customizations": theme.dump()}}
        except Exception as e:
            log.exception("build failed at step %d", self.current)
            self.state = FAILED
            self.error = str(e) or e.__class__.__name__
            yield self._line(f"> Error: {self.error}")
            yield self._state_event(error=self.error)
            yield {"event": "error", "data": {"error": self.error}}
