import json
import logging
import os
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel, Field, ValidationError

from seocraft import analysis, llm_client, seo_content, synthesizer, themes
from seocraft.analysis import AnalysisError
from seocraft.build import BuildSimulator
from seocraft.llm_client import LLMError, LLMUnavailable
from seocraft.models import ThemeCustomization, ToolConfig
from seocraft.render import render_index, render_message, render_tool_page
from seocraft.session import ToolSession
from seocraft.store import ToolNotFound, ToolStore, get_backend
from seocraft.synthesizer import SynthesisError
from seocraft.validators import collect_errors

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

log = logging.getLogger(__name__)

app = FastAPI(title="SEOCraft")

allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = str(uuid.uuid4())
    start = time.time()
    request.state.request_id = rid
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        dur_ms = int((time.time() - start) * 1000)
        log.info(
            "rid=%s method=%s path=%s status=%s dur_ms=%d",
            rid,
            request.method,
            request.url.path,
            getattr(response, "status_code", "?"),
            dur_ms,
        )


_STORE: Optional[ToolStore] = None


def get_store() -> ToolStore:
    global _STORE
    if _STORE is None:
        _STORE = ToolStore(get_backend())
    return _STORE


class GenerateRequest(BaseModel):
    prompt: Optional[str] = Field(default=None, description="Free-text description of the tool to build")


class AnalyzeRequest(BaseModel):
    toolType: Optional[str] = None
    input: Union[str, Dict[str, Any], None] = None
    toolConfig: Optional[Dict[str, Any]] = None


class GenerateUIRequest(BaseModel):
    prompt: Optional[str] = None
    toolType: Optional[str] = None


class GenerateLogicRequest(BaseModel):
    toolConfig: Optional[Dict[str, Any]] = None


class SeoRequest(BaseModel):
    prompt: Optional[str] = None
    toolType: str = "general"
    context: Dict[str, Any] = Field(default_factory=dict)


class ValidateRequest(BaseModel):
    toolConfig: Dict[str, Any]


class BuildRequest(BaseModel):
    prompt: str = ""
    toolConfig: Dict[str, Any]
    template: str = "modern"
    customPrompt: Optional[str] = None
    features: List[str] = Field(default_factory=list)


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/llm/status")
def llm_status_endpoint() -> Dict[str, Any]:
    return llm_client.status()


@app.get("/llm/probe")
def llm_probe_endpoint() -> Dict[str, Any]:
    return llm_client.probe()


@app.post("/api/generate")
def generate_endpoint(req: GenerateRequest):
    if not req.prompt or not req.prompt.strip():
        return _error("Prompt is required", 400)
    try:
        config = synthesizer.synthesize(req.prompt)
    except SynthesisError as e:
        return _error(str(e), 500, rawResponse=e.raw)
    except LLMUnavailable:
        return _error("API key not configured. Please set up your OpenAI API key to use this tool.", 500)
    except LLMError as e:
        log.warning("generate: provider error err=%s", e)
        return _error(f"Failed to generate SEO tool: {e}", 500)
    return {"toolConfig": config.dump(), "plan": synthesizer.build_plan(config)}


@app.post("/api/analyze")
def analyze_endpoint(req: AnalyzeRequest):
    try:
        outcome = analysis.analyze(req.toolType, req.input, req.toolConfig)
    except AnalysisError as e:
        extra = {"rawResponse": e.raw} if e.raw else {}
        return _error(str(e), e.status_code, **extra)
    return outcome


@app.post("/api/generate-ui")
def generate_ui_endpoint(req: GenerateUIRequest):
    if not req.prompt or not req.prompt.strip():
        return _error("Prompt is required", 400)
    return themes.generate_ui(req.prompt, req.toolType)


@app.post("/api/generate-logic")
def generate_logic_endpoint(req: GenerateLogicRequest):
    if not req.toolConfig:
        return _error("Tool configuration is required", 400)
    return analysis.generate_logic(req.toolConfig)


@app.post("/api/seo")
def seo_endpoint(req: SeoRequest):
    if not req.prompt or not req.prompt.strip():
        return _error("Prompt is required", 400)
    try:
        return seo_content.generate_seo_content(req.prompt, req.toolType)
    except Exception:
        log.exception("seo: request failed")
        return _error("Failed to process SEO request", 500)


@app.post("/api/validate")
def validate_endpoint(req: ValidateRequest):
    """
    Validate a tool configuration.
    Returns 200 and {"detail":{"valid":true}} on success,
            422 and {"detail":{"valid":false,"errors":[...]}} on failure.
    """
    errors = collect_errors(req.toolConfig)
    detail: Dict[str, Any] = {"valid": not errors}
    if errors:
        detail["errors"] = errors
        return JSONResponse(status_code=422, content={"detail": detail})
    return {"detail": detail}


@app.post("/api/build")
def build_endpoint(req: BuildRequest, request: Request, store: ToolStore = Depends(get_store)):
    """
    NDJSON stream of build events. The tool is persisted only when the
    build completes; the final `complete` event carries its id.
    """
    try:
        config = ToolConfig.model_validate(req.toolConfig)
    except ValidationError as e:
        errors = [{"path": ".".join(str(p) for p in err.get("loc", [])) or "(root)", "message": err.get("msg", "invalid")} for err in e.errors()]
        return JSONResponse(status_code=422, content={"detail": {"valid": False, "errors": errors}})

    design_prompt = req.customPrompt or req.prompt
    simulator = BuildSimulator(config, template=req.template, features=req.features)

    def _resolve() -> themes.ThemeResolution:
        resolution = themes.resolve(req.template, design_prompt, config.tool_type, brand_name=config.title)
        theme = resolution.customizations
        if req.customPrompt and theme.custom_prompt is None:
            theme = theme.model_copy(update={"custom_prompt": req.customPrompt})
        return themes.ThemeResolution(theme, resolution.warning)

    def _persist(theme: ThemeCustomization) -> Dict[str, Any]:
        entry = store.add_entry(req.prompt, config, theme)
        return {"toolId": entry.id}

    def _iter() -> Iterable[str]:
        meta = {"event": "meta", "request_id": getattr(request.state, "request_id", None), "steps": simulator.steps}
        yield json.dumps(meta) + "\n"
        for event in simulator.run(_resolve, on_complete=_persist):
            yield json.dumps(event) + "\n"

    return StreamingResponse(_iter(), media_type="application/x-ndjson")


@app.get("/api/history")
def history_endpoint(store: ToolStore = Depends(get_store)):
    return {"history": [e.dump() for e in store.history()]}


@app.delete("/api/history")
def clear_history_endpoint(store: ToolStore = Depends(get_store)):
    store.clear_history()
    return {"history": []}


@app.get("/api/tools/current")
def current_tool_endpoint(store: ToolStore = Depends(get_store)):
    tool_id = store.current_tool_id()
    if tool_id is None:
        return _error("No tools found", 404)
    return {"toolId": tool_id}


@app.get("/api/tools/{tool_id}")
def tool_endpoint(tool_id: str, store: ToolStore = Depends(get_store)):
    try:
        entry, theme = store.load_tool(tool_id)
    except ToolNotFound as e:
        return _error(str(e), 404)
    return {"id": entry.id, "prompt": entry.prompt, "toolConfig": entry.tool_config.dump(), "customizations": theme.dump()}


@app.patch("/api/tools/{tool_id}/theme")
def update_theme_endpoint(tool_id: str, partial: Dict[str, Any], store: ToolStore = Depends(get_store)):
    try:
        session = ToolSession.load(store, tool_id)
    except ToolNotFound as e:
        return _error(str(e), 404)
    theme = session.update_theme(partial)
    return {"customizations": theme.dump()}


@app.get("/", response_class=HTMLResponse)
def index(store: ToolStore = Depends(get_store)) -> str:
    return render_index(store.history())


@app.get("/c/{tool_id}", response_class=HTMLResponse)
def tool_page(tool_id: str, store: ToolStore = Depends(get_store)):
    try:
        session = ToolSession.load(store, tool_id)
    except ToolNotFound as e:
        return HTMLResponse(render_message("Tool not available", str(e)), status_code=404)
    return HTMLResponse(render_tool_page(session))


@app.post("/c/{tool_id}", response_class=HTMLResponse)
async def tool_submit(tool_id: str, request: Request, store: ToolStore = Depends(get_store)):
    try:
        session = ToolSession.load(store, tool_id)
    except ToolNotFound as e:
        return HTMLResponse(render_message("Tool not available", str(e)), status_code=404)
    # field names come from the tool config, so no Form(...) parameters
    data = await request.form()
    form = {k: v for k, v in data.items() if isinstance(v, str)}
    values = session.collect_values(form)
    notice = None
    if await run_in_threadpool(session.invoke_analysis, values) is None:
        notice = "Fill in at least one field before submitting."
    return HTMLResponse(render_tool_page(session, values, notice=notice))
