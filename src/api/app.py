"""
HTTP API for the Labour Law Assistant

Run with: uvicorn src.api.app:app --host 0.0.0.0 --port 8000
"""

from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.agent.agent import LabourLawAssistant, get_agent_info
from src.agent.state import PipelineServices
from src.config.logging_config import setup_logger
from src.config.settings import APP_TITLE, APP_VERSION, config
from src.services.errors import InputValidationError, PipelineError

logger = setup_logger(__name__)


class AskRequest(BaseModel):
    """Request body for the single-shot question endpoint"""

    question: Optional[str] = None


class ChatRequest(BaseModel):
    """Request body for one chat turn"""

    question: Optional[str] = None
    history: Optional[list[dict[str, Any]]] = None
    caseId: Optional[Union[str, int]] = None  # cases.id is a bigint; the listing returns it as a number


class ServiceContainer:
    """Builds the real provider clients once per process, on first use."""

    def __init__(self):
        self._assistant: LabourLawAssistant | None = None

    def get_assistant(self) -> LabourLawAssistant:
        if self._assistant is None:
            from src.services.cases.storage import SupabaseCaseStore
            from src.services.common.embedder import QueryEmbedder
            from src.services.llm_generator import LLMGenerator
            from src.services.retrieval.search import SupabaseSearchBackend

            logger.info("Initializing provider clients")
            services = PipelineServices(
                embedder=QueryEmbedder(),
                generator=LLMGenerator(),
                query_generator=LLMGenerator(model=config.REWRITE_MODEL, temperature=0),
                search_backend=SupabaseSearchBackend(),
                case_store=SupabaseCaseStore() if config.CASE_TRACKING_ENABLED else None,
                match_count=config.MATCH_COUNT,
                ask_match_count=config.ASK_MATCH_COUNT,
            )
            self._assistant = LabourLawAssistant(services)
        return self._assistant


_container = ServiceContainer()


def get_assistant() -> LabourLawAssistant:
    """FastAPI dependency; tests replace it through app.dependency_overrides."""
    return _container.get_assistant()


app = FastAPI(title=APP_TITLE, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# =============================================================================
# Error handlers: every failure is a JSON body with an "error" field
# =============================================================================


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(InputValidationError)
async def input_error_handler(request: Request, exc: InputValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.error("Pipeline failed at %s: %s", exc.stage, exc)
    return JSONResponse(
        status_code=500,
        content={"error": exc.kind, "details": str(exc), "stage": exc.stage},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Server Error")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error", "details": str(exc)})


# =============================================================================
# Endpoints
# =============================================================================


@app.get("/api/health")
async def health_check():
    """Liveness check; does not touch any provider."""
    return {"status": "ok", "version": APP_VERSION, "agent": get_agent_info()["name"]}


@app.post("/api/ask")
async def ask(request: AskRequest, assistant: LabourLawAssistant = Depends(get_assistant)):
    """Single-shot question: hybrid search on the raw question, answer from context only."""
    result = await assistant.ask(request.question)
    return result.to_dict()


@app.post("/api/chat")
async def chat(request: ChatRequest, assistant: LabourLawAssistant = Depends(get_assistant)):
    """One turn of the intake conversation."""
    case_id = str(request.caseId) if request.caseId is not None else None
    result = await assistant.chat(request.question, history=request.history, case_id=case_id)
    return result.to_dict()


@app.get("/api/cases")
async def list_cases(assistant: LabourLawAssistant = Depends(get_assistant)):
    """All persisted cases, most recently updated first."""
    return await assistant.list_cases()
