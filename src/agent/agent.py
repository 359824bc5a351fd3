"""
Main agent interface for the Labour Law Assistant
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any

from src.config.logging_config import setup_logger
from src.config.prompt_templates import ANSWER_PROMPT
from src.config.settings import APP_VERSION, config
from src.services.errors import InputValidationError
from src.services.retrieval.search import Retriever, build_context
from src.utils.chat_helpers import normalize_history
from src.utils.stages import run_blocking, run_stage

from .graph import build_pipeline_graph
from .state import PipelineServices, PipelineState

logger = setup_logger(__name__)


@dataclass
class ChatTurnResult:
    """Outcome of one chat turn."""

    reply: str
    legal_reasoning: str
    stage: str
    case_id: str | None
    missing_fields: list[str] = field(default_factory=list)
    case_facts: dict = field(default_factory=dict)  # record as persisted after the merge
    sources: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["caseId"] = data.pop("case_id")
        return data


@dataclass
class AskResult:
    """Outcome of a single-shot question."""

    answer: str
    sources: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def validate_question(question: Any) -> str:
    """Return the trimmed question or raise InputValidationError. No provider is called."""
    if not isinstance(question, str) or not question.strip():
        raise InputValidationError("Question is required")
    question = question.strip()
    if len(question) > config.MAX_QUERY_LENGTH:
        raise InputValidationError(f"Question is too long (max {config.MAX_QUERY_LENGTH} characters)")
    return question


class LabourLawAssistant:
    """
    Request-level entry points over injected services.

    Holds no per-request state: every call takes the full history and optional case id
    and returns the reply plus the case id to send back next turn.
    """

    def __init__(self, services: PipelineServices):
        self.services = services
        self.graph = build_pipeline_graph(services)
        self.ask_retriever = Retriever(
            services.embedder,
            services.search_backend,
            match_count=services.ask_match_count or config.ASK_MATCH_COUNT,
        )

    async def chat(self, question: Any, history: list | None = None, case_id: str | None = None) -> ChatTurnResult:
        """Run the full rewrite → expand → retrieve → extract → persist → respond pipeline."""
        question = validate_question(question)
        turns = normalize_history(history)

        total_start = time.time()
        logger.info("CHAT: %s (history=%s, case=%s)", question, len(turns), case_id)

        initial_state: PipelineState = {
            "question": question,
            "history": turns,
            "case_id": case_id or None,
        }
        final_state = await self.graph.ainvoke(initial_state)

        logger.info("TOTAL TIME: %.2fs (stage=%s)", time.time() - total_start, final_state.get("stage"))
        return ChatTurnResult(
            reply=final_state["reply"],
            legal_reasoning=final_state["legal_reasoning"],
            stage=final_state["stage"],
            case_id=final_state.get("case_id"),
            missing_fields=final_state.get("missing_fields", []),
            case_facts=final_state["stored_facts"].model_dump(),
            sources=final_state.get("chunks", []),
        )

    async def ask(self, question: Any) -> AskResult:
        """Single-shot RAG: search on the raw question and answer from the context only."""
        question = validate_question(question)
        logger.info("ASK: %s", question)

        chunks = await self.ask_retriever.retrieve(question)
        prompt = ANSWER_PROMPT.format(context=build_context(chunks), question=question)
        answer = await run_stage("generate", self.services.generator.generate_text(prompt, stage="generate"))
        return AskResult(answer=answer, sources=chunks)

    async def list_cases(self) -> list[dict]:
        """All persisted cases, most recently updated first."""
        store = self.services.case_store
        if store is None:
            return []
        return await run_stage("list", run_blocking(store.list_cases))


def get_agent_info() -> dict[str, Any]:
    """
    Get agent configuration and status
    """
    return {
        "name": "South African Labour Law Assistant",
        "version": APP_VERSION,
        "workflow_stages": ["rewrite", "expand", "retrieve", "extract", "persist", "respond"],
        "integrations": {
            "search": f"Supabase {config.HYBRID_SEARCH_RPC} (full-text + pgvector, RRF k={config.RRF_K})",
            "embeddings": config.EMBEDDING_MODEL,
            "llm": config.OPENAI_CHAT_MODEL,
            "case_store": f"Supabase table '{config.CASES_TABLE}'",
        },
    }
