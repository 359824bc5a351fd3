"""
Agent State Definition for LangGraph
"""

from dataclasses import dataclass
from typing import TypedDict

from src.services.cases.models import CaseFacts
from src.services.protocols import CaseStore, EmbeddingService, SearchBackend, TextGenerator


class PipelineState(TypedDict, total=False):
    """
    State object passed through the LangGraph workflow.

    Tracks one chat turn through: rewrite → expand → retrieve → extract → persist → respond
    """

    # Request input
    question: str
    history: list[dict]  # earlier turns, chronological; excludes the current question
    case_id: str | None

    # Query preparation
    standalone_question: str
    keywords: str
    search_query: str  # standalone_question + " " + keywords

    # Retrieval
    chunks: list[dict]
    context_text: str

    # Case intake
    case_facts: CaseFacts  # freshly extracted this turn
    stored_facts: CaseFacts  # after merge with the persisted record
    missing_fields: list[str]
    stage: str  # "intake" | "assessment"

    # Final response
    reply: str
    legal_reasoning: str


@dataclass
class PipelineServices:
    """External collaborators, constructed once by the process entry point."""

    embedder: EmbeddingService
    generator: TextGenerator
    search_backend: SearchBackend
    case_store: CaseStore | None = None  # None disables case persistence
    query_generator: TextGenerator | None = None  # rewrite/expand/extract; defaults to generator
    match_count: int | None = None
    ask_match_count: int | None = None
