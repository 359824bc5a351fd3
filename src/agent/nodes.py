"""
LangGraph Node Functions (Abstraction Layer)
Each node represents a processing stage in the workflow
"""

import time

from src.config.logging_config import setup_logger
from src.services.cases.extractor import CaseFactExtractor
from src.services.cases.models import missing_fields
from src.services.cases.responder import ASSESSMENT, INTAKE, StagedResponseGenerator, select_stage
from src.services.cases.storage import persist_case
from src.services.retrieval.query import QueryExpander, QueryRewriter, combine_search_query
from src.services.retrieval.search import Retriever, build_context
from src.utils.chat_helpers import with_current_question
from src.utils.stages import run_blocking, run_stage

from .state import PipelineServices, PipelineState

logger = setup_logger(__name__)


class PipelineNodes:
    """
    Node callables bound to one set of services.

    Nodes return partial state updates and never catch errors: a failing stage
    aborts the graph run and the exception reaches the caller.
    """

    def __init__(self, services: PipelineServices):
        self.services = services
        query_generator = services.query_generator or services.generator
        self.rewriter = QueryRewriter(query_generator)
        self.expander = QueryExpander(query_generator)
        self.retriever = Retriever(services.embedder, services.search_backend, match_count=services.match_count)
        self.extractor = CaseFactExtractor(query_generator)
        self.responder = StagedResponseGenerator(services.generator)

    async def rewrite(self, state: PipelineState) -> dict:
        """Node 1: make the question standalone using the history."""
        standalone = await self.rewriter.rewrite(state["question"], state.get("history") or [])
        return {"standalone_question": standalone}

    async def expand(self, state: PipelineState) -> dict:
        """Node 2: append legal search terms."""
        standalone = state["standalone_question"]
        keywords = await self.expander.expand(standalone)
        return {"keywords": keywords, "search_query": combine_search_query(standalone, keywords)}

    async def retrieve(self, state: PipelineState) -> dict:
        """Node 3: hybrid search and context assembly."""
        start_time = time.time()
        chunks = await self.retriever.retrieve(state["search_query"])
        logger.info("Retrieved %s chunks in %.1fs", len(chunks), time.time() - start_time)
        return {"chunks": chunks, "context_text": build_context(chunks)}

    async def extract(self, state: PipelineState) -> dict:
        """Node 4: re-derive the intake record from the full transcript, then pick the stage."""
        transcript = with_current_question(state.get("history") or [], state["question"])
        facts = await self.extractor.extract(transcript)
        stage = select_stage(facts)
        if stage == ASSESSMENT:
            facts = facts.model_copy(update={"merits_assessed": True})
        return {"case_facts": facts, "missing_fields": missing_fields(facts), "stage": stage}

    async def persist(self, state: PipelineState) -> dict:
        """Node 5: create or merge-update the case record."""
        store = self.services.case_store
        if store is None:
            return {"case_id": state.get("case_id"), "stored_facts": state["case_facts"]}
        case_id, stored = await run_stage(
            "persist", run_blocking(persist_case, store, state.get("case_id"), state["case_facts"])
        )
        return {"case_id": case_id, "stored_facts": stored}

    async def _respond(self, state: PipelineState, stage: str) -> dict:
        response = await self.responder.respond(
            stage,
            state["question"],
            state.get("history") or [],
            state["case_facts"],
            state.get("context_text", ""),
        )
        return {"reply": response.reply, "legal_reasoning": response.legal_reasoning}

    async def respond_intake(self, state: PipelineState) -> dict:
        """Node 6a: ask for the next missing fact."""
        return await self._respond(state, INTAKE)

    async def respond_assessment(self, state: PipelineState) -> dict:
        """Node 6b: assess merits and propose a demand letter."""
        return await self._respond(state, ASSESSMENT)
