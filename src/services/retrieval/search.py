"""
Hybrid Retrieval Service
Embeds the search query, calls the database's hybrid_search procedure
(full-text + vector, merged with Reciprocal Rank Fusion) and assembles the
context string handed to the LLM.
"""

import asyncio
import os

from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import AsyncClient, create_async_client

from src.config.logging_config import setup_logger
from src.config.settings import config
from src.services.errors import SearchBackendError
from src.services.protocols import EmbeddingService, SearchBackend
from src.utils.stages import run_blocking, run_stage

logger = setup_logger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"


class SupabaseSearchBackend:
    """
    Calls the ``hybrid_search`` RPC on Supabase.

    The procedure ranks chunks by RRF over ts_rank (lexical) and pgvector
    similarity (semantic); this class only passes parameters and normalises rows.
    """

    def __init__(self, url: str | None = None, key: str | None = None, rpc_name: str | None = None):
        """Initialize lazily; the async client is created on first search.

        Args:
            url: Supabase project URL. Falls back to SUPABASE_URL env var.
            key: Supabase anon/service key. Falls back to SUPABASE_KEY env var.
            rpc_name: Stored procedure name. Falls back to config.HYBRID_SEARCH_RPC.
        """
        self.url = url or os.getenv("SUPABASE_URL")
        self.key = key or os.getenv("SUPABASE_KEY")

        if not self.url or not self.key:
            raise ValueError("Supabase URL and KEY required")

        self.rpc_name = rpc_name or config.HYBRID_SEARCH_RPC
        self.client: AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _get_client(self) -> AsyncClient:
        async with self._client_lock:
            if self.client is None:
                self.client = await create_async_client(self.url, self.key)
        return self.client

    async def hybrid_search(
        self,
        query_text: str,
        query_embedding: list[float],
        match_count: int,
        full_text_weight: float,
        semantic_weight: float,
        rrf_k: int,
    ) -> list[dict]:
        """
        Run the hybrid_search RPC.

        Returns:
            ``[{"id": ..., "content": ...}]`` in rank order (most relevant first).

        Raises:
            SearchBackendError: the database reported an error or was unreachable.
        """
        try:
            client = await self._get_client()
            response = await client.rpc(
                self.rpc_name,
                {
                    "query_text": query_text,
                    "query_embedding": query_embedding,
                    "match_count": match_count,
                    "full_text_weight": full_text_weight,
                    "semantic_weight": semantic_weight,
                    "rrf_k": rrf_k,
                },
            ).execute()
        except (PostgrestAPIError, OSError) as e:
            logger.error("Supabase hybrid_search error: %s", e)
            raise SearchBackendError(str(e)) from e

        return [{"id": row.get("id"), "content": row.get("content") or ""} for row in response.data or []]


class Retriever:
    """
    Embedding + hybrid search for one combined search query.

    Fusion parameters are fixed (lexical 1.0, semantic 2.0, k=50 by default) so ranking
    leans on meaning over exact keyword match; only the result count varies by caller.
    """

    def __init__(
        self,
        embedder: EmbeddingService,
        backend: SearchBackend,
        match_count: int | None = None,
    ):
        self.embedder = embedder
        self.backend = backend
        self.match_count = match_count or config.MATCH_COUNT
        if self.match_count <= 0:
            raise ValueError(f"match_count must be positive, got {self.match_count}")

    async def retrieve(self, search_query: str, match_count: int | None = None) -> list[dict]:
        """Embed ``search_query`` and return the ranked chunks. No partial results on failure."""
        limit = match_count or self.match_count
        if limit <= 0:
            raise ValueError(f"match_count must be positive, got {limit}")

        logger.info("Hybrid search → top %s for: %s", limit, search_query[:200])
        query_embedding = await run_stage("embed", run_blocking(self.embedder.embed_query, search_query))
        chunks = await run_stage(
            "search",
            self.backend.hybrid_search(
                query_text=search_query,
                query_embedding=query_embedding,
                match_count=limit,
                full_text_weight=config.FULL_TEXT_WEIGHT,
                semantic_weight=config.SEMANTIC_WEIGHT,
                rrf_k=config.RRF_K,
            ),
        )
        logger.info("Hybrid search → %s chunks", len(chunks))
        return chunks


def build_context(chunks: list[dict]) -> str:
    """Concatenate chunk contents in rank order, each labelled with its id."""
    return CONTEXT_SEPARATOR.join(f"SOURCE ({chunk['id']}):\n{chunk['content']}" for chunk in chunks)
