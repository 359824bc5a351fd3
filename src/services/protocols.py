"""
Service Protocols (Interfaces)

Defines the contracts for the external collaborators of the chat pipeline so they can
be mocked in tests and swapped in production without coupling to concrete
implementations.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

SchemaT = TypeVar("SchemaT", bound=BaseModel)


# ---------------------------------------------------------------------------
# Embedding
# ---------------------------------------------------------------------------
@runtime_checkable
class EmbeddingService(Protocol):
    """Contract for embedding generation.

    Must use the same model that embedded the indexed corpus.
    """

    def embed_query(self, query_text: str) -> list[float]:
        """Generate an embedding vector for a single query string."""
        ...


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------
@runtime_checkable
class TextGenerator(Protocol):
    """Contract for the hosted LLM, in free-form and schema-constrained modes."""

    async def generate_text(self, prompt: str, stage: str = "generate") -> str:
        """Return free-form text for the prompt."""
        ...

    async def generate_structured(self, prompt: str, schema: type[SchemaT], stage: str = "generate") -> SchemaT:
        """Return the prompt's answer parsed into ``schema``.

        Raises StructuredOutputError when the output does not parse.
        """
        ...


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------
@runtime_checkable
class SearchBackend(Protocol):
    """Contract for the hybrid (lexical + vector, RRF-fused) search procedure."""

    async def hybrid_search(
        self,
        query_text: str,
        query_embedding: list[float],
        match_count: int,
        full_text_weight: float,
        semantic_weight: float,
        rrf_k: int,
    ) -> list[dict]:
        """Return ranked ``{id, content}`` rows, most relevant first.

        Raises SearchBackendError when the backend reports an error.
        """
        ...


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
@runtime_checkable
class CaseStore(Protocol):
    """Contract for the case table. Last writer wins on concurrent updates."""

    def insert_case(self, row: dict) -> str:
        """Insert a new case row and return its allocated identifier."""
        ...

    def get_case(self, case_id: str) -> dict | None:
        """Return the stored row for ``case_id``, or None if there is none."""
        ...

    def update_case(self, case_id: str, row: dict) -> None:
        """Overwrite the given columns of an existing case row."""
        ...

    def list_cases(self) -> list[dict]:
        """Return all case rows, most recently updated first."""
        ...
