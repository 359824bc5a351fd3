"""
Shared test helpers: in-process stand-ins for the embedding provider, LLM,
search procedure and case table. Each records the calls it receives.
"""

from datetime import datetime, timezone

from src.agent.state import PipelineServices
from src.services.cases.models import CaseFacts, LegalResponse

COMPLETE_FACTS = {
    "client_name": "Thandi Mokoena",
    "contact_info": "thandi@example.com",
    "employer_name": "Acme Retail (Pty) Ltd",
    "incident_date": "2024-03-01",
    "incident_description": "Dismissed without notice after a dispute with a manager",
    "disciplinary_hearing_held": "no",
}


def make_case_facts(**overrides: object) -> CaseFacts:
    """CaseFacts with every field unknown unless overridden."""
    return CaseFacts(**overrides)


def make_chunk(chunk_id: str, content: str = "") -> dict:
    """Minimal hybrid_search row."""
    return {"id": chunk_id, "content": content or f"content of {chunk_id}"}


def _resolve(value, prompt):
    if isinstance(value, list):
        value = value.pop(0)
    if isinstance(value, Exception):
        raise value
    if callable(value):
        return value(prompt)
    return value


class FakeGenerator:
    """
    LLM stand-in.

    ``texts`` maps a stage name to the free-form reply (a string, a callable taking
    the prompt, an exception to raise, or a list consumed one item per call).
    ``structured`` does the same for structured calls, keyed by stage.
    """

    def __init__(self, texts: dict | None = None, structured: dict | None = None):
        self.texts = texts or {}
        self.structured = structured or {}
        self.calls: list[dict] = []

    def stages_called(self) -> list[str]:
        return [c["stage"] for c in self.calls]

    def prompt_for(self, stage: str) -> str:
        return next(c["prompt"] for c in self.calls if c["stage"] == stage)

    async def generate_text(self, prompt: str, stage: str = "generate") -> str:
        self.calls.append({"mode": "text", "stage": stage, "prompt": prompt})
        return _resolve(self.texts.get(stage, f"{stage} output"), prompt)

    async def generate_structured(self, prompt: str, schema, stage: str = "generate"):
        self.calls.append({"mode": "structured", "stage": stage, "prompt": prompt, "schema": schema})
        if stage in self.structured:
            return _resolve(self.structured[stage], prompt)
        if schema is CaseFacts:
            return CaseFacts()
        if schema is LegalResponse:
            return LegalResponse(reply="Could you tell me more?", legal_reasoning="Pending.")
        return schema()


class FakeEmbedder:
    def __init__(self, dimensions: int = 8, error: Exception | None = None):
        self.dimensions = dimensions
        self.error = error
        self.queries: list[str] = []

    def embed_query(self, query_text: str) -> list[float]:
        self.queries.append(query_text)
        if self.error:
            raise self.error
        return [0.1] * self.dimensions


class FakeSearchBackend:
    def __init__(self, rows: list[dict] | None = None, error: Exception | None = None):
        self.rows = rows if rows is not None else [make_chunk("doc-1"), make_chunk("doc-2")]
        self.error = error
        self.calls: list[dict] = []

    async def hybrid_search(self, **kwargs) -> list[dict]:
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return list(self.rows)


class InMemoryCaseStore:
    """Case table stand-in; ids are allocated sequentially."""

    def __init__(self):
        self.rows: dict[str, dict] = {}
        self._next_id = 1

    def insert_case(self, row: dict) -> str:
        case_id = f"case-{self._next_id}"
        self._next_id += 1
        now = datetime.now(timezone.utc).isoformat()
        self.rows[case_id] = {"created_at": now, "updated_at": now, **row, "id": case_id}
        return case_id

    def get_case(self, case_id: str) -> dict | None:
        row = self.rows.get(case_id)
        return dict(row) if row else None

    def update_case(self, case_id: str, row: dict) -> None:
        self.rows[case_id].update(row)

    def list_cases(self) -> list[dict]:
        return sorted(self.rows.values(), key=lambda r: r["updated_at"], reverse=True)


def make_services(
    generator: FakeGenerator | None = None,
    embedder: FakeEmbedder | None = None,
    backend: FakeSearchBackend | None = None,
    store: InMemoryCaseStore | None = None,
    match_count: int = 10,
) -> PipelineServices:
    return PipelineServices(
        embedder=embedder or FakeEmbedder(),
        generator=generator or FakeGenerator(),
        search_backend=backend or FakeSearchBackend(),
        case_store=store,
        match_count=match_count,
        ask_match_count=5,
    )
