"""
Embedding Service for search queries
Generates embeddings using OpenAI text-embedding-3-small
"""

import os

from openai import OpenAI, OpenAIError

from src.config.logging_config import setup_logger
from src.config.settings import config
from src.services.errors import PipelineError

logger = setup_logger(__name__)


class QueryEmbedder:
    """
    Generate query embeddings using OpenAI

    The model and dimensions must be the ones used when the labour-law corpus was
    indexed; a vector of the wrong length is rejected instead of being sent to search.
    """

    def __init__(self, api_key: str = None, model: str = None, dimensions: int = None):
        """
        Initialize embedder

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Embedding model to use
            dimensions: Expected vector length
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key required. Set OPENAI_API_KEY env var or pass api_key parameter.")

        self.client = OpenAI(api_key=self.api_key)
        self.model = model or config.EMBEDDING_MODEL
        self.dimensions = dimensions or config.EMBEDDING_DIMENSIONS

    def embed_query(self, query_text: str) -> list[float]:
        """
        Generate embedding for a single query

        Args:
            query_text: Query string

        Returns:
            Embedding vector (``self.dimensions`` floats)
        """
        try:
            response = self.client.embeddings.create(model=self.model, input=[query_text])
        except OpenAIError as e:
            logger.error("Embedding request failed: %s", e)
            raise PipelineError("embed", str(e)) from e

        vector = response.data[0].embedding
        if len(vector) != self.dimensions:
            raise PipelineError(
                "embed",
                f"{self.model} returned {len(vector)} dimensions, index expects {self.dimensions}",
            )
        return vector
