"""
LLM Generator
Free-form and schema-constrained generation over LangChain ChatOpenAI
(automatic LangSmith tracing when enabled in the environment)
"""

import os
import time

from langchain_core.exceptions import OutputParserException
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from openai import OpenAIError
from pydantic import ValidationError

from src.config.logging_config import setup_logger
from src.config.prompt_templates import SYSTEM_PROMPT
from src.config.settings import config
from src.services.errors import PipelineError, StructuredOutputError

logger = setup_logger(__name__)


class LLMGenerator:
    """Generate text or structured output. Model via OPENAI_CHAT_MODEL (gpt-4o or gpt-4o-mini)."""

    def __init__(self, model: str | None = None, temperature: float | None = None, max_tokens: int = 1500):
        """Initialize LangChain ChatOpenAI. Uses config.OPENAI_CHAT_MODEL if model not passed."""
        model = model or config.OPENAI_CHAT_MODEL
        self.llm = ChatOpenAI(
            model=model,
            temperature=config.CHAT_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens,
            api_key=os.getenv("OPENAI_API_KEY"),
        )
        self.model = model

    @staticmethod
    def _messages(prompt: str) -> list:
        return [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)]

    async def generate_text(self, prompt: str, stage: str = "generate") -> str:
        """Free-form completion. Provider errors are raised as PipelineError for ``stage``."""
        logger.info("Calling LLM (%s, text)...", stage)
        api_start = time.time()
        try:
            response = await self.llm.ainvoke(self._messages(prompt))
        except OpenAIError as e:
            logger.error("LLM %s call failed: %s", stage, e)
            raise PipelineError(stage, str(e)) from e
        logger.info("LLM %s done in %.1fs", stage, time.time() - api_start)
        return response.content or ""

    async def generate_structured(self, prompt: str, schema, stage: str = "generate"):
        """
        Schema-constrained completion parsed into ``schema`` (a pydantic model class).

        Malformed output raises StructuredOutputError; it is never repaired or retried.
        """
        logger.info("Calling LLM (%s, structured %s)...", stage, schema.__name__)
        structured_llm = self.llm.with_structured_output(schema)
        api_start = time.time()
        try:
            result = await structured_llm.ainvoke(self._messages(prompt))
        except (OutputParserException, ValidationError) as e:
            logger.error("LLM %s output did not match %s: %s", stage, schema.__name__, e)
            raise StructuredOutputError(stage, f"malformed {schema.__name__}: {e}") from e
        except OpenAIError as e:
            logger.error("LLM %s call failed: %s", stage, e)
            raise PipelineError(stage, str(e)) from e

        if not isinstance(result, schema):
            raise StructuredOutputError(stage, f"expected {schema.__name__}, got {type(result).__name__}")
        logger.info("LLM %s done in %.1fs", stage, time.time() - api_start)
        return result
