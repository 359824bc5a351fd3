"""
Query preparation: turn a follow-up into a standalone question, then enrich it with
legal search terms before hybrid search.
"""

from src.config.logging_config import setup_logger
from src.config.prompt_templates import EXPANSION_PROMPT, REWRITE_PROMPT
from src.services.errors import PipelineError
from src.services.protocols import TextGenerator
from src.utils.chat_helpers import format_transcript
from src.utils.stages import run_stage

logger = setup_logger(__name__)


class QueryRewriter:
    """Resolve references like "he" or "that" against the conversation history."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def rewrite(self, question: str, history: list[dict[str, str]]) -> str:
        """
        Return a standalone version of ``question``.

        With no history there is nothing to resolve, so the question is returned as-is
        without calling the LLM. A blank rewrite also falls back to the question.
        """
        if not history:
            return question

        prompt = REWRITE_PROMPT.format(transcript=format_transcript(history), question=question)
        rewritten = (await run_stage("rewrite", self.generator.generate_text(prompt, stage="rewrite"))).strip()
        if not rewritten:
            logger.warning("[REWRITE] empty rewrite; searching on the original question")
            return question
        logger.info("[REWRITE] %s → %s", question, rewritten)
        return rewritten


class QueryExpander:
    """Ask the LLM for Act names, sections and concepts the user's wording may lack."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def expand(self, question: str) -> str:
        """Return raw keyword text (3-5 terms). Not parsed; it is appended as-is."""
        prompt = EXPANSION_PROMPT.format(question=question)
        keywords = (await run_stage("expand", self.generator.generate_text(prompt, stage="expand"))).strip()
        if not keywords:
            raise PipelineError("expand", "empty keyword expansion")
        logger.info("[EXPAND] keywords: %s", keywords)
        return keywords


def combine_search_query(standalone_question: str, keywords: str) -> str:
    """The text sent to both search channels: question, one space, keywords."""
    return f"{standalone_question} {keywords}"
