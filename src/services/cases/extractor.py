"""
Case Fact Extractor
Uses the LLM in structured-output mode to pull the intake fields out of the conversation
"""

from src.config.logging_config import setup_logger
from src.config.prompt_templates import EXTRACTION_PROMPT
from src.services.protocols import TextGenerator
from src.utils.chat_helpers import format_transcript
from src.utils.stages import run_stage

from .models import CaseFacts, missing_fields, normalize_case_facts

logger = setup_logger(__name__)


class CaseFactExtractor:
    """
    Re-derives the full intake record from the whole transcript on every turn.

    The record is not diffed against earlier turns; fields the transcript does not
    establish come back as None.
    """

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def extract(self, history: list[dict[str, str]]) -> CaseFacts:
        """
        Args:
            history: All turns including the user's latest message.

        Returns:
            CaseFacts with every field present (None where unknown).

        Raises:
            StructuredOutputError: the LLM output did not parse as CaseFacts.
        """
        prompt = EXTRACTION_PROMPT.format(transcript=format_transcript(history))
        facts = await run_stage("extract", self.generator.generate_structured(prompt, CaseFacts, stage="extract"))
        # merits_assessed is owned by the pipeline, not the transcript
        facts = normalize_case_facts(facts.model_copy(update={"merits_assessed": False}))
        logger.info("Extracted case facts; missing: %s", missing_fields(facts) or "none")
        return facts
