"""
Staged Response Generator

Intake: keep asking for the next missing fact, no legal conclusion.
Assessment: judge the merits against the retrieved law and offer a demand letter.
The stage is re-derived from the freshly extracted record on every turn.
"""

from typing import Literal

from src.config.logging_config import setup_logger
from src.config.prompt_templates import ASSESSMENT_PROMPT, INTAKE_PROMPT
from src.services.protocols import TextGenerator
from src.utils.chat_helpers import format_transcript
from src.utils.stages import run_stage

from .models import FIELD_LABELS, REQUIRED_FIELDS, CaseFacts, LegalResponse, missing_fields

logger = setup_logger(__name__)

Stage = Literal["intake", "assessment"]

INTAKE: Stage = "intake"
ASSESSMENT: Stage = "assessment"


def select_stage(facts: CaseFacts) -> Stage:
    """Assessment once every required field is known, otherwise intake."""
    return ASSESSMENT if not missing_fields(facts) else INTAKE


def _format_known_facts(facts: CaseFacts) -> str:
    lines = []
    for name in REQUIRED_FIELDS:
        value = getattr(facts, name)
        lines.append(f"- {FIELD_LABELS[name]}: {value if value is not None else 'unknown'}")
    return "\n".join(lines)


class StagedResponseGenerator:
    """Builds the stage prompt and returns the structured two-field reply."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    def build_prompt(
        self,
        stage: Stage,
        question: str,
        history: list[dict[str, str]],
        facts: CaseFacts,
        context_text: str,
    ) -> str:
        transcript = format_transcript(history) or "(no earlier messages)"
        context = context_text or "(no relevant material found)"
        if stage == ASSESSMENT:
            return ASSESSMENT_PROMPT.format(
                known_facts=_format_known_facts(facts),
                context=context,
                transcript=transcript,
                question=question,
            )

        missing = missing_fields(facts)
        return INTAKE_PROMPT.format(
            known_facts=_format_known_facts(facts),
            missing_labels=", ".join(FIELD_LABELS[name] for name in missing) or "nothing",
            next_label=FIELD_LABELS[missing[0]] if missing else "anything else the client wants to add",
            context=context,
            transcript=transcript,
            question=question,
        )

    async def respond(
        self,
        stage: Stage,
        question: str,
        history: list[dict[str, str]],
        facts: CaseFacts,
        context_text: str,
    ) -> LegalResponse:
        """
        Raises:
            StructuredOutputError: the LLM output did not parse as LegalResponse.
        """
        prompt = self.build_prompt(stage, question, history, facts, context_text)
        logger.info("Generating %s response", stage)
        return await run_stage("generate", self.generator.generate_structured(prompt, LegalResponse, stage="generate"))
