"""Claude-powered extraction of decisions and action items from a transcript."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable

from anthropic import Anthropic
from anthropic.types import TextBlock

from meeting_governance.config import settings
from meeting_governance.extraction.models import Action, Decision, ExtractionResult

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str], str]

_JSON_BLOCK = re.compile(r"```json\s*(.*?)```", re.DOTALL)

EXTRACTION_PROMPT = """You are an assistant that extracts the important outcomes of a meeting.

## Project
{project_context}

## Transcript
{transcript}

## Instructions
From the transcript above, extract the following and return it as JSON:

1. **decisions**: things the meeting agreed on (agreements, policy or design choices)
   - content: what was decided
   - context: the background or reasoning behind the decision

2. **actions**: tasks or action items agreed in the meeting
   - task: what needs to be done
   - assignee: who is responsible
   - deadline: when it is due (YYYY/MM/DD, MM/DD, "next week", "by end of this week", ...)

## Output format
```json
{{
  "decisions": [
    {{ "content": "what was decided", "context": "background" }}
  ],
  "actions": [
    {{ "task": "task description", "assignee": "owner", "deadline": "deadline" }}
  ]
}}
```

Return empty arrays when there are no decisions or actions.
Do not guess or fill in gaps: only extract what the transcript states explicitly."""


def build_extraction_prompt(transcript: str, project_context: str) -> str:
    """Render the extraction prompt for one transcript."""
    return EXTRACTION_PROMPT.format(project_context=project_context, transcript=transcript)


def parse_extraction_result(model_output: str | None) -> ExtractionResult:
    """Parse model output into decisions and actions.

    A fenced ``json`` block is preferred; otherwise the whole trimmed text is
    parsed. Never raises: failures come back as an empty result with
    ``parse_error`` set.
    """
    if not model_output or not model_output.strip():
        return ExtractionResult(parse_error="Empty output")

    match = _JSON_BLOCK.search(model_output)
    payload = match.group(1).strip() if match else model_output.strip()

    try:
        parsed = json.loads(payload)
    except (ValueError, RecursionError) as exc:
        return ExtractionResult(parse_error=str(exc))

    if not isinstance(parsed, dict):
        return ExtractionResult(parse_error=f"Expected a JSON object, got {type(parsed).__name__}")

    decisions = parsed.get("decisions")
    actions = parsed.get("actions")
    if not isinstance(decisions, list):
        decisions = []
    if not isinstance(actions, list):
        actions = []

    return ExtractionResult(
        decisions=[Decision.from_dict(d) for d in decisions if isinstance(d, dict)],
        actions=[Action.from_dict(a) for a in actions if isinstance(a, dict)],
    )


def generate_text(prompt: str) -> str:
    """Send a single-turn prompt to Claude and return the text of the reply."""
    client = Anthropic(api_key=settings.anthropic_api_key)
    response = client.messages.create(
        model=settings.llm_model,
        max_tokens=settings.extraction_max_tokens,
        messages=[{"role": "user", "content": prompt}],
    )

    block = response.content[0]
    if not isinstance(block, TextBlock):
        raise ValueError(f"Expected TextBlock from Claude, got {type(block).__name__}")
    return block.text


def extract_decisions_and_actions(
    transcript: str,
    project_context: str,
    meeting_date: str,
    generate: GenerateFn | None = None,
) -> ExtractionResult:
    """Extract decisions and actions from a transcript.

    Every decision is stamped with ``meeting_date``, overriding whatever date
    the model produced.

    Args:
        transcript: The raw meeting transcript text.
        project_context: Project name or description included in the prompt.
        meeting_date: ``YYYY-MM-DD`` date of the meeting.
        generate: Text-generation function; defaults to Claude.

    Returns:
        The extraction result. On any failure the result is empty and carries
        ``error`` instead of raising.
    """
    if not transcript or not transcript.strip():
        return ExtractionResult()

    generate = generate or generate_text
    try:
        output = generate(build_extraction_prompt(transcript, project_context))
        result = parse_extraction_result(output)
        if result.parse_error:
            logger.warning("Could not parse extraction output: %s", result.parse_error)

        result.decisions = [
            Decision(content=d.content, context=d.context, date=meeting_date)
            for d in result.decisions
        ]
        return result
    except Exception as exc:
        logger.exception("Extraction failed for meeting on %s", meeting_date)
        return ExtractionResult(error=str(exc))
