"""Question answering over an uploaded dataset."""
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends
from pydantic import ValidationError

from config import Settings
from db.client import get_settings
from models.schemas import AnalysisAnswer, ChartSpec, ChatResponse, ChatTurn, DatasetAnalysis
from services.formatter import extract_chart, format_response
from services.llm_client import LLMClient, get_llm_client
from services.profiler import profile_dataset, summarize
from services.prompts import CATEGORY_HINTS, DATASET_CONTEXT_TEMPLATE, get_prompt_config
from services.tabular import parse_table

logger = logging.getLogger(__name__)

FALLBACK_INTERPRETATION = "See observation for details"
FALLBACK_ACTIONABLE = "Please refine your question for more specific insights"


def parse_answer(content: str) -> AnalysisAnswer:
    """Read the fixed-schema JSON reply.

    A reply that is not a JSON object keeps its first 300 characters as the
    observation. An invalid chart is dropped without losing the sections.
    """
    try:
        payload: Any = json.loads(content)
    except json.JSONDecodeError:
        payload = None

    if not isinstance(payload, dict):
        logger.info("Reply was not a JSON object, using text fallback")
        return AnalysisAnswer(
            observation=content[:300],
            interpretation=FALLBACK_INTERPRETATION,
            actionable_conclusion=FALLBACK_ACTIONABLE,
        )

    chart = None
    if payload.get("chart"):
        try:
            chart = ChartSpec.model_validate(payload["chart"])
        except ValidationError as e:
            logger.info("Dropping invalid chart spec: %s", e.errors()[:1])

    return AnalysisAnswer(
        observation=str(payload.get("observation") or ""),
        interpretation=str(payload.get("interpretation") or ""),
        actionable_conclusion=str(payload.get("actionable_conclusion") or ""),
        chart=chart,
    )


class Analyst:
    """Builds prompts, calls the model and shapes the replies."""

    def __init__(self, llm: LLMClient, settings: Settings):
        self.llm = llm
        self.settings = settings

    async def answer(
        self,
        question: str,
        category: str,
        dataset_name: Optional[str] = None,
        dataset_text: Optional[str] = None,
    ) -> Tuple[str, AnalysisAnswer]:
        """Ask the analyst persona one question.

        Returns:
            Tuple of (raw reply text, parsed answer)
        """
        config = get_prompt_config("analyst")

        user_content = f"Question: {question}"
        if dataset_text:
            excerpt = dataset_text[:self.settings.dataset_context_chars]
            user_content += f"\n\nDataset context ({dataset_name or 'dataset'}):\n{excerpt}"

        messages = [
            {"role": "system", "content": config.system_prompt},
            {"role": "system", "content": CATEGORY_HINTS[category]},
            {"role": "user", "content": user_content},
        ]

        content = await self.llm.chat_completions(
            messages=messages,
            temperature=self.settings.analyze_temperature,
            max_tokens=self.settings.llm_max_tokens,
            json_mode=config.json_mode,
        )

        return content, parse_answer(content)

    async def converse(
        self,
        turns: List[ChatTurn],
        csv_content: Optional[str] = None,
        is_first_message: bool = False,
    ) -> ChatResponse:
        """Continue a conversation with the Eurika persona."""
        config = get_prompt_config("eurika")

        messages: List[Dict[str, str]] = [{"role": "system", "content": config.system_prompt}]
        analysis = None

        if csv_content:
            dataset = parse_table(csv_content, max_rows=self.settings.profile_max_rows)
            if dataset is not None:
                profile = profile_dataset(dataset)
                summary = summarize(profile)
                messages.append({
                    "role": "system",
                    "content": DATASET_CONTEXT_TEMPLATE.format(
                        rows=profile["total_rows"],
                        cols=profile["total_columns"],
                        summary="\n".join(summary),
                        columns=", ".join(profile["columns"]),
                        csv=csv_content,
                    ),
                })
                if is_first_message:
                    analysis = DatasetAnalysis(summary=summary, profile=profile)

        messages.extend({"role": t.role, "content": t.content} for t in turns)

        content = await self.llm.chat_completions(
            messages=messages,
            temperature=self.settings.chat_temperature,
            max_tokens=self.settings.llm_max_tokens,
        )

        return ChatResponse(
            content=content,
            formatted=format_response(content),
            chart=extract_chart(content),
            analysis=analysis,
        )


def get_analyst(
    llm: LLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> Analyst:
    """FastAPI dependency building an Analyst over the shared clients."""
    return Analyst(llm, settings)
