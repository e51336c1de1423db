"""Question answering endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from config import Settings
from db.client import get_settings, get_supabase
from models.schemas import (
    AnalyzeRequest, AnalyzeResponse,
    FormatRequest, FormattedResponse,
    MessageCreate, RouteRequest, RouteResponse,
)
from routes.qa import fetch_active_rules
from routes.sessions import append_message, get_owned_session
from services.analyst import Analyst, get_analyst
from services.auth import CurrentUser, get_current_user
from services.formatter import format_response
from services.qa_lookup import find_override, override_answer
from services.router import classify_question
from services.storage import get_file_row, load_dataset_text

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
    analyst: Analyst = Depends(get_analyst),
):
    """Answer a question about a dataset in three sections.

    Steps:
    1. Route the question to a category (unless the caller sent one)
    2. Save the user message when a session is given
    3. Answer from a matching Q&A override, skipping the model
    4. Otherwise ask the model with the dataset excerpt as context
    5. Save the assistant message
    """
    question = request.question.strip()
    if not question:
        raise HTTPException(status_code=400, detail="Question is required")

    category = request.category or classify_question(question)

    try:
        if request.session_id:
            get_owned_session(supabase, request.session_id, user.id)
            append_message(
                supabase, request.session_id, user.id,
                MessageCreate(role="user", content=question),
            )

        rule = find_override(question, fetch_active_rules(supabase, user.id))

        if rule is not None:
            logger.info("Answering from Q&A override %s", rule.get("id"))
            answer = override_answer(rule)
            response = AnalyzeResponse(
                **answer, category=category, chart=None, source="qa_override"
            )
        else:
            file_name, dataset_text = None, None
            if request.file_id:
                file_row = get_file_row(supabase, request.file_id, user.id)
                if not file_row:
                    raise HTTPException(status_code=404, detail="File not found")
                file_name = file_row.get("file_name")
                dataset_text = load_dataset_text(supabase, settings.storage_bucket, file_row)

            content, parsed = await analyst.answer(
                question, category, dataset_name=file_name, dataset_text=dataset_text
            )
            response = AnalyzeResponse(
                content=content,
                observation=parsed.observation,
                interpretation=parsed.interpretation,
                actionable_conclusion=parsed.actionable_conclusion,
                category=category,
                chart=parsed.chart,
                source="model",
            )

        if request.session_id:
            append_message(
                supabase, request.session_id, user.id,
                MessageCreate(
                    role="assistant",
                    content=response.content,
                    observation=response.observation,
                    interpretation=response.interpretation,
                    actionable_conclusion=response.actionable_conclusion,
                    chart=response.chart.model_dump() if response.chart else None,
                ),
            )

        return response

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Analysis failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")


@router.post("/route", response_model=RouteResponse)
async def route_question(request: RouteRequest):
    """Classify a question without answering it."""
    return RouteResponse(question=request.question, category=classify_question(request.question))


@router.post("/format", response_model=FormattedResponse)
async def format_text(request: FormatRequest):
    """Split a bolded-section reply into its presentational parts."""
    return format_response(request.content)
