"""Pydantic models for request/response validation."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Category = Literal["observation", "interpretation", "actionable"]
Role = Literal["reader", "editor", "admin"]


# ── Uploads / profiles ────────────────────────────────────────────────────────

class UploadResponse(BaseModel):
    file_id: str
    file_name: str
    file_path: str
    file_size: int
    mime_type: str


class ProfileResponse(BaseModel):
    status: Literal["ready", "no_data"]
    file_id: Optional[str] = None
    file_name: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None
    summary: List[str] = []


# ── Sessions / messages ───────────────────────────────────────────────────────

class SessionCreate(BaseModel):
    file_id: Optional[str] = None
    file_name: Optional[str] = None


class SessionRename(BaseModel):
    title: str


class SessionResponse(BaseModel):
    id: str
    title: str
    file_id: Optional[str]
    file_name: Optional[str] = None
    message_count: int = 0
    created_at: str


class MessageCreate(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    observation: Optional[str] = None
    interpretation: Optional[str] = None
    actionable_conclusion: Optional[str] = None
    chart: Optional[Dict[str, Any]] = None


class MessageResponse(BaseModel):
    id: str
    session_id: str
    role: str
    content: str
    observation: Optional[str] = None
    interpretation: Optional[str] = None
    actionable_conclusion: Optional[str] = None
    chart: Optional[Dict[str, Any]] = None
    created_at: str


# ── Charts / formatted replies ────────────────────────────────────────────────

class ChartPoint(BaseModel):
    name: str
    value: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, v: Any) -> str:
        return str(v)


class ChartSpec(BaseModel):
    chartType: Literal["bar", "line", "pie", "scatter"]
    title: str = ""
    data: List[ChartPoint]
    xLabel: Optional[str] = None
    yLabel: Optional[str] = None

    @model_validator(mode="after")
    def _points_match_type(self) -> "ChartSpec":
        for point in self.data:
            if self.chartType == "scatter":
                if point.x is None or point.y is None:
                    raise ValueError("scatter points need x and y")
            elif point.value is None:
                raise ValueError(f"{self.chartType} points need a value")
        return self


class Metric(BaseModel):
    label: str
    value: str


class BreakdownRow(BaseModel):
    label: str
    value: str
    percentage: Optional[str] = None


class FormattedResponse(BaseModel):
    structured: bool
    raw: str
    title: Optional[str] = None
    metric: Optional[Metric] = None
    breakdown_label: Optional[str] = None
    breakdown: List[BreakdownRow] = []
    insights: List[str] = []
    recommendations: List[str] = []
    unparsed: List[str] = []


class FormatRequest(BaseModel):
    content: str


# ── Question answering ────────────────────────────────────────────────────────

class RouteRequest(BaseModel):
    question: str


class RouteResponse(BaseModel):
    question: str
    category: Category


class AnalyzeRequest(BaseModel):
    question: str
    file_id: Optional[str] = None
    session_id: Optional[str] = None
    category: Optional[Category] = None


class AnalysisAnswer(BaseModel):
    """Fixed-schema object the model is asked to return."""

    observation: str = ""
    interpretation: str = ""
    actionable_conclusion: str = ""
    chart: Optional[ChartSpec] = None


class AnalyzeResponse(BaseModel):
    content: str
    observation: str
    interpretation: str
    actionable_conclusion: str
    category: Category
    chart: Optional[ChartSpec] = None
    source: Literal["model", "qa_override"]


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatTurn]
    csv_content: Optional[str] = None
    is_first_message: bool = False


class DatasetAnalysis(BaseModel):
    summary: List[str]
    profile: Dict[str, Any]


class ChatResponse(BaseModel):
    content: str
    formatted: FormattedResponse
    chart: Optional[ChartSpec] = None
    analysis: Optional[DatasetAnalysis] = None


# ── Q&A overrides ─────────────────────────────────────────────────────────────

class QAPairIn(BaseModel):
    question: str
    keywords: List[str]
    is_active: bool = True
    observation_content: Optional[str] = None
    interpretation_content: Optional[str] = None
    actionable_content: Optional[str] = None


class QAPairResponse(QAPairIn):
    id: str
    created_at: str


# ── Team ──────────────────────────────────────────────────────────────────────

class InvitationCreate(BaseModel):
    email: str
    role: Role
    message: Optional[str] = None


class RoleUpdate(BaseModel):
    new_role: Role = Field(alias="newRole")

    model_config = {"populate_by_name": True}


class TeamListResponse(BaseModel):
    members: List[Dict[str, Any]]
    invitations: List[Dict[str, Any]]
