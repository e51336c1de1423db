"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import load_settings
from db.client import create_supabase
from routes import analyze, chat, files, qa, sessions, team, upload
from services.llm_client import LLMClient

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("neurika")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared clients at startup and close them at shutdown."""
    app.state.settings = settings
    app.state.supabase = create_supabase(settings)
    app.state.llm_client = LLMClient.from_settings(settings)
    logger.info("Neurika backend started (model=%s)", settings.openai_model)
    yield
    await app.state.llm_client.close()


app = FastAPI(
    title="Neurika Backend",
    description="FastAPI backend for Neurika - dataset profiling and three-section AI analysis",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(upload.router, prefix="/api", tags=["Upload"])
app.include_router(files.router, prefix="/api", tags=["Profiles"])
app.include_router(sessions.router, prefix="/api", tags=["Sessions"])
app.include_router(analyze.router, prefix="/api", tags=["Analysis"])
app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(qa.router, prefix="/api", tags=["Q&A Overrides"])
app.include_router(team.router, prefix="/api", tags=["Team"])


@app.get("/")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Neurika Backend",
        "version": "1.0.0"
    }


@app.get("/health")
def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "configured" if settings.supabase_url else "not configured",
        "model": settings.openai_model,
    }
