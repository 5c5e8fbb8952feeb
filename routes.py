"""API route aggregation plus reference and health endpoints."""
from fastapi import APIRouter

from log import get_logger
from models import STORY_LANGUAGES, READING_LEVEL_LABELS
from cache import cache_stats
from llm import LLM_PROVIDER, LLM_BASE_URL, LLM_MODEL, check_llm_connectivity

from story_routes import router as story_router
from reader_routes import router as reader_router
from deck_routes import router as deck_router

logger = get_logger("lingotales.routes")

router = APIRouter()
router.include_router(story_router)
router.include_router(reader_router)
router.include_router(deck_router)


@router.get("/api/languages", tags=["Reference"], summary="List story languages")
async def get_languages():
    return STORY_LANGUAGES


@router.get("/api/reading-levels", tags=["Reference"], summary="List CEFR reading levels")
async def get_reading_levels():
    return [{"value": level.value, "label": label} for level, label in READING_LEVEL_LABELS.items()]


@router.get("/api/health", tags=["System"], summary="Health check with stats")
async def health_check():
    from backend import get_latency_stats

    llm_ok = await check_llm_connectivity()
    if not llm_ok:
        logger.warning("LLM unreachable", extra={"provider": LLM_PROVIDER, "model": LLM_MODEL})
    return {
        "status": "ok" if llm_ok else "degraded",
        "llm": {"reachable": llm_ok, "provider": LLM_PROVIDER, "url": LLM_BASE_URL, "model": LLM_MODEL},
        "cache": cache_stats(),
        "latency": get_latency_stats(),
    }
