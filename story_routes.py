"""Story generation and saved-story API routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from log import get_logger
from models import StoryRequest, StoryResponse, FormSuggestion, StoryCreate, Story
from auth import enforce_rate_limit, require_password
from llm import LLMError, RateLimitError, QuotaExceededError, generate_story, generate_form_data
import db

logger = get_logger("lingotales.story_routes")

router = APIRouter()


@router.post("/api/generate", tags=["Stories"], summary="Generate a story with the LLM",
             response_model=StoryResponse,
             dependencies=[Depends(require_password), Depends(enforce_rate_limit)])
async def generate(req: StoryRequest):
    try:
        return await generate_story(req)
    except RateLimitError as e:
        raise HTTPException(429, str(e))
    except QuotaExceededError as e:
        raise HTTPException(502, str(e))
    except LLMError:
        logger.exception("Error generating story", extra={"endpoint": "/api/generate"})
        raise HTTPException(502, "Failed to generate story")


@router.post("/api/generate-form", tags=["Stories"], summary="Suggest story form defaults",
             response_model=FormSuggestion,
             dependencies=[Depends(require_password), Depends(enforce_rate_limit)])
async def generate_form():
    try:
        return await generate_form_data()
    except RateLimitError as e:
        raise HTTPException(429, str(e))
    except LLMError:
        logger.exception("Error generating form data", extra={"endpoint": "/api/generate-form"})
        raise HTTPException(502, "Failed to generate story setup")


@router.post("/api/stories", tags=["Stories"], summary="Save a story", response_model=Story,
             dependencies=[Depends(require_password)])
async def save_story(req: StoryCreate):
    story = db.create_story(req.title, req.content, req.readingLevel.value, req.wordCount)
    logger.info("Story saved", extra={"component": "stories", "count": 1})
    return story


@router.get("/api/stories", tags=["Stories"], summary="List saved stories, newest first",
            response_model=List[Story])
async def list_stories():
    return db.list_stories()


@router.get("/api/stories/{story_id}", tags=["Stories"], summary="Get a saved story", response_model=Story)
async def get_story(story_id: int):
    story = db.get_story(story_id)
    if not story:
        raise HTTPException(404, "Story not found")
    return story
