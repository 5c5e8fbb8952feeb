"""Reading-aid API routes: translation, word info and segmentation."""
from fastapi import APIRouter, Depends, HTTPException

from log import get_logger
from models import TranslateRequest, WordInfoRequest, WordInfo, SegmentRequest
from auth import enforce_rate_limit, require_password
from cache import cache_key, cache_get, cache_put
from llm import LLMError, RateLimitError, translate_text
from lookup import LookupFailed, resolve_word_info
from tokenizer import SegmentMode, normalize_word, segment, segment_into_sentences

logger = get_logger("lingotales.reader_routes")

router = APIRouter()

MAX_INPUT_LEN = 2000
MAX_SEGMENT_LEN = 20000


@router.post("/api/translate", tags=["Reading"], summary="Translate a sentence or title",
             dependencies=[Depends(require_password), Depends(enforce_rate_limit)])
async def translate(req: TranslateRequest):
    sentence = req.sentence.strip()
    if not sentence:
        raise HTTPException(400, "Sentence cannot be empty")
    if len(sentence) > MAX_INPUT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")

    ck = cache_key(sentence, req.targetLanguage)
    if not req.fresh:
        cached = cache_get(ck)
        if cached is not None:
            return {"translation": cached}

    try:
        translation = await translate_text(sentence, req.targetLanguage)
    except RateLimitError as e:
        raise HTTPException(429, str(e))
    except LLMError:
        logger.exception("Translation failed", extra={"endpoint": "/api/translate"})
        raise HTTPException(502, "Translation failed")

    cache_put(ck, translation)
    return {"translation": translation}


@router.post("/api/word-info", tags=["Reading"], summary="Look up a clicked word",
             response_model=WordInfo,
             dependencies=[Depends(require_password), Depends(enforce_rate_limit)])
async def word_info(req: WordInfoRequest):
    if not normalize_word(req.word):
        raise HTTPException(400, "Word cannot be empty")
    if len(req.word) > MAX_INPUT_LEN or len(req.context) > MAX_INPUT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")
    try:
        return await resolve_word_info(req.word, req.context, req.language)
    except LookupFailed:
        logger.warning("Word lookup failed", extra={"endpoint": "/api/word-info"}, exc_info=True)
        raise HTTPException(502, "Failed to get word information")


@router.post("/api/segment", tags=["Reading"], summary="Split text into sentences and clickable tokens")
async def segment_text(req: SegmentRequest):
    if len(req.text) > MAX_SEGMENT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_SEGMENT_LEN} characters)")
    try:
        mode = SegmentMode(req.mode)
    except ValueError:
        raise HTTPException(400, "Unknown segmentation mode")
    return {
        "mode": mode.value,
        "sentences": [
            {"text": s, "tokens": [t.to_dict() for t in segment(s, mode)]}
            for s in segment_into_sentences(req.text)
        ],
    }
