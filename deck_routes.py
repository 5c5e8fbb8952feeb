"""Deck and vocabulary API routes."""
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException

from log import get_logger
from models import DeckCreate, Deck, VocabCreate, VocabUpdate, VocabEntry
from auth import require_password
import db

logger = get_logger("lingotales.deck_routes")

router = APIRouter()


@router.post("/api/decks", tags=["Decks"], summary="Create a deck", response_model=Deck,
             dependencies=[Depends(require_password)])
async def create_deck(req: DeckCreate):
    return db.create_deck(req.name.strip(), req.description)


@router.get("/api/decks", tags=["Decks"], summary="List decks with their vocabulary", response_model=List[Deck])
async def list_decks():
    return db.list_decks()


@router.delete("/api/decks/{deck_id}", tags=["Decks"], summary="Delete a deck and its vocabulary",
               dependencies=[Depends(require_password)])
async def delete_deck(deck_id: int):
    if not db.delete_deck(deck_id):
        raise HTTPException(404, "Deck not found")
    logger.info("Deck deleted", extra={"component": "decks", "detail": deck_id})
    return {"ok": True}


@router.post("/api/vocabulary", tags=["Vocabulary"], summary="Add a word to a deck", response_model=VocabEntry,
             dependencies=[Depends(require_password)])
async def create_vocab(req: VocabCreate):
    entry = db.create_vocab_entry(req.word.strip(), req.translation.strip(), req.partOfSpeech,
                                  req.context, req.deckId)
    if entry is None:
        raise HTTPException(404, "Deck not found")
    return entry


@router.get("/api/vocabulary", tags=["Vocabulary"], summary="List vocabulary entries",
            response_model=List[VocabEntry])
async def list_vocab(deckId: Optional[int] = None):
    return db.list_vocabulary(deckId)


@router.put("/api/vocabulary/{entry_id}", tags=["Vocabulary"], summary="Edit a vocabulary entry",
            response_model=VocabEntry, dependencies=[Depends(require_password)])
async def update_vocab(entry_id: int, req: VocabUpdate):
    entry = db.update_vocab_entry(entry_id, req.model_dump(exclude_unset=True))
    if entry is None:
        raise HTTPException(404, "Vocabulary entry not found")
    return entry


@router.delete("/api/vocabulary/{entry_id}", tags=["Vocabulary"], summary="Delete a vocabulary entry",
               dependencies=[Depends(require_password)])
async def delete_vocab(entry_id: int):
    if not db.delete_vocab_entry(entry_id):
        raise HTTPException(404, "Vocabulary entry not found")
    return {"ok": True}
