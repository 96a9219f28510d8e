"""One-shot counter endpoints — increment and query without a live connection."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from livecounter.application.actors.counter_actor import CounterActor
from livecounter.domain.errors import StorageUnavailableError
from livecounter.infrastructure.api.dependencies import get_counter_actor

router = APIRouter(tags=["counter"])

STORAGE_UNAVAILABLE = "Counter storage unavailable"


@router.api_route("/increment", methods=["GET", "POST"])
async def increment(actor: CounterActor = Depends(get_counter_actor)):
    """Add one to the counter and push the new value to every subscriber."""
    try:
        count = await actor.increment_and_broadcast()
    except StorageUnavailableError:
        raise HTTPException(status_code=503, detail=STORAGE_UNAVAILABLE)
    return {"count": count}


@router.api_route("/count", methods=["GET", "POST"])
async def get_count(actor: CounterActor = Depends(get_counter_actor)):
    """Current persisted value; nothing is broadcast."""
    try:
        count = await actor.get_value()
    except StorageUnavailableError:
        raise HTTPException(status_code=503, detail=STORAGE_UNAVAILABLE)
    return {"count": count}
