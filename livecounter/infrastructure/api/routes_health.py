"""Health check endpoint."""

from fastapi import APIRouter, Depends

from livecounter.adapters.persistence.repositories import SqlCounterStore
from livecounter.application.actors.registry import ActorRegistry
from livecounter.config import settings
from livecounter.domain.errors import StorageUnavailableError
from livecounter.infrastructure.api.dependencies import get_actor_registry, get_health_store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    store: SqlCounterStore = Depends(get_health_store),
    registry: ActorRegistry = Depends(get_actor_registry),
):
    """Check API and database connectivity."""
    try:
        await store.ping()
        db_status = "connected"
    except StorageUnavailableError as e:
        db_status = f"error: {e.__cause__ or e}"

    actor = registry.peek(settings.counter_name)
    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "subscribers": actor.subscriber_count if actor else 0,
        "service": "livecounter",
    }
