"""Daily completion API controller."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from models.base import utc_today
from models.user import User
from sacredsix.core.dependencies import get_current_user, validate_token
from sacredsix.database import get_store
from sacredsix.domains.completion.aggregator import CompletionAggregator
from sacredsix.schemas.base import ResponseSchema
from sacredsix.schemas.completion import (
    CompletionStatsResponse,
    DailyCompletionResponse,
    DailyCompletionUpdate,
)
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/daily-completion",
    tags=["daily-completion"],
    dependencies=[Depends(validate_token)],
)


@router.post("/update", response_model=ResponseSchema)
async def update_daily_completion(
    update: DailyCompletionUpdate | None = None,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Record the current today-selection for the given date (default: today)."""
    day = update.date if update and update.date else utc_today()
    record = await CompletionAggregator(store).record_today(current_user.id, day)

    return ResponseSchema(
        status="success",
        message="Daily completion updated successfully",
        data=DailyCompletionResponse.model_validate(record).model_dump(mode="json"),
    )


@router.get("/stats", response_model=ResponseSchema)
async def get_completion_stats(
    since: date | None = Query(None, description="Only count days on or after this date"),
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    stats = await CompletionAggregator(store).get_stats(current_user.id, since=since)

    return ResponseSchema(
        status="success",
        message="Completion statistics retrieved successfully",
        data=CompletionStatsResponse.model_validate(stats).model_dump(mode="json"),
    )
