"""
Write path shared by every ledger collection.

Each mutation derives ``month`` from ``date``, checks the actor may manage
that month, and only then touches the store.
"""
import asyncio
import logging
from typing import Any, Dict

from pydantic import BaseModel

from mealbook.core.errors import MealbookError, NotFoundError
from mealbook.core.permissions import ensure_can_manage_month
from mealbook.models.ledger import MealBatch
from mealbook.models.user import UserInDB
from mealbook.repositories.base import LedgerRepository
from mealbook.repositories.meal_repo import MealRepository
from mealbook.schemas.ledger import MealBatchResult
from mealbook.utils.months import month_of

logger = logging.getLogger(__name__)

# Optional fields a client may clear by sending null.
CLEARABLE_FIELDS = {"note"}


class LedgerService:
    def __init__(self, repo: LedgerRepository, actor: UserInDB):
        self.repo = repo
        self.actor = actor

    async def create(self, payload: BaseModel, **extra: Any):
        fields = payload.model_dump()
        fields.update(extra)
        fields["month"] = month_of(fields["date"])
        ensure_can_manage_month(self.actor, fields["month"])

        row = await self.repo.insert_row(fields)
        logger.info("%s %s created for %s by %s", self.repo.label, row.id, row.month, self.actor.id)
        return row

    async def update(self, payload: BaseModel):
        updates: Dict[str, Any] = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True, exclude={"id"}).items()
            if value is not None or key in CLEARABLE_FIELDS
        }

        existing = await self.repo.get_row(payload.id)
        if existing is None:
            raise NotFoundError(f"{self.repo.label} not found")

        # The actor must own both the month the row leaves and the one it lands in.
        ensure_can_manage_month(self.actor, existing.month)
        new_month = month_of(updates["date"]) if "date" in updates else existing.month
        if new_month != existing.month:
            ensure_can_manage_month(self.actor, new_month)
        updates["month"] = new_month

        row = await self.repo.update_row(payload.id, updates)
        if row is None:
            raise NotFoundError(f"{self.repo.label} not found")
        return row

    async def delete(self, row_id: str) -> None:
        existing = await self.repo.get_row(row_id)
        if existing is None:
            raise NotFoundError(f"{self.repo.label} not found")

        ensure_can_manage_month(self.actor, existing.month)
        if not await self.repo.delete_row(row_id):
            raise NotFoundError(f"{self.repo.label} not found")
        logger.info("%s %s deleted by %s", self.repo.label, row_id, self.actor.id)


async def apply_meal_batch(repo: MealRepository, actor: UserInDB, batch: MealBatch) -> MealBatchResult:
    """Upsert one day's meal counts; each member's entry is written independently."""
    month = month_of(batch.date)
    ensure_can_manage_month(actor, month)

    async def apply(entry) -> bool:
        if entry.count > 0:
            await repo.upsert_meal(batch.date, entry.member_id, entry.count, month)
            return True
        await repo.remove_meal(batch.date, entry.member_id)
        return False

    results = await asyncio.gather(
        *(apply(entry) for entry in batch.meals),
        return_exceptions=True
    )

    failures = [r for r in results if isinstance(r, Exception)]
    if failures:
        logger.error(
            "%d of %d meal entries failed for %s",
            len(failures), len(results), batch.date.date(),
            exc_info=failures[0]
        )
        raise MealbookError(
            f"{len(failures)} of {len(results)} meal entries could not be saved"
        ) from failures[0]

    upserted = sum(1 for r in results if r is True)
    return MealBatchResult(
        date=batch.date,
        month=month,
        upserted=upserted,
        removed=len(results) - upserted
    )
