"""
Upload item command service.

Drives one item through begin, complete or fail and folds the transition
into its job. Each command is one unit of work:

1. Read the item and check ownership
2. Plan the move from the observed status
3. Conditional item update (WHERE status = observed); re-plan if it lost
4. Atomic job counter delta
5. Commit

The item update is the exactly-once gate: a retried or racing command finds
the item already moved and is rejected before it reaches the job row.
Transient database conflicts roll the unit back and rerun it with bounded
backoff.

Dependencies: tenacity, upload_tracker.boundary.db.CRUD, upload_tracker.core
System role: Item lifecycle orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from upload_tracker.boundary.db.base import utcnow
from upload_tracker.boundary.db.conflicts import is_transient_conflict
from upload_tracker.boundary.db.CRUD.upload_item_crud import upload_item_crud
from upload_tracker.boundary.db.CRUD.upload_job_crud import upload_job_crud
from upload_tracker.configs import get_settings
from upload_tracker.core.exceptions import AggregationError, ContentionError
from upload_tracker.core.item_state_machine import (
    InvalidTransition,
    ItemAction,
    plan_transition,
)
from upload_tracker.core.results import (
    Rejected,
    RejectionReason,
    TransitionOk,
    TransitionResult,
)
from upload_tracker.core.statuses import ItemStatus

logger = logging.getLogger(__name__)

class UploadItemService:
    """
    Upload item command orchestrator.

    Returns TransitionOk or Rejected for expected outcomes; raises only for
    exhausted contention and storage failures.
    """

    def __init__(
        self,
        db: AsyncSession,
        max_attempts: int | None = None,
        backoff_initial: float | None = None,
        backoff_max: float | None = None,
    ) -> None:
        """
        Initialize upload item service.

        Args:
            db: AsyncSession for item and job updates
            max_attempts: Units of work tried before ContentionError
                (defaults to settings)
            backoff_initial: First retry delay in seconds (defaults to settings)
            backoff_max: Largest retry delay in seconds (defaults to settings)
        """
        policy = get_settings().uploads
        self.db = db
        self.max_attempts = max_attempts or policy.contention_max_attempts
        self.backoff_initial = (
            policy.contention_backoff_initial if backoff_initial is None else backoff_initial
        )
        self.backoff_max = policy.contention_backoff_max if backoff_max is None else backoff_max

    async def begin_item(self, item_id: UUID, owner_id: UUID) -> TransitionResult:
        """Mark a PENDING item IN_PROGRESS."""
        return await self.apply_action(item_id, owner_id, ItemAction.BEGIN)

    async def complete_item(self, item_id: UUID, owner_id: UUID) -> TransitionResult:
        """Mark an IN_PROGRESS item DONE."""
        return await self.apply_action(item_id, owner_id, ItemAction.COMPLETE)

    async def fail_item(self, item_id: UUID, owner_id: UUID) -> TransitionResult:
        """Mark a PENDING or IN_PROGRESS item FAILED."""
        return await self.apply_action(item_id, owner_id, ItemAction.FAIL)

    async def apply_action(
        self,
        item_id: UUID,
        owner_id: UUID,
        action: ItemAction,
    ) -> TransitionResult:
        """
        Run one item command, retrying the whole unit on transient conflicts.

        Args:
            item_id: Target item
            owner_id: Calling identity
            action: BEGIN, COMPLETE or FAIL

        Returns:
            TransitionResult: TransitionOk, or Rejected with NOT_FOUND,
                NOT_OWNER or INVALID_TRANSITION

        Raises:
            ContentionError: If every attempt hit a transient conflict
            AggregationError: If the job row refused the delta while active
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_transient_conflict),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                multiplier=self.backoff_initial,
                max=self.backoff_max,
                jitter=self.backoff_initial,
            ),
            before_sleep=self._log_retry,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    try:
                        return await self._run_once(item_id, owner_id, action)
                    except Exception:
                        await self.db.rollback()
                        raise
        except RetryError as e:
            logger.error(
                "Item transition abandoned after repeated conflicts",
                extra={
                    "item_id": str(item_id),
                    "action": action.value,
                    "attempts": self.max_attempts,
                    "error": str(e.last_attempt.exception()),
                },
            )
            raise ContentionError(str(item_id), self.max_attempts) from e

    async def _run_once(
        self,
        item_id: UUID,
        owner_id: UUID,
        action: ItemAction,
    ) -> TransitionResult:
        item = await upload_item_crud.get_by_id(self.db, item_id, fresh=True)
        if item is None:
            return await self._reject(RejectionReason.NOT_FOUND, f"Item {item_id} not found")
        if item.owner_id != owner_id:
            logger.warning(
                "Item command from non-owner",
                extra={"item_id": str(item_id), "owner_id": str(owner_id), "action": action.value},
            )
            return await self._reject(RejectionReason.NOT_OWNER, f"Item {item_id} not found")

        # Each lost update means another caller moved the item forward. Items
        # move forward at most twice, so the loop ends in a won update or an
        # InvalidTransition.
        while True:
            plan = plan_transition(item.status, action)
            if isinstance(plan, InvalidTransition):
                return await self._reject(
                    RejectionReason.INVALID_TRANSITION,
                    plan.message,
                    current_status=plan.current_status,
                )

            at = utcnow()
            updated = await upload_item_crud.transition(self.db, item_id, plan, at)
            if updated is not None:
                break

            logger.info(
                "Item changed before conditional update; re-planning",
                extra={"item_id": str(item_id), "observed_status": plan.from_status.value},
            )
            await self.db.refresh(item)

        job = await upload_job_crud.apply_item_transition(
            self.db, updated.job_id, plan.from_status, plan.to_status, at
        )
        extra = {
            "item_id": str(item_id),
            "job_id": str(updated.job_id),
            "from_status": plan.from_status.value,
            "to_status": plan.to_status.value,
        }

        if job is None:
            current = await upload_job_crud.get_by_id(self.db, updated.job_id, fresh=True)
            if current is None or not current.status.is_terminal:
                logger.error("Job refused item delta", extra=extra)
                raise AggregationError(
                    f"Job {updated.job_id} has no {plan.from_status.value} item to move",
                    job_id=str(updated.job_id),
                )
            logger.warning(
                "Item transition after job became terminal; job left unchanged",
                extra={**extra, "job_status": current.status.value},
            )
            await self.db.commit()
            return TransitionOk(
                item_id=item_id,
                job_id=updated.job_id,
                from_status=plan.from_status,
                to_status=plan.to_status,
            )

        counters = job.counters
        if not counters.is_balanced:
            logger.error(
                "Job counters out of balance",
                extra={**extra, "counters": counters.__dict__},
            )

        await self.db.commit()
        logger.info(
            "Item transition applied",
            extra={**extra, "job_status": job.status.value, "job_version": job.version},
        )
        return TransitionOk(
            item_id=item_id,
            job_id=updated.job_id,
            from_status=plan.from_status,
            to_status=plan.to_status,
            job_status=job.status,
            counters=counters,
        )

    async def _reject(
        self,
        reason: RejectionReason,
        message: str,
        current_status: ItemStatus | None = None,
    ) -> Rejected:
        await self.db.rollback()
        return Rejected(reason=reason, message=message, current_status=current_status)

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            f"Write conflict, retrying item transition "
            f"(attempt {retry_state.attempt_number})",
            extra={"error": str(retry_state.outcome.exception())},
        )
