"""
Enrichment Coordinator

Fans out one enrichment task per record, gates in-flight lookups with a
semaphore, and joins every task before returning. Each task writes only the
record at its own index, so output order always matches input order.

Failure policies:
- abort: the first lookup error cancels the remaining tasks and is raised
- collect: every outcome is recorded; failed records keep empty fields
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from core.config import FAILURE_POLICIES
from core.logging import get_logger

from .models import BusinessRecord, EnrichmentOutcome, EnrichmentStatus, SessionToken

logger = get_logger(__name__, domain="d4")

DEFAULT_MAX_CONCURRENT = 1000


@dataclass
class BatchEnrichmentResult:
    """Result of batch enrichment operation"""

    session_token: str
    records: list[BusinessRecord]
    outcomes: list[EnrichmentOutcome]
    execution_time_seconds: float
    errors: list[BaseException] = field(default_factory=list)

    def _count(self, status: EnrichmentStatus) -> int:
        return len([o for o in self.outcomes if o.status == status])

    @property
    def resolved(self) -> int:
        return self._count(EnrichmentStatus.RESOLVED)

    @property
    def unresolved(self) -> int:
        return self._count(EnrichmentStatus.UNRESOLVED)

    @property
    def failed(self) -> int:
        return self._count(EnrichmentStatus.FAILED)

    @property
    def first_error(self) -> Optional[BaseException]:
        return self.errors[0] if self.errors else None


class EnrichmentCoordinator:
    """Concurrent fan-out/fan-in over a dataset of business records"""

    def __init__(self, enricher, max_concurrent: int = DEFAULT_MAX_CONCURRENT, failure_policy: str = "abort"):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if failure_policy not in FAILURE_POLICIES:
            raise ValueError(f"failure_policy must be one of {list(FAILURE_POLICIES)}")

        self.enricher = enricher
        self.max_concurrent = max_concurrent
        self.failure_policy = failure_policy

    async def enrich_all(self, records: Sequence[BusinessRecord], session_token: SessionToken) -> BatchEnrichmentResult:
        """
        Enrich every record concurrently and wait for all of them

        Raises:
            Exception: Under the abort policy, the first lookup error, after
                every other task has been cancelled and awaited
        """
        start_time = time.monotonic()
        records = list(records)
        semaphore = asyncio.Semaphore(self.max_concurrent)
        errors: list[BaseException] = []
        abort = self.failure_policy == "abort"

        async def enrich_one(index: int, record: BusinessRecord) -> EnrichmentOutcome:
            async with semaphore:
                try:
                    fields = await self.enricher.enrich(record, session_token)
                except Exception as e:
                    errors.append(e)
                    logger.warning(f"Enrichment failed for row {index} ('{record.name}'): {e}")
                    if abort:
                        raise
                    return EnrichmentOutcome(index=index, record=record, error=e)

            record.apply(fields)
            return EnrichmentOutcome(index=index, record=record)

        tasks = [asyncio.create_task(enrich_one(i, record)) for i, record in enumerate(records)]

        try:
            if tasks:
                if abort:
                    await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
                    if errors:
                        raise errors[0]
                else:
                    await asyncio.gather(*tasks)
        finally:
            # No task outlives this call
            outstanding = [t for t in tasks if not t.done()]
            for task in outstanding:
                task.cancel()
            if outstanding:
                await asyncio.gather(*outstanding, return_exceptions=True)
            for task in tasks:
                if not task.cancelled():
                    task.exception()  # mark retrieved

        result = BatchEnrichmentResult(
            session_token=str(session_token),
            records=records,
            outcomes=[task.result() for task in tasks],
            execution_time_seconds=time.monotonic() - start_time,
            errors=errors,
        )

        logger.info(
            f"Batch enrichment completed: {result.resolved} resolved, "
            f"{result.unresolved} unresolved, {result.failed} failed"
        )
        return result
