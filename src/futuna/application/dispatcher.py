"""
Batch Dispatcher

Runs one task per batch under a concurrency ceiling:

    +---------+   acquire slot   +-----------+   analyze()   +-------------+
    |  Batch  | ---------------> | Semaphore | ------------> | ModelAdapter|
    +---------+                  +-----------+               +------+------+
                                                                    |
          request_logs <-- log_exchange  <--------------------------+
                                                                    |
          analyses     <-- commit <-- validate <-- extract <--------+

The first failure is kept and sets the shared cancellation event. Batches
still waiting for a slot see the event and skip their model call, and
adapters check it before any retry. A call already in flight finishes and
is persisted. Nothing committed is rolled back.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from futuna.application.processors import PayloadValidator, extract_json_object
from futuna.domain.exceptions import RunCancelledError
from futuna.domain.models import Batch, BatchStatus
from futuna.infrastructure.database.persister import AnalysisPersister
from futuna.infrastructure.llm.llm_interfaces import ModelAdapter

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    """What happened to one batch"""

    batch: Batch
    status: BatchStatus
    rows_written: int = 0
    error: Optional[Exception] = None


@dataclass
class DispatchReport:
    """Joined result of one run"""

    outcomes: List[BatchOutcome] = field(default_factory=list)
    error: Optional[Exception] = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    def _with_status(self, status: BatchStatus) -> List[BatchOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def completed(self) -> List[BatchOutcome]:
        return self._with_status(BatchStatus.COMPLETED)

    @property
    def failed(self) -> List[BatchOutcome]:
        return self._with_status(BatchStatus.FAILED)

    @property
    def cancelled(self) -> List[BatchOutcome]:
        return self._with_status(BatchStatus.CANCELLED)

    @property
    def rows_written(self) -> int:
        return sum(o.rows_written for o in self.outcomes)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Re-raise the first failure recorded during the run"""
        if self.error is not None:
            raise self.error


class _RunState:
    """Shared cancellation event plus the first-error slot of one run"""

    def __init__(self):
        self.cancelled = asyncio.Event()
        self.cancel_reason = ""
        self.first_error: Optional[Exception] = None

    def fail(self, error: Exception) -> None:
        if self.first_error is None:
            self.first_error = error
        self.cancel(f"{type(error).__name__} in a sibling batch")

    def cancel(self, reason: str) -> None:
        if not self.cancelled.is_set():
            self.cancel_reason = reason
            self.cancelled.set()


class AnalysisDispatcher:
    """Fans batches out to the model adapter with bounded concurrency"""

    def __init__(
        self,
        adapter: ModelAdapter,
        persister: AnalysisPersister,
        validator: PayloadValidator,
        max_concurrency: int = 5,
    ):
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self.adapter = adapter
        self.persister = persister
        self.validator = validator
        self.max_concurrency = max_concurrency

    async def run(self, batches: Sequence[Batch], timeout: Optional[float] = None) -> DispatchReport:
        """
        Process every batch and join the outcomes.

        Args:
            batches: batches to analyze
            timeout: overall deadline in seconds; when it passes, batches that
                have not called the model yet are skipped

        Returns:
            DispatchReport with per-batch outcomes and the first error
        """
        report = DispatchReport()
        state = _RunState()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        deadline = None
        if timeout is not None:
            loop = asyncio.get_running_loop()
            deadline = loop.call_later(timeout, state.cancel, f"run deadline of {timeout}s exceeded")

        logger.info(f"Dispatching {len(batches)} batches (max_concurrency={self.max_concurrency})")
        try:
            outcomes = await asyncio.gather(*(self._run_batch(batch, semaphore, state) for batch in batches))
        finally:
            if deadline is not None:
                deadline.cancel()

        report.outcomes = list(outcomes)
        report.error = state.first_error
        report.finished_at = datetime.now()

        logger.info(
            "Run finished | completed=%d | failed=%d | cancelled=%d | rows=%d | duration=%.2fs",
            len(report.completed),
            len(report.failed),
            len(report.cancelled),
            report.rows_written,
            (report.finished_at - report.started_at).total_seconds(),
        )
        if report.error is not None:
            logger.error(f"Run failed: {report.error}")
        return report

    async def _run_batch(self, batch: Batch, semaphore: asyncio.Semaphore, state: _RunState) -> BatchOutcome:
        async with semaphore:
            if state.cancelled.is_set():
                error = RunCancelledError(f"Skipped, {state.cancel_reason}", batch=batch.symbols)
                state.fail(error)
                logger.info(f"{batch.label} skipped: {state.cancel_reason}")
                return BatchOutcome(batch=batch, status=BatchStatus.CANCELLED, error=error)

            logger.info(f"{batch.label} started: {','.join(batch.symbols)}")
            try:
                rows = await self._process(batch, state)
            except RunCancelledError as e:
                state.fail(e)
                logger.info(f"{batch.label} abandoned: {state.cancel_reason}")
                return BatchOutcome(batch=batch, status=BatchStatus.CANCELLED, error=e)
            except Exception as e:
                state.fail(e)
                logger.error(f"{batch.label} failed: {e}")
                return BatchOutcome(batch=batch, status=BatchStatus.FAILED, error=e)

            logger.info(f"{batch.label} completed: {rows} analyses stored")
            return BatchOutcome(batch=batch, status=BatchStatus.COMPLETED, rows_written=rows)

    async def _process(self, batch: Batch, state: _RunState) -> int:
        exchange = await self.adapter.analyze(batch.symbols, is_cancelled=state.cancelled.is_set)

        # Audit row goes in before parsing so bad output stays diagnosable
        await asyncio.to_thread(self.persister.log_exchange, exchange)

        text = extract_json_object(exchange.output)
        payload = self.validator.parse(text, batch=batch.symbols)
        analysis_date = self.validator.analysis_date(payload)

        return await asyncio.to_thread(self.persister.commit, payload, analysis_date)
