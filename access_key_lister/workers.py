"""
Access Key Worker Pool

A fixed number of worker threads drain a shared queue of per-user work items.
Each item is listed with iam:ListAccessKeys and turned into exactly one
outcome: Found with the user's keys, or Empty.

The queue is filled and closed before any worker starts. When a worker fails it
raises the shared cancellation event and hands the error to the aggregator
instead of stopping the process; the other workers stop pulling new items and
abandon their current traversal at the next page boundary.
"""

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from .aggregator import ResultAggregator, WorkerFailure
from .errors import AccessKeyListerError, ListingError, ValidationError
from .models import AccessKeyRecord, Empty, Found, WorkItem
from .pagination import TraversalCancelled, collect_pages

DEFAULT_WORKERS = 10

# Closes the work queue; one is enqueued per worker.
_CLOSED = object()


class AccessKeyWorkerPool:
    """Bounded pool of access key listing workers."""

    def __init__(self, workers: int = DEFAULT_WORKERS, logger: Optional[logging.Logger] = None):
        if workers < 1:
            raise ValidationError(f"worker count must be at least 1, got {workers}")
        self.workers = workers
        self.logger = logger or logging.getLogger(__name__)

    def list_access_keys(self, item: WorkItem, cancel_event: Optional[threading.Event] = None):
        """List one user's access keys and classify the result.

        An empty first page means the user has no keys; no further pages are
        requested in that case.
        """
        paginator = item.session.iam_client.get_paginator("list_access_keys")
        try:
            metadata = collect_pages(
                paginator.paginate(UserName=item.user_name),
                "AccessKeyMetadata",
                stop_if_first_page_empty=True,
                cancel_event=cancel_event,
            )
        except (ClientError, BotoCoreError) as e:
            raise ListingError(
                "error when listing access keys",
                account_id=item.account_id,
                role_name=item.session.role_name,
                user_name=item.user_name,
                cause=e,
            ) from e

        if not metadata:
            return Empty(user_name=item.user_name, account_id=item.account_id)

        return Found(
            user_name=item.user_name,
            account_id=item.account_id,
            keys=tuple(AccessKeyRecord.from_metadata(key) for key in metadata),
        )

    def _worker(
        self,
        worker_id: int,
        work_queue: queue.Queue,
        outcomes: queue.Queue,
        cancel_event: threading.Event,
    ) -> None:
        while not cancel_event.is_set():
            item = work_queue.get()
            if item is _CLOSED:
                return

            self.logger.debug(f"listing access key for user worker_id={worker_id} username={item.user_name}")
            try:
                outcome = self.list_access_keys(item, cancel_event)
            except TraversalCancelled:
                return
            except Exception as e:
                self.logger.debug(f"worker failed worker_id={worker_id} username={item.user_name}")
                if not isinstance(e, AccessKeyListerError):
                    e = ListingError(
                        "unexpected error when listing access keys",
                        account_id=item.account_id,
                        role_name=item.session.role_name,
                        user_name=item.user_name,
                        cause=e,
                    )
                cancel_event.set()
                outcomes.put(WorkerFailure(e))
                return

            self.logger.debug(
                f"{'access key found' if isinstance(outcome, Found) else 'access key not found'} "
                f"worker_id={worker_id} username={item.user_name}"
            )
            outcomes.put(outcome)

    def run(self, items: list, aggregator: Optional[ResultAggregator] = None) -> list:
        """Process every work item and return the Found outcomes in arrival order.

        Raises the first worker error after all worker threads have exited.
        """
        aggregator = aggregator or ResultAggregator(len(items), self.logger)
        if not items:
            return aggregator.found

        work_queue = queue.Queue()
        outcomes = queue.Queue()
        cancel_event = threading.Event()

        for item in items:
            work_queue.put(item)
        for _ in range(self.workers):
            work_queue.put(_CLOSED)

        self.logger.info(f"Listing access keys for {len(items)} user(s) with {self.workers} worker(s)")

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="access-key-worker") as executor:
            futures = [
                executor.submit(self._worker, worker_id, work_queue, outcomes, cancel_event)
                for worker_id in range(1, self.workers + 1)
            ]
            try:
                found = aggregator.collect(outcomes)
            finally:
                # Stops the remaining workers after a failure.
                cancel_event.set()

        for future in futures:
            future.result()

        return found
