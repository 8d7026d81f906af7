"""Result Aggregator: the fan-in side of the access key worker pool."""

import logging
import queue
from dataclasses import dataclass
from typing import Optional

from .models import Empty, Found

PROGRESS_EVERY = 100


@dataclass(frozen=True)
class WorkerFailure:
    """Sent in place of an outcome when a worker could not process its item."""

    error: BaseException


class ResultAggregator:
    """Reads exactly one outcome per submitted work item and keeps the Found ones.

    Rows are kept in arrival order, which depends on worker scheduling and is
    not stable between runs.
    """

    def __init__(self, expected: int, logger: Optional[logging.Logger] = None):
        self.expected = expected
        self.logger = logger or logging.getLogger(__name__)
        self.found = []
        self.received = 0
        self.empty = 0

    def add(self, outcome) -> None:
        """Record one outcome."""
        self.received += 1
        if isinstance(outcome, Found):
            self.found.append(outcome)
        elif isinstance(outcome, Empty):
            self.empty += 1
        else:
            raise TypeError(f"unexpected outcome {outcome!r}")

    def collect(self, outcomes: queue.Queue) -> list:
        """Block until all expected outcomes are read; re-raise the first worker failure."""
        while self.received < self.expected:
            message = outcomes.get()
            if isinstance(message, WorkerFailure):
                raise message.error
            self.add(message)

            if self.received % PROGRESS_EVERY == 0:
                self.logger.info(f"Processed {self.received}/{self.expected} users...")

        self.logger.debug(
            f"all outcomes received found={len(self.found)} empty={self.empty} total={self.received}"
        )
        return self.found

    @property
    def rows(self) -> list:
        return [outcome.to_row() for outcome in self.found]
