import asyncio
import itertools
import logging
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from budgetsmart.domain.errors import FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestResultGate(Generic[T]):
    """
    Applies only the outcome of the most recently issued request.

    Every request takes a ticket from ``issue()``; results or errors that
    arrive with an older ticket are discarded, so out-of-order completion
    never overwrites newer data.
    """

    def __init__(self):
        self._tickets = itertools.count(1)
        self.latest = 0
        self.result: Optional[T] = None
        self.error: Optional[Exception] = None
        self.applied = 0

    def issue(self) -> int:
        self.latest = next(self._tickets)
        return self.latest

    def is_latest(self, ticket: int) -> bool:
        return ticket == self.latest

    def publish(self, ticket: int, result: T) -> bool:
        if not self.is_latest(ticket):
            logger.debug("Discarding stale result %d (latest %d)", ticket, self.latest)
            return False
        self.result = result
        self.error = None
        self.applied = ticket
        return True

    def fail(self, ticket: int, error: Exception) -> bool:
        if not self.is_latest(ticket):
            logger.debug("Discarding stale error %d (latest %d)", ticket, self.latest)
            return False
        # previously applied result stays visible
        self.error = error
        self.applied = ticket
        return True

    async def run(self, func: Callable[..., T], *args: Any) -> bool:
        ticket = self.issue()
        try:
            result = await asyncio.to_thread(func, *args)
        except FetchError as e:
            return self.fail(ticket, e)
        return self.publish(ticket, result)

    async def run_latest(self, func: Callable[..., T], *args: Any) -> Optional[T]:
        """
        Run ``func`` through the gate and hand its outcome back: the result
        while this request is still the latest, ``None`` once a newer request
        has superseded it. A FetchError of the latest request is re-raised.
        """
        if not await self.run(func, *args):
            return None
        if self.error is not None:
            raise self.error
        return self.result


class LatestResultGates(Generic[T]):
    """One gate per key (a user id), created on first use."""

    def __init__(self):
        self._gates: Dict[str, LatestResultGate[T]] = {}

    def for_key(self, key: str) -> LatestResultGate[T]:
        if key not in self._gates:
            self._gates[key] = LatestResultGate()
        return self._gates[key]
