"""
Transaction Feed Simulator - Synthetic "other players" wins and losses.

Runs independently of any round as a single asyncio task: wait a randomized
interval, generate one record, prepend it, trim to the newest N, repeat.
Generation finishes before the next wait starts, so the loop never overlaps
itself. stop() cancels the pending wait; nothing is appended afterwards.

Usage:
    feed = TransactionFeedSimulator(rng=random.Random(3))
    feed.start()          # inside a running event loop
    records = feed.snapshot()
    await feed.stop()
"""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


ADJECTIVES = ['Lucky', 'Wild', 'Crypto', 'Diamond', 'Golden', 'Moon', 'Rocket', 'Rich', 'Based', 'Degen']
NOUNS = ['Trader', 'Wolf', 'Whale', 'King', 'Master', 'Ape', 'Hunter', 'Boss', 'Chad', 'Guru']


@dataclass(frozen=True)
class TransactionRecord:
    """One synthetic win or loss shown in the live feed."""
    id: str
    username: str
    amount: int
    is_win: bool
    timestamp: datetime

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "username": self.username,
            "amount": self.amount,
            "is_win": self.is_win,
            "timestamp": self.timestamp.isoformat(),
        }


class TransactionFeedSimulator:
    """Bounded, newest-first feed of generated transactions."""

    WIN_PROBABILITY = 0.7
    HUGE_WIN_PROBABILITY = 0.05
    HUGE_WIN_FACTOR = 10
    WIN_AMOUNT_RANGE = (100, 1000)   # [low, high)
    LOSS_AMOUNT_RANGE = (10, 100)    # [low, high)

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_records: int = 20,
        seed_count: int = 10,
        min_interval_ms: float = 4000,
        max_interval_ms: float = 7000,
        extra_delay_chance: float = 0.2,
        extra_min_ms: float = 2000,
        extra_max_ms: float = 4000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.rng = rng or random.Random()
        self.max_records = max_records
        self.seed_count = seed_count
        self.min_interval_ms = min_interval_ms
        self.max_interval_ms = max_interval_ms
        self.extra_delay_chance = extra_delay_chance
        self.extra_min_ms = extra_min_ms
        self.extra_max_ms = extra_max_ms
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._records: List[TransactionRecord] = []
        self._task: Optional[asyncio.Task] = None
        self._subscribers: List[asyncio.Queue] = []

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> List[TransactionRecord]:
        """Records newest first. A copy; the feed is read-only to callers."""
        return list(self._records)

    # Generation

    def generate_username(self) -> str:
        adjective = self.rng.choice(ADJECTIVES)
        noun = self.rng.choice(NOUNS)
        return f"{adjective}{noun}{self.rng.randrange(9999):02d}"

    def generate_transaction(self) -> TransactionRecord:
        is_win = self.rng.random() < self.WIN_PROBABILITY
        low, high = self.WIN_AMOUNT_RANGE if is_win else self.LOSS_AMOUNT_RANGE
        amount = self.rng.randrange(low, high)

        if is_win and self.rng.random() < self.HUGE_WIN_PROBABILITY:
            amount *= self.HUGE_WIN_FACTOR

        return TransactionRecord(
            id=uuid.UUID(int=self.rng.getrandbits(128)).hex[:8],
            username=self.generate_username(),
            amount=amount,
            is_win=is_win,
            timestamp=self._clock(),
        )

    def next_interval_ms(self) -> float:
        """Base 4-7s, and one time in five an extra 2-4s."""
        interval = self.rng.uniform(self.min_interval_ms, self.max_interval_ms)
        if self.rng.random() < self.extra_delay_chance:
            interval += self.rng.uniform(self.extra_min_ms, self.extra_max_ms)
        return interval

    def push(self, record: TransactionRecord):
        """Prepend a record, evict the oldest beyond max_records, notify subscribers."""
        self._records.insert(0, record)
        del self._records[self.max_records:]
        for queue in self._subscribers:
            queue.put_nowait(record)

    # Subscription (used by the SSE stream)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue):
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    # Lifecycle

    def seed(self):
        """Replace the feed with seed_count fresh records."""
        initial = [self.generate_transaction() for _ in range(self.seed_count)]
        self._records = initial[:self.max_records]

    def start(self) -> asyncio.Task:
        """Seed the feed and launch the background loop on the running event loop."""
        if self.running:
            return self._task
        self.seed()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Transaction feed started with {len(self._records)} records")
        return self._task

    async def stop(self):
        """Cancel the pending wait and wait for the loop to exit."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Transaction feed stopped")

    async def _run(self):
        while True:
            await self._sleep(self.next_interval_ms() / 1000.0)
            record = self.generate_transaction()
            self.push(record)
            logger.debug(
                f"Feed: {record.username} {'won' if record.is_win else 'lost'} {record.amount}"
            )
