import asyncio
import logging
from typing import Awaitable, Callable

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger("timing")


def format_elapsed(seconds: int) -> str:
    seconds = max(0, int(seconds or 0))
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


class TickTimer:
    """
    Owned, cancellable once-per-interval tick source.

    Every start() opens a new generation; a tick belonging to an older
    generation is dropped, so nothing fires after cancel() returns.
    cancel() is safe to call from inside the tick callback itself.
    """

    def __init__(self, name: str, interval_sec: float, on_tick: Callable[[], Awaitable[None]]):
        self.name = name
        self.interval_sec = max(0.001, float(interval_sec))
        self._on_tick = on_tick
        self._task: asyncio.Task | None = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        if self._task is not None:
            return
        self._generation += 1
        self._task = asyncio.create_task(self._run(self._generation), name=f"tick:{self.name}")

    def cancel(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            # the loop sees the generation bump and exits after this tick
            return
        task.cancel()

    async def _run(self, generation: int) -> None:
        try:
            while generation == self._generation:
                await asyncio.sleep(self.interval_sec)
                if generation != self._generation:
                    break
                await self._on_tick()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("[%s] tick handler failed; timer stopped", self.name)
            if generation == self._generation:
                self._task = None
