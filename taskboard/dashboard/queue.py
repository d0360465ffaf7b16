"""Per-task serialisation of client mutations."""

import logging
import threading
from collections.abc import Callable, Hashable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for
from typing import Any


logger = logging.getLogger(__name__)


class MutationQueue:
    """Runs mutations on a thread pool, one at a time per key.

    A job submitted for a key starts only once every earlier job for the same
    key has finished, whatever its outcome. Jobs for different keys run
    concurrently.
    """

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="taskboard-mutation")
        self._tails: dict[Hashable, Future] = {}
        self._lock = threading.Lock()

    def submit(self, key: Hashable, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        with self._lock:
            previous = self._tails.get(key)
            future = self._executor.submit(self._run_after, previous, fn, args, kwargs)
            self._tails[key] = future
        future.add_done_callback(lambda done: self._release(key, done))
        return future

    def pending(self, key: Hashable) -> bool:
        """Whether a job for ``key`` is queued or running."""
        with self._lock:
            return key in self._tails

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _run_after(previous: Future | None, fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
        # Predecessors are submitted first, so with a FIFO pool they are
        # already running or done by the time this job waits on them.
        if previous is not None:
            wait_for([previous])
        return fn(*args, **kwargs)

    def _release(self, key: Hashable, done: Future) -> None:
        with self._lock:
            if self._tails.get(key) is done:
                del self._tails[key]
