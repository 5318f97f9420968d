"""
Probe Pool - bounded thread pool for blocking reachability checks

Works like ``concurrent.futures.ThreadPoolExecutor`` with two differences
that matter for a one-wave subnet sweep:

* a new worker is started for every submitted task unless an idle worker
  can take it, up to ``max_workers``; tasks only queue at the ceiling
* workers exit after ``idle_timeout`` seconds without work, so a pool kept
  around between sweeps does not pin hundreds of threads
"""

import itertools
import logging
import queue
import threading
from concurrent.futures import Future
from typing import Any, Callable, Set

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 256
DEFAULT_IDLE_TIMEOUT = 10.0


class _WorkItem:
    def __init__(self, future: Future, fn: Callable, args: tuple, kwargs: dict):
        self.future = future
        self.fn = fn
        self.args = args
        self.kwargs = kwargs

    def run(self):
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.fn(*self.args, **self.kwargs)
        except BaseException as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


class ProbePool:
    """Thread pool that favors new workers over queuing and reclaims idle ones"""

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS,
                 idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
                 thread_name_prefix: str = 'probe-pool'):
        """
        Initialize the pool. No threads are started until work is submitted.

        Args:
            max_workers: Ceiling on concurrently running workers
            idle_timeout: Seconds an idle worker waits for work before exiting
            thread_name_prefix: Prefix for worker thread names
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if idle_timeout <= 0:
            raise ValueError("idle_timeout must be positive")

        self.max_workers = max_workers
        self.idle_timeout = idle_timeout
        self.thread_name_prefix = thread_name_prefix

        self._work_queue = queue.SimpleQueue()
        self._idle_semaphore = threading.Semaphore(0)
        self._lock = threading.Lock()
        self._workers: Set[threading.Thread] = set()
        self._shutdown = False
        self._counter = itertools.count()

    def __enter__(self) -> 'ProbePool':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
        return False

    @property
    def worker_count(self) -> int:
        """Number of live worker threads"""
        with self._lock:
            return len(self._workers)

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future:
        """Schedule ``fn(*args, **kwargs)`` and return its future."""
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot submit to a pool that has been shut down")

            future = Future()
            self._work_queue.put(_WorkItem(future, fn, args, kwargs))
            self._adjust_thread_count()
            return future

    def shutdown(self, wait: bool = True, cancel_futures: bool = False):
        """
        Stop accepting work and let workers exit once the queue is drained.

        Args:
            wait: Block until every worker has exited
            cancel_futures: Cancel tasks still waiting in the queue
        """
        with self._lock:
            if self._shutdown and not wait:
                return
            self._shutdown = True

            if cancel_futures:
                cancelled = 0
                while True:
                    try:
                        item = self._work_queue.get_nowait()
                    except queue.Empty:
                        break
                    if item is not None:
                        item.future.cancel()
                        cancelled += 1
                if cancelled:
                    logger.debug(f"Cancelled {cancelled} queued tasks on shutdown")

            workers = list(self._workers)
            for _ in workers:
                self._work_queue.put(None)

        if wait:
            for worker in workers:
                worker.join()

    def _adjust_thread_count(self):
        # caller holds self._lock
        if self._idle_semaphore.acquire(timeout=0):
            return

        if len(self._workers) < self.max_workers:
            name = f"{self.thread_name_prefix}-{next(self._counter)}"
            worker = threading.Thread(target=self._worker, name=name, daemon=True)
            self._workers.add(worker)
            worker.start()

    def _worker(self):
        while True:
            try:
                item = self._work_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                if self._retire_idle_worker():
                    return
                continue

            if item is None:
                self._remove_current_worker()
                return

            item.run()
            del item
            self._idle_semaphore.release()

    def _retire_idle_worker(self) -> bool:
        with self._lock:
            # submits hold the lock, so an empty queue here means nothing is waiting for this worker
            if not self._work_queue.empty():
                return False
            self._idle_semaphore.acquire(timeout=0)
            self._workers.discard(threading.current_thread())
            logger.debug(f"{threading.current_thread().name} idle for {self.idle_timeout}s, exiting")
            return True

    def _remove_current_worker(self):
        with self._lock:
            self._workers.discard(threading.current_thread())
