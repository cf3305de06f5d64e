"""
=============================================================================
THREAD POOL
=============================================================================

Bounded concurrency for connection handling.

=============================================================================
WHY NOT ONE THREAD PER CONNECTION?
=============================================================================

Spawning a thread per accepted connection is the simplest model, but an
unbounded burst of clients becomes an unbounded number of threads (each
with its own stack). A pool caps that:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept loop ──submit()──►  ┌──────────────────┐                   │
    │                              │   Task Queue     │ bounded           │
    │                              │ [conn][conn][..] │ (queue_size)      │
    │                              └────────┬─────────┘                   │
    │                    ┌──────────────────┼──────────────────┐          │
    │                    ▼                  ▼                  ▼          │
    │               Worker-0           Worker-1    ...    Worker-N        │
    │                                                  (N < max_workers)  │
    │                                                                      │
    │   Queue full → submit(block=False) returns False → 503              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
POISON PILL SHUTDOWN
=============================================================================

To stop workers cleanly we put None in the queue, once per worker. A
worker that takes None exits its loop.

=============================================================================
SCALING
=============================================================================

    min_workers are started up front.

    Two counters, both guarded by the pool lock:

        pending   tasks submitted but not yet picked up by a worker
        idle      workers not running a task (including ones just started)

    submit() raises pending; a worker picking a task up lowers pending
    AND idle in one step, and raises idle again when the task is done.
    Whenever pending > idle after a submit, and we are under max_workers,
    one more worker is started. A burst of submits that arrives before
    any worker has woken up still sees the right numbers:

        4 idle workers, 5 submits  →  pending 5 > idle 4  →  5th worker

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"        # Waiting for task
    BUSY = "busy"        # Executing task
    STOPPED = "stopped"  # Thread exited


@dataclass
class Task:
    """
    A deferred function call: "call func(*args, **kwargs) later".

    Attributes:
        func: The function to execute.
        args: Positional arguments for the function.
        kwargs: Keyword arguments for the function.
        submitted_at: Time the task was queued.
    """
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the queue.

        1. Wait for a task (blocking, wakes every idle_timeout seconds)
        2. None? → exit
        3. Run it; log any exception, never let it kill the thread
        4. task_done(), back to 1
    """

    def __init__(
        self,
        task_queue: queue.Queue,
        worker_id: int,
        idle_timeout: float = 1.0,
        on_task_start: Optional[Callable[[], None]] = None,
        on_task_end: Optional[Callable[[], None]] = None,
    ):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout

        # Pool bookkeeping hooks
        self._on_task_start = on_task_start or (lambda: None)
        self._on_task_end = on_task_end or (lambda: None)

        self.state = WorkerState.IDLE
        self._shutdown = threading.Event()

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue  # Re-check the shutdown flag

            try:
                if task is None:
                    break  # Poison pill
                self._on_task_start()
                try:
                    self._execute_task(task)
                finally:
                    self._on_task_end()
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args, **task.kwargs)

            elapsed = time.time() - start_time
            logger.debug(f"Worker {self.worker_id} completed task in {elapsed:.3f}s")
            self.tasks_completed += 1

        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(
                f"Worker {self.worker_id} task failed after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1

        finally:
            self.state = WorkerState.IDLE

    def shutdown(self):
        """Signal the worker to stop."""
        self._shutdown.set()


class ThreadPool:
    """
    Thread pool for concurrent connection handling.

        pool = ThreadPool(min_workers=4, max_workers=64, queue_size=128)
        pool.start()

        if not pool.submit(handle, args=(conn,), block=False):
            ...  # queue full, reject

        pool.shutdown(wait=True, timeout=30.0)
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 64,
        queue_size: int = 128,
        idle_timeout: float = 1.0
    ):
        """
        Args:
            min_workers: Workers created at start().
            max_workers: Hard cap on worker threads.
            queue_size: Maximum number of waiting tasks.
            idle_timeout: How often idle workers wake to check for shutdown.
        """
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.max_queue_size = queue_size
        self.idle_timeout = idle_timeout

        self._task_queue: queue.Queue[Optional[Task]] = queue.Queue(maxsize=queue_size)

        self._workers: list[Worker] = []
        self._lock = threading.Lock()  # Protects _workers, _pending, _idle
        self._pending = 0
        self._idle = 0
        self._started = False
        self._shutdown = False
        self._next_worker_id = 0

    def start(self):
        """Start the pool with min_workers threads."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")

        with self._lock:
            self._pending = 0
            self._idle = 0
            for _ in range(self.min_workers):
                self._add_worker()

        self._started = True
        self._shutdown = False

    def _add_worker(self) -> Worker:
        """Start one more worker. Caller must hold self._lock."""
        worker = Worker(
            task_queue=self._task_queue,
            worker_id=self._next_worker_id,
            idle_timeout=self.idle_timeout,
            on_task_start=self._task_started,
            on_task_end=self._task_ended,
        )
        self._next_worker_id += 1
        self._workers.append(worker)
        self._idle += 1  # Counted idle before its thread is even running
        worker.start()
        return worker

    def _task_started(self):
        """A worker took a task off the queue."""
        with self._lock:
            self._pending -= 1
            self._idle -= 1

    def _task_ended(self):
        with self._lock:
            self._idle += 1

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        block: bool = True,
        queue_timeout: Optional[float] = None
    ) -> bool:
        """
        Submit a task for execution.

        Args:
            func: The function to execute.
            args: Positional arguments for the function.
            kwargs: Keyword arguments for the function.
            block: Whether to wait for queue space.
            queue_timeout: How long to wait for space when blocking.

        Returns:
            True if the task was queued, False if the queue was full.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")

        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        task = Task(func=func, args=args, kwargs=kwargs or {})

        # Counted before put() so a worker can't pick it up uncounted
        with self._lock:
            self._pending += 1

        try:
            self._task_queue.put(task, block=block, timeout=queue_timeout)
        except queue.Full:
            with self._lock:
                self._pending -= 1
            return False

        with self._lock:
            self._maybe_scale_up()
        return True

    def _maybe_scale_up(self):
        """
        Add a worker if more tasks are waiting than there are idle workers.

        Caller must hold self._lock.
        """
        if self._pending > self._idle and len(self._workers) < self.max_workers:
            logger.debug(
                f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers "
                f"({self._pending} pending, {self._idle} idle)"
            )
            self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Shutdown the thread pool.

            1. Reject new tasks
            2. If wait: let the queue drain (up to timeout)
            3. One poison pill per worker
            4. Join workers

        Args:
            wait: Whether to wait for pending tasks to complete.
            timeout: Maximum time to wait for the queue to drain.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            if timeout:
                deadline = time.time() + timeout
                while self._task_queue.unfinished_tasks:
                    if time.time() > deadline:
                        logger.warning("Shutdown timeout, forcing stop")
                        break
                    time.sleep(0.1)
            else:
                self._task_queue.join()

        for _ in self._workers:
            try:
                self._task_queue.put(None, block=False)
            except queue.Full:
                break  # Workers also check the shutdown flag

        for worker in self._workers:
            worker.shutdown()
            worker.join(timeout=2.0)

        with self._lock:
            self._workers.clear()
            self._pending = 0
            self._idle = 0
        self._started = False

        logger.info("Thread pool shutdown complete")

    # =========================================================================
    # MONITORING
    # =========================================================================

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def idle_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.IDLE)

    @property
    def queue_size(self) -> int:
        """Tasks currently waiting."""
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """Worker and task counts."""
        return {
            "workers": {
                "total": len(self._workers),
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "tasks": {
                "queued": self._task_queue.qsize(),
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
