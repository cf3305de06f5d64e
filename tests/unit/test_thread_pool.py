"""
Unit tests for the thread pool.
"""

import threading
import time

import pytest

from minihttp.core.thread_pool import ThreadPool


@pytest.fixture
def pool():
    pool = ThreadPool(min_workers=2, max_workers=4, queue_size=8, idle_timeout=0.1)
    pool.start()
    yield pool
    pool.shutdown(wait=False)


class TestThreadPool:
    """Tests for ThreadPool class."""

    def test_submit_runs_task(self, pool: ThreadPool):
        done = threading.Event()
        results = []

        def task(value, scale=1):
            results.append(value * scale)
            done.set()

        assert pool.submit(task, args=(21,), kwargs={"scale": 2})
        assert done.wait(timeout=5.0)
        assert results == [42]

    def test_submit_before_start(self):
        with pytest.raises(RuntimeError, match="not started"):
            ThreadPool().submit(lambda: None)

    def test_starts_min_workers(self, pool: ThreadPool):
        assert pool.stats["workers"]["total"] == 2

    def test_full_queue_rejects(self):
        pool = ThreadPool(min_workers=1, max_workers=1, queue_size=1, idle_timeout=0.1)
        pool.start()
        release = threading.Event()
        started = threading.Event()

        def blocker():
            started.set()
            release.wait(timeout=5.0)

        try:
            assert pool.submit(blocker, block=False)
            assert started.wait(timeout=5.0)
            assert pool.submit(blocker, block=False)   # waits in the queue
            assert pool.queue_size == 1
            assert pool.submit(blocker, block=False) is False
        finally:
            release.set()
            pool.shutdown(wait=True, timeout=5.0)

    def test_failing_task_does_not_kill_worker(self, pool: ThreadPool):
        done = threading.Event()

        def boom():
            raise RuntimeError("boom")

        pool.submit(boom)
        pool.submit(done.set)

        assert done.wait(timeout=5.0)

    def test_scales_up_when_busy(self):
        pool = ThreadPool(min_workers=1, max_workers=3, queue_size=8, idle_timeout=0.1)
        pool.start()
        release = threading.Event()

        try:
            for _ in range(4):
                pool.submit(release.wait, args=(5.0,))
                time.sleep(0.05)

            assert 1 < pool.stats["workers"]["total"] <= 3
        finally:
            release.set()
            pool.shutdown(wait=True, timeout=5.0)

    def test_burst_scales_up_before_workers_wake(self):
        """Test that back-to-back submits each get a worker."""
        pool = ThreadPool(min_workers=2, max_workers=4, queue_size=8, idle_timeout=0.1)
        pool.start()
        release = threading.Event()
        started = threading.Semaphore(0)

        def blocker():
            started.release()
            release.wait(timeout=5.0)

        try:
            for _ in range(4):
                assert pool.submit(blocker, block=False)

            for _ in range(4):
                assert started.acquire(timeout=5.0)
            assert pool.stats["workers"]["total"] == 4
        finally:
            release.set()
            pool.shutdown(wait=True, timeout=5.0)

    def test_scales_up_after_finished_tasks(self):
        """Test that finished tasks don't leave phantom idle workers behind."""
        pool = ThreadPool(min_workers=1, max_workers=3, queue_size=16, idle_timeout=0.1)
        pool.start()
        finished = threading.Semaphore(0)

        try:
            for _ in range(10):
                pool.submit(finished.release)
            for _ in range(10):
                assert finished.acquire(timeout=5.0)
            time.sleep(0.1)

            release = threading.Event()
            started = threading.Semaphore(0)

            def blocker():
                started.release()
                release.wait(timeout=5.0)

            pool.submit(blocker)
            pool.submit(blocker)

            assert started.acquire(timeout=5.0)
            assert started.acquire(timeout=5.0)
            release.set()
        finally:
            pool.shutdown(wait=True, timeout=5.0)

    def test_shutdown_waits_for_queue(self):
        pool = ThreadPool(min_workers=1, max_workers=1, queue_size=8, idle_timeout=0.1)
        pool.start()
        results = []

        for i in range(5):
            pool.submit(lambda i=i: (time.sleep(0.01), results.append(i)))

        pool.shutdown(wait=True, timeout=5.0)

        assert sorted(results) == [0, 1, 2, 3, 4]

    def test_submit_after_shutdown(self, pool: ThreadPool):
        pool.shutdown(wait=True, timeout=1.0)

        with pytest.raises(RuntimeError):
            pool.submit(lambda: None)
