"""
Threaded classification worker for ISeeFood.

Runs classification jobs in a background thread to avoid blocking the
UI thread while the model loads and runs.
"""

import logging
import queue
import threading
from typing import Callable

logger = logging.getLogger(__name__)

Job = Callable[[], None]


class ClassificationWorker:
    """
    Background worker for classification jobs.

    Uses a producer-consumer pattern:
    - Main thread submits jobs to the input queue
    - Worker thread runs each job; jobs publish their own results
    """

    def __init__(self, max_queue_size: int = 2):
        """
        Initialize the classification worker.

        Args:
            max_queue_size: Maximum pending jobs (oldest dropped if full).
        """
        self.max_queue_size = max_queue_size

        self._job_queue: queue.Queue[Job | None] = queue.Queue(maxsize=max_queue_size)
        self._worker_thread: threading.Thread | None = None
        self._running = False

        # Statistics
        self.jobs_processed = 0
        self.jobs_dropped = 0
        self.jobs_failed = 0

    def start(self) -> None:
        """Start the worker thread."""
        if self._running:
            logger.warning("ClassificationWorker already running")
            return

        self._running = True
        self._worker_thread = threading.Thread(
            target=self._worker_loop,
            name="ClassificationWorker",
            daemon=True,
        )
        self._worker_thread.start()
        logger.info("ClassificationWorker started")

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the worker thread."""
        if not self._running:
            return

        self._running = False

        # Send stop signal
        try:
            self._job_queue.put_nowait(None)
        except queue.Full:
            pass

        if self._worker_thread is not None:
            self._worker_thread.join(timeout=timeout)
            self._worker_thread = None

        logger.info(
            f"ClassificationWorker stopped: "
            f"processed={self.jobs_processed}, "
            f"dropped={self.jobs_dropped}, "
            f"failed={self.jobs_failed}"
        )

    def submit(self, job: Job) -> bool:
        """
        Submit a job for background execution.

        If the queue is full, the oldest pending job is dropped (non-blocking).

        Args:
            job: Zero-argument callable.

        Returns:
            True if the job was queued, False if the worker is not running.
        """
        if not self._running:
            logger.warning("ClassificationWorker not running, job rejected")
            return False

        try:
            self._job_queue.put_nowait(job)
            return True
        except queue.Full:
            try:
                self._job_queue.get_nowait()
                self.jobs_dropped += 1
                logger.warning("ClassificationWorker queue full, dropped oldest job")
            except queue.Empty:
                pass
            try:
                self._job_queue.put_nowait(job)
                return True
            except queue.Full:
                return False

    def _worker_loop(self) -> None:
        """Main worker loop - runs jobs from the queue."""
        logger.debug("ClassificationWorker loop started")

        while self._running:
            try:
                job = self._job_queue.get(timeout=0.1)
            except queue.Empty:
                continue

            # Stop signal
            if job is None:
                break

            try:
                job()
                self.jobs_processed += 1
            except Exception as e:
                self.jobs_failed += 1
                logger.error(f"Classification job error: {e}")

        logger.debug("ClassificationWorker loop exited")

    @property
    def is_running(self) -> bool:
        """Check if worker is running."""
        return self._running

    @property
    def queue_size(self) -> int:
        """Get current queue size."""
        return self._job_queue.qsize()
