# floture/workflow/controller.py
"""
Detection request state machine.

Idle -> Pending -> (Success | Failure). The network call runs on a single
worker thread; the outcome is applied to the status only from poll()/wait(),
on the caller's thread, and only if it belongs to the current request.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional

import requests

from floture.models import (
    IDLE,
    PENDING,
    DetectionResult,
    DetectionStatus,
    Failure,
    Pending,
    SelectedFile,
    Success,
)
from floture.utils.api_client import DetectionServiceError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Something went wrong"


def failure_message(exc: BaseException) -> str:
    if isinstance(exc, DetectionServiceError):
        return exc.message or f"Request failed: {exc.status_code}"
    return str(exc) or FALLBACK_MESSAGE


class DetectionRequestController:
    def __init__(self, client, current_file: Callable[[], Optional[SelectedFile]]):
        self.client = client
        self._current_file = current_file
        self._status: DetectionStatus = IDLE
        self._generation = 0
        self._future: Optional[Future] = None
        self._future_generation = 0
        self._lock = threading.Lock()
        self._executor = self._new_executor()

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="floture-detect")

    # ------------------------------
    # State
    # ------------------------------
    @property
    def status(self) -> DetectionStatus:
        return self._status

    @property
    def pending(self) -> bool:
        return isinstance(self._status, Pending)

    @property
    def result(self) -> Optional[DetectionResult]:
        return self._status.result if isinstance(self._status, Success) else None

    # ------------------------------
    # Transitions
    # ------------------------------
    def detect(self) -> bool:
        """Start a detection request. Returns False when the call was ignored."""
        file = self._current_file()
        if file is None:
            return False
        with self._lock:
            if self.pending:
                logger.debug("Detection already in flight; ignoring")
                return False
            self._generation += 1
            generation = self._generation
            self._status = PENDING
            logger.info("Detection #%d started for %s", generation, file.name)
            self._future = self._executor.submit(self.client.detect, file)
            self._future_generation = generation
        return True

    def reset(self):
        """Back to Idle; any in-flight outcome is dropped when it arrives."""
        with self._lock:
            self._generation += 1
            if self._future is not None:
                if not self._future.cancel():
                    # The running call still holds the worker; later requests get a fresh one
                    logger.info("Superseding in-flight detection")
                    self._executor.shutdown(wait=False)
                    self._executor = self._new_executor()
                self._future = None
            self._status = IDLE

    def poll(self) -> DetectionStatus:
        """Apply a finished request's outcome, without blocking."""
        with self._lock:
            future = self._future
            if future is not None and future.done():
                self._settle(future)
        return self._status

    def wait(self, timeout: Optional[float] = None) -> DetectionStatus:
        """Block until the in-flight request resolves (or timeout expires)."""
        future = self._future
        if future is not None:
            try:
                future.exception(timeout=timeout)
            except FutureTimeoutError:
                pass
        return self.poll()

    def _settle(self, future: Future):
        generation = self._future_generation
        self._future = None
        if generation != self._generation or not self.pending:
            return
        exc = future.exception()
        if exc is None:
            self._status = Success(future.result())
            logger.info("Detection #%d succeeded", generation)
        else:
            if isinstance(exc, (DetectionServiceError, requests.RequestException)):
                logger.warning("Detection #%d failed: %s", generation, exc)
            else:
                logger.error("Detection #%d failed unexpectedly", generation, exc_info=exc)
            self._status = Failure(failure_message(exc))

    # ------------------------------
    # Teardown
    # ------------------------------
    def close(self):
        with self._lock:
            self._generation += 1
            if self._future is not None:
                self._future.cancel()
                self._future = None
        self._executor.shutdown(wait=False, cancel_futures=True)
