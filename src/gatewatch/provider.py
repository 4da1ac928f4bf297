"""Host-facing data provider for the gate crossing display."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import CancelledError, Executor, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Dict, Optional, Set

from .config import GateConfig
from .gate_tracker import GateCrossingTracker
from .models import ComplicationRequest, ComplicationType, DisplayText
from .presenter import present, preview_text

logger = logging.getLogger(__name__)


class DataProvider(ABC):
    """Lifecycle callbacks a display host invokes on a data source."""

    @abstractmethod
    def handle_trigger(self, request: ComplicationRequest) -> Optional[DisplayText]:
        """Return fresh display data, or None to decline the request."""

    @abstractmethod
    def get_preview(self, complication_type: ComplicationType) -> Optional[DisplayText]:
        """Return static sample data without touching the network."""

    def on_activate(self, instance_id: int, complication_type: ComplicationType) -> None:
        """Called when the host starts showing an instance."""

    def on_deactivate(self, instance_id: int) -> None:
        """Called when the host stops showing an instance."""


class GateCrossingProvider(DataProvider):
    """Serves short text gate predictions to a display host."""

    SUPPORTED_TYPE = ComplicationType.SHORT_TEXT

    def __init__(
        self,
        config: Optional[GateConfig] = None,
        tracker: Optional[GateCrossingTracker] = None,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the provider.

        Args:
            config: Configuration. Defaults to the tracker's, then GateConfig().
            tracker: Pipeline to run. Built from config if None.
            executor: Optional executor to run requests on. Without one each
                request gets its own daemon thread, so a fetch abandoned after
                a timeout never holds up a later request.
        """
        self.config = config or (tracker.config if tracker else GateConfig())
        self.tracker = tracker or GateCrossingTracker(self.config)
        self._executor = executor
        self._lock = threading.Lock()
        self._pending: Dict[int, Future] = {}
        self.active_instances: Set[int] = set()

    def get_preview(self, complication_type: ComplicationType) -> Optional[DisplayText]:
        if complication_type != self.SUPPORTED_TYPE:
            return None
        return preview_text()

    def _submit(self, instance_id: int, now: int) -> Future:
        if self._executor is not None:
            return self._executor.submit(self.tracker.get_display, now)

        future: Future = Future()

        def run():
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = self.tracker.get_display(now)
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(result)

        threading.Thread(target=run, name=f"gatewatch-{instance_id}", daemon=True).start()
        return future

    def _error_display(self, now: int) -> DisplayText:
        return present(
            now,
            None,
            fetch_succeeded=False,
            utc_offset=self.config.utc_offset,
            tz=self.config.tzinfo,
        )

    def handle_trigger(self, request: ComplicationRequest) -> Optional[DisplayText]:
        """
        Run one prediction for a host request.

        The fetch runs off the calling thread and is abandoned after
        config.request_timeout seconds. Every failure is rendered as the
        error text; nothing is raised to the host.

        Args:
            request: Host trigger.

        Returns:
            DisplayText, or None if the type is unsupported or the instance
            was deactivated while the request was pending.
        """
        logger.debug(
            f"Trigger for instance {request.instance_id} ({request.complication_type.value})"
        )
        if request.complication_type != self.SUPPORTED_TYPE:
            return None

        now = int(time.time())
        with self._lock:
            future = self._submit(request.instance_id, now)
            self._pending[request.instance_id] = future

        try:
            display = future.result(timeout=self.config.request_timeout)
        except CancelledError:
            logger.info(f"Request for instance {request.instance_id} was cancelled")
            return None
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                f"Request for instance {request.instance_id} timed out after "
                f"{self.config.request_timeout}s"
            )
            return self._error_display(now)
        except Exception as e:
            logger.error(f"Prediction failed for instance {request.instance_id}: {e}", exc_info=True)
            return self._error_display(now)
        finally:
            with self._lock:
                abandoned = self._pending.get(request.instance_id) is not future
                if not abandoned:
                    del self._pending[request.instance_id]

        if abandoned:
            logger.info(f"Discarding result for deactivated instance {request.instance_id}")
            return None

        logger.debug(f"Generated text for instance {request.instance_id}: {display.primary_text}")
        return display

    def on_activate(self, instance_id: int, complication_type: ComplicationType) -> None:
        with self._lock:
            self.active_instances.add(instance_id)
        logger.info(f"Instance {instance_id} activated with type {complication_type.value}")

    def on_deactivate(self, instance_id: int) -> None:
        """Forget the instance and abandon any request still in flight for it."""
        with self._lock:
            self.active_instances.discard(instance_id)
            future = self._pending.pop(instance_id, None)
        if future is not None and not future.done():
            future.cancel()
            logger.debug(f"Abandoned pending request for instance {instance_id}")
        logger.info(f"Instance {instance_id} deactivated")

    def shutdown(self) -> None:
        """Release an injected executor without waiting for abandoned fetches."""
        if self._executor is not None:
            self._executor.shutdown(wait=False)
        logger.info("Provider shut down")
