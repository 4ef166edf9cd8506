"""
Best-effort analytics delivery to an external webhook.

Events are posted as JSON from a small background pool so the interview
never waits on the analytics sink. Delivery errors are logged and dropped.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
import threading
from typing import Any, Dict, Optional, Tuple

import httpx

from lyra.utils.logger import get_logger

logger = get_logger("utils.webhook")


class WebhookLogger:
    """
    Fire-and-forget JSON poster.

    An empty URL disables delivery; send() then returns None.
    """

    def __init__(
        self,
        url: str = "",
        timeout: float = 3.0,
        transport: Optional[httpx.BaseTransport] = None,
        max_workers: int = 2,
    ):
        self.url = url or ""
        self.client = httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lyra-webhook")

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def send(self, event_type: str, payload: Dict[str, Any]) -> Optional[Future]:
        """
        Queue one event for delivery.

        Args:
            event_type: "step" or "result"
            payload: Event body; a type and UTC timestamp are added

        Returns:
            Future resolving to True/False on delivery, or None when disabled
        """
        if not self.enabled:
            return None
        event = {
            "type": event_type,
            "ts": datetime.now(timezone.utc).isoformat(),
            **payload,
        }
        return self._executor.submit(self._deliver, event)

    def _deliver(self, event: Dict[str, Any]) -> bool:
        try:
            response = self.client.post(self.url, json=event)
            response.raise_for_status()
            return True
        except Exception as e:
            logger.warning(f"Webhook delivery failed ({event.get('type')}): {e}")
            return False

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.client.close()


# One logger per (url, timeout), shared by every controller in the process
_shared_loggers: Dict[Tuple[str, float], WebhookLogger] = {}
_shared_lock = threading.Lock()


def get_webhook_logger(url: str = "", timeout: float = 3.0) -> WebhookLogger:
    """
    Get the process-wide logger for a webhook URL.

    Controllers come and go with user sessions; the worker pool and HTTP
    client behind a URL are created once and reused.
    """
    key = (url or "", float(timeout))
    with _shared_lock:
        logger_ = _shared_loggers.get(key)
        if logger_ is None:
            logger_ = WebhookLogger(url=key[0], timeout=key[1])
            _shared_loggers[key] = logger_
        return logger_


def close_webhook_loggers() -> None:
    """Drain and close every shared logger (server shutdown)."""
    with _shared_lock:
        loggers = list(_shared_loggers.values())
        _shared_loggers.clear()
    for logger_ in loggers:
        logger_.close()
