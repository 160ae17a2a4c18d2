"""
# Logging Manager

Central logger factory for the Campus Events API.

Every module obtains its logger through `get_logger`, optionally tagged with a prefix that
identifies the subsystem in the log stream:

```python
from campus_events.managers.logging_manager import get_logger

logger = get_logger(prefix="[EventRepository]")
logger.info("Created event %s", event_id)
# 2026-01-01 10:00:00 - campus_events - INFO - [EventRepository] Created event 5f2c...
```

The root `campus_events` handler is configured once, on first use, from
`settings.DEFAULT_LOG_LEVEL`.
"""

import logging
import sys
from typing import Any, MutableMapping, Tuple

from campus_events.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "campus_events"

_configured = False


class PrefixAdapter(logging.LoggerAdapter):
    """Prepends a fixed prefix such as ``[DATABASE]`` to every message."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        prefix = self.extra.get("prefix") if self.extra else None
        if prefix:
            return f"{prefix} {msg}", kwargs
        return msg, kwargs


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = logging.getLevelName(settings.DEFAULT_LOG_LEVEL.upper())
    root.setLevel(level if isinstance(level, int) else logging.INFO)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    _configured = True


def get_logger(name: str = ROOT_LOGGER_NAME, prefix: str = "") -> logging.LoggerAdapter:
    """
    Returns a logger for the given name, tagged with an optional prefix.

    Args:
        name (str): Logger name. Names outside the `campus_events` hierarchy are nested under it.
        prefix (str): Text prepended to every message, e.g. `"[Event Routes]"`.

    Returns:
        logging.LoggerAdapter: Adapter exposing the standard logging methods.
    """
    _configure_root()

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return PrefixAdapter(logging.getLogger(name), {"prefix": prefix})
