#!/usr/bin/env python3
"""Simple threading utilities for background reloads."""
from __future__ import annotations
import logging
import threading
from typing import Callable, Optional

from .errors import ReloadCancelled
from .models import CatalogSnapshot

logger = logging.getLogger(__name__)

# Type aliases
Action = Callable[[], None]
ErrorHandler = Callable[[Exception], None]
SnapshotHandler = Callable[[CatalogSnapshot], None]


def run_background(task: Action,
                   before: Optional[Action] = None,
                   after: Optional[Action] = None,
                   on_error: Optional[ErrorHandler] = None,
                   name: str | None = None,
                   daemon: bool = True) -> threading.Thread:
    """Execute a task in a background thread with optional hooks."""
    def runner():
        try:
            if before:
                before()
            task()
        except Exception as e:  # noqa: BLE001
            if on_error:
                on_error(e)
            else:
                logger.error(f"[run_background] Unhandled error in {name or 'task'}: {e}")
        finally:
            if after:
                after()
    t = threading.Thread(target=runner, daemon=daemon, name=name or 'bg-task')
    t.start()
    return t


def reload_in_background(service,
                         on_done: Optional[SnapshotHandler] = None,
                         on_error: Optional[ErrorHandler] = None,
                         server_id: str | None = None) -> threading.Thread:
    """Run ``service.reload()`` off the calling thread.

    Starting another reload supersedes this one; a superseded reload is
    logged and reported to neither callback.
    """
    def task():
        try:
            snapshot = service.reload(server_id=server_id)
        except ReloadCancelled as e:
            logger.info(f"Background reload dropped: {e}")
            return
        if on_done:
            on_done(snapshot)
    return run_background(task, on_error=on_error, name='catalog-reload')
