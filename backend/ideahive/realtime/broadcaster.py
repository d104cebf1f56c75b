"""
Page-room fan-out for live edit notifications.

Sessions viewing a page join that page's room with a listener callable.
After a mutation commits, the engine publishes one event to the room and
every listener receives it. Delivery is best effort: a failing listener is
logged and removed, and publishing never raises back into the caller.
There is no ordering or conflict resolution here; clients re-read page
content when they need the authoritative state.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import current_app

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class PageBroadcaster:
    """
    Registry of listeners grouped by page id.

    rooms = {
        "page-a": [("session-1", listener), ("session-2", listener)],
        "page-b": [("session-3", listener)],
    }
    """

    def __init__(self):
        self._rooms: Dict[str, List[Tuple[str, Listener]]] = {}
        self._lock = threading.Lock()

    def join(self, page_id: str, session_id: str, listener: Listener) -> None:
        with self._lock:
            room = self._rooms.setdefault(page_id, [])
            room[:] = [entry for entry in room if entry[0] != session_id]
            room.append((session_id, listener))

    def leave(self, page_id: str, session_id: str) -> None:
        """Idempotent; drops the room once it is empty."""
        with self._lock:
            room = self._rooms.get(page_id)
            if room is None:
                return
            room[:] = [entry for entry in room if entry[0] != session_id]
            if not room:
                del self._rooms[page_id]

    def leave_all(self, session_id: str) -> None:
        with self._lock:
            page_ids = list(self._rooms)
        for page_id in page_ids:
            self.leave(page_id, session_id)

    def sessions(self, page_id: str) -> List[str]:
        with self._lock:
            return [session_id for session_id, _ in self._rooms.get(page_id, [])]

    def publish(
        self,
        page_id: str,
        event: str,
        payload: Dict[str, Any],
        *,
        exclude: Optional[str] = None,
    ) -> int:
        """Deliver `event` to every session in the room; returns delivery count."""
        with self._lock:
            targets = list(self._rooms.get(page_id, []))

        delivered = 0
        for session_id, listener in targets:
            if session_id == exclude:
                continue
            try:
                listener(event, payload)
                delivered += 1
            except Exception as exc:
                logger.warning(
                    "Dropping session %s from page %s after listener error: %s",
                    session_id, page_id, exc,
                )
                self.leave(page_id, session_id)
        return delivered


def get_broadcaster() -> PageBroadcaster:
    return current_app.extensions["broadcaster"]
