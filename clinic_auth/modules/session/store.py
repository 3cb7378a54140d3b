import logging
from typing import Callable, List

from clinic_auth.modules.session.schemas import Snapshot

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Snapshot], None]


class SessionStore:
    """
    Holds the current Snapshot.

    `publish` is the only way to change state: it replaces the Snapshot with a
    new one built from the previous one plus `changes`, then hands the new
    object to every subscriber. Consumers never see a partially updated
    Snapshot.
    """

    def __init__(self, initial: Snapshot = None):
        self._snapshot = initial or Snapshot()
        self._listeners: List[SnapshotListener] = []

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def publish(self, **changes) -> Snapshot:
        unknown = set(changes) - set(Snapshot.model_fields)
        if unknown:
            raise ValueError(f"Unknown snapshot fields: {sorted(unknown)}")

        self._snapshot = self._snapshot.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as e:
                logger.exception(f"Snapshot listener failed: {e}")
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register listener; returns a callable that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
