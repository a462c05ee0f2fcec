"""
État de synchronisation côté client.

`SyncState` appartient à un unique `SyncController`; il n'est jamais persisté. Les composants
qui doivent réagir aux changements de statut s'abonnent via `subscribe`.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from portfolio_cms.app.metrics import SYNC_PENDING_QUEUE_SIZE, SYNC_STATUS_TRANSITIONS
from portfolio_cms.domain.content import ContentDocument, Status, utc_now_iso

log = structlog.get_logger(__name__).bind(component="sync_state")


class ConnectionStatus(str, Enum):
    CHECKING = "checking"
    ONLINE = "online"
    SYNCING = "syncing"
    OFFLINE = "offline"


@dataclass
class PendingOperation:
    """Opération d'écriture en attente de connectivité.

    `kind` vaut `write`, `publish` ou `delete_item`. `edit_seq` est la séquence d'édition de la
    section au moment de la mise en file.
    """

    kind: str
    section: str
    language: str | None
    document: ContentDocument | None = None
    status: str = "draft"
    item_id: str | int | None = None
    edit_seq: int = 0
    queued_at: str = field(default_factory=utc_now_iso)

    @property
    def slot(self) -> tuple[str, str | None]:
        return self.section, self.language


@dataclass
class StatusMessage:
    """Message destiné à l'utilisateur (niveau info / success / warning / error)."""

    level: str
    text: str
    section: str | None = None


StatusListener = Callable[["SyncState"], Any]


@dataclass
class SyncState:
    connection_status: ConnectionStatus = ConnectionStatus.CHECKING
    last_sync_at: str | None = None
    pending_queue: deque[PendingOperation] = field(default_factory=deque)
    unsaved: dict[str, bool] = field(default_factory=dict)
    edit_seq: dict[str, int] = field(default_factory=dict)
    _listeners: list[StatusListener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: StatusListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def has_unsaved(self, section: str) -> bool:
        return self.unsaved.get(section, False)

    def set_status(self, status: ConnectionStatus) -> None:
        """Change le statut et notifie les abonnés (une erreur d'abonné est journalisée)."""
        if status is self.connection_status:
            return
        previous, self.connection_status = self.connection_status, status
        SYNC_STATUS_TRANSITIONS.labels(status=status.value).inc()
        log.debug("connection_status_changed", previous=previous.value, status=status.value)
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                log.exception("status_listener_failed", listener=repr(listener))

    def enqueue(self, op: PendingOperation, max_size: int) -> PendingOperation | None:
        """Ajoute une opération; retourne l'opération la plus ancienne si elle a été évincée.

        Une écriture remplace sur place l'écriture en attente du même couple (section, langue)
        lorsque celle-ci est la dernière opération sur ce couple. Un brouillon ne remplace
        jamais une écriture publiée en attente.
        """
        if op.kind == "write":
            for index in range(len(self.pending_queue) - 1, -1, -1):
                queued = self.pending_queue[index]
                if queued.slot != op.slot:
                    continue
                if queued.kind == "write" and (
                    queued.status == op.status or op.status == Status.PUBLISHED.value
                ):
                    self.pending_queue[index] = op
                    SYNC_PENDING_QUEUE_SIZE.set(len(self.pending_queue))
                    return None
                break

        self.pending_queue.append(op)
        dropped = None
        if len(self.pending_queue) > max_size:
            dropped = self.pending_queue.popleft()
        SYNC_PENDING_QUEUE_SIZE.set(len(self.pending_queue))
        return dropped
