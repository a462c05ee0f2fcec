# ============================================================
# Module : portfolio_cms/sync/controller.py
# Objet  : Contrôleur de synchronisation entre l'éditeur et le magasin de contenu.
# Contexte : exécution coopérative (asyncio); l'état n'est modifié qu'entre deux
#            points de suspension, aucun verrou n'est nécessaire.
# ============================================================

from __future__ import annotations

import asyncio
import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from portfolio_cms.app.metrics import SYNC_PENDING_QUEUE_SIZE
from portfolio_cms.core.settings import Settings, get_settings
from portfolio_cms.domain.content import (
    SECTIONS,
    ContentDocument,
    Status,
    normalize_language,
    normalize_section,
    same_item_id,
    utc_now_iso,
)
from portfolio_cms.domain.defaults import default_content
from portfolio_cms.domain.errors import (
    NotFoundError,
    StoreError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from portfolio_cms.domain.messages import text
from portfolio_cms.domain.validation import validate_document
from portfolio_cms.sync.client import ContentStoreClient
from portfolio_cms.sync.state import (
    ConnectionStatus,
    PendingOperation,
    StatusMessage,
    SyncState,
)

MessageListener = Callable[[StatusMessage], Any]


@dataclass
class SaveResult:
    """Issue d'une écriture: `ok`, mise en file (`queued`) ou erreur à afficher."""

    ok: bool
    queued: bool = False
    error: StoreError | None = None


class SyncController:
    """
    Médiateur entre l'interface d'édition et le magasin de contenu.

    - charge toutes les sections d'une langue (échecs partiels remplacés par les défauts)
    - suit les éditions locales non sauvegardées et leur séquence d'édition
    - sauvegarde / publie / supprime, met en file en cas de perte de connectivité
    - rejoue la file une fois la connexion rétablie, autosave périodique
    """

    def __init__(
        self,
        client: ContentStoreClient,
        settings: Settings | None = None,
        language: str = "zh",
    ) -> None:
        settings = settings or get_settings()
        self.client = client
        self.state = SyncState()
        self.language = language
        self.documents: dict[str, ContentDocument] = {}
        self.active_section: str | None = None
        self.autosave_interval = settings.SYNC_AUTOSAVE_INTERVAL_S
        self.probe_timeout = settings.SYNC_PROBE_TIMEOUT_S
        self.health_check_interval = settings.SYNC_HEALTH_CHECK_INTERVAL_S
        self.queue_max = settings.SYNC_QUEUE_MAX
        self._message_listeners: list[MessageListener] = []
        self._tasks: list[asyncio.Task] = []
        self._log = structlog.get_logger(__name__).bind(component="sync_controller")

    # --- messages ---
    def on_message(self, listener: MessageListener) -> None:
        self._message_listeners.append(listener)

    def _emit(self, level: str, key: str, section: str | None = None) -> None:
        message = StatusMessage(level=level, text=text(key, self.language), section=section)
        for listener in list(self._message_listeners):
            try:
                listener(message)
            except Exception:
                self._log.exception("message_listener_failed", key=key)

    @property
    def status(self) -> ConnectionStatus:
        return self.state.connection_status

    # --- connectivité ---
    async def probe(self) -> bool:
        """Sonde `/health` avec un délai borné; met à jour le statut."""
        try:
            await self.client.health(timeout=self.probe_timeout)
        except StoreError as err:
            self._log.warning("probe_failed", kind=err.kind, error=err.message)
            self.state.set_status(ConnectionStatus.OFFLINE)
            return False
        self.state.set_status(ConnectionStatus.ONLINE)
        return True

    async def force_reconnect(self) -> bool:
        """Relance une sonde unique puis rejoue la file.

        Sans effet pendant `checking` ou `syncing`: le résultat de l'opération en vol fixera
        le statut.
        """
        if self.status in (ConnectionStatus.CHECKING, ConnectionStatus.SYNCING):
            return False
        self.state.set_status(ConnectionStatus.CHECKING)
        online = await self.probe()
        if online and self.state.pending_queue:
            await self.flush_pending()
        return online

    # --- lecture ---
    async def load_all(
        self, language: str, include_drafts: bool = False
    ) -> dict[str, ContentDocument]:
        """Lit toutes les sections en parallèle; une section en échec reçoit ses défauts."""
        results = await asyncio.gather(
            *(self.client.read(section, language, include_drafts) for section in SECTIONS),
            return_exceptions=True,
        )
        loaded: dict[str, ContentDocument] = {}
        failed: list[StoreError] = []
        for section, result in zip(SECTIONS, results, strict=True):
            fallback = default_content(section, normalize_language(section, language))
            if isinstance(result, StoreError):
                self._log.warning("section_load_failed", section=section, kind=result.kind)
                failed.append(result)
                loaded[section] = fallback
            elif isinstance(result, Exception):
                self._log.error("section_load_crashed", section=section, error=repr(result))
                failed.append(StoreError(str(result) or type(result).__name__))
                loaded[section] = fallback
            elif isinstance(result, BaseException):
                # annulation de la tâche: on ne la masque pas
                raise result
            elif include_drafts and isinstance(result, dict) and "hasDraft" in result:
                candidates = (result.get("draft"), result.get("published"))
                loaded[section] = next((d for d in candidates if d is not None), fallback)
            else:
                loaded[section] = result if result is not None else fallback

        self.language = language
        self.documents = loaded
        self.state.unsaved = {section: False for section in SECTIONS}
        if not failed:
            self.state.last_sync_at = utc_now_iso()
            self._emit("success", "load_ok")
        elif len(failed) < len(SECTIONS):
            self._emit("warning", "load_partial")
        else:
            if all(err.retryable for err in failed):
                self.state.set_status(ConnectionStatus.OFFLINE)
            self._emit("error", "load_failed")
        self._log.info("content_loaded", language=language, failed=len(failed))
        return loaded

    # --- édition locale ---
    def edit(self, section: str, document: ContentDocument) -> int:
        """Enregistre une édition locale; retourne la nouvelle séquence d'édition."""
        name = normalize_section(section)
        self.documents[name] = copy.deepcopy(document)
        self.active_section = name
        self.state.unsaved[name] = True
        self.state.edit_seq[name] = self.state.edit_seq.get(name, 0) + 1
        return self.state.edit_seq[name]

    # --- écritures ---
    def _queue(self, op: PendingOperation) -> None:
        dropped = self.state.enqueue(op, self.queue_max)
        if dropped is not None:
            self._log.warning(
                "pending_queue_overflow",
                dropped_kind=dropped.kind,
                dropped_section=dropped.section,
                size=len(self.state.pending_queue),
            )
            self._emit("warning", "sync_dropped", dropped.section)
        self._emit("warning", "queued", op.section)

    async def _perform(self, op: PendingOperation) -> None:
        if op.kind == "write":
            await self.client.write(op.section, op.language, op.document, op.status)
        elif op.kind == "publish":
            await self.client.publish(op.section, op.language)
        elif op.kind == "delete_item":
            await self.client.delete_item(op.section, op.language, op.item_id)
        else:
            raise ValueError(f"unknown pending operation: {op.kind}")

    async def _execute(self, op: PendingOperation, failure_key: str) -> SaveResult:
        """Exécute une opération et applique les transitions de statut.

        Hors ligne (ou pendant `checking`), l'opération est mise en file sans appel réseau.
        """
        if self.status in (ConnectionStatus.OFFLINE, ConnectionStatus.CHECKING):
            self._queue(op)
            return SaveResult(ok=False, queued=True)

        self.state.set_status(ConnectionStatus.SYNCING)
        try:
            await self._perform(op)
        except StoreUnavailableError as err:
            self.state.set_status(ConnectionStatus.OFFLINE)
            self._queue(op)
            return SaveResult(ok=False, queued=True, error=err)
        except UnauthorizedError as err:
            self.state.set_status(ConnectionStatus.ONLINE)
            self._emit("error", "unauthorized", op.section)
            return SaveResult(ok=False, error=err)
        except NotFoundError as err:
            self.state.set_status(ConnectionStatus.ONLINE)
            self._emit("error", "not_found", op.section)
            return SaveResult(ok=False, error=err)
        except StoreError as err:
            self.state.set_status(ConnectionStatus.ONLINE)
            self._log.warning(
                "sync_operation_failed", kind=op.kind, section=op.section, error=err.message
            )
            self._emit("error", failure_key, op.section)
            return SaveResult(ok=False, error=err)
        finally:
            # une exception inattendue ne doit jamais laisser le statut bloqué sur `syncing`
            if self.status is ConnectionStatus.SYNCING:
                self.state.set_status(ConnectionStatus.ONLINE)

        self.state.set_status(ConnectionStatus.ONLINE)
        self.state.last_sync_at = utc_now_iso()
        return SaveResult(ok=True)

    def _mark_saved(self, op: PendingOperation) -> None:
        """Efface l'indicateur non sauvegardé si aucune édition plus récente n'existe."""
        if self.state.edit_seq.get(op.section, 0) != op.edit_seq:
            self._log.warning(
                "stale_write_completed",
                section=op.section,
                saved_seq=op.edit_seq,
                current_seq=self.state.edit_seq.get(op.section, 0),
            )
            self._emit("warning", "stale_write", op.section)
            return
        self.state.unsaved[op.section] = False
        if op.language == self.language or op.language is None:
            self.documents[op.section] = copy.deepcopy(op.document)

    async def save_section(
        self,
        section: str,
        language: str | None = None,
        document: ContentDocument | None = None,
        status: str | Status = Status.DRAFT,
    ) -> SaveResult:
        """Sauvegarde une section; la validation bloque l'envoi avant tout appel réseau."""
        name = normalize_section(section)
        language = language or self.language
        st = Status(status)
        doc = document if document is not None else self.documents.get(name)
        if doc is None:
            doc = default_content(name, normalize_language(name, language))
        try:
            validate_document(name, doc)
        except ValidationError as err:
            self._emit("error", "validation", name)
            return SaveResult(ok=False, error=err)

        op = PendingOperation(
            kind="write",
            section=name,
            language=language,
            document=copy.deepcopy(doc),
            status=st.value,
            edit_seq=self.state.edit_seq.get(name, 0),
        )
        result = await self._execute(op, "save_failed")
        if result.ok:
            self._mark_saved(op)
            self._emit("success", "published" if st is Status.PUBLISHED else "draft_saved", name)
        return result

    async def publish(self, section: str, language: str | None = None) -> SaveResult:
        name = normalize_section(section)
        op = PendingOperation(kind="publish", section=name, language=language or self.language)
        result = await self._execute(op, "save_failed")
        if result.ok:
            self._emit("success", "published", name)
        return result

    async def delete_item(
        self, section: str, language: str | None, item_id: str | int
    ) -> SaveResult:
        name = normalize_section(section)
        language = language or self.language
        op = PendingOperation(kind="delete_item", section=name, language=language, item_id=item_id)
        result = await self._execute(op, "delete_failed")
        if result.ok:
            cached = self.documents.get(name)
            if language == self.language and isinstance(cached, list):
                self.documents[name] = [it for it in cached if not same_item_id(it, item_id)]
            self._emit("success", "deleted", name)
        return result

    async def flush_pending(self) -> int:
        """Rejoue la file dans l'ordre; retourne le nombre d'opérations appliquées.

        Une erreur de connectivité interrompt le rejeu (l'opération reste en file), tout comme
        une erreur d'autorisation; les autres échecs retirent l'opération avec un message.
        """
        if self.status is not ConnectionStatus.ONLINE:
            return 0
        replayed = 0
        queue = self.state.pending_queue
        while queue:
            op = queue[0]
            self.state.set_status(ConnectionStatus.SYNCING)
            try:
                await self._perform(op)
            except StoreUnavailableError:
                self.state.set_status(ConnectionStatus.OFFLINE)
                break
            except UnauthorizedError:
                self.state.set_status(ConnectionStatus.ONLINE)
                self._emit("error", "unauthorized", op.section)
                break
            except StoreError as err:
                queue.popleft()
                self.state.set_status(ConnectionStatus.ONLINE)
                self._log.warning(
                    "pending_operation_dropped",
                    kind=op.kind,
                    section=op.section,
                    error=err.message,
                )
                self._emit("warning", "sync_dropped", op.section)
                continue
            finally:
                if self.status is ConnectionStatus.SYNCING:
                    self.state.set_status(ConnectionStatus.ONLINE)
            queue.popleft()
            replayed += 1
            self.state.set_status(ConnectionStatus.ONLINE)
            if op.kind == "write":
                self._mark_saved(op)

        SYNC_PENDING_QUEUE_SIZE.set(len(queue))
        if replayed:
            self.state.last_sync_at = utc_now_iso()
            self._emit("success", "synced")
        return replayed

    # --- tâches de fond ---
    async def autosave_once(self) -> SaveResult | None:
        """Un cycle d'autosave: brouillon de la section active si modifiée et en ligne."""
        if self.status is not ConnectionStatus.ONLINE:
            self._log.debug("autosave_suppressed", status=self.status.value)
            return None
        section = self.active_section
        if section is None or not self.state.has_unsaved(section):
            return None
        return await self.save_section(
            section, self.language, self.documents.get(section), Status.DRAFT
        )

    async def _autosave_loop(self) -> None:
        while True:
            await asyncio.sleep(self.autosave_interval)
            await self.autosave_once()

    async def _reconnect_loop(self) -> None:
        while True:
            await asyncio.sleep(self.health_check_interval)
            if self.status is ConnectionStatus.OFFLINE:
                await self.force_reconnect()

    async def start(self) -> None:
        """Sonde initiale puis lancement des boucles d'autosave et de reconnexion."""
        if await self.probe() and self.state.pending_queue:
            await self.flush_pending()
        self._tasks = [
            asyncio.create_task(self._autosave_loop(), name="sync-autosave"),
            asyncio.create_task(self._reconnect_loop(), name="sync-reconnect"),
        ]

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        await self.client.aclose()
