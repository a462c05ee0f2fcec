"""
Erreurs structurées du magasin de contenu.

Chaque erreur porte un `kind` stable (unavailable, unauthorized, not_found, conflict,
validation, error) partagé par le serveur et le client de synchronisation. Seules les
erreurs de connectivité sont rejouables.
"""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Erreur générique du magasin de contenu (kind + message)."""

    kind = "error"
    retryable = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Représentation sérialisable (kind, message, details)."""
        out: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out


class StoreUnavailableError(StoreError):
    """Backend injoignable ou délai dépassé (transitoire)."""

    kind = "unavailable"
    retryable = True


class UnauthorizedError(StoreError):
    """Jeton absent, invalide ou expiré: ré-authentification requise."""

    kind = "unauthorized"


class NotFoundError(StoreError):
    """Ressource absente (ex: publication sans brouillon)."""

    kind = "not_found"


class ConflictError(StoreError):
    """Conflit (email déjà utilisé, version attendue périmée)."""

    kind = "conflict"

    def __init__(
        self, message: str, code: str = "conflict", details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.code = code


class ValidationError(StoreError):
    """Champs requis manquants ou section inconnue."""

    kind = "validation"

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message, {"missing": missing} if missing else None)
        self.missing = missing or []
