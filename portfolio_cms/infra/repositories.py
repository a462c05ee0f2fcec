"""
Dépôts des comptes administrateurs.

Implémentations en mémoire et Redis; l'email est unique (index `user:idx:email`).
"""

import json
from typing import Any

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from portfolio_cms.domain.errors import StoreUnavailableError


def _email_key(email: str) -> str:
    return email.strip().lower()


class InMemoryUserRepo:
    """Dépôt utilisateurs en mémoire (email indexée par scan simple)."""

    name = "memory"

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, dict[str, Any]] = {}

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Recherche un utilisateur par email (insensible à la casse)."""
        wanted = _email_key(email)
        return next(
            (u for u in self._db.values() if _email_key(u.get("email", "")) == wanted), None
        )

    def save(self, user: dict[str, Any]) -> dict[str, Any]:
        """Sauvegarde un utilisateur."""
        self._db[user["id"]] = user
        return user

    def list_emails(self) -> list[str]:
        return [u["email"] for u in self._db.values()]


class RedisUserRepo:
    """Dépôt utilisateurs via Redis avec index email->id (hash)."""

    name = "redis"

    def __init__(self, url: str):
        """Crée un client Redis et vérifie la connexion."""
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.client.ping()
        self.idx_key = "user:idx:email"

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Recherche un utilisateur par email via l'index Redis."""
        try:
            user_id = self.client.hget(self.idx_key, _email_key(email))
            if not user_id:
                return None
            raw = self.client.get(f"user:{user_id}")
        except (RedisConnectionError, RedisTimeoutError) as err:
            raise StoreUnavailableError("user store unreachable") from err
        return json.loads(raw) if raw else None

    def save(self, user: dict[str, Any]) -> dict[str, Any]:
        """Sauvegarde un utilisateur et met à jour l'index email."""
        pipe = self.client.pipeline()
        pipe.set(f"user:{user['id']}", json.dumps(user))
        pipe.hset(self.idx_key, _email_key(user["email"]), user["id"])
        try:
            pipe.execute()
        except (RedisConnectionError, RedisTimeoutError) as err:
            raise StoreUnavailableError("user store unreachable") from err
        return user

    def list_emails(self) -> list[str]:
        return list(self.client.hkeys(self.idx_key))
