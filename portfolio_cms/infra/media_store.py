"""
Stockage des fichiers téléversés (répertoire local).

Chaque fichier reçoit un nom unique `{uuid}-{nom nettoyé}`; un index JSON (`index.json`)
conserve la liste des médias pour `GET /media`.
"""

from __future__ import annotations

import json
import re
import threading
import uuid
from dataclasses import asdict, dataclass
from pathlib import Path

from portfolio_cms.domain.content import utc_now_iso
from portfolio_cms.domain.errors import ValidationError

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class MediaRecord:
    """Métadonnées d'un fichier stocké."""

    fileName: str
    url: str
    size: int
    type: str
    uploadedAt: str


def safe_filename(name: str) -> str:
    """Nettoie un nom de fichier client (aucun séparateur de chemin)."""
    base = Path(name or "file").name
    cleaned = _UNSAFE.sub("-", base).strip("-.")
    return cleaned or "file"


class MediaStore:
    """Stockage local des médias avec index JSON."""

    def __init__(self, root: str | Path, base_url: str, max_bytes: int) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes
        self._lock = threading.Lock()

    @property
    def _index_path(self) -> Path:
        return self.root / "index.json"

    def _read_index(self) -> list[dict]:
        if not self._index_path.exists():
            return []
        with open(self._index_path, encoding="utf-8") as f:
            return json.load(f)

    def save(self, filename: str, content: bytes, content_type: str | None) -> MediaRecord:
        """Écrit le fichier et l'ajoute à l'index; rejette les fichiers vides ou trop gros."""
        if not content:
            raise ValidationError("empty file", ["file"])
        if len(content) > self.max_bytes:
            raise ValidationError(f"file exceeds {self.max_bytes} bytes", ["file"])

        stored_name = f"{uuid.uuid4().hex[:12]}-{safe_filename(filename)}"
        record = MediaRecord(
            fileName=stored_name,
            url=f"{self.base_url}/{stored_name}",
            size=len(content),
            type=content_type or "application/octet-stream",
            uploadedAt=utc_now_iso(),
        )
        with self._lock:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / stored_name).write_bytes(content)
            index = self._read_index()
            index.append(asdict(record))
            with open(self._index_path, "w", encoding="utf-8") as f:
                json.dump(index, f, ensure_ascii=False, indent=2)
        return record

    def list(self) -> list[dict]:
        """Liste les médias connus (plus récents en dernier)."""
        with self._lock:
            return self._read_index()
