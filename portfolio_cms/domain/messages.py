"""Textes bilingues du canal de messages de statut (zh/en)."""

from __future__ import annotations

TEXTS: dict[str, dict[str, str]] = {
    "zh": {
        "draft_saved": "草稿保存成功",
        "published": "发布成功",
        "save_failed": "保存失败",
        "queued": "离线：已加入同步队列",
        "unauthorized": "登录已过期，请重新登录",
        "not_found": "未找到草稿，无法发布",
        "validation": "此字段为必填项",
        "deleted": "删除成功",
        "delete_failed": "删除失败",
        "load_ok": "内容加载完成",
        "load_partial": "部分内容加载失败，已使用默认内容",
        "load_failed": "加载数据失败",
        "synced": "队列同步完成",
        "sync_dropped": "同步失败，已放弃该操作",
        "stale_write": "保存期间内容已被修改，请再次保存",
    },
    "en": {
        "draft_saved": "Draft saved",
        "published": "Published",
        "save_failed": "Save failed",
        "queued": "Offline: queued for sync",
        "unauthorized": "Session expired, please sign in again",
        "not_found": "No draft to publish",
        "validation": "This field is required",
        "deleted": "Deleted",
        "delete_failed": "Delete failed",
        "load_ok": "Content loaded",
        "load_partial": "Some sections failed to load, defaults shown",
        "load_failed": "Failed to load content",
        "synced": "Pending changes synchronized",
        "sync_dropped": "Sync failed, operation dropped",
        "stale_write": "Content changed while saving, save again",
    },
}


def text(key: str, language: str = "en") -> str:
    """Retourne le texte traduit (anglais par défaut, clé brute si inconnue)."""
    table = TEXTS.get(language, TEXTS["en"])
    return table.get(key, TEXTS["en"].get(key, key))
