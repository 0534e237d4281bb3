"""
portal.library: Document library folder navigation.

The admin library page browses one folder level at a time.  ``FolderBrowser``
tracks the path of entered folders (for "up" and breadcrumbs) and which
folder's documents are listed.  Its state is kept per session in the cache
backend so navigation survives between requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from portal import config
from portal.cache_backend import get_cache_backend
from portal.core.utils import format_file_size, parse_float

logger = logging.getLogger(__name__)


def folder_id(folder: dict) -> str:
    return str(folder.get("_id") or folder.get("id") or "")


@dataclass
class FolderBrowser:
    path: List[Dict[str, str]] = field(default_factory=list)
    selected_id: Optional[str] = None

    @property
    def current_parent_id(self) -> Optional[str]:
        """Folder whose children are listed; ``None`` means the root level."""
        return self.path[-1]["id"] if self.path else None

    def enter(self, folder_id_: str, name: str = "") -> None:
        self.path.append({"id": folder_id_, "name": name})
        self.selected_id = None

    def up(self) -> None:
        """Leave the current folder; at the root this just clears the selection."""
        if self.path:
            self.path.pop()
        self.selected_id = None

    def select(self, folder_id_: Optional[str]) -> None:
        self.selected_id = folder_id_

    def select_default(self, folders: List[dict]) -> None:
        """With nothing selected, the first listed folder becomes the selection."""
        if self.selected_id is None and folders:
            self.selected_id = folder_id(folders[0])

    def breadcrumbs(self) -> List[Dict[str, str]]:
        return [{"id": "", "name": "Root"}] + list(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "selected_id": self.selected_id}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FolderBrowser":
        if not isinstance(data, dict):
            return cls()
        path = [p for p in data.get("path") or [] if isinstance(p, dict) and p.get("id")]
        return cls(path=path, selected_id=data.get("selected_id"))


def _key(session_id: str) -> str:
    return f"library:{session_id}"


def load_browser(session_id: str) -> FolderBrowser:
    return FolderBrowser.from_dict(get_cache_backend().get_json(_key(session_id)))


def save_browser(session_id: str, browser: FolderBrowser) -> None:
    get_cache_backend().set_json(_key(session_id), browser.to_dict(), ttl_seconds=config.SESSION_EXPIRY_SECONDS)


def clear_browser(session_id: str) -> None:
    get_cache_backend().delete(_key(session_id))


def document_row(document: dict) -> dict:
    """Library listing row with a human file size."""
    size = parse_float(document.get("file_size")) or 0
    return {**document, "size_label": format_file_size(int(size))}
