"""Local persistence for drafts and editor preferences.

``LocalStore`` is a flat key/value map kept in one JSON file, the way a
browser keeps ``localStorage``. Every write rewrites the file; the last
writer wins.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path.home() / ".inkfeed" / "storage.json"

DRAFT_FIELDS = ("title", "summary", "tags", "alias", "content", "draft", "listed", "createdAt")
NEW_DOCUMENT = "new"


class LocalStore:
    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path) if path else DEFAULT_STORE_PATH
        self._data: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        try:
            with self.path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(self._data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._write()

    def remove(self, *keys: str) -> None:
        removed = False
        for key in keys:
            if key in self._data:
                del self._data[key]
                removed = True
        if removed:
            self._write()

    def keys(self, prefix: str = "") -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]

    def __contains__(self, key: str) -> bool:
        return key in self._data


class DraftCache:
    """Draft field values for one document.

    Keys are ``draft/<doc_id>/<field>``; a document without an id uses the
    ``new`` scope, so an unsaved post survives a restart too.
    """

    def __init__(self, store: LocalStore, doc_id: int | str | None = None):
        self.store = store
        self.scope = str(doc_id) if doc_id not in (None, "") else NEW_DOCUMENT

    def _key(self, field: str) -> str:
        if field not in DRAFT_FIELDS:
            raise KeyError(f"Unknown draft field: {field}")
        return f"draft/{self.scope}/{field}"

    def get(self, field: str, default: Any = None) -> Any:
        return self.store.get(self._key(field), default)

    def set(self, field: str, value: Any) -> None:
        self.store.set(self._key(field), value)

    def has(self, field: str) -> bool:
        return self._key(field) in self.store

    def load(self) -> dict[str, Any]:
        """All cached fields of this document."""
        return {field: self.get(field) for field in DRAFT_FIELDS if self.has(field)}

    def clear(self) -> None:
        self.store.remove(*self.store.keys(f"draft/{self.scope}/"))


class Preferences:
    """Editor display preferences shared by all documents."""

    FONT_SIZE_KEY = "editor/fontSize"
    FONT_FAMILY_KEY = "editor/fontFamily"
    LINE_HEIGHT_KEY = "editor/lineHeight"

    DEFAULT_FONT_SIZE = 14
    DEFAULT_FONT_FAMILY = "monospace"
    DEFAULT_LINE_HEIGHT = 1.5

    def __init__(self, store: LocalStore):
        self.store = store

    @property
    def font_size(self) -> int:
        return int(self.store.get(self.FONT_SIZE_KEY, self.DEFAULT_FONT_SIZE))

    @font_size.setter
    def font_size(self, value: int) -> None:
        if value <= 0:
            raise ValueError("font size must be positive")
        self.store.set(self.FONT_SIZE_KEY, int(value))

    @property
    def font_family(self) -> str:
        return self.store.get(self.FONT_FAMILY_KEY, self.DEFAULT_FONT_FAMILY)

    @font_family.setter
    def font_family(self, value: str) -> None:
        self.store.set(self.FONT_FAMILY_KEY, value.strip() or self.DEFAULT_FONT_FAMILY)

    @property
    def line_height(self) -> float:
        return float(self.store.get(self.LINE_HEIGHT_KEY, self.DEFAULT_LINE_HEIGHT))

    @line_height.setter
    def line_height(self, value: float) -> None:
        if value <= 0:
            raise ValueError("line height must be positive")
        self.store.set(self.LINE_HEIGHT_KEY, float(value))

    def as_dict(self) -> dict[str, Any]:
        return {
            "fontSize": self.font_size,
            "fontFamily": self.font_family,
            "lineHeight": self.line_height,
        }


__all__ = ["LocalStore", "DraftCache", "Preferences", "DRAFT_FIELDS", "DEFAULT_STORE_PATH"]
