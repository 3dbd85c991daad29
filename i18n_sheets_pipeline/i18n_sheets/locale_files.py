from __future__ import annotations
import json, logging, os, shutil
from typing import Any, Dict, List, Optional

from .errors import INVALID_JSON_DOCUMENT, NON_OBJECT_JSON_DOCUMENT
from .issues import IssueLog
from .tree import Branch, TranslationStore
from .utils import dump_json_text, load_text, save_text

JSON_EXT = ".json"


def _json_files(directory: str) -> List[str]:
    return sorted(f for f in os.listdir(directory)
                  if f.endswith(JSON_EXT) and os.path.isfile(os.path.join(directory, f)))


def _safe_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class LocaleFileStore:
    """
    Reads and writes the per-language JSON documents.

    layout="nested": <locales_dir>/<lang>/<category>.json
    layout="flat":   <locales_dir>/<lang>.json holding every category as a top-level key
    """

    def __init__(
        self,
        locales_dir: str,
        layout: str = "nested",
        clean: bool = True,
        dry_run: bool = False,
        issues: Optional[IssueLog] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if layout not in ("nested", "flat"):
            raise ValueError(f"Unknown layout {layout!r}")
        self.locales_dir = locales_dir
        self.layout = layout
        self.clean = clean
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger("i18n-sheets")
        self.issues = issues if issues is not None else IssueLog(self.logger)

    # ---------- reading ----------

    def _load_document(self, path: str) -> Optional[Any]:
        try:
            return json.loads(load_text(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.issues.add(INVALID_JSON_DOCUMENT, f"{path} contains invalid JSON ({e}), skipping...")
            return None

    def read_translation_files(self) -> TranslationStore:
        store = TranslationStore()
        if not os.path.isdir(self.locales_dir):
            self.logger.warning(f"Locales directory {self.locales_dir} does not exist; nothing to read")
            return store
        if self.layout == "nested":
            self._read_nested(store)
        else:
            self._read_flat(store)
        return store

    def _read_nested(self, store: TranslationStore) -> None:
        for lang in sorted(os.listdir(self.locales_dir)):
            lang_dir = os.path.join(self.locales_dir, lang)
            if not os.path.isdir(lang_dir):
                continue
            for fname in _json_files(lang_dir):
                category = fname[: -len(JSON_EXT)]
                path = os.path.join(lang_dir, fname)
                doc = self._load_document(path)
                if doc is None:
                    continue
                if not isinstance(doc, dict):
                    self.issues.add(NON_OBJECT_JSON_DOCUMENT,
                                    f"{path} does not contain a valid translation object, skipping...",
                                    category=category, language=lang)
                    continue
                store.put(lang, category, Branch.from_json(doc))
                self.logger.info(f"Read {path}")

    def _read_flat(self, store: TranslationStore) -> None:
        for fname in _json_files(self.locales_dir):
            lang = fname[: -len(JSON_EXT)]
            path = os.path.join(self.locales_dir, fname)
            doc = self._load_document(path)
            if doc is None:
                continue
            if not isinstance(doc, dict):
                self.issues.add(NON_OBJECT_JSON_DOCUMENT,
                                f"{path} does not contain a valid translation object, skipping...", language=lang)
                continue
            for category, tree in doc.items():
                if not isinstance(tree, dict):
                    self.issues.add(NON_OBJECT_JSON_DOCUMENT,
                                    f"{path}: category '{category}' is not an object, skipping...",
                                    category=category, language=lang)
                    continue
                store.put(lang, category, Branch.from_json(tree))
            self.logger.info(f"Read {path}")

    # ---------- writing ----------

    def _clean(self) -> None:
        if not os.path.isdir(self.locales_dir):
            return
        if self.layout == "nested":
            shutil.rmtree(self.locales_dir)
            self.logger.info(f"Cleaned up {self.locales_dir} directory")
        else:
            for fname in _json_files(self.locales_dir):
                os.remove(os.path.join(self.locales_dir, fname))
            self.logger.info(f"Removed existing locale files from {self.locales_dir}")

    def _documents(self, store: TranslationStore) -> Dict[str, Any]:
        docs: Dict[str, Any] = {}
        for lang in store.languages():
            if not _safe_name(lang):
                self.logger.warning(f"Skipping language {lang!r}: not usable as a file name")
                continue
            cats = [c for c in store.categories(lang) if _safe_name(c)]
            for c in store.categories(lang):
                if c not in cats:
                    self.logger.warning(f"Skipping category {c!r} for {lang}: not usable as a file name")
            if self.layout == "nested":
                for cat in cats:
                    docs[os.path.join(self.locales_dir, lang, cat + JSON_EXT)] = store.get(lang, cat).to_json()
            else:
                docs[os.path.join(self.locales_dir, lang + JSON_EXT)] = {
                    cat: store.get(lang, cat).to_json() for cat in cats
                }
        return docs

    def write_translation_files(self, store: TranslationStore) -> List[str]:
        docs = self._documents(store)
        if self.dry_run:
            for path in docs:
                self.logger.info(f"[dry-run] would write {path}")
            return list(docs)
        if self.clean:
            self._clean()
        os.makedirs(self.locales_dir, exist_ok=True)
        for path, data in docs.items():
            save_text(path, dump_json_text(data))
            self.logger.info(f"Created {path}")
        return list(docs)
