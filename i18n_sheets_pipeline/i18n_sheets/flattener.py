from __future__ import annotations
import logging
from typing import Dict, List, Optional

from . import keypath
from .errors import KEY_COLLISION, MALFORMED_KEY, TYPE_COERCION_LOSS, MalformedKey
from .issues import IssueLog
from .rows import Row, RowTable
from .tree import Branch, TranslationStore
from .utils import scalar_text


class TreeFlattener:
    """
    Reverse projection: one RowTable per category.

    Categories and languages come out in lexicographic order. Rows follow the
    first-seen order of keys over a pre-order walk of each language's tree,
    languages visited in that same sorted order, so output is stable across runs.
    """

    def __init__(self, issues: Optional[IssueLog] = None, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("i18n-sheets")
        self.issues = issues if issues is not None else IssueLog(self.logger)

    def flatten(self, store: TranslationStore) -> List[RowTable]:
        return [self.flatten_category(store, cat) for cat in store.categories()]

    def flatten_category(self, store: TranslationStore, category: str) -> RowTable:
        languages = store.languages_for(category)
        order: Dict[str, None] = {}
        cells: Dict[str, Dict[str, str]] = {}
        for lang in languages:
            tree = store.get(lang, category)
            cells[lang] = self._leaves(tree, lang, category) if tree is not None else {}
            for key in cells[lang]:
                order.setdefault(key, None)

        table = RowTable(category, languages=languages)
        for key in order:
            table.rows.append(Row(key, {lang: cells[lang].get(key, "") for lang in languages}))
        return table

    def _leaves(self, tree: Branch, lang: str, category: str) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for segments, leaf in keypath.walk(tree):
            try:
                key = keypath.join(segments)
            except MalformedKey as e:
                self.issues.add(MALFORMED_KEY, f"Skipping leaf in {lang}/{category}: {e}",
                                category=category, language=lang, key=e.key)
                continue
            if key in out:
                # {"a.b": x} next to {"a": {"b": y}}: first leaf wins
                self.issues.add(KEY_COLLISION, f"Duplicate key '{key}' in {lang}/{category}; keeping the first value",
                                category=category, language=lang, key=key)
                continue
            if not isinstance(leaf.value, str):
                self.issues.add(TYPE_COERCION_LOSS,
                                f"{lang}/{category} '{key}': {type(leaf.value).__name__} value written as text",
                                category=category, language=lang, key=key)
            out[key] = scalar_text(leaf.value)
        return out


def flatten_store(store: TranslationStore, issues: Optional[IssueLog] = None) -> List[RowTable]:
    return TreeFlattener(issues).flatten(store)
