from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Set

from . import keypath
from .errors import KEY_COLLISION, LEAF_BRANCH_CONFLICT, MALFORMED_KEY, MalformedKey
from .issues import IssueLog
from .rows import RowTable
from .tree import Branch, Leaf, TranslationStore


def _insert(root: Branch, segments: List[str], value: str) -> bool:
    """Walk-or-create the branch chain and set the last segment. Returns True if a subtree was overwritten."""
    node = root
    conflict = False
    for seg in segments[:-1]:
        child = node.children.get(seg)
        if isinstance(child, Leaf):
            conflict = True
            child = None
        if child is None:
            child = Branch()
            node.children[seg] = child
        node = child
    if isinstance(node.children.get(segments[-1]), Branch):
        conflict = True
    node.children[segments[-1]] = Leaf(value)
    return conflict


class TreeBuilder:
    """Forward projection: per-category row tables into language -> category -> tree."""

    def __init__(self, issues: Optional[IssueLog] = None, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("i18n-sheets")
        self.issues = issues if issues is not None else IssueLog(self.logger)

    def build(self, tables: Iterable[RowTable], store: Optional[TranslationStore] = None) -> TranslationStore:
        store = store if store is not None else TranslationStore()
        for table in tables:
            self.add_table(store, table)
        return store

    def add_table(self, store: TranslationStore, table: RowTable) -> None:
        cat = table.category
        roots = {lang: store.ensure(lang, cat) for lang in table.languages}
        seen: Set[str] = set()
        for row in table.rows:
            if row.is_blank():
                continue
            try:
                segments = keypath.split(row.key)
            except MalformedKey as e:
                self.issues.add(MALFORMED_KEY, f"Skipping row in sheet {cat}: {e}", category=cat, key=row.key)
                continue

            if row.key in seen:
                self.issues.add(KEY_COLLISION, f"Duplicate key '{row.key}' in sheet {cat}; the later row wins",
                                category=cat, key=row.key)
            seen.add(row.key)

            conflicted = False
            for lang, root in roots.items():
                if _insert(root, segments, row.values.get(lang, "")):
                    conflicted = True
            if conflicted:
                self.issues.add(LEAF_BRANCH_CONFLICT,
                                f"Key '{row.key}' in sheet {cat} overwrote a conflicting leaf/branch",
                                category=cat, key=row.key)
        self.logger.debug(f"Built {cat}: {len(seen)} keys x {len(roots)} languages")


def build_store(tables: Iterable[RowTable], issues: Optional[IssueLog] = None) -> TranslationStore:
    return TreeBuilder(issues).build(tables)
