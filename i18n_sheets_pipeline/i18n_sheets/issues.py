from __future__ import annotations
import json, logging, os
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from .errors import INFORMATIONAL_KINDS


@dataclass
class SyncIssue:
    kind: str
    detail: str
    category: Optional[str] = None
    language: Optional[str] = None
    key: Optional[str] = None


class IssueLog:
    """Collects recoverable faults of one run and mirrors each one to the logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("i18n-sheets")
        self.issues: List[SyncIssue] = []

    def add(self, kind: str, detail: str, category: Optional[str] = None,
            language: Optional[str] = None, key: Optional[str] = None) -> SyncIssue:
        issue = SyncIssue(kind, detail, category, language, key)
        self.issues.append(issue)
        if kind in INFORMATIONAL_KINDS:
            self.logger.info(detail)
        else:
            self.logger.warning(detail)
        return issue

    def of_kind(self, kind: str) -> List[SyncIssue]:
        return [i for i in self.issues if i.kind == kind]

    def counts(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        for i in self.issues:
            out[i.kind] = out.get(i.kind, 0) + 1
        return out

    def __len__(self) -> int:
        return len(self.issues)

    def dump(self, path: str) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump([asdict(i) for i in self.issues], f, ensure_ascii=False, indent=2)
        self.logger.info(f"Sync issues: {len(self.issues)} (see {path})")
