from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class Leaf:
    value: Any = ""

    def to_json(self) -> Any:
        return self.value


@dataclass
class Branch:
    children: Dict[str, "Node"] = field(default_factory=dict)

    def to_json(self) -> Dict[str, Any]:
        return {seg: child.to_json() for seg, child in self.children.items()}

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "Branch":
        """Build a tree from a decoded JSON object. Objects become branches, anything else a leaf."""
        root = cls()
        for seg, value in obj.items():
            if isinstance(value, dict):
                root.children[seg] = cls.from_json(value)
            else:
                root.children[seg] = Leaf(value)
        return root


Node = Union[Leaf, Branch]


class TranslationStore:
    """language -> category -> tree, held for one sync run."""

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Branch]] = {}

    def put(self, language: str, category: str, tree: Branch) -> None:
        self._data.setdefault(language, {})[category] = tree

    def get(self, language: str, category: str) -> Optional[Branch]:
        return self._data.get(language, {}).get(category)

    def ensure(self, language: str, category: str) -> Branch:
        tree = self.get(language, category)
        if tree is None:
            tree = Branch()
            self.put(language, category, tree)
        return tree

    def languages(self) -> List[str]:
        return sorted(self._data)

    def categories(self, language: Optional[str] = None) -> List[str]:
        if language is not None:
            return list(self._data.get(language, {}))
        seen = set()
        for cats in self._data.values():
            seen.update(cats)
        return sorted(seen)

    def languages_for(self, category: str) -> List[str]:
        return sorted(lang for lang, cats in self._data.items() if category in cats)

    def to_json(self) -> Dict[str, Dict[str, Any]]:
        return {lang: {cat: tree.to_json() for cat, tree in cats.items()}
                for lang, cats in self._data.items()}

    def __len__(self) -> int:
        return sum(len(cats) for cats in self._data.values())
