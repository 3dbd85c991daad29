from __future__ import annotations
from typing import Iterator, List, Sequence, Tuple

from .errors import MalformedKey
from .tree import Branch, Leaf

SEP = "."


def split(key: str) -> List[str]:
    if not key:
        raise MalformedKey("Empty key", key=key)
    segments = key.split(SEP)
    if any(s == "" for s in segments):
        raise MalformedKey(f"Key {key!r} has an empty path segment", key=key)
    return segments


def join(segments: Sequence[str]) -> str:
    if not segments:
        raise MalformedKey("Empty key path")
    for s in segments:
        # "a.b" splits back as two segments; an empty dot-part would not split at all
        if any(p == "" for p in s.split(SEP)):
            raise MalformedKey(f"Path segment {s!r} cannot be joined into a key", key=SEP.join(segments))
    return SEP.join(segments)


def walk(tree: Branch) -> Iterator[Tuple[List[str], Leaf]]:
    """Depth-first, pre-order: children in insertion order, every leaf yields its path."""
    def _visit(path: List[str], node: Branch) -> Iterator[Tuple[List[str], Leaf]]:
        for seg, child in node.children.items():
            if isinstance(child, Branch):
                yield from _visit(path + [seg], child)
            else:
                yield path + [seg], child

    yield from _visit([], tree)
