import json, os
from typing import Any, List

def unique_preserve_order(seq: List[str]) -> List[str]:
    seen, out = set(), []
    for s in seq:
        if s not in seen:
            seen.add(s); out.append(s)
    return out

def load_text(path: str) -> str:
    # utf-8-sig drops the BOM some editors put in front of JSON files
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()

def save_text(path: str, text: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)

def dump_json_text(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"

def scalar_text(value: Any) -> str:
    """Spreadsheet text for a JSON leaf: strings unchanged, everything else in JSON form."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
