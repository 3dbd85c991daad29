from __future__ import annotations
from typing import Optional


class SyncError(Exception):
    """Base for faults that abort the unit they occur in (a row or a whole table)."""
    kind = "sync_error"

    def __init__(self, message: str, category: Optional[str] = None, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.category = category
        self.key = key


class MalformedKey(SyncError):
    kind = "malformed_key"


class MissingKeyColumn(SyncError):
    kind = "missing_key_column"


class EmptySheet(SyncError):
    kind = "empty_sheet"


class ConfigError(Exception):
    pass


class AuthorizationError(Exception):
    pass


class SheetsApiError(Exception):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


# recoverable issue kinds (recorded, never raised)
KEY_COLLISION = "key_collision"
LEAF_BRANCH_CONFLICT = "leaf_branch_conflict"
INVALID_JSON_DOCUMENT = "invalid_json_document"
NON_OBJECT_JSON_DOCUMENT = "non_object_json_document"
TYPE_COERCION_LOSS = "type_coercion_loss"
MALFORMED_KEY = MalformedKey.kind

INFORMATIONAL_KINDS = {TYPE_COERCION_LOSS}
