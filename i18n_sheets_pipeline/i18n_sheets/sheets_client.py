from __future__ import annotations
import logging, random, time
from typing import Any, Dict, List, Sequence
from urllib.parse import quote

import requests
from google.auth.exceptions import RefreshError, TransportError

from .errors import AuthorizationError, SheetsApiError
from .rows import RowTable, parse_grid
from .sheets_base import SheetBackend

SHEETS_URL_TEMPLATE = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}"
RETRY_STATUSES = {429, 500, 502, 503, 504}


def a1_range(sheet_name: str) -> str:
    """Whole-tab A1 range, quoted so names with spaces or quotes survive."""
    return "'" + sheet_name.replace("'", "''") + "'"


class GoogleSheetsBackend(SheetBackend):
    """Sheets v4 REST calls over an authorized requests session (bearer token, refresh on 401)."""

    def __init__(
        self,
        sheet_id: str,
        session: requests.Session,
        max_retries: int = 5,
        backoff_base: float = 1.5,
        timeout: int = 60,
        logger: logging.Logger | None = None,
    ):
        self.sheet_id = sheet_id
        self.session = session
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.timeout = timeout
        self.logger = logger or logging.getLogger("i18n-sheets")
        self.base_url = SHEETS_URL_TEMPLATE.format(sheet_id=sheet_id)

    def _values_url(self, sheet_name: str, suffix: str = "") -> str:
        return f"{self.base_url}/values/{quote(a1_range(sheet_name), safe='')}{suffix}"

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        last_err: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except RefreshError as e:
                raise AuthorizationError(f"Token refresh failed: {e}") from e
            except (requests.RequestException, TransportError) as e:
                last_err = e
            else:
                if 200 <= resp.status_code < 300:
                    if not resp.content:
                        return {}
                    try:
                        return resp.json()
                    except ValueError as e:
                        raise SheetsApiError(f"Invalid JSON response: {resp.text[:200]}",
                                             status=resp.status_code) from e
                err = SheetsApiError(f"HTTP {resp.status_code}: {resp.text[:200]}", status=resp.status_code)
                if resp.status_code not in RETRY_STATUSES:
                    raise err
                last_err = err
            if attempt < self.max_retries:
                sleep = (self.backoff_base ** attempt) + random.uniform(0, 0.6)
                self.logger.warning(f"Sheets request failed ({last_err}); retrying in {sleep:.1f}s")
                time.sleep(sleep)
        if isinstance(last_err, SheetsApiError):
            raise last_err
        raise SheetsApiError(f"Sheets request failed after {self.max_retries} attempts: {last_err}")

    def get_sheet_names(self) -> List[str]:
        data = self._request("GET", self.base_url, params={"fields": "sheets.properties.title"})
        return [(s.get("properties") or {}).get("title", "") for s in data.get("sheets", [])]

    def sheet_exists(self, name: str) -> bool:
        return name in self.get_sheet_names()

    def create_sheet(self, name: str) -> None:
        body = {"requests": [{"addSheet": {"properties": {"title": name}}}]}
        self._request("POST", f"{self.base_url}:batchUpdate", json=body)
        self.logger.info(f"Created new sheet: {name}")

    def get_sheet_values(self, name: str) -> List[List[str]]:
        data = self._request("GET", self._values_url(name))
        return data.get("values") or []

    def get_sheet_data(self, name: str) -> RowTable:
        return parse_grid(name, self.get_sheet_values(name))

    def update_sheet_data(self, name: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        if not self.sheet_exists(name):
            self.logger.info(f"Sheet {name} does not exist. Creating it...")
            self.create_sheet(name)
        else:
            try:
                self._request("POST", self._values_url(name, ":clear"), json={})
            except SheetsApiError as e:
                self.logger.warning(f"Could not clear sheet {name} ({e}); continuing with update")

        values = [list(headers)] + [list(r) for r in rows]
        self._request(
            "PUT",
            self._values_url(name),
            params={"valueInputOption": "RAW"},
            json={"range": a1_range(name), "majorDimension": "ROWS", "values": values},
        )
        self.logger.info(f"Updated sheet: {name}")
