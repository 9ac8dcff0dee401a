"""HTTP client for the leaderboard service.

Every call reports failure through its return value instead of raising:
``list()`` degrades to an empty list, writes return a ``ClientResult``.
Nothing is retried.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

API_PATH = '/api/leaderboard'


@dataclass
class ClientResult:
    ok: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None
    not_found: bool = False


def sort_entries(entries: List[dict]) -> List[dict]:
    """Best score first, ties broken by higher level."""
    return sorted(entries, key=lambda e: (-(e.get('score') or 0), -(e.get('level') or 0)))


class LeaderboardClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip('/')
        self.http = session if session is not None else requests.Session()
        # 0 and None both mean "wait as long as it takes"
        self.timeout = timeout or None

    def _url(self, name: Optional[str] = None) -> str:
        if name is None:
            return f"{self.base_url}{API_PATH}"
        return f"{self.base_url}{API_PATH}/{quote(name, safe='')}"

    def _request(self, method: str, url: str, payload: Optional[dict] = None) -> ClientResult:
        try:
            resp = self.http.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning(f"[lb-client] {method} {url} failed error={exc}")
            return ClientResult(ok=False, error=str(exc))

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code >= 400:
            error = data.get('error') if isinstance(data, dict) else None
            error = error or f'HTTP {resp.status_code}'
            logger.warning(f"[lb-client] {method} {url} status={resp.status_code} error={error}")
            return ClientResult(
                ok=False,
                status=resp.status_code,
                data=data,
                error=error,
                not_found=resp.status_code == 404,
            )
        return ClientResult(ok=True, status=resp.status_code, data=data)

    def list(self) -> List[dict]:
        result = self._request('GET', self._url())
        if not result.ok:
            return []
        if not isinstance(result.data, list):
            logger.warning(f"[lb-client] unexpected list payload type={type(result.data).__name__}")
            return []
        return sort_entries(result.data)

    def submit(self, name: str, score: int, level: int) -> ClientResult:
        """Insert a new entry; repeated names produce repeated rows."""
        return self._request('POST', self._url(), {'name': name, 'score': score, 'level': level})

    def upsert(self, name: str, score: int, level: int) -> ClientResult:
        """Create or overwrite the entry stored under ``name``."""
        return self._request('PUT', self._url(name), {'score': score, 'level': level})

    def remove(self, name: str) -> ClientResult:
        return self._request('DELETE', self._url(name))

    def clear(self) -> ClientResult:
        return self._request('DELETE', self._url())
