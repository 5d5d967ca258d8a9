"""Google Drive v3 folder-children client.

Only two read-only queries are issued, both scoped to one parent folder:
  - child folders:  mimeType = application/vnd.google-apps.folder, not trashed
  - child images:   mimeType contains 'image/', not trashed

The static API key travels as ``key=`` on every request. Requests use
urllib and run in a worker thread so the event loop never blocks.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from photopick.drive.models import DriveEntry
from photopick.errors import ProviderUnavailable

logger = logging.getLogger("photopick.drive.client")

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DEFAULT_API_BASE = "https://www.googleapis.com/drive/v3/files"
_USER_AGENT = "photopick/0.1"
_MAX_BYTES = 10 * 1024 * 1024  # 10 MB


def display_locator(asset_id: str) -> str:
    """Return the full-size view URL for a Drive asset."""
    return f"https://drive.google.com/uc?export=view&id={asset_id}"


def thumbnail_locator(asset_id: str, size: int = 400) -> str:
    """Return a thumbnail URL *size* pixels wide for a Drive asset."""
    return f"https://drive.google.com/thumbnail?id={asset_id}&sz=w{size}"


class DriveClient:
    """Minimal async client for listing a Drive folder's children."""

    def __init__(
        self,
        api_key: str | None,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: int = 30,
    ) -> None:
        self.api_key = api_key
        self.api_base = api_base
        self.timeout = timeout

    async def list_child_folders(self, folder_id: str) -> list[DriveEntry]:
        """Return the non-trashed sub-folders of *folder_id* in provider order."""
        query = (
            f"'{_quote_id(folder_id)}' in parents and mimeType='{FOLDER_MIME_TYPE}' "
            "and trashed=false"
        )
        return await self._list(query)

    async def list_child_images(self, folder_id: str) -> list[DriveEntry]:
        """Return the non-trashed image files directly inside *folder_id*."""
        query = f"'{_quote_id(folder_id)}' in parents and mimeType contains 'image/' and trashed=false"
        return await self._list(query)

    async def _list(self, query: str) -> list[DriveEntry]:
        if not self.api_key:
            logger.error("Drive API key not configured; returning no entries for query %r", query)
            return []
        url = self._build_url(query)
        payload = await asyncio.to_thread(self._get_json, url)
        return _parse_entries(payload)

    def _build_url(self, query: str) -> str:
        params = urllib.parse.urlencode(
            {"q": query, "fields": "files(id,name,mimeType)", "key": self.api_key}
        )
        return f"{self.api_base}?{params}"

    def _get_json(self, url: str) -> Any:
        """Fetch *url* and decode its JSON body.

        Raises:
            ProviderUnavailable: On any network, HTTP status, or decoding failure.
        """
        request = urllib.request.Request(
            url, headers={"User-Agent": _USER_AGENT, "Accept": "application/json"}
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                body = response.read(_MAX_BYTES + 1)
        except urllib.error.HTTPError as exc:
            logger.error("Drive API error: HTTP %s %s", exc.code, exc.reason)
            raise ProviderUnavailable(f"Drive API error: HTTP {exc.code} {exc.reason}") from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            logger.error("Drive API unreachable: %s", exc)
            raise ProviderUnavailable(f"Drive API unreachable: {exc}") from exc

        if len(body) > _MAX_BYTES:
            raise ProviderUnavailable(
                f"Drive API response exceeds {_MAX_BYTES // (1024 * 1024)} MB limit."
            )
        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProviderUnavailable(f"Drive API returned malformed JSON: {exc}") from exc


def _quote_id(folder_id: str) -> str:
    # Drive query strings are single-quoted; escape embedded quotes.
    return folder_id.replace("\\", "\\\\").replace("'", "\\'")


def _parse_entries(payload: Any) -> list[DriveEntry]:
    if not isinstance(payload, dict):
        raise ProviderUnavailable("Drive API returned an unexpected payload shape.")
    entries: list[DriveEntry] = []
    for item in payload.get("files") or []:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        entries.append(
            DriveEntry(
                id=str(item["id"]),
                name=str(item.get("name", "")),
                mime_type=str(item.get("mimeType", "")),
            )
        )
    return entries
