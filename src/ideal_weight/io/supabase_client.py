"""
Minimal async PostgREST client for a Supabase project.

Only the two calls the catalog needs are implemented: calling a stored
procedure and selecting columns from a table.  The aiohttp session is
owned by the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import aiohttp

from ..catalog.errors import TransportError


class SupabaseRestClient:
    """
    PostgREST calls against ``{url}/rest/v1``.

    Non-2xx responses raise TransportError; connection-level failures are
    left as the aiohttp exceptions they are.
    """

    def __init__(self, session: aiohttp.ClientSession, url: str, key: str):
        """
        Args:
            session: Open aiohttp session (caller closes it)
            url: Project URL, e.g. https://xyz.supabase.co
            key: Anon or service-role API key
        """
        self.session = session
        self.rest_url = url.rstrip("/") + "/rest/v1"
        self.key = key

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Accept": "application/json",
        }

    async def _read_json(self, response: aiohttp.ClientResponse) -> Any:
        if response.status >= 400:
            body = await response.text()
            raise TransportError(
                f"{response.method} {response.url} failed with status "
                f"{response.status}: {body[:200]}",
                status=response.status,
                url=str(response.url),
            )
        return await response.json(content_type=None)

    async def rpc(self, function: str, params: Mapping[str, Any] | None = None) -> list[Any]:
        """POST /rpc/<function> and return the decoded JSON body."""
        async with self.session.post(
            f"{self.rest_url}/rpc/{function}",
            json=dict(params or {}),
            headers=self._headers(),
        ) as response:
            return await self._read_json(response)

    async def select(self, table: str, columns: str) -> list[Any]:
        """GET /<table>?select=<columns> and return the decoded JSON body."""
        async with self.session.get(
            f"{self.rest_url}/{table}",
            params={"select": columns},
            headers=self._headers(),
        ) as response:
            return await self._read_json(response)
