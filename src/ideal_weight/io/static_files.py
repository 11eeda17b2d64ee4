"""
JSON fetchers for the manifest catalog source.

HttpJsonFetcher reads from a base URL (static hosting); LocalJsonFetcher
reads from a directory, including the data bundled with the package.
Manifest paths are resolved relative to the base with leading slashes
stripped, so "/data/x.json" and "data/x.json" name the same file.
"""

from __future__ import annotations

import asyncio
import importlib.resources
import json
from pathlib import Path
from typing import Any

import aiohttp

from ..catalog.errors import TransportError


def get_bundled_data_dir() -> Path:
    """Return the package's bundled data/ directory."""
    try:
        ref = importlib.resources.files("ideal_weight").joinpath("data")
        with importlib.resources.as_file(ref) as p:
            return Path(p)
    except Exception:
        # Fallback: look relative to this file's package root
        return Path(__file__).parent.parent / "data"


class HttpJsonFetcher:
    """Fetch JSON documents relative to a base URL."""

    def __init__(self, session: aiohttp.ClientSession, base_url: str):
        self.session = session
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get_json(self, path: str) -> Any:
        url = self.url_for(path)
        async with self.session.get(url) as response:
            if response.status >= 400:
                raise TransportError(
                    f"Failed to fetch {path}: {response.status}",
                    status=response.status,
                    url=url,
                )
            return await response.json(content_type=None)


class LocalJsonFetcher:
    """Read JSON documents from a directory on disk."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, path: str) -> Path:
        return self.root / path.lstrip("/")

    def _read(self, path: Path) -> Any:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)

    async def get_json(self, path: str) -> Any:
        # Blocking read runs in a worker thread
        return await asyncio.to_thread(self._read, self.path_for(path))
