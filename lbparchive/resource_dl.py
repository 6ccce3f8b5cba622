"""Concurrent download of a level's resources and everything they depend on."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import aiohttp

from .resource_parse import BinaryMethod, ResrcData, Sha1Descriptor

USER_AGENT = "lbp_archive_dl/2.5.0"


class DownloadStatusError(Exception):
    """The server answered with a status other than 200."""

    def __init__(self, status: int) -> None:
        super().__init__(f"status code error: {status}")
        self.status = status


class _HashMismatch(ValueError):
    """Downloaded data does not match the hash it was requested by."""


class _UrlSource(Protocol):
    def url_for(self, sha1: bytes) -> str: ...


@dataclass
class DownloadResult:
    """Downloaded resources, sorted by hash, with success and failure counts."""

    resources: dict[bytes, bytes]
    success_count: int
    error_count: int


def _progress(mark: str) -> None:
    print(mark, end="", flush=True)


async def _run_detached(coroutines: Iterable[Awaitable[Any]]) -> None:
    # Failures of individual downloads are dropped; only corrupt data aborts.
    results = await asyncio.gather(*coroutines, return_exceptions=True)
    for result in results:
        if isinstance(result, _HashMismatch):
            raise result


class Downloader:
    """Downloads resources and their dependency trees, at most ``max_parallel`` at once."""

    def __init__(
        self,
        download_server: _UrlSource,
        max_parallel: int,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        if max_parallel < 1:
            raise ValueError("max_parallel must be at least 1")
        self._server = download_server
        self._semaphore = asyncio.Semaphore(max_parallel)
        self._session = session
        self._owns_session = False
        self._downloaded: set[bytes] = set()
        self._cache: dict[bytes, bytes] = {}
        self._successful = 0
        self._failed = 0

    async def __aenter__(self) -> Downloader:
        if self._session is None:
            self._session = aiohttp.ClientSession(headers={"User-Agent": USER_AGENT})
            self._owns_session = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    @property
    def resources(self) -> dict[bytes, bytes]:
        """Copy of every resource downloaded so far."""
        return dict(self._cache)

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Downloader must be used inside 'async with'")
        return self._session

    async def download_resource(self, sha1: bytes) -> bytes:
        """Fetch one resource and check it against its hash."""
        session = self._require_session()
        url = self._server.url_for(sha1)
        async with self._semaphore:
            response = await session.get(url)
        async with response:
            if response.status != 200:
                raise DownloadStatusError(response.status)
            body = await response.read()
        if hashlib.sha1(body).digest() != bytes(sha1):
            raise _HashMismatch(f"hash mismatch for resource {bytes(sha1).hex()}")
        return body

    async def download_with_dependencies(self, sha1: bytes) -> None:
        """Fetch a resource and, recursively, every resource it refers to by hash."""
        sha1 = bytes(sha1)
        if sha1 in self._downloaded:
            return

        try:
            resource = await self.download_resource(sha1)
        except DownloadStatusError:
            _progress("!")
            self._failed += 1
            return
        _progress(".")
        self._successful += 1

        self._downloaded.add(sha1)
        metadata = ResrcData.parse(resource, parse_texture=False)
        self._cache[sha1] = resource

        if isinstance(metadata.method, BinaryMethod):
            children = [
                dependency.descriptor.sha1
                for dependency in metadata.method.dependencies
                if isinstance(dependency.descriptor, Sha1Descriptor)
            ]
            await _run_detached(self.download_with_dependencies(child) for child in children)

    def stats(self) -> tuple[int, int]:
        """Numbers of successful and failed downloads."""
        return self._successful, self._failed


async def download_level(
    root_sha1: bytes,
    icon_sha1: Optional[bytes],
    download_server: _UrlSource,
    max_parallel: int,
) -> DownloadResult:
    """Download a level's root resource and icon together with all their dependencies."""
    async with Downloader(download_server, max_parallel) as downloader:
        targets = [root_sha1] if icon_sha1 is None else [root_sha1, icon_sha1]
        await _run_detached(downloader.download_with_dependencies(sha1) for sha1 in targets)
        success_count, error_count = downloader.stats()
        resources = dict(sorted(downloader.resources.items()))
    return DownloadResult(resources, success_count, error_count)