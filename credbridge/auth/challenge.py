"""File challenge issuance: secret generation, token files and path mapping."""

from __future__ import annotations

import asyncio
import base64
import pathlib  # noqa: TC003 - used at runtime for Path operations
import secrets
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING

import structlog

from credbridge.auth.secret_cache import EvictionRecord
from credbridge.exceptions import ChallengeIssueError
from credbridge.types import EvictionReason

if TYPE_CHECKING:
    from credbridge.auth.secret_cache import SecretCache

logger = structlog.get_logger(__name__)

SECRET_BYTES = 32
TOKEN_FILE_SUFFIX = ".key"


@dataclass(frozen=True)
class IssuedChallenge:
    """Where a freshly issued secret lives. Never carries the secret itself."""

    file_name: str
    local_path: pathlib.Path
    remote_path: str


def generate_secret() -> str:
    """Return a base64-encoded 256-bit random secret."""
    return base64.b64encode(secrets.token_bytes(SECRET_BYTES)).decode("ascii")


def to_remote_path(remote_dir: str, file_name: str) -> str:
    """Join ``file_name`` onto the caller-side directory in the caller's path syntax.

    Only a directory written with ``\\`` and no ``/`` (``C:\\tokens``) is joined
    the Windows way. Anything else, including a bare relative name such as
    ``tokens``, is treated as a POSIX path with any ``\\`` converted to ``/``.
    """
    if "\\" in remote_dir and "/" not in remote_dir:
        return str(PureWindowsPath(remote_dir, file_name))
    return str(PurePosixPath(remote_dir.replace("\\", "/"), file_name))


def delete_best_effort(record: EvictionRecord) -> None:
    """Remove the token file behind an eviction record. Never raises."""
    try:
        record.file_path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning(
            "token_file_delete_failed",
            file_path=str(record.file_path),
            reason=str(record.reason),
            error=str(exc),
        )
        return
    logger.debug("token_file_deleted", file_path=str(record.file_path), reason=str(record.reason))


class ChallengeIssuer:
    """Writes one-time secrets to token files and registers them in the cache.

    A secret is registered before its file is written, so every file the
    issuer creates is owned by a cache entry. A write that fails or whose
    request is cancelled withdraws the entry and removes the file.
    """

    def __init__(self, cache: SecretCache, remote_dir: str) -> None:
        self._cache = cache
        self._remote_dir = remote_dir

    async def issue(self, local_dir: pathlib.Path, ttl_seconds: float) -> IssuedChallenge:
        """Create a new challenge file under ``local_dir`` valid for ``ttl_seconds``.

        Raises:
            ChallengeIssueError: if the directory or file cannot be written.
        """
        # Settle evictions left by earlier requests, off the event loop.
        await asyncio.to_thread(self._cache.sweep)

        secret = generate_secret()
        file_name = f"{uuid.uuid4()}{TOKEN_FILE_SUFFIX}"
        local_path = local_dir / file_name

        self._cache.put(secret, local_path, ttl_seconds)
        write = asyncio.ensure_future(asyncio.to_thread(self._write_secret, local_path, secret))
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            # The worker thread keeps running; withdraw once it has finished.
            write.add_done_callback(lambda fut: self._withdraw(secret, local_path, fut))
            raise
        except OSError as exc:
            self._withdraw(secret, local_path)
            raise ChallengeIssueError(f"Cannot write token file in {local_dir}: {exc}") from exc

        remote_path = to_remote_path(self._remote_dir, file_name)
        logger.info(
            "challenge_issued",
            local_path=str(local_path),
            remote_path=remote_path,
            ttl_seconds=ttl_seconds,
        )
        return IssuedChallenge(file_name=file_name, local_path=local_path, remote_path=remote_path)

    def _withdraw(
        self,
        secret: str,
        local_path: pathlib.Path,
        write: asyncio.Future[None] | None = None,
    ) -> None:
        if write is not None and not write.cancelled() and write.exception() is not None:
            logger.warning("token_file_write_failed", local_path=str(local_path))
        self._cache.take(secret)
        delete_best_effort(EvictionRecord(secret, local_path, EvictionReason.TAKEN))
        logger.info("challenge_withdrawn", local_path=str(local_path))

    @staticmethod
    def _write_secret(path: pathlib.Path, secret: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(secret, encoding="ascii")
