"""
Paste store adapter.

Wraps the block database with the rules the HTTP layer relies on:
bounded-latency reads, read truncation, and translation between the
public /paste/<id> route and the store's /ipld/<id> addressing.
"""

from __future__ import annotations

import asyncio
import logging

from blockpaste.database import IPLD_PREFIX, BlockDatabase
from blockpaste.exceptions import PasteError, PasteNotFoundError, PasteValidationError, StoreError

logger = logging.getLogger(__name__)

PASTE_PREFIX = "/paste/"


def internalize(public_path: str) -> str:
    """Rewrite a public paste path into the store's block path."""
    if not public_path.startswith(PASTE_PREFIX):
        raise PasteValidationError(reason=f"path lacks {PASTE_PREFIX} prefix: {public_path!r}")
    return public_path.replace(PASTE_PREFIX, IPLD_PREFIX, 1)


def publicize(internal_path: str) -> str:
    """Rewrite a store block path into its public paste path."""
    if not internal_path.startswith(IPLD_PREFIX):
        raise StoreError(reason=f"store returned unexpected path: {internal_path!r}")
    return internal_path.replace(IPLD_PREFIX, PASTE_PREFIX, 1)


class PasteStore:
    """Bounded-latency get/put over a shared BlockDatabase.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(self, database: BlockDatabase, max_size: int, get_timeout: float) -> None:
        self.database = database
        self.max_size = max_size
        self.get_timeout = get_timeout

    async def put(self, data: bytes) -> str:
        """Store envelope bytes and return the public paste path.

        No retries: a store failure surfaces as StoreError. Envelopes over
        `max_size` are refused before the store is touched, since reads are
        truncated at that size and could never return them intact.
        """
        if len(data) > self.max_size:
            raise PasteValidationError(
                "Paste exceeds maximum stored size",
                status_code=413,
                reason=f"envelope of {len(data)} bytes over read cap {self.max_size}",
            )
        try:
            internal_path = await self.database.put(data)
        except PasteError:
            raise
        except Exception as e:
            raise StoreError("Failed to put paste in store", reason=f"{type(e).__name__}: {e}") from e

        return publicize(internal_path)

    async def get(self, public_path: str) -> bytes:
        """Fetch envelope bytes for a public paste path.

        The lookup is abandoned once `get_timeout` seconds have passed;
        a slow store and a missing paste are both reported as not found.
        At most `max_size` bytes are returned.
        """
        internal_path = internalize(public_path)
        try:
            data = await asyncio.wait_for(
                self.database.get(internal_path, self.max_size),
                timeout=self.get_timeout,
            )
        except asyncio.TimeoutError as e:
            raise PasteNotFoundError(
                reason=f"lookup for {public_path} exceeded {self.get_timeout}s"
            ) from e
        except PasteError:
            raise
        except Exception as e:
            raise StoreError(reason=f"{type(e).__name__}: {e}") from e

        return data[: self.max_size]
