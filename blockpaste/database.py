"""
Block store layer: content-addressed Redis storage with in-memory fallback for development.
Blocks are keyed by the SHA-256 of their bytes and addressed as /ipld/<cid>.
"""
import hashlib
import logging
from typing import Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from blockpaste.exceptions import PasteNotFoundError, StoreError

logger = logging.getLogger(__name__)

IPLD_PREFIX = "/ipld/"


def content_id(data: bytes) -> str:
    """Content identifier for a block: lowercase hex SHA-256."""
    return hashlib.sha256(data).hexdigest()


def _split_path(path: str) -> str:
    if not path.startswith(IPLD_PREFIX):
        raise PasteNotFoundError(reason=f"not a block path: {path!r}")
    return path[len(IPLD_PREFIX):]


class InMemoryBlockStore:
    """Simple in-memory block store for development/testing (when Redis unavailable)."""

    def __init__(self):
        self.blocks: Dict[str, bytes] = {}

    async def put(self, data: bytes) -> str:
        """Store a block, returning its internal path."""
        cid = content_id(data)
        self.blocks.setdefault(cid, bytes(data))
        return IPLD_PREFIX + cid

    async def get(self, path: str, limit: Optional[int] = None) -> bytes:
        """Retrieve at most `limit` bytes of a block."""
        cid = _split_path(path)
        if cid not in self.blocks:
            raise PasteNotFoundError(reason=f"block {cid} not in memory store")
        data = self.blocks[cid]
        return data if limit is None else data[:limit]

    async def ping(self) -> bool:
        """Health check."""
        return True

    async def close(self):
        pass


class RedisBlockStore:
    """Block store over a Redis connection pool (one key per block)."""

    key_prefix = "block:"

    def __init__(self, redis: Redis):
        self.redis = redis

    async def put(self, data: bytes) -> str:
        cid = content_id(data)
        try:
            # NX: identical content already stored is left untouched
            await self.redis.set(self.key_prefix + cid, data, nx=True)
        except RedisError as e:
            raise StoreError("Failed to put paste in store", reason=f"redis put failed: {e}") from e
        return IPLD_PREFIX + cid

    async def get(self, path: str, limit: Optional[int] = None) -> bytes:
        cid = _split_path(path)
        key = self.key_prefix + cid
        end = -1 if limit is None else limit - 1
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.exists(key)
                pipe.getrange(key, 0, end)
                exists, data = await pipe.execute()
        except RedisError as e:
            raise StoreError(reason=f"redis get failed: {e}") from e

        if not exists:
            raise PasteNotFoundError(reason=f"block {cid} not in redis")
        # GETRANGE 0 -1 on an empty value, or limit 0, still yields b""
        return b"" if limit == 0 else data

    async def ping(self) -> bool:
        return await self.redis.ping()

    async def close(self):
        await self.redis.aclose()


class BlockDatabase:
    """Wrapper for block store operations on a shared backend."""

    def __init__(self, redis_url: Optional[str] = None, backend=None):
        """
        Set up the block store backend.

        Args:
            redis_url: Redis connection URL, used when no backend is given
            backend: Pre-built backend (tests inject doubles here)
        """
        self.using_fallback = False
        self.redis_url = redis_url
        if backend is not None:
            self.backend = backend
        elif redis_url:
            self.backend = RedisBlockStore(
                Redis.from_url(redis_url, decode_responses=False, socket_connect_timeout=2)
            )
        else:
            self.backend = InMemoryBlockStore()
            self.using_fallback = True

    async def connect(self) -> None:
        """Verify the Redis backend is reachable, falling back to memory if not."""
        if not isinstance(self.backend, RedisBlockStore):
            return
        try:
            logger.info(f"Attempting to connect to Redis: {(self.redis_url or '<injected>')[:30]}...")
            await self.backend.ping()
            logger.info("✓ Redis block store connected")
        except RedisError as e:
            logger.error(f"❌ Error connecting to Redis: {type(e).__name__}: {str(e)}")
            logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
            await self.backend.close()
            self.backend = InMemoryBlockStore()
            self.using_fallback = True

    async def is_healthy(self) -> bool:
        """Check if the block store is alive."""
        try:
            return bool(await self.backend.ping())
        except RedisError as e:
            logger.error(f"Health check failed: {e}")
        return False

    async def put(self, data: bytes) -> str:
        return await self.backend.put(data)

    async def get(self, path: str, limit: Optional[int] = None) -> bytes:
        return await self.backend.get(path, limit)

    async def close(self) -> None:
        await self.backend.close()
