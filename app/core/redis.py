from redis.asyncio import Redis

# Global Redis client instance, set by the application lifespan
redis_client: Redis | None = None


async def delete_matching(client: Redis, pattern: str, batch_size: int = 100) -> int:
    """
    Delete every key matching ``pattern`` using SCAN, never KEYS.

    Args:
        client: Redis client
        pattern: Glob-style key pattern, e.g. "metrics_*"
        batch_size: SCAN count hint

    Returns:
        Number of keys deleted
    """
    cursor = 0
    deleted = 0

    while True:
        cursor, keys = await client.scan(cursor, match=pattern, count=batch_size)
        if keys:
            deleted += await client.delete(*keys)
        if cursor == 0:
            break

    return deleted
