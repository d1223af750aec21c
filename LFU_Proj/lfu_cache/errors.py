class CacheError(Exception):
    """Base error for the LFU-TTL cache."""


class InvalidConfiguration(CacheError, ValueError):
    """Raised when a cache is constructed with an unusable capacity or ttl."""
