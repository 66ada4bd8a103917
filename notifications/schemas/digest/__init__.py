"""Digest schemas."""

from notifications.schemas.digest.digest_flush_response import DigestFlushResponse

__all__ = ["DigestFlushResponse"]
