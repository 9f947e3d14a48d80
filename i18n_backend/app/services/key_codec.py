"""Derived keys shared by the cache and the translations table.

A derived key has the form ``<locale-code>:<digest>`` where the digest is
the base64 encoding of the MD5 hex digest of the scope-qualified key.
Stored rows and cache entries are addressed by it, so the format must not
change.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Sequence


def qualify(key: str, scope: str | Sequence[str] | None = None) -> str:
    """Prefix *key* with its scope segments, joined by dots."""
    if not scope:
        return key
    if isinstance(scope, str):
        return f"{scope}.{key}"
    return ".".join([*(str(s) for s in scope), key])


def generate_hash_key(key: str) -> str:
    digest = hashlib.md5(key.encode("utf-8")).hexdigest()
    return base64.b64encode(digest.encode("ascii")).decode("ascii")


def build_cache_key(locale_code: str, hash_key: str) -> str:
    return f"{locale_code}:{hash_key}"


def derive_cache_key(locale_code: str, qualified_key: str) -> str:
    return build_cache_key(locale_code, generate_hash_key(qualified_key))
