"""
Identifier Mapping

Qdrant accepts point IDs that are either unsigned integers or UUIDs. Content
units are identified by a composite string key, so the key is hashed and the
digest laid out as a UUID. Re-inserting the same unit therefore overwrites
its earlier point instead of duplicating it.
"""

import hashlib


class IdentifierMapper:
    """Deterministic mapping from composite content keys to point IDs."""

    @staticmethod
    def compose_key(relative_path: str, start_line: int, end_line: int, content: str) -> str:
        """Build the `path:start:end:content` key identifying a content unit."""
        return f"{relative_path}:{start_line}:{end_line}:{content}"

    @staticmethod
    def to_stable_id(original_key: str) -> str:
        """
        Derive a stable UUID-formatted ID from an arbitrary key.

        The MD5 digest (128 bits) of the key is split into 8-4-4-4-12 hex
        groups. Identical keys always give identical IDs.

        Args:
            original_key: Composite key chosen by the caller

        Returns:
            ID of the form xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx
        """
        digest = hashlib.md5(original_key.encode("utf-8")).hexdigest()
        return f"{digest[0:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"


def to_stable_id(original_key: str) -> str:
    """Module-level shortcut for IdentifierMapper.to_stable_id."""
    return IdentifierMapper.to_stable_id(original_key)
