"""Storage key construction and validation.

Keys namespace every blob by its owner so two users can never collide.

Format: {owner_id}/{object_id}-{sanitized_name}

Examples:
    >>> from drive.storage.keys import sanitize_filename, build_storage_key
    >>> sanitize_filename("../Quarterly Report (final).pdf")
    'Quarterly_Report_final.pdf'
    >>> build_storage_key("u1", "f1", "a.txt")
    'u1/f1-a.txt'
"""

from __future__ import annotations

import re

from drive.errors import InvalidArgumentError

_KEY_SEGMENT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def sanitize_filename(name: str, max_length: int = 120) -> str:
    """Sanitize an uploaded filename into a filesystem-safe key suffix.

    Rules:
        - Drop any directory components
        - Whitespace runs become a single underscore
        - Strip everything except [A-Za-z0-9._-]
        - Strip leading dots so the result is never hidden or relative
        - Truncate to max_length, keeping the extension where possible
        - Fallback to 'file' if empty

    Args:
        name: Original filename as supplied by the client.
        max_length: Maximum length of the result.

    Returns:
        Sanitized filename.
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    base = re.sub(r"\s+", "_", base)
    base = re.sub(r"[^A-Za-z0-9._-]", "", base)
    base = re.sub(r"_{2,}", "_", base)
    base = base.lstrip(".-_")

    if len(base) > max_length:
        stem, dot, ext = base.rpartition(".")
        if dot and 0 < len(ext) < 16:
            base = stem[: max_length - len(ext) - 1] + "." + ext
        else:
            base = base[:max_length]

    return base or "file"


def build_storage_key(owner_id: str, object_id: str, original_name: str) -> str:
    """Build the storage key for a new blob.

    Args:
        owner_id: Owning user's id.
        object_id: Unique id of the object (the file id).
        original_name: Client-supplied filename, kept for readability only.

    Returns:
        Storage key string.

    Raises:
        InvalidArgumentError: If owner_id or object_id are not plain segments.
    """
    for label, value in (("owner id", owner_id), ("object id", object_id)):
        if not value or not _KEY_SEGMENT.match(value):
            raise InvalidArgumentError(f"Invalid {label} for storage key: {value!r}")
    return f"{owner_id}/{object_id}-{sanitize_filename(original_name)}"


def validate_storage_key(key: str) -> tuple[str, str]:
    """Check a storage key and split it into (owner_id, object_name).

    Raises:
        InvalidArgumentError: If the key could escape the owner's namespace.
    """
    parts = key.split("/") if key else []
    if len(parts) != 2 or not all(_KEY_SEGMENT.match(p) for p in parts):
        raise InvalidArgumentError(f"Malformed storage key: {key!r}")
    owner_id, object_name = parts
    return owner_id, object_name


def owner_of_key(key: str) -> str:
    """Return the owner id a storage key is namespaced under."""
    return validate_storage_key(key)[0]
