"""Cache key construction.

All analysis cache keys are built here so equivalent requests always land
on the same entry. Callers must not assemble keys by hand.

Format:
    analysis:<md5(text_or_id)>[:marketing][:<md5(context)>]
"""

import hashlib

ANALYSIS_PREFIX = "analysis"


def hash_text(text: str) -> str:
    """Return the hex MD5 digest of text (UTF-8)."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def analysis_key(
    text_or_id: str,
    marketing: bool = False,
    context: str | None = None,
) -> str:
    """Build the cache key for an analysis result.

    Args:
        text_or_id: Document text, or a document id standing in for it
        marketing: Whether the marketing pipeline produced the result
        context: Optional marketing context (hashed into the key)

    Returns:
        The cache key

    Example:
        ```python
        analysis_key("Earn 12% guaranteed returns", marketing=True)
        # 'analysis:5f1c...:marketing'
        ```
    """
    key = f"{ANALYSIS_PREFIX}:{hash_text(text_or_id)}"
    if marketing:
        key += ":marketing"
    if context:
        key += f":{hash_text(context)}"
    return key


def simple_key(text: str, key_type: str = ANALYSIS_PREFIX) -> str:
    """Build a `<type>:<md5(text)>` key for non-analysis entries."""
    return f"{key_type}:{hash_text(text)}"
