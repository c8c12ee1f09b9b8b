"""Cache key derivation for claim texts."""

import re

CACHE_NAMESPACE = "claim:"
MAX_KEY_TEXT_LENGTH = 200

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_claim_text(text: str) -> str:
    """Normalize claim text so near-identical claims compare equal.

    Lowercases, drops punctuation, collapses whitespace and keeps the first
    200 characters.
    """
    normalized = _NON_WORD.sub("", text.lower())
    normalized = _WHITESPACE.sub(" ", normalized).strip()
    return normalized[:MAX_KEY_TEXT_LENGTH]


def cache_key(text: str) -> str:
    """Fingerprint of a claim text used as the cache key.

    Only the text participates: claim id, context and source URL never do,
    so different callers asking about the same claim share one entry.
    """
    return f"{CACHE_NAMESPACE}{normalize_claim_text(text)}"
