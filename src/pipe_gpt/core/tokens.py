"""Approximate token counting for the request budget.

This is a heuristic, not the provider's tokenizer. Each maximal run of word
characters (letters, digits, underscore) counts as one token, and every other
non-whitespace character counts as one token on its own. Real tokenizers
split long words into several pieces, so expect the estimate to run low on
prose with rare words and high on punctuation-heavy text. Use it for soft
limits only.
"""

from __future__ import annotations

import re

_TOKEN_RE = re.compile(r"\w+|[^\w\s]")


def estimate_tokens(text: str) -> int:
    """Estimate the number of tokens in text.

    Examples:
        >>> estimate_tokens("Hello, world!")
        4
        >>> estimate_tokens("")
        0
    """
    return sum(1 for _ in _TOKEN_RE.finditer(text))
