"""
Tokenizer

The sparse encoder consumes any object with a `tokenize(text)` method that
returns normalized word tokens in document order. `RegexTokenizer` is the
default implementation.
"""

import re
from typing import List, Protocol


class Tokenizer(Protocol):
    """Contract for tokenizers used by the sparse encoder."""

    def tokenize(self, text: str) -> List[str]:
        ...


class RegexTokenizer:
    """
    Case-folding word tokenizer.

    Keeps alphabetic word tokens only (digits, punctuation and underscores
    split tokens) and drops tokens shorter than `min_term_length`.
    """

    _WORD_PATTERN = re.compile(r"[^\W\d_]+")

    def __init__(self, min_term_length: int = 2):
        if min_term_length < 1:
            raise ValueError(f"min_term_length must be at least 1, got {min_term_length}")
        self.min_term_length = min_term_length

    def tokenize(self, text: str) -> List[str]:
        tokens = self._WORD_PATTERN.findall(text.casefold())
        return [t for t in tokens if len(t) >= self.min_term_length]
