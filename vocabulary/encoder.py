"""
Sparse Encoder

Turns text into a term-frequency sparse vector whose dimensions come from a
collection's VocabularyStore. Only raw term frequencies are produced; the
engine applies the IDF modifier configured on the sparse vector space.
"""

import logging
from collections import Counter
from typing import Optional

from .models import SparseVector
from .store import VocabularyStore
from .tokenizer import RegexTokenizer, Tokenizer

logger = logging.getLogger(__name__)


class SparseEncoder:
    """
    Term-frequency encoder bound to one vocabulary.

    Example:
        >>> encoder = SparseEncoder(VocabularyStore())
        >>> encoder.encode("index the index")
        SparseVector(indices=[0, 1], values=[2.0, 1.0])
    """

    def __init__(self, store: VocabularyStore, tokenizer: Optional[Tokenizer] = None):
        self.store = store
        self.tokenizer = tokenizer or RegexTokenizer()

    def encode(self, text: str) -> SparseVector:
        """
        Encode text as (vocabulary index, term frequency) pairs.

        Empty or whitespace-only text yields an empty vector without calling
        the tokenizer. Pairs are ordered by first occurrence of each term.
        Unseen terms are added to the vocabulary.
        """
        if not text or not text.strip():
            return SparseVector()

        tokens = self.tokenizer.tokenize(text)
        if not tokens:
            return SparseVector()

        # Counter preserves first-occurrence order
        term_freq = Counter(tokens)

        indices = []
        values = []
        for term, freq in term_freq.items():
            indices.append(self.store.index_of(term))
            values.append(float(freq))

        logger.debug(
            f"Generated sparse vector - tokens: {len(tokens)}, dimensions: {len(indices)}"
        )
        return SparseVector(indices=indices, values=values)

    def save(self) -> None:
        """Persist the underlying vocabulary."""
        self.store.save()
