"""
Vocabulary Module

Lexical side of hybrid search:
- VocabularyStore: persistent, append-only term → index table
- Tokenizer contract and the default RegexTokenizer
- SparseEncoder: text → term-frequency SparseVector
- VocabularyRegistry: per-collection ownership of encoders and stores
"""

from .models import SparseVector
from .store import VocabularyStore
from .tokenizer import Tokenizer, RegexTokenizer
from .encoder import SparseEncoder
from .registry import VocabularyRegistry, derive_vocabulary_path

__all__ = [
    'SparseVector',
    'VocabularyStore',
    'Tokenizer',
    'RegexTokenizer',
    'SparseEncoder',
    'VocabularyRegistry',
    'derive_vocabulary_path',
]
