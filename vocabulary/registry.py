"""
Vocabulary Registry

Owns one SparseEncoder (and its VocabularyStore) per collection. Entries are
created on first use and evicted when the collection is dropped; no other
component holds vocabulary state.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from config import VocabularySettings

from .encoder import SparseEncoder
from .store import VocabularyStore
from .tokenizer import RegexTokenizer, Tokenizer

logger = logging.getLogger(__name__)


def derive_vocabulary_path(collection_name: str, directory: str) -> Path:
    """
    Derive the per-collection snapshot path.

    Collection names carry a content-address suffix after their last
    underscore ("hybrid_code_chunks_1a2b3c4d" → "1a2b3c4d"); the snapshot is
    `<directory>/vocabulary-<suffix>.json`. Names without an underscore use
    the whole name as the suffix.
    """
    collection_hash = collection_name.split('_')[-1]
    return Path(directory).expanduser() / f"vocabulary-{collection_hash}.json"


class VocabularyRegistry:
    """
    Per-collection registry of sparse encoders.

    The registry is a plain dict without locking. Callers issuing concurrent
    inserts into the same collection must serialize their own encode + save
    sequences.
    """

    def __init__(
        self,
        settings: Optional[VocabularySettings] = None,
        tokenizer_factory: Optional[Callable[[], Tokenizer]] = None
    ):
        """
        Initialize the registry.

        Args:
            settings: Vocabulary settings; `path` overrides per-collection derivation
            tokenizer_factory: Builds the tokenizer for each new encoder
        """
        self._settings = settings or VocabularySettings()
        self._tokenizer_factory = tokenizer_factory or (
            lambda: RegexTokenizer(min_term_length=self._settings.min_term_length)
        )
        self._encoders: Dict[str, SparseEncoder] = {}

    def __contains__(self, collection_name: object) -> bool:
        return collection_name in self._encoders

    def __len__(self) -> int:
        return len(self._encoders)

    @property
    def collections(self) -> List[str]:
        return list(self._encoders)

    def vocabulary_path(self, collection_name: str) -> Path:
        """Snapshot path for a collection: the configured path, else the derived one."""
        if self._settings.path:
            return Path(self._settings.path).expanduser()
        return derive_vocabulary_path(collection_name, self._settings.directory)

    def encoder_for(self, collection_name: str) -> SparseEncoder:
        """Return the collection's encoder, creating and loading it on first use."""
        encoder = self._encoders.get(collection_name)
        if encoder is None:
            store = VocabularyStore(self.vocabulary_path(collection_name))
            encoder = SparseEncoder(store, self._tokenizer_factory())
            self._encoders[collection_name] = encoder
            logger.debug(
                f"Created vocabulary for collection '{collection_name}' at {store.path} "
                f"({len(store)} terms)"
            )
        return encoder

    def evict(self, collection_name: str) -> bool:
        """
        Drop the in-memory encoder for a collection.

        The on-disk snapshot is left untouched.

        Returns:
            True if an encoder was registered for the collection
        """
        removed = self._encoders.pop(collection_name, None) is not None
        if removed:
            logger.debug(f"Evicted vocabulary for collection '{collection_name}'")
        return removed

    def save(self, collection_name: str) -> None:
        """Persist the vocabulary of a registered collection."""
        encoder = self._encoders.get(collection_name)
        if encoder is not None:
            encoder.save()
