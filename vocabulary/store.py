"""
Vocabulary Store

Per-collection term → index table backing the sparse (lexical) vectors.
Indices are assigned on first occurrence and never reassigned or reused, so a
sparse dimension keeps the same meaning across insert and query calls and
across process restarts.

Snapshot format (JSON):

    {
        "vocabulary": {"term": 0, ...},
        "nextIndex": 1,
        "timestamp": "2024-01-01T00:00:00+00:00"
    }
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class VocabularyStore:
    """
    Mutable term → index table with full-rewrite JSON persistence.

    The table is not synchronized. Callers encoding into the same collection
    from concurrent writers must serialize their encode + save sequences,
    otherwise index assignments made between a load and a save can be lost.
    """

    def __init__(self, path: Optional[PathLike] = None, autoload: bool = True):
        """
        Initialize the store.

        Args:
            path: Snapshot file used by load()/save() when no path is passed
            autoload: Load the snapshot at `path` immediately if it exists
        """
        self.path: Optional[Path] = Path(path).expanduser() if path is not None else None
        self._vocabulary: Dict[str, int] = {}
        self._next_index = 0

        if autoload and self.path is not None:
            self.load()

    @property
    def next_index(self) -> int:
        """Index that will be assigned to the next unseen term."""
        return self._next_index

    def __len__(self) -> int:
        return len(self._vocabulary)

    def __contains__(self, term: object) -> bool:
        return term in self._vocabulary

    def get(self, term: str) -> Optional[int]:
        """Return the index of a known term without assigning one."""
        return self._vocabulary.get(term)

    def index_of(self, term: str) -> int:
        """Return the index of `term`, assigning the next free index on first occurrence."""
        index = self._vocabulary.get(term)
        if index is None:
            index = self._next_index
            self._vocabulary[term] = index
            self._next_index += 1
        return index

    def to_snapshot(self) -> Dict[str, Any]:
        """Build the JSON-serializable snapshot of the current table."""
        return {
            "vocabulary": dict(self._vocabulary),
            "nextIndex": self._next_index,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def _reset(self) -> None:
        self._vocabulary = {}
        self._next_index = 0

    def load(self, path: Optional[PathLike] = None) -> None:
        """
        Replace the in-memory table with the snapshot stored at `path`.

        A missing file leaves the store empty. An unreadable or corrupt file
        also leaves the store empty and logs a warning; it never raises.
        """
        target = Path(path).expanduser() if path is not None else self.path
        self._reset()

        if target is None or not target.exists():
            return

        try:
            with open(target, 'r', encoding='utf-8') as f:
                data = json.load(f)

            raw_vocabulary = data["vocabulary"]
            if not isinstance(raw_vocabulary, dict):
                raise ValueError("'vocabulary' must be an object")

            vocabulary = {str(term): int(index) for term, index in raw_vocabulary.items()}
            if any(index < 0 for index in vocabulary.values()):
                raise ValueError("vocabulary indices must be non-negative")

            next_index = data.get("nextIndex")
            floor = max(vocabulary.values()) + 1 if vocabulary else 0
            if not isinstance(next_index, int) or next_index < floor:
                if next_index is not None:
                    logger.warning(
                        f"Vocabulary snapshot {target} has nextIndex={next_index}, "
                        f"raising it to {floor} so indices are never reused"
                    )
                next_index = floor

            self._vocabulary = vocabulary
            self._next_index = next_index
            logger.info(f"Loaded vocabulary: {len(self._vocabulary)} terms from {target}")

        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to load vocabulary from {target}: {e}. Starting with an empty vocabulary")
            self._reset()

    def save(self, path: Optional[PathLike] = None) -> Optional[Path]:
        """
        Write the full table to `path`, creating parent directories as needed.

        Every save is a complete rewrite of the snapshot file.

        Returns:
            The path written, or None when the store has no path configured

        Raises:
            OSError: If the snapshot cannot be written
        """
        target = Path(path).expanduser() if path is not None else self.path
        if target is None:
            return None

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                json.dump(self.to_snapshot(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save vocabulary to {target}: {e}")
            raise

        logger.info(f"Saved vocabulary: {len(self._vocabulary)} terms to {target}")
        return target
