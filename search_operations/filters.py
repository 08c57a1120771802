"""
Filter Builders

Helpers producing filter predicates in Qdrant's native grammar, plus the
conversion to `models.Filter` used when a predicate is sent to the server.
Predicates are plain dictionaries so callers can compose or log them.
"""

from typing import Any, Dict, Optional, Sequence

from qdrant_client import models


class FilterBuilder:
    """
    Builds payload filters over the document fields stored on each point.

    Example:
        >>> FilterBuilder.by_extensions([".py", ".ts"])
        {'must': [{'key': 'fileExtension', 'match': {'any': ['.py', '.ts']}}]}
        >>> FilterBuilder.by_exact_path("")
        {}
    """

    @staticmethod
    def by_extensions(extensions: Sequence[str]) -> Dict[str, Any]:
        """Match documents whose file extension is any of `extensions`; {} when empty."""
        if not extensions:
            return {}
        return {
            "must": [
                {"key": "fileExtension", "match": {"any": list(extensions)}}
            ]
        }

    @staticmethod
    def by_exact_path(relative_path: str) -> Dict[str, Any]:
        """Match documents with exactly this relative path; {} when empty."""
        if not relative_path:
            return {}
        return {
            "must": [
                {"key": "relativePath", "match": {"value": relative_path}}
            ]
        }

    @staticmethod
    def to_qdrant_filter(filter_expr: Optional[Any]) -> Optional[models.Filter]:
        """
        Convert a predicate to the client's Filter model.

        Empty or None predicates mean "no filter". Filter models are passed
        through unchanged; dictionaries are validated verbatim.
        """
        if not filter_expr:
            return None
        if isinstance(filter_expr, models.Filter):
            return filter_expr
        return models.Filter.model_validate(filter_expr)
