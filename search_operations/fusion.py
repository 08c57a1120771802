"""
Fusion Strategies

Local Reciprocal Rank Fusion for combining ranked candidate lists when the
engine's own fusion is not used.
"""

import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_RRF_K = 60


def _default_key(hit: Any) -> str:
    if isinstance(hit, dict):
        return str(hit.get('id'))
    return str(getattr(hit, 'id'))


def reciprocal_rank_fusion(
    results_list: Sequence[Sequence[Any]],
    k: int = DEFAULT_RRF_K,
    key: Callable[[Any], str] = _default_key
) -> List[Tuple[Any, float]]:
    """
    Fuse results using Reciprocal Rank Fusion (RRF).

    Formula: RRF_score(d) = Σ 1 / (k + rank(d)), ranks starting at 1.

    Ties are broken by rank in the first list (the dense list by convention),
    then by order of first appearance across lists.

    Args:
        results_list: Ranked result lists, dense list first
        k: RRF rank constant
        key: Extracts a document identifier from a hit

    Returns:
        (hit, fused score) pairs sorted by descending score. The hit kept for
        each document is its first occurrence.
    """
    if not results_list:
        return []

    scores: Dict[str, float] = {}
    first_hit: Dict[str, Any] = {}
    primary_rank: Dict[str, int] = {}

    for list_index, results in enumerate(results_list):
        for rank, hit in enumerate(results, start=1):
            doc_id = key(hit)
            scores[doc_id] = scores.get(doc_id, 0.0) + 1.0 / (k + rank)
            if doc_id not in first_hit:
                first_hit[doc_id] = hit
            if list_index == 0 and doc_id not in primary_rank:
                primary_rank[doc_id] = rank

    order = {doc_id: position for position, doc_id in enumerate(first_hit)}
    missing_rank = float('inf')
    ranked = sorted(
        scores,
        key=lambda d: (-scores[d], primary_rank.get(d, missing_rank), order[d])
    )

    logger.debug(
        f"RRF fusion completed - "
        f"input_lists: {len(results_list)}, "
        f"unique_docs: {len(ranked)}, "
        f"k: {k}"
    )

    return [(first_hit[doc_id], scores[doc_id]) for doc_id in ranked]
