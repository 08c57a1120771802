"""
Search Parameters

Pydantic models describing dense and hybrid search calls.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator
from qdrant_client import models


class SearchOptions(BaseModel):
    """
    Options for a single dense query.

    Attributes:
        limit: Number of results; the configured default when None.
        filter_expr: Native filter predicate passed to the server.
        vector_name: Named vector space to query. When None the "dense" space
                     is used for hybrid collections and the unnamed space otherwise.
        score_threshold: Optional minimum score.
    """
    limit: Optional[int] = Field(None, gt=0)
    filter_expr: Optional[Union[Dict[str, Any], models.Filter]] = None
    vector_name: Optional[str] = None
    score_threshold: Optional[float] = None


class HybridSearchRequest(BaseModel):
    """
    One retrieval stage of a hybrid search.

    `anns_field` selects the stage: a dense field name ("vector" or "dense"
    by default) means `data` is a dense vector; any other field means `data`
    is query text to be encoded against the collection's vocabulary.
    """
    data: Union[List[float], str]
    anns_field: str
    limit: int = Field(10, gt=0)
    param: Dict[str, Any] = Field(default_factory=dict, description="Engine search parameters, e.g. {'hnsw_ef': 128}")

    @field_validator('data')
    @classmethod
    def validate_data(cls, v):
        if isinstance(v, list) and not v:
            raise ValueError("Dense request data must not be empty")
        return v


class HybridSearchOptions(BaseModel):
    """
    Options for a fused hybrid search.

    Attributes:
        limit: Number of fused results; the configured default when None.
        filter_expr: Native filter predicate applied to every stage.
    """
    limit: Optional[int] = Field(None, gt=0)
    filter_expr: Optional[Union[Dict[str, Any], models.Filter]] = None
