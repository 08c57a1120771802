"""
Sparse Vector Model

Pydantic representation of a lexical (term-frequency) vector.
"""

from typing import List

from pydantic import BaseModel, Field, model_validator
from qdrant_client import models


class SparseVector(BaseModel):
    """
    Sparse vector as parallel index/value lists.

    Indices reference vocabulary entries and are unique within a vector;
    values are raw term frequencies. IDF weighting is left to the engine.
    """
    indices: List[int] = Field(default_factory=list, description="Vocabulary indices")
    values: List[float] = Field(default_factory=list, description="Term frequency per index")

    @model_validator(mode='after')
    def check_parallel_lists(self) -> 'SparseVector':
        """Validate that indices and values line up."""
        if len(self.indices) != len(self.values):
            raise ValueError(
                f"indices and values must have equal length, "
                f"got {len(self.indices)} and {len(self.values)}"
            )
        if any(i < 0 for i in self.indices):
            raise ValueError("indices must be non-negative")
        if len(set(self.indices)) != len(self.indices):
            raise ValueError("indices must be unique")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.indices

    def to_qdrant(self) -> models.SparseVector:
        """Convert to the client's wire model."""
        return models.SparseVector(indices=list(self.indices), values=list(self.values))
