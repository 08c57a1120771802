"""
Data Validator

Provides validation utilities for documents before insertion into Qdrant
collections. Vectors are checked for shape, emptiness, finiteness and
dimension; documents are normalized into `Document` models.

Typical usage from external projects:

    from data_management_operations import DataValidator

    documents = DataValidator.validate_documents(raw_documents, dimension=768)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
from pydantic import ValidationError

from data_management_operations.data_ops_exceptions import DocumentValidationError
from data_management_operations.models.entities import Document

logger = logging.getLogger(__name__)


class DataValidator:
    """
    Validates documents before insertion into Qdrant collections.

    Validation happens entirely client-side: a batch that fails validation
    never reaches the server and is never retried.
    """

    @staticmethod
    def validate_vector(vector: Any, dimension: Optional[int] = None) -> List[str]:
        """
        Check a single dense vector.

        Args:
            vector: Candidate vector (list, tuple or 1-D numpy array)
            dimension: Expected length, or None to skip the length check

        Returns:
            List of error messages; empty if the vector is valid
        """
        if vector is None:
            return ["Vector is required."]
        if isinstance(vector, (str, bytes)) or not isinstance(vector, (list, tuple, np.ndarray)):
            return [f"Vector must be a sequence of numbers, got {type(vector).__name__}."]

        try:
            array = np.asarray(vector, dtype=np.float64)
        except (TypeError, ValueError):
            return ["Vector must contain only numeric values."]

        if array.ndim != 1:
            return [f"Vector must be one-dimensional, got shape {array.shape}."]
        if array.size == 0:
            return ["Vector must not be empty."]

        errors = []
        if not np.all(np.isfinite(array)):
            errors.append("Vector must contain only finite values.")
        if dimension is not None and array.size != dimension:
            errors.append(f"Vector dimension mismatch. Expected {dimension}, got {array.size}.")
        return errors

    @classmethod
    def validate_documents(
        cls,
        documents: Sequence[Union[Document, Dict[str, Any]]],
        dimension: Optional[int] = None
    ) -> List[Document]:
        """
        Validate a batch and convert it to Document models.

        Args:
            documents: Documents as models or dictionaries
            dimension: Collection dense dimension, if known

        Returns:
            The documents as Document models, vectors converted to float lists

        Raises:
            DocumentValidationError: If any document is invalid
        """
        errors: Dict[Union[int, str], List[str]] = {}
        validated: List[Document] = []

        for i, doc in enumerate(documents):
            raw = doc.model_dump() if isinstance(doc, Document) else doc
            if not isinstance(raw, dict):
                errors[i] = [f"Document must be a Document or a dict, got {type(doc).__name__}."]
                continue

            doc_id = raw.get("id", i)
            vector_errors = cls.validate_vector(raw.get("vector"), dimension)
            if vector_errors:
                errors[doc_id] = vector_errors
                continue

            fields = dict(raw)
            fields["vector"] = np.asarray(raw["vector"], dtype=np.float64).tolist()
            try:
                validated.append(Document.model_validate(fields))
            except ValidationError as e:
                errors[doc_id] = [err["msg"] for err in e.errors()]

        if errors:
            error_msg = f"{len(errors)} of {len(documents)} documents failed validation"
            logger.error(f"{error_msg}: {errors}")
            raise DocumentValidationError(error_msg, errors)

        return validated
