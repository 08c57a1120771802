"""
Data Entities

Defines Pydantic models for documents and operation results in data management.
Documents are code chunks stored as Qdrant points: the dense vector plus a
payload carrying the chunk's content, location and open metadata.

Typical usage from external projects:

    from data_management_operations import Document, BatchOperationResult

    doc = Document(
        id=to_stable_id(IdentifierMapper.compose_key("src/app.py", 1, 20, text)),
        vector=embedding,
        content=text,
        relative_path="src/app.py",
        start_line=1,
        end_line=20,
        file_extension=".py",
    )

    result = await manager.insert("code_chunks_1a2b3c4d", [doc])
    print(f"Inserted {result.successful_count} documents")
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Payload keys as stored on the server
PAYLOAD_FIELDS = {
    "content": "content",
    "relative_path": "relativePath",
    "start_line": "startLine",
    "end_line": "endLine",
    "file_extension": "fileExtension",
}

# Metadata key never copied into payloads
SPARSE_VECTOR_METADATA_KEY = "sparseVector"


class OperationStatus(str, Enum):
    """
    Enumeration of possible statuses for data operations.

    This provides a standardized way to track and report the status of
    data operations across the system.
    """
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"


class Document(BaseModel):
    """
    A code chunk to be stored in, or returned from, a collection.

    `vector` is None on search results. When present its length must equal
    the collection's dense dimension; this is checked at insert time.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., description="Point ID, typically a stable ID derived from path, lines and content")
    vector: Optional[List[float]] = Field(None, description="Dense embedding")
    content: str = ""
    relative_path: str = ""
    start_line: int = 0
    end_line: int = 0
    file_extension: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Open metadata flattened into the payload")

    def to_payload(self, exclude_metadata_keys: tuple = ()) -> Dict[str, Any]:
        """
        Build the point payload.

        Known fields use their camelCase wire names; metadata keys are
        flattened alongside them, except the excluded ones.
        """
        payload = {wire: getattr(self, attr) for attr, wire in PAYLOAD_FIELDS.items()}
        for key, value in self.metadata.items():
            if key in exclude_metadata_keys:
                continue
            payload[key] = value
        return payload

    @classmethod
    def from_payload(cls, point_id: Any, payload: Optional[Dict[str, Any]]) -> "Document":
        """Rebuild a document (without vector) from a point ID and payload."""
        payload = dict(payload or {})
        fields = {attr: payload.pop(wire) for attr, wire in PAYLOAD_FIELDS.items() if wire in payload}
        # Missing or null fields fall back to defaults
        fields = {k: v for k, v in fields.items() if v is not None}
        return cls(id=str(point_id), metadata=payload, **fields)


class SearchResult(BaseModel):
    """A ranked hit: the matched document (vector omitted) and its score."""
    document: Document
    score: float


class BatchOperationResult(BaseModel):
    """
    Result of a batch operation on multiple documents.

    Qdrant applies an upsert batch as a whole, so a batch either fully
    succeeds or raises; `PARTIAL` is never produced by this package.
    """
    status: OperationStatus
    successful_count: int = 0
    failed_count: int = 0
    inserted_ids: List[Any] = Field(
        default_factory=list,
        description="List of IDs for successfully inserted documents"
    )
    operation_status: Optional[str] = Field(None, description="Update status reported by the server")

    @property
    def total_count(self) -> int:
        """Total number of documents processed in this batch."""
        return self.successful_count + self.failed_count

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage."""
        if self.total_count == 0:
            return 0.0
        return (self.successful_count / self.total_count) * 100


def payload_row(point_id: Any, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Shape a scrolled point as a query row.

    The row is the payload plus `id`, and `metadata` holds the whole payload
    serialized as a JSON string.
    """
    payload = dict(payload or {})
    row = {"id": point_id}
    row.update(payload)
    row["metadata"] = json.dumps(payload)
    return row
