"""
Collection configuration models for Qdrant.

This module defines Pydantic models describing how dense and hybrid
collections are configured, together with the builders that translate them
into `qdrant_client.models` request objects. Defaults come from
`IndexSettings` and are resolved once, when a CollectionManager is built.

Layouts produced:
- Dense collection: one unnamed dense vector space (cosine distance)
- Hybrid collection: a dense space named "dense" plus a sparse space named
  "sparse" with the IDF modifier, so the engine weights raw term frequencies
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from qdrant_client import models

from config import IndexSettings, QuantizationMode, SparseDatatype

DENSE_VECTOR_NAME = "dense"
SPARSE_VECTOR_NAME = "sparse"

SHARD_NUMBER = 1
REPLICATION_FACTOR = 1


class CollectionKind(str, Enum):
    """Layout of a collection's vector spaces."""
    DENSE = "dense"
    HYBRID = "hybrid"


class HnswConfig(BaseModel):
    """
    HNSW graph parameters for a dense vector space.

    Attributes:
        m: Edges per node in the graph.
        ef_construct: Candidate list size while building the graph.
        full_scan_threshold: Vector count below which the engine scans instead.
        on_disk: Whether the graph is stored on disk.
    """
    m: int = Field(16, gt=0)
    ef_construct: int = Field(100, gt=0)
    full_scan_threshold: int = Field(10000, ge=0)
    on_disk: bool = False

    def to_qdrant(self) -> models.HnswConfigDiff:
        return models.HnswConfigDiff(
            m=self.m,
            ef_construct=self.ef_construct,
            full_scan_threshold=self.full_scan_threshold,
            on_disk=self.on_disk,
        )


class QuantizationConfig(BaseModel):
    """
    Quantization of a dense vector space.

    `quantile` only applies to scalar (int8) quantization.
    """
    mode: QuantizationMode
    quantile: float = Field(0.99, gt=0, le=1)
    always_ram: bool = False

    def to_qdrant(self) -> Any:
        if self.mode == QuantizationMode.BINARY:
            return models.BinaryQuantization(
                binary=models.BinaryQuantizationConfig(always_ram=self.always_ram)
            )
        return models.ScalarQuantization(
            scalar=models.ScalarQuantizationConfig(
                type=models.ScalarType.INT8,
                quantile=self.quantile,
                always_ram=self.always_ram,
            )
        )


class SparseIndexConfig(BaseModel):
    """Index parameters for the lexical vector space; on disk unless told otherwise."""
    on_disk: bool = True
    datatype: Optional[SparseDatatype] = None

    def to_qdrant(self) -> models.SparseIndexParams:
        if self.datatype is None:
            return models.SparseIndexParams(on_disk=self.on_disk)
        return models.SparseIndexParams(
            on_disk=self.on_disk,
            datatype=models.Datatype(self.datatype.value),
        )


class CollectionOptions(BaseModel):
    """
    Index options applied when a collection is created.

    Example:
        >>> options = CollectionOptions.from_settings(settings.index)
        >>> options.hnsw.m
        16
    """
    hnsw: HnswConfig = Field(default_factory=HnswConfig)
    quantization: Optional[QuantizationConfig] = None
    sparse: SparseIndexConfig = Field(default_factory=SparseIndexConfig)

    @classmethod
    def from_settings(cls, settings: Optional[IndexSettings] = None) -> "CollectionOptions":
        """Resolve options from index settings."""
        settings = settings or IndexSettings()
        quantization = None
        if settings.quantization.mode is not None:
            quantization = QuantizationConfig(
                mode=settings.quantization.mode,
                quantile=settings.quantization.quantile,
                always_ram=settings.quantization.always_ram,
            )
        return cls(
            hnsw=HnswConfig(
                m=settings.hnsw.m,
                ef_construct=settings.hnsw.ef_construct,
                full_scan_threshold=settings.hnsw.full_scan_threshold,
                on_disk=settings.hnsw.on_disk,
            ),
            quantization=quantization,
            sparse=SparseIndexConfig(
                on_disk=settings.sparse.on_disk,
                datatype=settings.sparse.datatype,
            ),
        )


class CollectionDescriptor(BaseModel):
    """
    A collection as reported by the server.

    The server is the source of truth; descriptors are rebuilt on every
    describe call and never cached.
    """
    name: str
    dimension: Optional[int] = None
    kind: CollectionKind = CollectionKind.DENSE
    hnsw: Optional[HnswConfig] = None
    quantization: Optional[QuantizationConfig] = None
    points_count: Optional[int] = None
    status: Optional[str] = None


def build_dense_vector_params(dimension: int, options: CollectionOptions) -> models.VectorParams:
    """Build the dense vector space: cosine distance, HNSW block and optional quantization."""
    params: Dict[str, Any] = {
        "size": dimension,
        "distance": models.Distance.COSINE,
        "hnsw_config": options.hnsw.to_qdrant(),
    }
    if options.quantization is not None:
        params["quantization_config"] = options.quantization.to_qdrant()
    return models.VectorParams(**params)


def build_sparse_vector_params(options: CollectionOptions) -> models.SparseVectorParams:
    """Build the lexical vector space with the IDF modifier."""
    return models.SparseVectorParams(
        index=options.sparse.to_qdrant(),
        modifier=models.Modifier.IDF,
    )


def build_create_collection_request(
    dimension: int,
    options: CollectionOptions,
    kind: CollectionKind = CollectionKind.DENSE
) -> Dict[str, Any]:
    """
    Build keyword arguments for `AsyncQdrantClient.create_collection`.

    Args:
        dimension: Dense vector length
        options: Resolved index options
        kind: DENSE for a single unnamed space, HYBRID for dense + sparse spaces

    Returns:
        Dictionary of create_collection keyword arguments, without the name
    """
    dense = build_dense_vector_params(dimension, options)
    request: Dict[str, Any] = {
        "shard_number": SHARD_NUMBER,
        "replication_factor": REPLICATION_FACTOR,
    }
    if kind == CollectionKind.HYBRID:
        request["vectors_config"] = {DENSE_VECTOR_NAME: dense}
        request["sparse_vectors_config"] = {SPARSE_VECTOR_NAME: build_sparse_vector_params(options)}
    else:
        request["vectors_config"] = dense
    return request


def _read(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def collection_params(info: Any) -> Any:
    """Return `config.params` of a get_collection response (model or dict)."""
    return _read(_read(info, "config"), "params")


def has_sparse_space(info: Any, name: str = SPARSE_VECTOR_NAME) -> bool:
    """Whether a collection exposes the named sparse vector space."""
    sparse_vectors = _read(collection_params(info), "sparse_vectors")
    return bool(sparse_vectors) and name in sparse_vectors


def dense_dimension(info: Any) -> Optional[int]:
    """
    Dense vector length of a collection, or None if it cannot be read.

    Handles both the unnamed layout and the named "dense" space.
    """
    vectors = _read(collection_params(info), "vectors")
    if vectors is None:
        return None
    size = _read(vectors, "size")
    if size is None and isinstance(vectors, dict):
        size = _read(vectors.get(DENSE_VECTOR_NAME), "size")
    return size if isinstance(size, int) else None


def descriptor_from_info(name: str, info: Any) -> CollectionDescriptor:
    """Translate a get_collection response into a CollectionDescriptor."""
    params = collection_params(info)
    vectors = _read(params, "vectors")
    dense = vectors.get(DENSE_VECTOR_NAME) if isinstance(vectors, dict) else vectors

    hnsw = None
    hnsw_source = _read(dense, "hnsw_config") or _read(_read(info, "config"), "hnsw_config")
    if hnsw_source is not None:
        hnsw = HnswConfig(
            m=_read(hnsw_source, "m") or 16,
            ef_construct=_read(hnsw_source, "ef_construct") or 100,
            full_scan_threshold=_read(hnsw_source, "full_scan_threshold") or 10000,
            on_disk=bool(_read(hnsw_source, "on_disk")),
        )

    quantization = None
    quant_source = _read(dense, "quantization_config")
    if _read(quant_source, "scalar") is not None:
        scalar = _read(quant_source, "scalar")
        quantization = QuantizationConfig(
            mode=QuantizationMode.SCALAR,
            quantile=_read(scalar, "quantile") or 0.99,
            always_ram=bool(_read(scalar, "always_ram")),
        )
    elif _read(quant_source, "binary") is not None:
        quantization = QuantizationConfig(
            mode=QuantizationMode.BINARY,
            always_ram=bool(_read(_read(quant_source, "binary"), "always_ram")),
        )

    status = _read(info, "status")
    return CollectionDescriptor(
        name=name,
        dimension=dense_dimension(info),
        kind=CollectionKind.HYBRID if has_sparse_space(info) else CollectionKind.DENSE,
        hnsw=hnsw,
        quantization=quantization,
        points_count=_read(info, "points_count"),
        status=getattr(status, "value", status),
    )
