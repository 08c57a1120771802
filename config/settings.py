"""
Pydantic Settings for Qdrant Operations

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Optional, List, Union
from enum import Enum
from pathlib import Path
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_file


class QuantizationMode(str, Enum):
    """
    Quantization modes supported for dense vector spaces.

    Quantization compresses vector components to trade precision for memory:
    - SCALAR stores each component as int8, bounded by a quantile
    - BINARY stores one bit per component, fastest but lossiest
    """
    SCALAR = "scalar"
    BINARY = "binary"


class SparseDatatype(str, Enum):
    """Storage datatype for the sparse (lexical) vector index."""
    FLOAT32 = "float32"
    UINT8 = "uint8"


class ConnectionSettings(BaseSettings):
    """
    Connection settings for reaching the Qdrant server.

    These settings control how the client connects to the server and how
    remote calls are retried:
    - Server location and authentication
    - Per-call timeout, the only cap on an individual remote call
    - Retry budget and initial backoff delay for transient failures
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_", case_sensitive=False)

    url: str = Field("http://localhost:6333",
                     description="Base URL of the Qdrant server")
    api_key: Optional[str] = Field(None,
                                   description="API key for authentication (if enabled on server)")
    timeout: int = Field(60,
                         description="Timeout in seconds for each remote call")
    retry_count: int = Field(3, ge=1,
                             description="Maximum number of attempts for retried operations")
    retry_initial_delay: float = Field(1.0, gt=0,
                                       description="Delay in seconds before the first retry; doubles on each retry")


class HNSWSettings(BaseSettings):
    """
    HNSW (Hierarchical Navigable Small World) index parameters.

    HNSW is a graph-based indexing algorithm:
    - m controls how many edges each node keeps (higher = better recall, more memory)
    - ef_construct controls build quality (higher = better graph, slower builds)
    - full_scan_threshold is the segment size below which brute force is used
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_HNSW_", case_sensitive=False)

    m: int = Field(16, gt=0, description="Number of edges per node in the index graph")
    ef_construct: int = Field(100, gt=0, description="Size of the candidate list during index construction")
    full_scan_threshold: int = Field(10000, ge=0, description="Vector count below which full scan is preferred")
    on_disk: bool = Field(False, description="Store the HNSW index on disk")


class QuantizationSettings(BaseSettings):
    """
    Quantization settings for dense vector spaces.

    Quantization is disabled unless a mode is set.
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_QUANTIZATION_", case_sensitive=False)

    mode: Optional[QuantizationMode] = Field(None, description="Quantization mode, or None to disable")
    quantile: float = Field(0.99, gt=0, le=1, description="Quantile used to bound scalar quantization")
    always_ram: bool = Field(False, description="Keep quantized vectors in RAM")


class SparseIndexSettings(BaseSettings):
    """
    Index settings for the lexical (sparse) vector space of hybrid collections.

    The sparse index is stored on disk by default for memory efficiency,
    unlike the dense HNSW index which defaults to RAM.
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_SPARSE_", case_sensitive=False)

    on_disk: bool = Field(True, description="Store the sparse index on disk")
    datatype: Optional[SparseDatatype] = Field(None, description="Datatype of the sparse index, server default if None")


class IndexSettings(BaseSettings):
    """
    Index settings applied when creating collections.

    Groups the dense HNSW parameters, optional quantization and the sparse
    index parameters used for hybrid collections.
    """
    hnsw: HNSWSettings = Field(default_factory=HNSWSettings)
    quantization: QuantizationSettings = Field(default_factory=QuantizationSettings)
    sparse: SparseIndexSettings = Field(default_factory=SparseIndexSettings)


class VocabularySettings(BaseSettings):
    """
    Vocabulary persistence and tokenization settings.

    When `path` is set, every collection shares that single snapshot file.
    Otherwise each collection gets `<directory>/vocabulary-<hash>.json`, where
    `<hash>` is the last underscore-delimited segment of the collection name.
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_VOCABULARY_", case_sensitive=False)

    path: Optional[str] = Field(None, description="Explicit vocabulary snapshot path shared by all collections")
    directory: str = Field("~/.context/vocabulary",
                           description="Directory for per-collection vocabulary snapshots")
    min_term_length: int = Field(2, ge=1, description="Minimum token length kept by the default tokenizer")


class SearchSettings(BaseSettings):
    """
    Search settings for dense and hybrid queries.

    Candidate pools for each prefetch are over-fetched as
    max(limit * prefetch_multiplier, min_prefetch_limit) so that fusion has
    enough overlap to work with.
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_SEARCH_", case_sensitive=False)

    default_limit: int = Field(10, gt=0, description="Number of results returned when the caller gives no limit")
    prefetch_multiplier: int = Field(3, gt=0, description="Over-fetch multiplier for prefetch candidate pools")
    min_prefetch_limit: int = Field(100, gt=0, description="Minimum size of a prefetch candidate pool")
    rrf_k: int = Field(60, gt=0, description="Rank constant used by local reciprocal rank fusion")
    local_fusion: bool = Field(False, description="Fuse candidate lists locally instead of in the engine")
    hybrid_collection_prefix: str = Field("hybrid_", description="Name prefix identifying hybrid collections")
    dense_fields: List[str] = Field(default_factory=lambda: ["vector", "dense"],
                                    description="Request field names treated as dense vector requests")


class MonitoringSettings(BaseSettings):
    """
    Monitoring settings for operation events.

    Retry progress is reported as structured events; by default these are
    written to the standard logging module at `event_log_level`.
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_", case_sensitive=False)

    emit_events: bool = Field(True, description="Whether to log retry/attempt events")
    event_log_level: str = Field("DEBUG", description="Logging level for attempt and success events")


class QdrantSettings(BaseSettings):
    """
    Main settings class for Qdrant operations that consolidates all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = QdrantSettings()

        # Load from YAML file
        settings = QdrantSettings.from_yaml('config.yaml')

        # Access nested settings
        url = settings.connection.url
        m = settings.index.hnsw.m
    """
    model_config = SettingsConfigDict(env_prefix="QDRANT_OPS_", case_sensitive=False,
                                      env_nested_delimiter="__")

    connection: ConnectionSettings = Field(default_factory=ConnectionSettings,
                                           description="Connection settings for the Qdrant server")
    index: IndexSettings = Field(default_factory=IndexSettings,
                                 description="Index configuration used when creating collections")
    vocabulary: VocabularySettings = Field(default_factory=VocabularySettings,
                                           description="Vocabulary persistence and tokenization")
    search: SearchSettings = Field(default_factory=SearchSettings,
                                   description="Search parameters and fusion behaviour")
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings,
                                           description="Operation event reporting")

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "QdrantSettings":
        """Load settings from YAML file"""
        import yaml
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, yaml_file: Union[str, Path]) -> None:
        """Write the current settings to a YAML file"""
        to_yaml_file(Path(yaml_file), self)


def load_settings(config_path: Optional[str] = None) -> QdrantSettings:
    """
    Load settings from file and/or environment variables.

    Args:
        config_path: Path to YAML configuration file. If None or file doesn't exist,
                    falls back to environment variables and default values.

    Returns:
        QdrantSettings object with loaded configuration
    """
    if config_path and os.path.exists(config_path):
        return QdrantSettings.from_yaml(config_path)
    return QdrantSettings()
