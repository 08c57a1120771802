"""
Configuration Module

This module provides centralized configuration management for Qdrant operations:
- Connection and retry configuration
- Index defaults (HNSW, quantization, sparse index)
- Vocabulary persistence locations
- Search and fusion parameters
- Operation event reporting

Values are resolved once, when settings are constructed, from defaults,
environment variables or a YAML file.
"""

from .settings import (
    QdrantSettings,
    load_settings,
    ConnectionSettings,
    IndexSettings,
    HNSWSettings,
    QuantizationSettings,
    SparseIndexSettings,
    VocabularySettings,
    SearchSettings,
    MonitoringSettings,
    QuantizationMode,
    SparseDatatype,
)

__all__ = [
    'QdrantSettings',
    'load_settings',
    'ConnectionSettings',
    'IndexSettings',
    'HNSWSettings',
    'QuantizationSettings',
    'SparseIndexSettings',
    'VocabularySettings',
    'SearchSettings',
    'MonitoringSettings',
    'QuantizationMode',
    'SparseDatatype',
]
