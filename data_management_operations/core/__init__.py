"""
Core Data Management Components

Contains the DataManager and DataValidator.
"""

from .validator import DataValidator
from .manager import DataManager

__all__ = ['DataManager', 'DataValidator']
