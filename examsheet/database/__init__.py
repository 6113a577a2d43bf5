"""
Database Module

This module provides the declarative base and engine lifecycle for the
exam sheet service.
"""

from examsheet.database.base import Base, ModelBase, metadata

__all__ = ['Base', 'ModelBase', 'metadata']
