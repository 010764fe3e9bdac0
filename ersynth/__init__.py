"""
ER-Synth - Dependency-ordered, referentially consistent synthetic data for ER schemas.

This package provides tools to:
- Validate schemas extracted from ER diagrams
- Order tables by their foreign key dependencies
- Classify schema size and complexity
- Generate rows whose foreign keys always point at existing parent rows
"""

__version__ = "1.0.0"
__author__ = "ER-Synth Contributors"

from ersynth.core.dependency_resolver import DependencyResolver
from ersynth.core.generator import DataGenerator
from ersynth.core.loader import load_schema
from ersynth.core.models import DatabaseSchema, GenerationConfig
from ersynth.core.processor import process_schema, run_pipeline

__all__ = [
    "DatabaseSchema",
    "DependencyResolver",
    "DataGenerator",
    "GenerationConfig",
    "load_schema",
    "process_schema",
    "run_pipeline",
]
