"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import validate_template, validate_job, ValidationError

__all__ = [
    "validate_template",
    "validate_job",
    "ValidationError",
]
