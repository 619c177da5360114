"""
Shared data schemas for the Pecha gateway

This package contains the entity schemas used by the gateway and the client core.
"""

from .text import (
    TextType, ContributionRole, Contribution, StoredContribution, TextCreateSchema, TextSchema, TextListResponse,
    DERIVED_TEXT_TYPES, has_primary_value,
)
from .person import PersonCreateSchema, PersonSchema, PersonListResponse
from .instance import (
    InstanceType, Span, Annotation, InstanceMetadata, TextInstanceCreateSchema,
    TextInstanceSchema, KNOWN_ANNOTATION_KINDS, annotations_from_payload,
)
from .errors import ErrorResponse, error_body

__all__ = [
    "TextType",
    "ContributionRole",
    "Contribution",
    "StoredContribution",
    "TextCreateSchema",
    "TextSchema",
    "TextListResponse",
    "DERIVED_TEXT_TYPES",
    "has_primary_value",
    "PersonCreateSchema",
    "PersonSchema",
    "PersonListResponse",
    "InstanceType",
    "Span",
    "Annotation",
    "InstanceMetadata",
    "TextInstanceCreateSchema",
    "TextInstanceSchema",
    "KNOWN_ANNOTATION_KINDS",
    "annotations_from_payload",
    "ErrorResponse",
    "error_body",
]

__version__ = "1.0.0"
