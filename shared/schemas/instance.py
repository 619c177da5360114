"""
Text Instance Schemas
Pydantic schemas for text instances (editions) and their span annotations
"""

from pydantic import BaseModel, Field, ConfigDict, AliasChoices, model_validator
from typing import Optional, Dict, Any, List
from enum import Enum


class InstanceType(str, Enum):
    """Instance (edition) type enumeration"""
    DIPLOMATIC = "diplomatic"
    CRITICAL = "critical"
    COLLATED = "collated"


# Annotation kinds the UI knows how to render; anything else is shown generically
KNOWN_ANNOTATION_KINDS = ("segmentation", "alignment")


class Span(BaseModel):
    """Character range [start, end) in the instance content"""
    start: int = Field(..., ge=0, description="Start offset (inclusive)")
    end: int = Field(..., ge=0, description="End offset (exclusive)")

    @model_validator(mode="after")
    def validate_order(self):
        if self.start >= self.end:
            raise ValueError(f"Span start ({self.start}) must be less than end ({self.end})")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start


class Annotation(BaseModel):
    """Span annotation of any kind"""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Annotation ID")
    span: Optional[Span] = Field(None, description="Annotated character range")
    index: Optional[int] = Field(None, description="Position within its annotation layer")
    alignment_index: Optional[List[int]] = Field(None, description="Aligned segment indices")


class InstanceMetadata(BaseModel):
    """Edition metadata"""
    model_config = ConfigDict(extra="allow")

    type: InstanceType = Field(..., description="Instance type")
    copyright: Optional[str] = Field(None, description="Copyright status")
    bdrc: Optional[str] = Field(None, description="BDRC instance ID")
    colophon: Optional[str] = Field(None, description="Colophon text")
    incipit_title: Optional[Dict[str, str]] = Field(None, description="Incipit title keyed by language")


def check_spans_within(content: str, annotations: List[Annotation], label: str) -> None:
    """Raise ValueError when an annotation runs past the end of the content"""
    for position, annotation in enumerate(annotations):
        if annotation.span is not None and annotation.span.end > len(content):
            raise ValueError(
                f"{label} annotation {position + 1}: end ({annotation.span.end}) "
                f"exceeds content length ({len(content)})"
            )


class TextInstanceCreateSchema(BaseModel):
    """Schema for creating a text instance"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "metadata": {
                    "type": "diplomatic",
                    "copyright": "public",
                    "bdrc": "W1KG4313",
                    "colophon": "",
                    "incipit_title": {"en": "", "bo": ""}
                },
                "annotation": [
                    {"span": {"start": 0, "end": 12}, "index": 0, "alignment_index": [0]}
                ],
                "content": "བྱང་ཆུབ་སེམས་དཔའི་སྤྱོད་པ་ལ་འཇུག་པ།"
            }
        }
    )

    metadata: Optional[InstanceMetadata] = Field(None, description="Edition metadata")
    content: str = Field(..., min_length=1, description="Raw text body")
    annotation: List[Annotation] = Field(default=[], description="Segmentation annotations")

    @model_validator(mode="after")
    def validate_spans(self):
        check_spans_within(self.content, self.annotation, "Segmentation")
        return self


class TextInstanceSchema(BaseModel):
    """Text instance as returned by the OpenPecha API"""
    model_config = ConfigDict(from_attributes=True, extra="allow", populate_by_name=True)

    id: Optional[str] = Field(None, description="Instance ID")
    text_id: Optional[str] = Field(None, description="Owning text ID")
    metadata: Optional[InstanceMetadata] = Field(None, description="Edition metadata")
    content: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("content", "base"),
        description="Raw text body"
    )
    annotations: Dict[str, List[Annotation]] = Field(default={}, description="Annotations keyed by kind")

    @model_validator(mode="before")
    @classmethod
    def normalize_upstream_shape(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        metadata = data.get("metadata")
        if not data.get("id") and isinstance(metadata, dict) and metadata.get("id"):
            data["id"] = metadata["id"]
        annotations = data.get("annotations")
        if isinstance(annotations, list):
            # Flat list of typed annotation summaries, grouped by their type
            grouped: Dict[str, List[Any]] = {}
            for item in annotations:
                kind = item.get("type", "unknown") if isinstance(item, dict) else "unknown"
                grouped.setdefault(kind, []).append(item)
            data["annotations"] = grouped
        return data

    @model_validator(mode="after")
    def validate_spans(self):
        if self.content is not None:
            for kind, items in self.annotations.items():
                check_spans_within(self.content, items, kind)
        return self

    @property
    def instance_type(self) -> Optional[str]:
        if self.metadata:
            return self.metadata.type.value
        extra = self.model_extra or {}
        return extra.get("type")

    def annotations_of(self, kind: str) -> List[Annotation]:
        return self.annotations.get(kind, [])

    def unknown_annotation_kinds(self) -> List[str]:
        return [kind for kind in self.annotations if kind not in KNOWN_ANNOTATION_KINDS]

    def span_text(self, span: Optional[Span]) -> str:
        if span is None:
            return ""
        return (self.content or "")[span.start:span.end]


def annotations_from_payload(payload: Dict[str, Any]) -> Dict[str, List[Any]]:
    """Collect raw annotation lists from either payload shape

    The creation form sends a flat `annotation` list of segments while the
    API returns an `annotations` mapping of kind to list.
    """
    collected: Dict[str, List[Any]] = {}
    flat = payload.get("annotation")
    if isinstance(flat, list):
        collected["segmentation"] = list(flat)
    nested = payload.get("annotations")
    if isinstance(nested, dict):
        for kind, items in nested.items():
            if isinstance(items, list):
                collected.setdefault(kind, []).extend(items)
    return collected
