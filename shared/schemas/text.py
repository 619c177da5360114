"""
Text Schemas
Pydantic schemas for OpenPecha texts, contributions and list responses
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import Optional, Dict, Any, List
from enum import Enum


class TextType(str, Enum):
    """Text type enumeration"""
    ROOT = "root"
    TRANSLATION = "translation"
    COMMENTARY = "commentary"


class ContributionRole(str, Enum):
    """Contribution role enumeration"""
    AUTHOR = "author"
    TRANSLATOR = "translator"
    REVISER = "reviser"
    EDITOR = "editor"
    SCHOLAR = "scholar"


# Text types that point at another text through `parent`
DERIVED_TEXT_TYPES = (TextType.TRANSLATION, TextType.COMMENTARY)


def has_primary_value(mapping: Optional[Dict[str, Any]]) -> bool:
    """True when an en or bo entry of a localized mapping is non-empty"""
    if not isinstance(mapping, dict):
        return False
    return any(
        isinstance(mapping.get(lang), str) and mapping.get(lang).strip()
        for lang in ("en", "bo")
    )


class Contribution(BaseModel):
    """Attribution of a person or an AI to a text"""
    model_config = ConfigDict(extra="allow")

    person_id: Optional[str] = Field(None, description="Contributing person ID")
    ai_id: Optional[str] = Field(None, description="Contributing AI identifier")
    person_bdrc_id: Optional[str] = Field(None, description="BDRC ID of the person")
    role: ContributionRole = Field(..., description="Contribution role")

    @model_validator(mode="after")
    def validate_contributor(self):
        if bool(self.person_id) == bool(self.ai_id):
            raise ValueError("Contribution must reference exactly one of person_id or ai_id")
        return self


class StoredContribution(Contribution):
    """Contribution as stored upstream; may reference the person by BDRC ID only"""

    @model_validator(mode="after")
    def validate_contributor(self):
        return self


class TextCreateSchema(BaseModel):
    """Schema for creating a new text"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "type": "root",
                "title": {"en": "The Way of the Bodhisattva", "bo": "སྤྱོད་འཇུག"},
                "language": "bo",
                "contributions": [{"person_id": "P1KY", "role": "author"}],
                "date": "8th century",
                "bdrc": "W1KG4313",
                "alt_titles": [{"en": "Bodhicaryavatara"}],
            }
        }
    )

    type: TextType = Field(..., description="Text type")
    title: Dict[str, str] = Field(..., description="Title keyed by language code")
    language: str = Field(..., min_length=1, description="Primary language code")
    parent: Optional[str] = Field(None, description="Parent text ID for translations and commentaries")
    contributions: List[Contribution] = Field(default=[], description="Ordered contributions")
    date: Optional[str] = Field(None, description="Composition date")
    bdrc: Optional[str] = Field(None, description="BDRC work ID")
    wiki: Optional[str] = Field(None, description="Wiki URL")
    alt_titles: List[Dict[str, str]] = Field(default=[], description="Alternative titles")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not has_primary_value(v):
            raise ValueError("Title must be provided in English or Tibetan")
        return v


class TextSchema(TextCreateSchema):
    """Text as returned by the OpenPecha API"""
    model_config = ConfigDict(from_attributes=True, extra="allow")

    id: str = Field(..., description="Text ID")
    contributions: List[StoredContribution] = Field(default=[], description="Ordered contributions")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        # Stored texts may be titled in other languages only
        return v


class TextListResponse(BaseModel):
    """Paginated text list"""
    results: List[TextSchema] = Field(default=[], description="Texts on this page")
    count: int = Field(default=0, description="Number of texts returned")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Number of texts skipped")
