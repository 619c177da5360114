"""
Person Schemas
Pydantic schemas for OpenPecha persons
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, Dict, List

from .text import has_primary_value


class PersonCreateSchema(BaseModel):
    """Schema for creating a new person"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": {"en": "tenzin kunsang", "bo": "ཀུན་བཟང་"},
                "alt_names": [{"en": "bhu nyamchung"}],
                "bdrc": "",
                "wiki": ""
            }
        }
    )

    name: Dict[str, str] = Field(..., description="Name keyed by language code")
    alt_names: List[Dict[str, str]] = Field(default=[], description="Alternative names")
    bdrc: Optional[str] = Field("", description="BDRC person ID")
    wiki: Optional[str] = Field("", description="Wiki URL")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not has_primary_value(v):
            raise ValueError("Name is required with at least one language (en or bo)")
        return v


class PersonSchema(PersonCreateSchema):
    """Person as returned by the OpenPecha API"""
    model_config = ConfigDict(from_attributes=True, extra="allow")

    id: str = Field(..., description="Person ID")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return v


class PersonListResponse(BaseModel):
    """Paginated person list"""
    results: List[PersonSchema] = Field(default=[], description="Persons on this page")
    count: int = Field(default=0, description="Number of persons returned")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Number of persons skipped")
