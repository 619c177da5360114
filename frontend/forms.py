"""
Creation Forms
Form state, validation and payload building for texts, instances and persons.
Validation runs before any request is made; an empty list means the form can be submitted.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shared.schemas import (
    ContributionRole,
    DERIVED_TEXT_TYPES,
    InstanceType,
    PersonSchema,
    TextType,
)
from frontend.display import person_display_name

LANGUAGE_OPTIONS = {
    "bo": "Tibetan",
    "en": "English",
    "sa": "Sanskrit",
    "zh": "Chinese",
    "lzh": "Literary Chinese",
    "hi": "Hindi",
    "it": "Italian",
    "cmg": "Classical Mongolian",
}

TEXT_TYPES = [t.value for t in TextType]
CONTRIBUTION_ROLES = [r.value for r in ContributionRole]
INSTANCE_TYPES = [t.value for t in InstanceType]

LEADING_INT = re.compile(r"\s*([-+]?\d+)")


def _to_int(value: Any) -> int:
    """Numeric inputs arrive as strings; the leading integer is read, anything else is 0"""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else 0


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def filter_persons(persons: List[PersonSchema], search: str, limit: int = 10) -> List[PersonSchema]:
    """Contributor picker matches on display name, alternative names or id"""
    needle = (search or "").strip().lower()
    if not needle:
        return persons[:limit]

    matches = []
    for person in persons:
        alt_names = " ".join(next(iter(alt.values()), "") for alt in person.alt_names if alt)
        if (needle in person_display_name(person, "").lower()
                or needle in alt_names.lower()
                or needle in person.id.lower()):
            matches.append(person)
            if len(matches) >= limit:
                break
    return matches


@dataclass
class TextForm:
    """New text form"""
    type: str = ""
    title_en: str = ""
    title_bo: str = ""
    language: str = ""
    parent: str = ""
    person_id: Optional[str] = None
    role: str = ContributionRole.AUTHOR.value
    date: str = ""
    bdrc: str = ""

    def select_person(self, person: Optional[PersonSchema]) -> None:
        self.person_id = person.id if person else None

    @property
    def needs_parent(self) -> bool:
        return self.type in DERIVED_TEXT_TYPES

    def validate(self) -> List[str]:
        errors = []
        if not self.type:
            errors.append("Type is required")
        elif self.type not in TEXT_TYPES:
            errors.append(f"Invalid text type: {self.type}")
        if not (_present(self.title_en) or _present(self.title_bo)):
            errors.append("Title is required in English or Tibetan")
        if not _present(self.language):
            errors.append("Language is required")
        if self.needs_parent and not _present(self.parent):
            errors.append(f"Parent text is required for a {self.type}")
        if self.person_id and self.role not in CONTRIBUTION_ROLES:
            errors.append(f"Invalid contribution role: {self.role}")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        title = {}
        if _present(self.title_en):
            title["en"] = self.title_en.strip()
        if _present(self.title_bo):
            title["bo"] = self.title_bo.strip()

        payload: Dict[str, Any] = {
            "type": self.type,
            "title": title,
            "language": self.language.strip(),
        }
        if self.person_id:
            payload["contributions"] = [{"person_id": self.person_id, "role": self.role}]
        if _present(self.date):
            payload["date"] = self.date.strip()
        if _present(self.bdrc):
            payload["bdrc"] = self.bdrc.strip()
        if self.needs_parent:
            payload["parent"] = self.parent.strip()
        return payload


@dataclass
class AnnotationRow:
    start: int = 0
    end: int = 0
    index: int = 0
    alignment_index: List[int] = field(default_factory=lambda: [0])

    def to_payload(self) -> Dict[str, Any]:
        return {
            "span": {"start": self.start, "end": self.end},
            "index": self.index,
            "alignment_index": list(self.alignment_index),
        }


@dataclass
class InstanceForm:
    """New text instance form with its segmentation rows"""
    type: str = ""
    copyright: str = "public"
    bdrc: str = ""
    colophon: str = ""
    incipit_en: str = ""
    incipit_bo: str = ""
    content: str = ""
    annotations: List[AnnotationRow] = field(default_factory=list)

    @classmethod
    def blank(cls) -> "InstanceForm":
        """Form as first shown, with one empty segment row"""
        form = cls()
        form.add_annotation()
        return form

    def add_annotation(self) -> AnnotationRow:
        row = AnnotationRow(index=len(self.annotations))
        self.annotations.append(row)
        return row

    def remove_annotation(self, position: int) -> None:
        del self.annotations[position]
        for i, row in enumerate(self.annotations):
            row.index = i

    def set_span(self, position: int, start: Any = None, end: Any = None) -> None:
        row = self.annotations[position]
        if start is not None:
            row.start = _to_int(start)
        if end is not None:
            row.end = _to_int(end)

    def validate(self) -> List[str]:
        errors = []
        if not self.type:
            errors.append("Type is required")
        elif self.type not in INSTANCE_TYPES:
            errors.append(f"Invalid instance type: {self.type}")
        if not _present(self.content):
            errors.append("Content is required")
        if self.type == InstanceType.DIPLOMATIC.value and not _present(self.bdrc):
            errors.append("BDRC ID is required when type is Diplomatic")

        content_length = len(self.content)
        for i, row in enumerate(self.annotations, start=1):
            if row.start < 0 or row.end < 0:
                errors.append(f"Annotation {i}: Start and End positions must be non-negative")
            elif row.start >= row.end:
                errors.append(f"Annotation {i}: Start position must be less than End position")
            elif row.end > content_length:
                errors.append(f"Annotation {i}: End position exceeds content length ({content_length})")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {
            "metadata": {
                "type": self.type,
                "copyright": self.copyright,
                "bdrc": self.bdrc.strip(),
                "colophon": self.colophon,
                "incipit_title": {"en": self.incipit_en, "bo": self.incipit_bo},
            },
            "annotation": [row.to_payload() for row in self.annotations],
            "content": self.content,
        }


@dataclass
class PersonForm:
    """New person form"""
    name_en: str = ""
    name_bo: str = ""
    alt_names: List[Dict[str, str]] = field(default_factory=list)
    bdrc: str = ""
    wiki: str = ""

    def add_alt_name(self, language: str = "en", value: str = "") -> None:
        self.alt_names.append({language: value})

    def remove_alt_name(self, position: int) -> None:
        del self.alt_names[position]

    def validate(self) -> List[str]:
        if not (_present(self.name_en) or _present(self.name_bo)):
            return ["Please provide a name in English or Tibetan"]
        return []

    def to_payload(self) -> Dict[str, Any]:
        name = {}
        if _present(self.name_en):
            name["en"] = self.name_en.strip()
        if _present(self.name_bo):
            name["bo"] = self.name_bo.strip()
        alt_names = [
            {lang: value.strip() for lang, value in alt.items() if _present(value)}
            for alt in self.alt_names
        ]
        return {
            "name": name,
            "alt_names": [alt for alt in alt_names if alt],
            "bdrc": self.bdrc.strip(),
            "wiki": self.wiki.strip(),
        }
