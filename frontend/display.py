"""
Display helpers for texts, persons and instances
"""

from typing import Any, Dict, List, Optional

from shared.schemas import Annotation, PersonSchema, TextInstanceSchema, TextSchema


def display_name(mapping: Optional[Dict[str, str]], fallback: str = "Untitled") -> str:
    """Tibetan first, then English, then whatever language is there"""
    if not mapping:
        return fallback
    for lang in ("bo", "en"):
        if mapping.get(lang):
            return mapping[lang]
    for value in mapping.values():
        if value:
            return value
    return fallback


def text_display_name(text: TextSchema, fallback: str = "Untitled") -> str:
    return display_name(text.title, fallback)


def person_display_name(person: PersonSchema, fallback: str = "Unknown") -> str:
    return display_name(person.name, fallback)


def alt_title_preview(alt_titles: List[Dict[str, str]], count: int = 3) -> List[str]:
    """First value of each of the first few alternative titles or names"""
    preview = []
    for alt in alt_titles[:count]:
        value = next(iter(alt.values()), "") if alt else ""
        if value:
            preview.append(value)
    return preview


def contributors_preview(text: TextSchema, count: int = 2) -> Dict[str, Any]:
    shown = [
        {"id": c.person_id or c.ai_id or c.person_bdrc_id, "role": c.role.value}
        for c in text.contributions[:count]
    ]
    return {"shown": shown, "more": max(0, len(text.contributions) - count)}


def annotation_preview(instance: TextInstanceSchema, annotation: Annotation, max_length: int = 80) -> str:
    """Text covered by an annotation, shortened for list display"""
    excerpt = instance.span_text(annotation.span)
    if len(excerpt) > max_length:
        return excerpt[:max_length].rstrip() + "..."
    return excerpt


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def instance_summary(instance: TextInstanceSchema) -> Dict[str, Any]:
    """Figures shown on an instance card"""
    segments = instance.annotations_of("segmentation")
    incipit = instance.metadata.incipit_title if instance.metadata else None
    return {
        "id": instance.id,
        "type": instance.instance_type or "Unknown",
        "title": display_name(incipit, fallback=instance.id or "Untitled"),
        "length": len(instance.content or ""),
        "segments": len(segments),
        "segments_label": plural(len(segments), "segment"),
        "annotation_kinds": sorted(instance.annotations),
        "unknown_kinds": instance.unknown_annotation_kinds(),
    }
