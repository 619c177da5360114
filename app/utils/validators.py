"""
Validation utilities for gateway write routes

Each validator returns a list of issues; an empty list means the payload
may be forwarded upstream.
"""

from typing import Any, Dict, List, NamedTuple

from shared.schemas import (
    TextType, ContributionRole, InstanceType, has_primary_value, annotations_from_payload,
)

VALID_TEXT_TYPES = [t.value for t in TextType]
VALID_CONTRIBUTION_ROLES = [r.value for r in ContributionRole]
VALID_INSTANCE_TYPES = [t.value for t in InstanceType]


class ValidationIssue(NamedTuple):
    error: str
    details: str


def validate_text_payload(text_data: Dict[str, Any]) -> List[ValidationIssue]:
    """
    Validate a text creation payload
    Returns list of validation issues
    """
    missing = [field for field in ("type", "title", "language") if not text_data.get(field)]
    if missing:
        return [ValidationIssue(
            "Missing required fields",
            f"type, title, and language are required (missing: {', '.join(missing)})"
        )]

    issues = []

    if text_data["type"] not in VALID_TEXT_TYPES:
        issues.append(ValidationIssue(
            "Invalid text type",
            f"type must be one of: {', '.join(VALID_TEXT_TYPES)}"
        ))

    if not has_primary_value(text_data["title"]):
        issues.append(ValidationIssue(
            "Invalid title",
            "title must be an object with a non-empty en or bo value"
        ))

    contributions = text_data.get("contributions")
    if contributions is not None:
        issues.extend(validate_contributions(contributions))

    return issues


def validate_contributions(contributions: Any) -> List[ValidationIssue]:
    """
    Validate text contributions
    Returns list of validation issues
    """
    if not isinstance(contributions, list):
        return [ValidationIssue("Invalid contribution", "contributions must be a list")]

    issues = []
    for position, contribution in enumerate(contributions, start=1):
        if not isinstance(contribution, dict):
            issues.append(ValidationIssue(
                "Invalid contribution",
                f"Contribution {position} must be an object"
            ))
            continue

        person_id = contribution.get("person_id")
        ai_id = contribution.get("ai_id")
        role = contribution.get("role")

        if not role or not (person_id or ai_id):
            issues.append(ValidationIssue(
                "Invalid contribution",
                "Each contribution must have person_id (or ai_id) and role"
            ))
            continue

        if person_id and ai_id:
            issues.append(ValidationIssue(
                "Invalid contribution",
                f"Contribution {position} cannot have both person_id and ai_id"
            ))

        if role not in VALID_CONTRIBUTION_ROLES:
            issues.append(ValidationIssue(
                "Invalid contribution role",
                f"role must be one of: {', '.join(VALID_CONTRIBUTION_ROLES)}"
            ))

    return issues


def validate_instance_payload(instance_data: Dict[str, Any]) -> List[ValidationIssue]:
    """
    Validate a text instance creation payload
    Returns list of validation issues
    """
    content = instance_data.get("content")
    if not content or not isinstance(content, str):
        return [ValidationIssue("Missing required field", "content is required")]

    issues = []

    metadata = instance_data.get("metadata")
    if metadata is not None:
        if not isinstance(metadata, dict):
            issues.append(ValidationIssue("Invalid metadata", "metadata must be an object"))
        elif metadata.get("type") is not None and metadata["type"] not in VALID_INSTANCE_TYPES:
            issues.append(ValidationIssue(
                "Invalid instance type",
                f"metadata.type must be one of: {', '.join(VALID_INSTANCE_TYPES)}"
            ))

    for kind, annotations in annotations_from_payload(instance_data).items():
        issues.extend(validate_annotation_spans(kind, annotations, len(content)))

    return issues


def validate_annotation_spans(kind: str, annotations: List[Any], content_length: int) -> List[ValidationIssue]:
    """
    Check 0 <= start < end <= content_length for every annotation of one kind
    Returns list of validation issues
    """
    issues = []
    for position, annotation in enumerate(annotations, start=1):
        span = annotation.get("span") if isinstance(annotation, dict) else None
        start = span.get("start") if isinstance(span, dict) else None
        end = span.get("end") if isinstance(span, dict) else None

        if not isinstance(start, int) or not isinstance(end, int) or isinstance(start, bool) or isinstance(end, bool):
            issues.append(ValidationIssue(
                "Invalid annotation",
                f"{kind} annotation {position}: span must have integer start and end"
            ))
        elif start < 0 or end < 0:
            issues.append(ValidationIssue(
                "Invalid annotation",
                f"{kind} annotation {position}: start and end positions must be non-negative"
            ))
        elif start >= end:
            issues.append(ValidationIssue(
                "Invalid annotation",
                f"{kind} annotation {position}: start position must be less than end position"
            ))
        elif end > content_length:
            issues.append(ValidationIssue(
                "Invalid annotation",
                f"{kind} annotation {position}: end position exceeds content length ({content_length})"
            ))

    return issues


def validate_person_payload(person_data: Dict[str, Any]) -> List[ValidationIssue]:
    """
    Validate a person creation payload
    Returns list of validation issues
    """
    if not has_primary_value(person_data.get("name")):
        return [ValidationIssue(
            "Name is required with at least one language (en or bo)",
            "Please provide a name in English or Tibetan"
        )]

    issues = []

    alt_names = person_data.get("alt_names")
    if alt_names is not None and not isinstance(alt_names, list):
        issues.append(ValidationIssue("Invalid alternative names", "alt_names must be a list"))

    return issues
