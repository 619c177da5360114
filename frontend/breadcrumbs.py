"""
Breadcrumb trail derived from the current route
"""

from typing import List, NamedTuple, Optional


class Crumb(NamedTuple):
    label: str
    href: Optional[str] = None


def build_breadcrumbs(
    path: str,
    text_name: Optional[str] = None,
    instance_name: Optional[str] = None,
    person_name: Optional[str] = None
) -> List[Crumb]:
    """
    Build the trail for a route path

    Args:
        path: Route path, e.g. /texts/T1/instances/I1
        text_name: Display name of the text in the path
        instance_name: Display name of the instance in the path
        person_name: Label of the person section

    Returns:
        Crumbs from the outermost to the current page. The last one
        carries no link.
    """
    segments = [s for s in path.split("?", 1)[0].split("/") if s]
    crumbs: List[Crumb] = []

    if segments[:1] == ["texts"]:
        crumbs.append(Crumb("Texts", "/texts"))
        if len(segments) >= 2:
            text_id = segments[1]
            crumbs.append(Crumb(text_name or text_id, f"/texts/{text_id}/instances"))
            if len(segments) >= 4 and segments[2] == "instances":
                crumbs.append(Crumb(instance_name or segments[3]))
    elif segments[:1] == ["persons"]:
        crumbs.append(Crumb(person_name or "Persons", "/persons"))

    if crumbs:
        last = crumbs[-1]
        crumbs[-1] = Crumb(last.label)
    return crumbs
