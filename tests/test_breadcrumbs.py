"""
Tests for breadcrumb derivation
"""

from frontend.breadcrumbs import Crumb, build_breadcrumbs


def test_text_list():
    assert build_breadcrumbs("/texts") == [Crumb("Texts")]


def test_text_instances():
    assert build_breadcrumbs("/texts/T1/instances", text_name="Heart Sutra") == [
        Crumb("Texts", "/texts"),
        Crumb("Heart Sutra"),
    ]


def test_instance_detail():
    assert build_breadcrumbs("/texts/T1/instances/I1?tab=segments", text_name="Heart Sutra",
                             instance_name="Derge") == [
        Crumb("Texts", "/texts"),
        Crumb("Heart Sutra", "/texts/T1/instances"),
        Crumb("Derge"),
    ]


def test_names_default_to_ids():
    crumbs = build_breadcrumbs("/texts/T1/instances/I1")
    assert [c.label for c in crumbs] == ["Texts", "T1", "I1"]


def test_persons():
    assert build_breadcrumbs("/persons/") == [Crumb("Persons")]
    assert build_breadcrumbs("/persons", person_name="Shantideva") == [Crumb("Shantideva")]


def test_unknown_route():
    assert build_breadcrumbs("/") == []
    assert build_breadcrumbs("/settings") == []
