"""
Tests for the text and instance creation workflow
"""

import pytest
from unittest.mock import MagicMock

from frontend.api import GatewayRequestError
from frontend.hooks import TextQueries
from frontend.workflow import (
    STEP_INSTANCE,
    STEP_SELECT,
    STEP_TEXT,
    CreationWorkflow,
    filter_texts,
)
from shared.schemas import TextSchema


def make_text(text_id: str, **title) -> TextSchema:
    return TextSchema(id=text_id, type="root", title=title, language="en")


@pytest.fixture
def queries():
    return MagicMock(spec=TextQueries)


@pytest.fixture
def workflow(queries, client_settings):
    flow = CreationWorkflow(queries, config=client_settings)
    flow.instance_form.type = "critical"
    flow.instance_form.content = "abcdef"
    flow.instance_form.set_span(0, start=0, end=6)
    return flow


def fill_text_form(flow: CreationWorkflow):
    flow.start_new_text()
    flow.text_form.type = "root"
    flow.text_form.title_en = "X"
    flow.text_form.language = "en"


def test_filter_texts_by_title_or_id():
    texts = [make_text("T1", en="Heart Sutra"), make_text("T2", bo="སྤྱོད་འཇུག"), make_text("ABC", en="Other")]

    assert [t.id for t in filter_texts(texts, "heart")] == ["T1"]
    assert [t.id for t in filter_texts(texts, "སྤྱོད")] == ["T2"]
    assert [t.id for t in filter_texts(texts, "abc")] == ["ABC"]
    assert [t.id for t in filter_texts(texts, "  ")] == ["T1", "T2", "ABC"]


def test_filter_texts_caps_matches():
    texts = [make_text(f"T{i}", en="Sutra") for i in range(80)]

    assert len(filter_texts(texts, "sutra")) == 50
    assert len(filter_texts(texts, "")) == 50


@pytest.mark.asyncio
async def test_load_texts_uses_picker_page(workflow, queries):
    queries.texts.return_value = [make_text("T1", en="A")]

    await workflow.load_texts()

    queries.texts.assert_awaited_once_with({"limit": 100, "offset": 0})
    assert [t.id for t in workflow.matching_texts()] == ["T1"]


def test_step_transitions(workflow):
    assert workflow.step == STEP_SELECT

    workflow.select_text(make_text("T1", bo="ཀ", en="K"))
    assert workflow.step == STEP_INSTANCE
    assert workflow.search == "ཀ"
    assert workflow.target_text_id == "T1"

    workflow.set_search("")
    assert workflow.selected_text is None

    workflow.start_new_text()
    assert workflow.step == STEP_TEXT
    workflow.cancel_instance()
    assert workflow.step == STEP_SELECT


@pytest.mark.asyncio
async def test_existing_text_only_creates_instance(workflow, queries):
    queries.create_text_instance.return_value = {"id": "I1"}
    workflow.select_text(make_text("T1", en="A"))

    assert await workflow.submit() is True

    queries.create_text.assert_not_called()
    queries.create_text_instance.assert_awaited_once_with("T1", workflow.instance_form.to_payload())
    assert workflow.success == "Text and Details created successfully!"
    assert workflow.redirect_to == "/texts"


@pytest.mark.asyncio
async def test_new_text_created_before_instance(workflow, queries):
    calls = []

    async def create_text(payload):
        calls.append(("text", payload))
        return {"id": "T9"}

    async def create_instance(text_id, payload):
        calls.append(("instance", text_id))
        return {"id": "I9"}

    queries.create_text.side_effect = create_text
    queries.create_text_instance.side_effect = create_instance
    fill_text_form(workflow)

    assert await workflow.submit() is True
    assert calls == [("text", {"type": "root", "title": {"en": "X"}, "language": "en"}), ("instance", "T9")]
    assert workflow.created_text_id == "T9"


@pytest.mark.asyncio
async def test_instance_failure_keeps_created_text(workflow, queries):
    queries.create_text.return_value = {"id": "T9"}
    queries.create_text_instance.side_effect = GatewayRequestError("content is required", status_code=400)
    fill_text_form(workflow)

    assert await workflow.submit() is False

    assert workflow.error == "Failed to create: content is required"
    assert workflow.created_text_id == "T9"
    assert workflow.redirect_to == "/texts/T9/instances"
    assert workflow.success is None
    assert not workflow.is_submitting

    # Retrying does not create the text a second time
    queries.create_text_instance.side_effect = None
    queries.create_text_instance.return_value = {"id": "I9"}
    assert await workflow.submit() is True
    queries.create_text.assert_awaited_once()
    assert workflow.error is None
    assert workflow.redirect_to == "/texts"

    workflow.cancel_instance()
    assert workflow.step == STEP_TEXT


@pytest.mark.asyncio
async def test_text_failure_stops_workflow(workflow, queries):
    queries.create_text.side_effect = GatewayRequestError("Invalid title")
    fill_text_form(workflow)

    assert await workflow.submit() is False

    assert workflow.error == "Failed to create: Invalid title"
    assert workflow.redirect_to is None
    queries.create_text_instance.assert_not_called()


@pytest.mark.asyncio
async def test_validation_blocks_network(workflow, queries):
    fill_text_form(workflow)
    workflow.text_form.language = ""
    workflow.instance_form.set_span(0, start=4, end=2)

    assert await workflow.submit() is False

    assert workflow.validation_errors == [
        "Language is required",
        "Annotation 1: Start position must be less than End position",
    ]
    queries.create_text.assert_not_called()
    queries.create_text_instance.assert_not_called()


@pytest.mark.asyncio
async def test_nothing_selected(workflow, queries):
    assert await workflow.submit() is False
    assert workflow.validation_errors == ["Select an existing text or create a new one"]


@pytest.mark.asyncio
async def test_text_creation_without_id(workflow, queries):
    queries.create_text.return_value = {}
    fill_text_form(workflow)

    assert await workflow.submit() is False
    assert workflow.error == "Failed to create: Text creation returned no id"


@pytest.mark.asyncio
async def test_changing_selection_after_failure_targets_new_choice(workflow, queries):
    queries.create_text.return_value = {"id": "NEW"}
    queries.create_text_instance.side_effect = GatewayRequestError("rejected")
    fill_text_form(workflow)
    assert await workflow.submit() is False

    queries.create_text_instance.side_effect = None
    queries.create_text_instance.return_value = {"id": "I1"}
    workflow.select_text(make_text("OTHER", en="Other"))

    assert workflow.created_text_id is None
    assert await workflow.submit() is True
    assert queries.create_text_instance.await_args.args[0] == "OTHER"


@pytest.mark.asyncio
async def test_starting_new_text_after_failure_creates_it(workflow, queries):
    queries.create_text.side_effect = [{"id": "FIRST"}, {"id": "SECOND"}]
    queries.create_text_instance.side_effect = [GatewayRequestError("rejected"), {"id": "I1"}]
    fill_text_form(workflow)
    assert await workflow.submit() is False

    fill_text_form(workflow)

    assert await workflow.submit() is True
    assert queries.create_text.await_count == 2
    assert queries.create_text_instance.await_args.args[0] == "SECOND"
    assert workflow.created_text_id == "SECOND"
