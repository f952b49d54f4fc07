"""Tests for room document state transitions."""

import asyncio

import pytest

from av_boq.boq.encoder import ALL_SYSTEMS
from av_boq.boq.session import RoomDocument
from av_boq.config.settings import Settings
from av_boq.core.errors import GenerationDecodeError
from av_boq.core.schemas import BoqItem, TokenUsage, ValidationResult
from av_boq.orchestrator import BoqService

VALID = {"isValid": True, "warnings": [], "suggestions": [], "missingComponents": []}


@pytest.fixture
def service(fake_llm, store):
    return BoqService(fake_llm, store, Settings())


@pytest.fixture
def room(item_factory):
    doc = RoomDocument("Boardroom", {"requiredSystems": ["display"], "displayBrands": ["LG"]})
    doc.boq = [BoqItem(**item_factory(model="A"))]
    doc.validation = ValidationResult(**VALID)
    return doc


def test_new_room_defaults_to_all_systems():
    """Test that a new room asks for every system."""
    assert RoomDocument("Room 1").answers == {"requiredSystems": ALL_SYSTEMS}


def test_generate_replaces_boq_and_clears_validation(room, service, fake_llm, item_factory):
    """Test that generation replaces the BOQ and drops validation."""
    fake_llm.queue([item_factory(model="B")], usage=TokenUsage(total_tokens=42))

    asyncio.run(room.generate(service))

    assert [i.model for i in room.boq] == ["B"]
    assert room.validation is None
    assert room.token_usage.total_tokens == 42
    assert room.error is None


def test_failed_generation_keeps_previous_boq(room, service, fake_llm):
    """Test that failed generation leaves the room unchanged."""
    fake_llm.queue("garbage")

    with pytest.raises(GenerationDecodeError):
        asyncio.run(room.generate(service))

    assert [i.model for i in room.boq] == ["A"]
    assert room.validation is not None
    assert room.error.startswith("Operation failed:")


def test_refine_supersedes_boq(room, service, fake_llm, item_factory):
    """Test that refinement replaces the whole BOQ."""
    fake_llm.queue([item_factory(model="B"), item_factory(model="C")])

    asyncio.run(room.refine(service, "Add a second display"))

    assert [i.model for i in room.boq] == ["B", "C"]
    assert room.validation is None


def test_failed_refine_records_error(room, service, fake_llm):
    """Test that failed refinement records an error and keeps the BOQ."""
    fake_llm.fail_next(ConnectionError("offline"))

    with pytest.raises(ConnectionError):
        asyncio.run(room.refine(service, "Anything"))

    assert [i.model for i in room.boq] == ["A"]
    assert room.error == "Failed to refine: offline"


def test_validate_stores_result(room, service, fake_llm):
    """Test that validation stores its result on the room."""
    fake_llm.queue({**VALID, "isValid": False, "warnings": ["LG requested, none found"]})

    result = asyncio.run(room.validate(service))

    assert room.validation is result
    assert result.warnings == ["LG requested, none found"]
    assert 'User Requirements: "requiredSystems: display; displayBrands: LG"' in (
        fake_llm.generate_calls[0]["prompt"]
    )


def test_validate_without_boq_is_noop(service, fake_llm):
    """Test that validating an empty room makes no model call."""
    assert asyncio.run(RoomDocument("Empty").validate(service)) is None
    assert fake_llm.generate_calls == []


def test_update_item_keeps_totals_and_clamps_margin(room):
    """Test that edits keep totals derived and clamp margin."""
    item = room.update_item(0, quantity=3, unit_price=10, margin=-4)

    assert item.total_price == 30
    assert item.margin == 0
    assert room.boq[0] is item
    assert room.validation is None


def test_add_and_delete_items(room):
    """Test adding a blank item and deleting a line."""
    added = room.add_item()
    assert added.item_description == "New Item"
    assert added.key_remarks == "Manually added item."
    assert (added.quantity, added.unit_price, added.total_price) == (1, 0, 0)
    assert (added.source, added.price_source) == ("web", "estimated")
    assert len(room.boq) == 2

    room.validation = ValidationResult(**VALID)
    room.delete_item(0)
    assert [i.item_description for i in room.boq] == ["New Item"]
    assert room.validation is None


def test_update_answers_clears_validation(room):
    """Test that changing answers drops validation."""
    room.update_answers({"roomType": "Huddle"})
    assert room.requirements_text == "roomType: Huddle"
    assert room.validation is None


def test_duplicate_copies_boq_without_validation(room):
    """Test that duplicates are independent copies without validation."""
    copy = room.duplicate()
    assert copy.name == "Boardroom (Copy)"
    assert copy.id != room.id
    assert copy.validation is None
    assert [i.model for i in copy.boq] == ["A"]
    copy.update_item(0, quantity=9)
    assert room.boq[0].quantity == 1


def test_update_item_accepts_wire_names(room):
    """Test that camelCase wire names edit the matching fields."""
    item = room.update_item(0, quantity=2, unitPrice=5, itemDescription="Ceiling speaker")
    assert (item.unit_price, item.total_price) == (5, 10)
    assert item.item_description == "Ceiling speaker"


@pytest.mark.parametrize("name", ["totalPrice", "total_price"])
def test_update_item_rejects_total_price(room, name):
    """Test that the derived total cannot be set directly."""
    with pytest.raises(ValueError, match="derived"):
        room.update_item(0, **{name: 1})
    assert room.boq[0].total_price == room.boq[0].quantity * room.boq[0].unit_price
