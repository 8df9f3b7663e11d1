"""Tests for attribute application on literature records."""

import pytest

from littag.errors import FreeTextNotAllowedError, NotFoundError
from littag.models.attribute import AttributeSchema, AttributeValue
from littag.services.attribute_service import (
    AttributeService,
    apply_value,
    find_application,
    remove_value,
    resolve_schema,
    set_note,
)


def test_apply_creates_application(article):
    tagged = apply_value(article, "a1", "Survey")

    assert tagged.attributes[0].attribute_id == "a1"
    assert tagged.attributes[0].values == ["Survey"]
    assert article.attributes is None


def test_apply_same_value_twice_keeps_one(article):
    tagged = apply_value(apply_value(article, "a1", "Survey"), "a1", "Survey")
    assert find_application(tagged, "a1").values == ["Survey"]


def test_apply_keeps_insertion_order(article):
    tagged = article
    for value in ("b", "a", "c", "a"):
        tagged = apply_value(tagged, "a1", value)
    assert find_application(tagged, "a1").values == ["b", "a", "c"]
    assert len(tagged.attributes) == 1


def test_apply_strips_and_ignores_blank(article):
    assert apply_value(article, "a1", "   ") is article
    assert find_application(apply_value(article, "a1", " x "), "a1").values == ["x"]


def test_remove_value(article):
    tagged = apply_value(apply_value(article, "a1", "x"), "a1", "y")
    assert find_application(remove_value(tagged, "a1", "x"), "a1").values == ["y"]


def test_remove_last_value_drops_application(article):
    tagged = apply_value(apply_value(article, "a1", "x"), "a2", "z")

    cleaned = remove_value(tagged, "a1", "x")
    assert find_application(cleaned, "a1") is None
    assert [a.attribute_id for a in cleaned.attributes] == ["a2"]

    emptied = remove_value(cleaned, "a2", "z")
    assert not emptied.attributes


def test_set_note(article):
    tagged = apply_value(article, "a1", "x")
    assert find_application(set_note(tagged, "a1", "checked"), "a1").note == "checked"
    assert set_note(tagged, "missing", "n") is tagged


def test_resolve_missing_schema_is_none(schemas):
    assert resolve_schema(schemas, "nope") is None


def test_service_tag_persists(literatures, schemas, article):
    saved = literatures.save(article)
    method = schemas.save(AttributeSchema(name="Method", allow_free_text=True))
    service = AttributeService(literatures, schemas)

    service.tag(saved.id, method.id, "Survey")
    service.annotate(saved.id, method.id, "from abstract")

    stored = literatures.load(saved.id)
    application = find_application(stored, method.id)
    assert application.values == ["Survey"]
    assert application.note == "from abstract"
    assert stored.created_at == saved.created_at


def test_service_rejects_free_text_when_disallowed(literatures, schemas, article):
    saved = literatures.save(article)
    region = schemas.save(
        AttributeSchema(name="Region", predefined_values=[AttributeValue(value="Europe")])
    )
    service = AttributeService(literatures, schemas)

    with pytest.raises(FreeTextNotAllowedError):
        service.tag(saved.id, region.id, "Mars")
    service.tag(saved.id, region.id, "Europe")
    assert find_application(literatures.load(saved.id), region.id).values == ["Europe"]


def test_service_tolerates_dangling_schema(literatures, schemas, article):
    saved = literatures.save(article)
    service = AttributeService(literatures, schemas)

    service.tag(saved.id, "deletedschema", "x")
    assert find_application(literatures.load(saved.id), "deletedschema").values == ["x"]


def test_service_untag_removes_application_on_disk(literatures, schemas, article):
    saved = literatures.save(apply_value(article, "a1", "x"))
    AttributeService(literatures, schemas).untag(saved.id, "a1", "x")
    assert literatures.load(saved.id).attributes is None


def test_service_missing_literature(literatures, schemas):
    with pytest.raises(NotFoundError):
        AttributeService(literatures, schemas).tag("missing", "a1", "x")


def test_remove_strips_value_and_keeps_record_when_absent(article):
    tagged = apply_value(article, "a1", " Survey ")
    assert remove_value(tagged, "a1", " Survey ").attributes is None
    assert remove_value(tagged, "a1", "Case study") is tagged
    assert remove_value(tagged, "missing", "Survey") is tagged


def test_service_untag_without_match_does_not_save(literatures, schemas, article, monkeypatch):
    saved = literatures.save(apply_value(article, "a1", "x"))

    def fail_save(record):
        raise AssertionError("unexpected save")

    monkeypatch.setattr(literatures, "save", fail_save)
    service = AttributeService(literatures, schemas)

    assert service.untag(saved.id, "a1", "y").updated_at == saved.updated_at
    assert service.tag(saved.id, "a1", "x").updated_at == saved.updated_at
