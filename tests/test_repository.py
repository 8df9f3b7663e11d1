"""Tests for the JSON-file repositories."""

import json
from itertools import count

import pytest

from littag.database import repository as repository_module
from littag.errors import CorruptRecordError, ImmutableTypeError, LiteratureValidationError, NotFoundError
from littag.models.attribute import AttributeSchema, AttributeValue
from littag.models.literature import Book, JournalArticle


@pytest.fixture
def ticking_clock(monkeypatch):
    """Make every save see a later timestamp."""
    ticks = count(1)
    monkeypatch.setattr(
        repository_module,
        "utc_now_iso",
        lambda: f"2024-01-01T00:00:{next(ticks):02d}+00:00",
    )


def test_save_assigns_id_and_timestamps(literatures, article, ticking_clock):
    saved = literatures.save(article)

    assert saved.id
    assert saved.created_at == saved.updated_at
    path = literatures.directory / f"{saved.id}.literature.json"
    assert path.is_file()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["type"] == "journal_article"
    assert data["createdAt"] == saved.created_at


def test_round_trip(literatures, article):
    saved = literatures.save(article)
    loaded = literatures.load(saved.id)

    assert loaded == saved
    assert isinstance(loaded, JournalArticle)
    assert loaded.journal == "Journal of Studies"


def test_id_stability(literatures, article, ticking_clock):
    first = literatures.save(article)
    # a fresh draft that only knows the id
    draft = article.model_copy(update={"id": first.id, "title": "A Study (rev.)"})
    second = literatures.save(draft)

    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.updated_at != first.updated_at
    assert literatures.load(first.id).title == "A Study (rev.)"
    assert len(list(literatures.directory.glob("*.literature.json"))) == 1


def test_save_preserves_explicit_created_at(literatures, article):
    saved = literatures.save(article.model_copy(update={"created_at": "2020-05-05T00:00:00+00:00"}))
    assert saved.created_at == "2020-05-05T00:00:00+00:00"


def test_save_accepts_dict_and_validates(literatures):
    saved = literatures.save({"type": "book", "title": "B", "year": 1999, "authors": ["A"]})
    assert isinstance(saved, Book)

    with pytest.raises(LiteratureValidationError):
        literatures.save({"type": "book", "title": "", "year": 1999, "authors": ["A"]})


def test_type_is_immutable(literatures, article):
    saved = literatures.save(article)
    book = Book(id=saved.id, title=saved.title, year=saved.year, authors=saved.authors)

    with pytest.raises(ImmutableTypeError):
        literatures.save(book)
    assert literatures.load(saved.id).type == "journal_article"


def test_load_missing_returns_none(literatures):
    assert literatures.load("doesnotexist") is None


def test_load_corrupt_raises(literatures):
    (literatures.directory / "broken.literature.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(CorruptRecordError):
        literatures.load("broken")


def test_invalid_id_rejected(literatures):
    with pytest.raises(ValueError):
        literatures.load("../project-metadata")


def test_list_skips_corrupt_files(literatures, article):
    literatures.save(article)
    literatures.save(article.model_copy(update={"title": "Another"}))
    (literatures.directory / "bad.literature.json").write_text("{oops", encoding="utf-8")
    (literatures.directory / "invalid.literature.json").write_text(
        json.dumps({"type": "book", "title": ""}), encoding="utf-8"
    )
    (literatures.directory / "notes.txt").write_text("ignored", encoding="utf-8")

    summaries = literatures.list()

    assert len(summaries) == 2
    assert {s.title for s in summaries} == {"A Study", "Another"}


def test_list_summary_fields(literatures, article):
    saved = literatures.save(article)
    [summary] = literatures.list()

    assert summary.id == saved.id
    assert summary.type == "journal_article"
    assert summary.year == 2023
    assert summary.authors == ["X"]
    assert summary.attributes == []


def test_list_on_missing_directory(literatures):
    literatures.directory.rmdir()
    assert literatures.list() == []


def test_delete(literatures, article):
    saved = literatures.save(article)
    literatures.delete(saved.id)

    assert literatures.load(saved.id) is None
    with pytest.raises(NotFoundError):
        literatures.delete(saved.id)


def test_no_temp_files_left_behind(literatures, article):
    literatures.save(article)
    leftovers = [p for p in literatures.directory.iterdir() if p.suffix == ".tmp"]
    assert leftovers == []


def test_schema_repository_assigns_value_ids(schemas):
    saved = schemas.save(
        AttributeSchema(
            name="Method",
            predefined_values=[AttributeValue(value="Survey"), AttributeValue(value="Experiment")],
        )
    )
    ids = [v.id for v in saved.predefined_values]
    assert all(ids)
    assert len(set(ids)) == 2

    again = schemas.save(saved)
    assert [v.id for v in again.predefined_values] == ids
    assert (schemas.directory / f"{saved.id}.attribute-schema.json").is_file()


def test_schema_listing_and_lookup(schemas):
    method = schemas.save(AttributeSchema(name="Method", allow_free_text=True))
    schemas.save(AttributeSchema(name="Region"))

    assert {s.name for s in schemas.list()} == {"Method", "Region"}
    assert schemas.as_lookup()[method.id].allow_free_text is True


def test_list_ignores_directories_matching_suffix(literatures, article):
    literatures.save(article)
    (literatures.directory / "stray.literature.json").mkdir()
    assert [s.title for s in literatures.list()] == ["A Study"]


def test_base_repository_is_abstract(context):
    with pytest.raises(TypeError):
        repository_module.JsonRecordRepository(context)
