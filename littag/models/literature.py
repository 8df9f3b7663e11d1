"""Literature data model.

A literature record is one of six variants discriminated by ``type``.
All variants share the fields of :class:`LiteratureBase`; the extra
bibliographic fields of every variant are optional because partial
records are common.

Records are stored and exchanged with camelCase keys
(``pdfFilePath``, ``createdAt`` ...); Python code uses snake_case.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from littag.errors import FieldError, LiteratureValidationError

MIN_YEAR = 1000
YEAR_LOOKAHEAD = 10


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AttributeApplication(CamelModel):
    """Values of one attribute schema attached to a literature record."""

    attribute_id: str = Field(min_length=1)
    values: list[str] = Field(min_length=1)
    note: Optional[str] = None


class LiteratureBase(CamelModel):
    """Fields common to every literature type."""

    id: Optional[str] = None
    title: str
    year: int
    authors: list[str] = Field(min_length=1)
    notes: Optional[str] = None
    pdf_file_path: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    attributes: Optional[list[AttributeApplication]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title is required")
        return v

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        max_year = datetime.now(timezone.utc).year + YEAR_LOOKAHEAD
        if v < MIN_YEAR or v > max_year:
            raise ValueError(f"year must be between {MIN_YEAR} and {max_year}")
        return v

    @field_validator("attributes")
    @classmethod
    def validate_unique_attributes(
        cls, v: Optional[list[AttributeApplication]]
    ) -> Optional[list[AttributeApplication]]:
        if v is None:
            return v
        seen: set[str] = set()
        for application in v:
            if application.attribute_id in seen:
                raise ValueError(
                    f"attribute '{application.attribute_id}' is applied more than once"
                )
            seen.add(application.attribute_id)
        return v


class JournalArticle(LiteratureBase):
    type: Literal["journal_article"] = "journal_article"
    journal: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    publisher: Optional[str] = None


class ConferencePaper(LiteratureBase):
    type: Literal["conference_paper"] = "conference_paper"
    conference: Optional[str] = None
    location: Optional[str] = None
    pages: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    publisher: Optional[str] = None


class Book(LiteratureBase):
    type: Literal["book"] = "book"
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    edition: Optional[str] = None
    total_pages: Optional[int] = Field(default=None, gt=0)


class BookChapter(LiteratureBase):
    type: Literal["book_chapter"] = "book_chapter"
    book_title: Optional[str] = None
    publisher: Optional[str] = None
    editors: Optional[list[str]] = None
    chapter: Optional[str] = None
    pages: Optional[str] = None
    isbn: Optional[str] = None


class Thesis(LiteratureBase):
    type: Literal["thesis"] = "thesis"
    thesis_type: Optional[Literal["doctoral", "masters", "bachelors"]] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    url: Optional[str] = None


class OtherLiterature(LiteratureBase):
    type: Literal["other"] = "other"
    source_type: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None


Literature = Annotated[
    Union[JournalArticle, ConferencePaper, Book, BookChapter, Thesis, OtherLiterature],
    Field(discriminator="type"),
]

LiteratureAdapter: TypeAdapter[Literature] = TypeAdapter(Literature)

LITERATURE_TYPES: dict[str, type[LiteratureBase]] = {
    "journal_article": JournalArticle,
    "conference_paper": ConferencePaper,
    "book": Book,
    "book_chapter": BookChapter,
    "thesis": Thesis,
    "other": OtherLiterature,
}

LITERATURE_TYPE_LABELS: dict[str, str] = {
    "journal_article": "Journal article",
    "conference_paper": "Conference paper",
    "book": "Book",
    "book_chapter": "Book chapter",
    "thesis": "Thesis",
    "other": "Other",
}


class LiteratureSummary(CamelModel):
    """Lightweight projection returned by repository listings."""

    id: str
    title: str
    type: str
    year: int
    authors: list[str] = Field(default_factory=list)
    attributes: list[AttributeApplication] = Field(default_factory=list)


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"]) or "(root)"
        errors.append(FieldError(path=path, message=err["msg"]))
    return errors


def collect_errors(candidate: Union[dict[str, Any], BaseModel]) -> list[FieldError]:
    """Return every field violation of *candidate* (empty list when valid)."""
    try:
        validate_literature(candidate)
    except LiteratureValidationError as e:
        return e.errors
    return []


def validate_literature(candidate: Union[dict[str, Any], BaseModel]) -> LiteratureBase:
    """Validate *candidate* and return the typed literature variant.

    The ``type`` tag selects the variant; all violations are collected
    before raising. When the tag is missing or unknown, the common
    fields are still checked so the caller sees everything at once.

    Raises:
        LiteratureValidationError: with one FieldError per invalid field
    """
    if isinstance(candidate, BaseModel):
        data = candidate.model_dump(by_alias=True)
    else:
        data = dict(candidate)

    tag = data.get("type")
    model_cls = LITERATURE_TYPES.get(tag) if isinstance(tag, str) else None
    if model_cls is not None:
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            raise LiteratureValidationError(_field_errors(e)) from e

    allowed = ", ".join(LITERATURE_TYPES)
    errors = [FieldError(path="type", message=f"type must be one of: {allowed}")]
    try:
        LiteratureBase.model_validate(data)
    except ValidationError as e:
        errors.extend(_field_errors(e))
    raise LiteratureValidationError(errors)
