"""Tidy-data (CSV/TSV) export service."""

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping, Optional, Union

from littag.models.attribute import AttributeSchema
from littag.models.literature import LiteratureBase

ExportFormat = Literal["csv", "tsv"]
ExportField = Literal["id", "title", "year", "authors", "filename", "filepath", "attribute", "value"]

EXPORT_FIELDS: tuple[str, ...] = (
    "id", "title", "year", "authors", "filename", "filepath", "attribute", "value",
)
DELIMITERS: dict[str, str] = {"csv": ",", "tsv": "\t"}
AUTHOR_SEPARATOR = "; "

_PATH_SEP_RE = re.compile(r"[\\/]")


@dataclass
class ExportConfig:
    """What to export and how."""

    format: ExportFormat = "csv"
    fields: list[str] = field(default_factory=lambda: ["id", "attribute", "value"])
    attribute_ids: Optional[list[str]] = None

    def __post_init__(self):
        if self.format not in DELIMITERS:
            raise ValueError(f"Unknown export format: {self.format!r} (use csv or tsv)")
        unknown = [f for f in self.fields if f not in EXPORT_FIELDS]
        if unknown:
            raise ValueError(f"Unknown export field(s): {', '.join(unknown)}")

    @property
    def delimiter(self) -> str:
        return DELIMITERS[self.format]

    @property
    def includes_attributes(self) -> bool:
        """``attribute`` and ``value`` act as one unit for row shape."""
        return "attribute" in self.fields or "value" in self.fields


def escape_field(value: Any, delimiter: str) -> str:
    """Stringify *value*, quoting it only when it contains the delimiter,
    a double quote or a newline.
    """
    text = "" if value is None else str(value)
    if delimiter in text or '"' in text or "\n" in text or "\r" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def filename_of(path: Optional[str]) -> str:
    """Last segment of a ``/`` or ``\\`` separated path."""
    if not path:
        return ""
    return _PATH_SEP_RE.split(path)[-1]


class TidyDataExporter:
    """Flatten literature and attribute data into delimited rows.

    Without attribute columns there is one row per literature record.
    With them there is one row per (literature, attribute, value).
    """

    def __init__(self, config: ExportConfig):
        """Initialize exporter.

        Args:
            config: Export format, columns and attribute filter
        """
        self.config = config

    def _base_values(self, literature: LiteratureBase) -> dict[str, Any]:
        return {
            "id": literature.id,
            "title": literature.title,
            "year": literature.year,
            "authors": AUTHOR_SEPARATOR.join(literature.authors),
            "filename": filename_of(literature.pdf_file_path),
            "filepath": literature.pdf_file_path,
        }

    def rows(
        self,
        literatures: Iterable[LiteratureBase],
        schemas: Union[Mapping[str, AttributeSchema], Iterable[AttributeSchema], None] = None,
    ) -> list[list[Any]]:
        """Data rows (unescaped), in column order of ``config.fields``."""
        names = _schema_names(schemas)
        wanted = set(self.config.attribute_ids or [])
        fields = self.config.fields

        result: list[list[Any]] = []
        for literature in literatures:
            base = self._base_values(literature)
            if not self.config.includes_attributes:
                result.append([base.get(f) for f in fields])
                continue

            for application in literature.attributes or []:
                if wanted and application.attribute_id not in wanted:
                    continue
                name = names.get(application.attribute_id, application.attribute_id)
                for value in application.values:
                    cells = {**base, "attribute": name, "value": value}
                    result.append([cells.get(f) for f in fields])
        return result

    def export(
        self,
        literatures: Iterable[LiteratureBase],
        schemas: Union[Mapping[str, AttributeSchema], Iterable[AttributeSchema], None] = None,
    ) -> str:
        """Render header and rows as one delimited text blob.

        Args:
            literatures: Literature snapshot
            schemas: Attribute schemas (list or id mapping) for name lookup

        Returns:
            Text with a header line, one line per row, and a final newline
        """
        delimiter = self.config.delimiter
        lines = [delimiter.join(self.config.fields)]
        for row in self.rows(literatures, schemas):
            lines.append(delimiter.join(escape_field(cell, delimiter) for cell in row))
        return "\n".join(lines) + "\n"

    def export_to_file(
        self,
        literatures: Iterable[LiteratureBase],
        schemas: Union[Mapping[str, AttributeSchema], Iterable[AttributeSchema], None],
        export_dir: Path,
    ) -> Path:
        """Export into ``export_dir`` as ``tidy-<today>.<format>``.

        Returns:
            Path to the written file (overwritten if it exists)
        """
        export_dir.mkdir(parents=True, exist_ok=True)
        filepath = export_dir / f"tidy-{date.today().isoformat()}.{self.config.format}"
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            f.write(self.export(literatures, schemas))
        return filepath


def _schema_names(
    schemas: Union[Mapping[str, AttributeSchema], Iterable[AttributeSchema], None],
) -> dict[str, str]:
    if schemas is None:
        return {}
    if isinstance(schemas, Mapping):
        return {key: schema.name for key, schema in schemas.items()}
    return {schema.id: schema.name for schema in schemas if schema.id}
