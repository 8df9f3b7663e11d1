"""Command-line interface handlers."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from littag.config import Settings
from littag.console import ConsoleUI
from littag.database.repository import AttributeSchemaRepository, LiteratureRepository
from littag.errors import LittagError, LiteratureValidationError, NotFoundError
from littag.logging_setup import setup_logging
from littag.models.attribute import AttributeSchema, AttributeValue
from littag.models.literature import LITERATURE_TYPES
from littag.models.project import ProjectSettings
from littag.services.attribute_service import AttributeService
from littag.services.export_service import EXPORT_FIELDS, ExportConfig, TidyDataExporter
from littag.services.project_service import ProjectStore, resolve_pdf_path
from littag.services.search_service import (
    filter_by_attribute,
    filter_by_keywords,
    filter_by_type,
    filter_by_year,
    sort_literatures,
)


def parse_assignments(pairs: Optional[list[str]]) -> dict[str, Any]:
    """Parse ``key=value`` pairs; JSON lists/objects are decoded.

    >>> parse_assignments(["volume=12", 'editors=["A. Editor"]'])
    {'volume': '12', 'editors': ['A. Editor']}
    """
    result: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected key=value, got {pair!r}")
        value: Any = raw
        if raw.lstrip().startswith(("[", "{")):
            value = json.loads(raw)
        result[key.strip()] = value
    return result


class LittagCLI:
    """CLI application for littag."""

    def __init__(self, settings: Optional[Settings] = None, ui: Optional[ConsoleUI] = None):
        """Initialize CLI with settings.

        Args:
            settings: Application settings (loaded from the app dir if not provided)
            ui: Console UI (a default Rich console if not provided)
        """
        self.settings = settings or Settings.load()
        self.ui = ui or ConsoleUI()
        self.store = ProjectStore(self.settings.app_dir)

    # ── Repositories for the active project ───────────────────────────

    @property
    def literatures(self) -> LiteratureRepository:
        return LiteratureRepository(self.store.active_context())

    @property
    def schemas(self) -> AttributeSchemaRepository:
        return AttributeSchemaRepository(self.store.active_context())

    @property
    def attributes(self) -> AttributeService:
        context = self.store.active_context()
        return AttributeService(LiteratureRepository(context), AttributeSchemaRepository(context))

    # ── Project ───────────────────────────────────────────────────────

    def cmd_init(
        self,
        directory: str,
        name: str,
        description: str = "",
        repository_dir: Optional[str] = None,
    ) -> None:
        """Create (or re-activate) a project at *directory*."""
        settings = ProjectSettings(
            project_name=name,
            project_description=description,
            working_dir=str(Path(directory).expanduser().resolve()),
            repository_dir=(
                str(Path(repository_dir).expanduser().resolve()) if repository_dir else None
            ),
        )
        self.store.activate_project(settings)
        self.ui.success(f"Project '{name}' is active.")
        self.ui.project(settings)

    def cmd_open(self, directory: str) -> None:
        """Switch to an existing project directory."""
        settings = self.store.adopt_existing_project(directory)
        self.ui.success(f"Switched to '{settings.project_name}'.")
        self.ui.project(settings)

    def cmd_status(self) -> None:
        self.ui.project(self.store.resolve_active_project())

    # ── Literature ────────────────────────────────────────────────────

    def cmd_list(
        self,
        keywords: Optional[list[str]] = None,
        mode: str = "or",
        types: Optional[list[str]] = None,
        attribute_id: Optional[str] = None,
        value: Optional[str] = None,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
        sort_by: str = "title",
        order: str = "asc",
    ) -> None:
        """List literature with optional filters."""
        items = self.literatures.list()
        items = filter_by_keywords(items, keywords or [], mode)
        items = filter_by_type(items, types)
        items = filter_by_attribute(items, attribute_id, value)
        items = filter_by_year(items, year_from, year_to)
        sort_literatures(items, sort_by, order)
        self.ui.display_literatures(items, self.attributes.schema_names())

    def cmd_show(self, literature_id: str) -> None:
        """Show one literature record with its attributes."""
        record = self.literatures.load(literature_id)
        if record is None:
            raise NotFoundError("literature", literature_id)
        context = self.store.active_context()
        self.ui.display_literature(
            record,
            AttributeSchemaRepository(context).as_lookup(),
            resolve_pdf_path(record, context),
        )
        self.ui.info(f"File: {self.literatures.path_for(literature_id)}")

    def cmd_add(
        self,
        literature_type: Optional[str] = None,
        title: Optional[str] = None,
        year: Optional[int] = None,
        authors: Optional[list[str]] = None,
        pdf: Optional[str] = None,
        notes: Optional[str] = None,
        assignments: Optional[list[str]] = None,
        json_file: Optional[str] = None,
    ) -> None:
        """Add a literature record from options or a JSON file."""
        if json_file:
            with open(json_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            data.pop("id", None)
        else:
            data = {
                "type": literature_type,
                "title": title,
                "year": year,
                "authors": authors or [],
                "pdfFilePath": pdf,
                "notes": notes,
            }
            data.update(parse_assignments(assignments))
        data = {k: v for k, v in data.items() if v is not None}
        record = self.literatures.save(data)
        self.ui.saved("literature", record.id or "")

    def cmd_edit(self, literature_id: str, assignments: list[str]) -> None:
        """Update fields of an existing record (``key=value``, camelCase keys)."""
        record = self.literatures.load(literature_id)
        if record is None:
            raise NotFoundError("literature", literature_id)
        data = record.model_dump(by_alias=True)
        data.update(parse_assignments(assignments))
        saved = self.literatures.save(data)
        self.ui.saved("literature", saved.id or "")

    def cmd_delete(self, literature_id: str) -> None:
        self.literatures.delete(literature_id)
        self.ui.deleted("literature", literature_id)

    # ── Attribute schemas ─────────────────────────────────────────────

    def cmd_attr_list(self) -> None:
        schemas = sorted(self.schemas.list_records(), key=lambda s: s.name.lower())
        self.ui.display_schemas(schemas)

    def cmd_attr_add(
        self,
        name: str,
        description: Optional[str] = None,
        values: Optional[list[str]] = None,
        allow_free_text: bool = False,
    ) -> None:
        """Define a new attribute schema."""
        schema = AttributeSchema(
            name=name,
            description=description,
            predefined_values=[AttributeValue(value=v) for v in values] if values else None,
            allow_free_text=allow_free_text,
        )
        saved = self.schemas.save(schema)
        self.ui.saved("attribute", saved.id or "")

    def cmd_attr_delete(self, schema_id: str) -> None:
        self.schemas.delete(schema_id)
        self.ui.deleted("attribute", schema_id)

    # ── Tagging ───────────────────────────────────────────────────────

    def cmd_tag(self, literature_id: str, attribute_id: str, value: str) -> None:
        service = self.attributes
        if service.schemas.load(attribute_id) is None:
            self.ui.warning(f"Attribute schema {attribute_id} not found; tagging anyway.")
            self.ui.summaries_hint(service.schemas.list())
        service.tag(literature_id, attribute_id, value)
        self.ui.success(f"Tagged {literature_id}: {attribute_id}={value}")

    def cmd_untag(self, literature_id: str, attribute_id: str, value: str) -> None:
        self.attributes.untag(literature_id, attribute_id, value)
        self.ui.success(f"Untagged {literature_id}: {attribute_id}={value}")

    def cmd_note(self, literature_id: str, attribute_id: str, note: str) -> None:
        self.attributes.annotate(literature_id, attribute_id, note)
        self.ui.success(f"Noted {literature_id}: {attribute_id}")

    # ── Export ────────────────────────────────────────────────────────

    def cmd_export(
        self,
        export_format: Optional[str] = None,
        fields: Optional[list[str]] = None,
        attribute_ids: Optional[list[str]] = None,
        output: Optional[str] = None,
        to_dir: bool = False,
    ) -> None:
        """Export tidy data to a file, the export directory, or stdout."""
        config = ExportConfig(
            format=export_format or self.settings.export_format,  # type: ignore[arg-type]
            fields=fields or list(self.settings.export_fields),
            attribute_ids=attribute_ids,
        )
        exporter = TidyDataExporter(config)
        context = self.store.active_context()
        records = LiteratureRepository(context).list_records()
        schemas = AttributeSchemaRepository(context).as_lookup()
        row_count = len(exporter.rows(records, schemas))

        if to_dir:
            export_dir = self.settings.export_dir or context.working_dir / "exports"
            filepath = exporter.export_to_file(records, schemas, export_dir)
            self.ui.exported(row_count, filepath)
        elif output:
            filepath = Path(output)
            with open(filepath, "w", encoding="utf-8", newline="") as f:
                f.write(exporter.export(records, schemas))
            self.ui.exported(row_count, filepath)
        else:
            sys.stdout.write(exporter.export(records, schemas))


def _fields_arg(raw: str) -> list[str]:
    fields = [f.strip() for f in raw.split(",") if f.strip()]
    unknown = [f for f in fields if f not in EXPORT_FIELDS]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown field(s) {', '.join(unknown)}; choose from {', '.join(EXPORT_FIELDS)}"
        )
    return fields


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="littag",
        description="Literature collection with attribute tags → tidy CSV/TSV",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # project commands
    init_parser = subparsers.add_parser("init", help="Create or activate a project directory")
    init_parser.add_argument("directory", help="Project working directory")
    init_parser.add_argument("--name", required=True, help="Project name")
    init_parser.add_argument("--description", default="", help="Project description")
    init_parser.add_argument(
        "--repository-dir",
        help="Base directory for relative PDF paths",
    )

    open_parser = subparsers.add_parser("open", help="Switch to an existing project")
    open_parser.add_argument("directory", help="Directory containing project-metadata.json")

    subparsers.add_parser("status", help="Show the active project")

    # list command
    list_parser = subparsers.add_parser("list", help="List literature")
    list_parser.add_argument("--keyword", "-k", action="append", dest="keywords",
                             help="Match title/authors (repeatable)")
    list_parser.add_argument("--mode", default="or", choices=["or", "and"],
                             help="Keyword combination (default: or)")
    list_parser.add_argument("--type", action="append", dest="types",
                             choices=list(LITERATURE_TYPES), help="Literature type (repeatable)")
    list_parser.add_argument("--attribute", dest="attribute_id", help="Attribute id to filter by")
    list_parser.add_argument("--value", help="Attribute value to filter by")
    list_parser.add_argument("--year-from", type=int)
    list_parser.add_argument("--year-to", type=int)
    list_parser.add_argument(
        "--sort",
        default="title",
        choices=["title", "year", "type"],
        dest="sort_by",
        help="Sort by title, year, or type (default: title)",
    )
    list_parser.add_argument("--order", default="asc", choices=["asc", "desc"])

    show_parser = subparsers.add_parser("show", help="Show one literature record")
    show_parser.add_argument("id")

    # add / edit / delete
    add_parser = subparsers.add_parser("add", help="Add a literature record")
    add_parser.add_argument("--type", dest="literature_type", choices=list(LITERATURE_TYPES),
                            default="journal_article")
    add_parser.add_argument("--title")
    add_parser.add_argument("--year", type=int)
    add_parser.add_argument("--author", action="append", dest="authors",
                            help="Author name (repeatable, in order)")
    add_parser.add_argument("--pdf", help="PDF path (absolute or relative to repository dir)")
    add_parser.add_argument("--notes")
    add_parser.add_argument("--set", action="append", dest="assignments", metavar="KEY=VALUE",
                            help="Type-specific field, e.g. journal=Nature (repeatable)")
    add_parser.add_argument("--json", dest="json_file", help="Read the record from a JSON file")

    edit_parser = subparsers.add_parser("edit", help="Update fields of a literature record")
    edit_parser.add_argument("id")
    edit_parser.add_argument("--set", action="append", dest="assignments", metavar="KEY=VALUE",
                             required=True)

    delete_parser = subparsers.add_parser("delete", help="Delete a literature record")
    delete_parser.add_argument("id")

    # attribute schema commands
    subparsers.add_parser("attr-list", help="List attribute schemas")

    attr_add_parser = subparsers.add_parser("attr-add", help="Define an attribute schema")
    attr_add_parser.add_argument("name")
    attr_add_parser.add_argument("--description")
    attr_add_parser.add_argument("--value", action="append", dest="values",
                                 help="Predefined value (repeatable)")
    attr_add_parser.add_argument("--free-text", action="store_true",
                                 help="Allow values outside the predefined list")

    attr_delete_parser = subparsers.add_parser("attr-delete", help="Delete an attribute schema")
    attr_delete_parser.add_argument("id")

    # tagging commands
    for command, help_text, last in (
        ("tag", "Apply an attribute value to a literature record", "value"),
        ("untag", "Remove an attribute value from a literature record", "value"),
        ("note", "Set the note of an applied attribute", "note"),
    ):
        tag_parser = subparsers.add_parser(command, help=help_text)
        tag_parser.add_argument("literature_id")
        tag_parser.add_argument("attribute_id")
        tag_parser.add_argument(last)

    # export command
    export_parser = subparsers.add_parser("export", help="Export tidy data (CSV/TSV)")
    export_parser.add_argument("--format", dest="export_format", choices=["csv", "tsv"])
    export_parser.add_argument(
        "--fields",
        type=_fields_arg,
        help=f"Comma-separated columns from: {', '.join(EXPORT_FIELDS)}",
    )
    export_parser.add_argument("--attribute", action="append", dest="attribute_ids",
                               help="Only export this attribute id (repeatable)")
    destination = export_parser.add_mutually_exclusive_group()
    destination.add_argument("--output", "-o", help="Write to this file")
    destination.add_argument("--to-dir", action="store_true",
                             help="Write tidy-<date>.<format> into the export directory")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = Settings.load()
    setup_logging(settings.log_level, settings.log_dir)
    cli = LittagCLI(settings)

    try:
        if args.command == "init":
            cli.cmd_init(args.directory, args.name, args.description, args.repository_dir)
        elif args.command == "open":
            cli.cmd_open(args.directory)
        elif args.command == "status":
            cli.cmd_status()
        elif args.command == "list":
            cli.cmd_list(args.keywords, args.mode, args.types, args.attribute_id, args.value,
                         args.year_from, args.year_to, args.sort_by, args.order)
        elif args.command == "show":
            cli.cmd_show(args.id)
        elif args.command == "add":
            cli.cmd_add(args.literature_type, args.title, args.year, args.authors, args.pdf,
                        args.notes, args.assignments, args.json_file)
        elif args.command == "edit":
            cli.cmd_edit(args.id, args.assignments)
        elif args.command == "delete":
            cli.cmd_delete(args.id)
        elif args.command == "attr-list":
            cli.cmd_attr_list()
        elif args.command == "attr-add":
            cli.cmd_attr_add(args.name, args.description, args.values, args.free_text)
        elif args.command == "attr-delete":
            cli.cmd_attr_delete(args.id)
        elif args.command == "tag":
            cli.cmd_tag(args.literature_id, args.attribute_id, args.value)
        elif args.command == "untag":
            cli.cmd_untag(args.literature_id, args.attribute_id, args.value)
        elif args.command == "note":
            cli.cmd_note(args.literature_id, args.attribute_id, args.note)
        elif args.command == "export":
            cli.cmd_export(args.export_format, args.fields, args.attribute_ids,
                           args.output, args.to_dir)
    except LiteratureValidationError as e:
        for err in e.errors:
            cli.ui.error(f"{err.path}: {err.message}")
        return 1
    except (LittagError, ValueError, OSError) as e:
        cli.ui.error(str(e))
        return 1
    return 0
