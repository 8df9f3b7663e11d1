"""Console UI for terminal output using Rich."""

from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console
from rich.table import Table

from littag.models.attribute import AttributeSchema, AttributeSchemaSummary
from littag.models.literature import LITERATURE_TYPE_LABELS, LiteratureBase, LiteratureSummary
from littag.models.project import ProjectSettings


class ConsoleUI:
    """Rich-based console UI for literature display and notifications."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        return self._console

    def info(self, message: str) -> None:
        """Print an info message."""
        self._console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        self._console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message in red."""
        self._console.print(f"[red]Error:[/red] {message}")

    def project(self, settings: Optional[ProjectSettings]) -> None:
        """Print the active project."""
        if settings is None:
            self._console.print("No active project.")
            return
        self._console.print(f"[bold]{settings.project_name}[/bold]")
        if settings.project_description:
            self._console.print(settings.project_description)
        self._console.print(f"Working dir:    {settings.working_dir}")
        self._console.print(f"Repository dir: {settings.repository_dir or '-'}")

    def display_literatures(
        self,
        items: list[LiteratureSummary],
        schema_names: Mapping[str, str],
        show_tip: bool = True,
    ) -> None:
        """Display literature summaries in a table.

        Args:
            items: Summaries to display
            schema_names: Attribute id → name, for the attribute column
            show_tip: Whether to show the tagging tip
        """
        table = Table(title=f"Literature ({len(items)})")
        table.add_column("ID", overflow="fold")
        table.add_column("Year", justify="right")
        table.add_column("Type")
        table.add_column("Title", overflow="fold")
        table.add_column("Authors", overflow="fold")
        table.add_column("Attributes", overflow="fold")

        for item in items:
            attrs = ", ".join(
                f"{schema_names.get(a.attribute_id, a.attribute_id)}={'/'.join(a.values)}"
                for a in item.attributes
            )
            table.add_row(
                item.id,
                str(item.year),
                LITERATURE_TYPE_LABELS.get(item.type, item.type),
                item.title,
                "; ".join(item.authors),
                attrs or "-",
            )

        self._console.print(table)

        if items and show_tip:
            self._console.print("Tip: `littag tag <literature-id> <attribute-id> <value>`")
        elif not items:
            self._console.print("No literature found.")

    def display_literature(
        self,
        record: LiteratureBase,
        schemas: Mapping[str, AttributeSchema],
        pdf_path: Optional[Path] = None,
    ) -> None:
        """Display every field of one record."""
        table = Table(show_header=False, title=record.title)
        table.add_column("Field", style="bold")
        table.add_column("Value", overflow="fold")
        for key, value in record.to_json_dict().items():
            if key == "attributes":
                continue
            if isinstance(value, list):
                value = "; ".join(str(v) for v in value)
            table.add_row(key, str(value))
        if pdf_path is not None:
            table.add_row("pdf (resolved)", str(pdf_path))
        self._console.print(table)

        for application in record.attributes or []:
            schema = schemas.get(application.attribute_id)
            if schema is None:
                self._console.print(
                    f"[dim]{application.attribute_id}: schema not found[/dim]"
                )
                continue
            line = f"[bold]{schema.name}[/bold]: {', '.join(application.values)}"
            if application.note:
                line += f"  [dim]({application.note})[/dim]"
            self._console.print(line)

    def display_schemas(self, schemas: list[AttributeSchema]) -> None:
        """Display attribute schemas in a table."""
        table = Table(title=f"Attributes ({len(schemas)})")
        table.add_column("ID", overflow="fold")
        table.add_column("Name")
        table.add_column("Values", overflow="fold")
        table.add_column("Free text", justify="center")
        table.add_column("Description", overflow="fold")
        for schema in schemas:
            table.add_row(
                schema.id or "-",
                schema.name,
                ", ".join(v.value for v in schema.predefined_values or []) or "-",
                "yes" if schema.allow_free_text else "no",
                schema.description or "-",
            )
        self._console.print(table)
        if not schemas:
            self._console.print("No attributes defined.")

    def saved(self, kind: str, record_id: str) -> None:
        self._console.print(f"[green]Saved {kind}[/green]: {record_id}")

    def deleted(self, kind: str, record_id: str) -> None:
        self._console.print(f"[green]Deleted {kind}[/green]: {record_id}")

    def exported(self, row_count: int, filepath: Optional[Path]) -> None:
        """Print export summary."""
        where = str(filepath) if filepath else "stdout"
        self._console.print(f"[green]Exported[/green] {row_count} rows → {where}")

    def summaries_hint(self, summaries: list[AttributeSchemaSummary]) -> None:
        """Print known attribute ids (used after a lookup miss)."""
        if summaries:
            known = ", ".join(f"{s.id} ({s.name})" for s in summaries)
            self._console.print(f"Known attributes: {known}")
