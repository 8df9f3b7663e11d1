"""Exception types shared by the store, repositories and services."""

from dataclasses import dataclass


class LittagError(Exception):
    """Base class for all littag errors."""


class NotFoundError(LittagError):
    """A record, schema or file does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class NotAProjectError(LittagError):
    """The directory has no ``project-metadata.json`` marker."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f"Not a littag project (no project-metadata.json): {directory}")


class ProjectNotConfiguredError(LittagError):
    """No active project has been activated yet."""

    def __init__(self):
        super().__init__("No active project. Run `littag init <dir>` or `littag open <dir>` first.")


class CorruptRecordError(LittagError):
    """A record file exists but cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class ImmutableTypeError(LittagError):
    """Attempt to change the ``type`` of an existing literature record."""

    def __init__(self, record_id: str, old_type: str, new_type: str):
        self.record_id = record_id
        self.old_type = old_type
        self.new_type = new_type
        super().__init__(
            f"Literature {record_id} is '{old_type}'; type cannot change to '{new_type}'"
        )


class FreeTextNotAllowedError(LittagError):
    """Value is not one of the schema's predefined values and free text is off."""

    def __init__(self, attribute_name: str, value: str):
        self.attribute_name = attribute_name
        self.value = value
        super().__init__(
            f"Attribute '{attribute_name}' does not allow free text; '{value}' is not a predefined value"
        )


@dataclass(frozen=True)
class FieldError:
    """One invalid field: dotted path plus a human-readable message."""

    path: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


class LiteratureValidationError(LittagError):
    """Carries every field violation found in a literature candidate."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        summary = "; ".join(f"{e.path}: {e.message}" for e in errors)
        super().__init__(f"Invalid literature ({len(errors)} error(s)): {summary}")
