"""Configuration management.

``Settings`` is a **metaclass-based singleton**: the first call to
``Settings.load()`` creates the instance; every later call returns
the same object.  Use ``update()`` to change values at runtime, or
``reload()`` to re-read everything from disk.

Application-owned state lives under the app directory
(``$LITTAG_HOME`` or ``~/.littag``):

* ``project-settings.json``   – the active project (written by ProjectStore)
* ``navigation-state.json``   – last UI navigation state (optional)
* ``preferences.yaml``        – user preferences (log level, export defaults)
* ``logs/littag.log``         – rotating log file
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

APP_DIR_ENV = "LITTAG_HOME"
PREFERENCES_FILENAME = "preferences.yaml"

DEFAULT_EXPORT_FORMAT = "csv"
DEFAULT_EXPORT_FIELDS = ["id", "attribute", "value"]


# ---------------------------------------------------------------------------
# Singleton metaclass
# ---------------------------------------------------------------------------

class _SettingsMeta(type):
    """Metaclass that enforces a process-wide singleton for *Settings*.

    * First ``Settings(...)`` creates and caches the instance.
    * Later ``Settings(...)`` calls return the cached instance (args ignored).
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


# ---------------------------------------------------------------------------
# Settings dataclass (singleton)
# ---------------------------------------------------------------------------

@dataclass
class Settings(metaclass=_SettingsMeta):
    """Application settings: singleton with runtime-mutable values.

    Usage::

        settings = Settings.load()              # first call → create
        settings = Settings.load()              # later → same object
        settings.update(export_format="tsv")    # runtime change
        settings = Settings.reload()            # re-read from disk
    """

    app_dir: Path = Path.home() / ".littag"
    log_level: str = "INFO"
    export_format: str = DEFAULT_EXPORT_FORMAT
    export_fields: list[str] = field(default_factory=lambda: list(DEFAULT_EXPORT_FIELDS))
    export_dir: Optional[Path] = None

    # ── Computed properties ────────────────────────────────────────────

    @property
    def project_settings_path(self) -> Path:
        return self.app_dir / "project-settings.json"

    @property
    def navigation_state_path(self) -> Path:
        return self.app_dir / "navigation-state.json"

    @property
    def preferences_path(self) -> Path:
        return self.app_dir / PREFERENCES_FILENAME

    @property
    def log_dir(self) -> Path:
        return self.app_dir / "logs"

    # ── Runtime helpers ───────────────────────────────────────────────

    def update(self, **kwargs: Any) -> None:
        """Mutate settings fields at runtime.

        >>> Settings.load().update(export_format="tsv")
        """
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no field '{key}'")
            setattr(self, key, value)

    def save_preferences(self) -> None:
        """Persist the user-editable fields to ``preferences.yaml``."""
        save_preferences(
            self.preferences_path,
            {
                "log_level": self.log_level,
                "export": {
                    "format": self.export_format,
                    "fields": list(self.export_fields),
                    "dir": str(self.export_dir) if self.export_dir else None,
                },
            },
        )

    # ── Factory / lifecycle ───────────────────────────────────────────

    @classmethod
    def load(cls, app_dir: Optional[Path] = None) -> "Settings":
        """Load or return the singleton Settings instance.

        On first call the singleton is created; subsequent calls return
        the cached instance.  Pass *app_dir* to override the application
        directory (defaults to ``$LITTAG_HOME`` or ``~/.littag``).
        """
        if cls in _SettingsMeta._instances:
            return _SettingsMeta._instances[cls]  # type: ignore[return-value]

        if app_dir is None:
            app_dir = default_app_dir()
        app_dir.mkdir(parents=True, exist_ok=True)

        prefs = _load_preferences(app_dir / PREFERENCES_FILENAME)
        export = prefs.get("export") if isinstance(prefs.get("export"), dict) else {}

        export_format = str(export.get("format") or DEFAULT_EXPORT_FORMAT).lower()
        if export_format not in ("csv", "tsv"):
            logger.warning("Unknown export format %r in preferences; using csv", export_format)
            export_format = DEFAULT_EXPORT_FORMAT

        fields = export.get("fields")
        if not isinstance(fields, list) or not fields:
            fields = list(DEFAULT_EXPORT_FIELDS)

        log_level = os.getenv("LITTAG_LOG_LEVEL") or prefs.get("log_level") or "INFO"

        return cls(
            app_dir=app_dir,
            log_level=str(log_level).upper(),
            export_format=export_format,
            export_fields=[str(f) for f in fields],
            export_dir=Path(export["dir"]).expanduser() if export.get("dir") else None,
        )

    @classmethod
    def reload(cls, app_dir: Optional[Path] = None) -> "Settings":
        """Discard the current singleton and re-load from disk."""
        cls.reset()
        return cls.load(app_dir)

    @classmethod
    def reset(cls) -> None:
        """Discard the singleton so the next ``load()`` re-creates it."""
        _SettingsMeta._instances.pop(cls, None)


def default_app_dir() -> Path:
    """``$LITTAG_HOME`` if set, else ``~/.littag``."""
    env = os.getenv(APP_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".littag"


# ---------------------------------------------------------------------------
# YAML loaders
# ---------------------------------------------------------------------------

def _load_preferences(path: Path) -> dict[str, Any]:
    """Load ``preferences.yaml``; missing or malformed files yield ``{}``."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def save_preferences(path: Path, data: dict[str, Any]) -> None:
    """Persist preferences to ``preferences.yaml``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# littag preferences\n")
        f.write("# log_level: DEBUG | INFO | WARNING | ERROR\n")
        f.write("# export.format: csv | tsv; export.fields: default export columns\n\n")
        yaml.dump(
            data,
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
