"""Configuration and workspace storage with XDG paths and atomic writes.

This module handles all persistent state for oasbuilder:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.oasbuilder/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~oasbuilder.models.GlobalConfig`
  JSON file storing defaults (document location, openapi version, output
  format).
* **Project config** -- An optional ``./oasbuilder.json`` that can pin the
  document file for a repository.
* **Workspace document** -- The document being edited, stored as a JSON
  snapshot ``{"document": ..., "lastSaved": ..., "version": "1.0"}``.
  Snapshots written before paths carried an ``operations`` list are
  upgraded on load.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import datetime
import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from oasbuilder.exceptions import ConfigError
from oasbuilder.models import Document, GlobalConfig

logger = logging.getLogger(__name__)

_APP_NAME = "oasbuilder"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "oasbuilder.json"
_DOCUMENT_FILENAME = "document.json"

DOCUMENT_ENV_VAR = "OASBUILDER_DOCUMENT"
SNAPSHOT_VERSION = "1.0"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/oasbuilder/`` (default ``~/.config/oasbuilder/``).
    On macOS/Windows: ``~/.oasbuilder/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (workspace document, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/oasbuilder/`` (default ``~/.local/share/oasbuilder/``).
    On macOS/Windows: ``~/.oasbuilder/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~oasbuilder.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./oasbuilder.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_document_path(cli_path: Optional[str] = None) -> Path:
    """Resolve which file holds the workspace document.

    Precedence (high to low):
        1. CLI flag (``--document``)
        2. Environment variable (``OASBUILDER_DOCUMENT``)
        3. Project config (``./oasbuilder.json`` key ``document_path``)
        4. User config (``document_path`` in ``config.json``)
        5. Default: ``<data_dir>/document.json``
    """
    if cli_path:
        return Path(cli_path).expanduser()

    env_path = os.environ.get(DOCUMENT_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    project = load_project_config()
    if project is not None and project.get("document_path"):
        return Path(str(project["document_path"])).expanduser()

    global_cfg = load_global_config()
    if global_cfg.document_path:
        return Path(global_cfg.document_path).expanduser()

    return get_data_dir() / _DOCUMENT_FILENAME


# --- Workspace document ---


def save_document(document: Document, path: Path) -> datetime.datetime:
    """Write *document* as a workspace snapshot.

    Returns:
        The UTC timestamp recorded as ``lastSaved``.
    """
    saved_at = datetime.datetime.now(datetime.timezone.utc)
    snapshot = {
        "document": document.model_dump(mode="json", by_alias=True),
        "lastSaved": saved_at.isoformat(),
        "version": SNAPSHOT_VERSION,
    }
    _atomic_write(path, json.dumps(snapshot, indent=2) + "\n")
    logger.debug("Saved document to %s", path)
    return saved_at


def load_document(path: Path) -> Optional[tuple[Document, Optional[datetime.datetime]]]:
    """Load a workspace snapshot.

    Returns:
        ``(document, last_saved)``, or ``None`` when *path* does not exist.
        ``last_saved`` is ``None`` when the snapshot has no readable
        timestamp.

    Raises:
        ConfigError: If the file is not valid JSON or does not hold a
            document.
    """
    if not path.is_file():
        return None
    data = _read_json(path, "workspace document")
    if not isinstance(data, dict) or not isinstance(data.get("document"), dict):
        raise ConfigError(f"Invalid workspace document at {path}: missing 'document' object")

    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        logger.warning(
            "Snapshot version mismatch in %s: %s vs %s", path, version, SNAPSHOT_VERSION
        )

    try:
        document = Document.model_validate(data["document"])
    except ValidationError as exc:
        raise ConfigError(f"Invalid workspace document at {path}: {exc}") from exc
    return document, _parse_timestamp(data.get("lastSaved"))


def get_last_saved_time(path: Path) -> Optional[datetime.datetime]:
    """Return the ``lastSaved`` timestamp of a snapshot without validating the document."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return _parse_timestamp(data.get("lastSaved")) if isinstance(data, dict) else None


def clear_document(path: Path) -> bool:
    """Delete the snapshot at *path*. Returns whether a file was removed."""
    if not path.is_file():
        return False
    path.unlink()
    return True


def has_stored_document(path: Path) -> bool:
    return path.is_file()


def _parse_timestamp(value: Any) -> Optional[datetime.datetime]:
    if not isinstance(value, str):
        return None
    try:
        # fromisoformat on older interpreters does not accept a trailing "Z".
        return datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
