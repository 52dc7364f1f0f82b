# src/reaper/remotes/config_store.py

"""
Config file persistence.

Every function works on a caller-supplied path; nothing is cached between calls.
The file is read and written wholesale (load-modify-save), so two reaper
processes editing the same file are not coordinated: last writer wins.

Errors:
- NotFoundError: the path does not exist
- ConfigIOError: any other filesystem failure
- ParseError: malformed TOML or a schema mismatch
- DuplicateNameError: two records share a name
- SerializeError: a Config that would not load back (bad name, non-string
  value, text that is not valid UTF-8)
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from ..core.errors import (
    ConfigIOError,
    DuplicateNameError,
    NotFoundError,
    ParseError,
    SerializeError,
)
from .models import LEGACY_REMOTE_KEYS, OPTIONAL_FIELDS, REMOTE_KEY, Config, Repository

logger = logging.getLogger(__name__)


def _check_unique(repositories: list[Repository]) -> None:
    seen: set[str] = set()
    for repo in repositories:
        if repo.name in seen:
            raise DuplicateNameError(repo.name)
        seen.add(repo.name)


def _repository_from_table(table: Any, *, key: str, index: int, path: Path | None) -> Repository:
    where = f"[[{key}]] #{index + 1}"
    if not isinstance(table, dict):
        raise ParseError(f"{where}: expected a table, got {type(table).__name__}", path)

    name = table.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ParseError(f"{where}: 'name' must be a non-empty string", path)

    attrs: dict[str, str] = {}
    for fname in OPTIONAL_FIELDS:
        if fname not in table:
            continue
        value = table[fname]
        if not isinstance(value, str):
            raise ParseError(
                f"{where} ({name}): '{fname}' must be a string, got {type(value).__name__}",
                path,
            )
        attrs[fname] = value

    unknown = sorted(set(table) - {"name", *OPTIONAL_FIELDS})
    if unknown:
        logger.debug("Ignoring unknown keys in %s (%s): %s", where, name, ", ".join(unknown))

    return Repository(name=name, **attrs)


def config_from_document(document: dict[str, Any], *, path: str | Path | None = None) -> Config:
    """Validate an already-decoded TOML document and build a Config from it."""
    src = Path(path) if path is not None else None
    repositories: list[Repository] = []

    for key in (REMOTE_KEY, *LEGACY_REMOTE_KEYS):
        if key not in document:
            continue
        tables = document[key]
        if not isinstance(tables, list):
            raise ParseError(f"'{key}' must be an array of tables, got {type(tables).__name__}", src)
        if key != REMOTE_KEY and tables:
            logger.debug("Reading legacy '%s' array as '%s'", key, REMOTE_KEY)
        for i, table in enumerate(tables):
            repositories.append(_repository_from_table(table, key=key, index=i, path=src))

    _check_unique(repositories)
    return Config(repositories=repositories)


def _decode(text: str, path: Path | None) -> dict[str, Any]:
    if not text.strip():
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"invalid TOML: {e}", path) from e


def parse(text: str, *, path: str | Path | None = None) -> Config:
    """Deserialize a TOML document. Empty or whitespace-only text yields an empty Config."""
    src = Path(path) if path is not None else None
    return config_from_document(_decode(text, src), path=src)


def dumps(config: Config) -> str:
    """
    Serialize to TOML text that `parse` reads back to an equal Config.

    Every record is written as its own [[remote]] block, whatever its size.
    Records `parse` would reject raise SerializeError before anything is encoded.
    """
    document = config.to_dict()
    try:
        config_from_document(document)
    except ParseError as e:
        raise SerializeError(f"Cannot save config: {e.reason}") from e

    blocks = [_dump_table(table) for table in document.get(REMOTE_KEY, [])]
    text = "\n".join(f"[[{REMOTE_KEY}]]\n{block}" for block in blocks)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializeError(f"Cannot encode config as UTF-8: {e}") from e
    return text


def _dump_table(table: dict[str, Any]) -> str:
    try:
        return tomli_w.dumps(table)
    except (TypeError, ValueError) as e:
        raise SerializeError(f"Cannot encode config as TOML: {e}") from e


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise NotFoundError(path) from e
    except UnicodeDecodeError as e:
        raise ParseError(f"not valid UTF-8: {e}", path) from e
    except OSError as e:
        raise ConfigIOError(path, e.strerror or str(e)) from e


def _write_text(path: Path, text: str) -> None:
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    except OSError as e:
        raise ConfigIOError(path, e.strerror or str(e)) from e
    finally:
        # Already gone after a successful replace.
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)


def load(path: str | Path) -> Config:
    p = Path(path).expanduser()
    config = parse(_read_text(p), path=p)
    logger.debug("Loaded config path=%s repositories=%d", p, len(config.repositories))
    return config


def save(path: str | Path, config: Config) -> None:
    """Write `config` as TOML, creating or overwriting the file."""
    p = Path(path).expanduser()
    text = dumps(config)
    _write_text(p, text)
    logger.debug("Saved config path=%s repositories=%d", p, len(config.repositories))


def unsupported_keys(document: dict[str, Any]) -> list[str]:
    """
    Dotted paths of the keys in a decoded document that a Config cannot hold.

    These are exactly the keys a load-modify-save cycle drops from the file:
    unknown top-level keys or tables, and unknown keys inside repository records.
    """
    known_arrays = (REMOTE_KEY, *LEGACY_REMOTE_KEYS)
    known_fields = {"name", *OPTIONAL_FIELDS}
    out: list[str] = [key for key in document if key not in known_arrays]

    for key in known_arrays:
        tables = document.get(key)
        if not isinstance(tables, list):
            continue
        for i, table in enumerate(tables):
            if not isinstance(table, dict):
                continue
            label = table.get("name", f"#{i + 1}")
            out.extend(f"{key}.{label}.{k}" for k in table if k not in known_fields)
    return out


def read_unsupported_keys(path: str | Path) -> list[str]:
    p = Path(path).expanduser()
    return unsupported_keys(_decode(_read_text(p), p))


def init(path: str | Path) -> Config:
    """
    Idempotent initialization.

    Missing file: create parent directories and write the default (empty) Config.
    Existing file: validate it and return its Config without writing anything,
    so unknown keys and formatting survive. A file that does not parse raises
    ParseError and is left untouched.
    """
    p = Path(path).expanduser()

    if not p.exists():
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.touch()
        except OSError as e:
            raise ConfigIOError(p, e.strerror or str(e)) from e
        config = Config()
        save(p, config)
        logger.info("Initialised new config at %s", p)
        return config

    config = load(p)
    logger.info("Config already initialised at %s", p)
    return config
