# src/reaper/remotes/models.py

"""
Data model of the reaper config file.

On disk the file is TOML with one array of tables:

    [[remote]]
    name = "rpr"
    description = "My helpful descriptor"
    url = "https://github.com/examplefork/rpr.git"
    upstream = "https://github.com/rossmurr4y/rpr.git"
    branch = "main"
    path = "docs/"

Only `name` is required. A record with just a name is a placeholder declaration.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

REMOTE_KEY = "remote"
# Historical spellings of the array name, still accepted when reading.
LEGACY_REMOTE_KEYS: tuple[str, ...] = ("remotes", "repository")

OPTIONAL_FIELDS: tuple[str, ...] = (
    "description",
    "url",
    "upstream",
    "branch",
    "path",
    "org",
    "platform",
)


@dataclass(frozen=True, slots=True)
class Repository:
    name: str
    description: str | None = None  # cosmetic only
    url: str | None = None
    upstream: str | None = None  # fork/upstream url to diff against
    branch: str | None = None
    path: str | None = None  # subpath of interest inside the repo
    org: str | None = None
    platform: str | None = None

    def to_dict(self) -> dict[str, str]:
        """TOML-ready mapping; unset optional fields are omitted."""
        out: dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        return out


@dataclass(slots=True)
class Config:
    repositories: list[Repository] = field(default_factory=list)

    def names(self) -> list[str]:
        return [r.name for r in self.repositories]

    def to_dict(self) -> dict[str, Any]:
        # An empty array is left out so the default config serializes to an empty document.
        if not self.repositories:
            return {}
        return {REMOTE_KEY: [r.to_dict() for r in self.repositories]}


class Remote:
    """
    Builder for Repository.

    Remote("rpr").url("https://...").branch("main").build()

    Setters overwrite and return the builder; build() can be called more than once
    and always returns a fresh immutable Repository.
    """

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Repository name must be a non-empty string")
        self._name = name
        self._attrs: dict[str, str] = {}

    def _set(self, key: str, value: str | None) -> Remote:
        if value is None:
            self._attrs.pop(key, None)
        else:
            self._attrs[key] = str(value)
        return self

    def description(self, value: str | None) -> Remote:
        return self._set("description", value)

    def url(self, value: str | None) -> Remote:
        return self._set("url", value)

    def upstream(self, value: str | None) -> Remote:
        return self._set("upstream", value)

    def branch(self, value: str | None) -> Remote:
        return self._set("branch", value)

    def path(self, value: str | None) -> Remote:
        return self._set("path", value)

    def org(self, value: str | None) -> Remote:
        return self._set("org", value)

    def platform(self, value: str | None) -> Remote:
        return self._set("platform", value)

    def build(self) -> Repository:
        return Repository(name=self._name, **self._attrs)
