# src/reaper/remotes/remote_api.py

from __future__ import annotations

import logging

from ..core.errors import DuplicateNameError
from .models import Config, Remote, Repository

logger = logging.getLogger(__name__)


def find_repository(config: Config, name: str) -> Repository | None:
    for repo in config.repositories:
        if repo.name == name:
            return repo
    return None


def add_repository(config: Config, repo: Repository) -> Config:
    """Return a new Config with `repo` appended. Names must stay unique."""
    if find_repository(config, repo.name) is not None:
        raise DuplicateNameError(repo.name)
    logger.info("Tracking new remote %s", repo.name)
    return Config(repositories=[*config.repositories, repo])


def repository_from_args(args: list[str] | tuple[str, ...]) -> Repository:
    """
    Build a Repository from task arguments of the form "key=value".

    `name` is required; keys with an empty value are treated as unset.
    """
    values: dict[str, str] = {}
    for raw in args:
        key, sep, value = raw.partition("=")
        if not sep:
            raise ValueError(f"Expected key=value argument, got {raw!r}")
        values[key.strip()] = value

    name = values.pop("name", "")
    remote = Remote(name)
    setters = {
        "description": remote.description,
        "url": remote.url,
        "upstream": remote.upstream,
        "branch": remote.branch,
        "path": remote.path,
        "org": remote.org,
        "platform": remote.platform,
    }
    for key, value in values.items():
        setter = setters.get(key)
        if setter is None:
            raise ValueError(f"Unknown repository attribute: {key!r}")
        setter(value or None)
    return remote.build()


def repository_to_args(repo: Repository) -> list[str]:
    return [f"{k}={v}" for k, v in repo.to_dict().items()]
