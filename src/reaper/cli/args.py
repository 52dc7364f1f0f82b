# src/reaper/cli/args.py

"""
Command-line surface.

    rpr [-c FILE] [-i] [-v|-vv] [-q]
    rpr add remote NAME [-d TEXT] [-u URL] [-x URL] [-b BRANCH] [-p PATH]

The parser only produces a CliInputs value; nothing outside this module sees argparse.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from .. import __version__

_VERBOSITY_HELP = "Logging verbosity. (none): ERROR, WARN, INFO; -v: + DEBUG; -vv: + TRACE."

REMOTE_ATTRS: tuple[str, ...] = ("description", "url", "upstream", "branch", "path", "org", "platform")


@dataclass(frozen=True, slots=True)
class CliInputs:
    config: str | None = None
    init: bool = False
    verbosity: int = 0
    quiet: bool = False
    # "add_remote" or None when only the bootstrap should run.
    command: str | None = None
    remote: dict[str, str] = field(default_factory=dict)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rpr", description="A simple command-line utility to manage your git remotes.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        default=None,
        help="A custom Reaper config file to use. Defaults to $REAPER_CONFIG or ~/reaper.toml.",
    )
    p.add_argument(
        "-i",
        "--init",
        action="store_true",
        help="Initialise a Reaper config file. If configuration already exists, existing content will supplement defaults.",
    )
    p.add_argument("-v", dest="verbosity", action="count", default=0, help=_VERBOSITY_HELP)
    p.add_argument("-q", "--quiet", action="store_true", help="Run quietly. Only errors will be reported.")

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    add_p = sub.add_parser("add", help="Add new configuration to your Reaper config file.")
    add_sub = add_p.add_subparsers(dest="add_command", metavar="KIND", required=True)

    remote_p = add_sub.add_parser("remote", help="Track a new remote repository.")
    remote_p.add_argument("name_pos", nargs="?", metavar="NAME", help="Alias for --name.")
    remote_p.add_argument("-n", "--name", default=None, help="A unique identifier for the remote's configuration.")
    remote_p.add_argument("-d", "--description", default=None, help="A personal descriptor for the repository.")
    remote_p.add_argument("-u", "--url", default=None, help="The URL of the remote repository.")
    remote_p.add_argument(
        "-x",
        "--upstream",
        metavar="URL",
        default=None,
        help="A URL for an `upstream` fork of the repository which you would like to track.",
    )
    remote_p.add_argument("-b", "--branch", default=None, help="The primary branch of the remote you wish to track.")
    remote_p.add_argument(
        "-p",
        "--path",
        default=None,
        help="A filepath within the remote repository to specific content you wish to track.",
    )
    remote_p.add_argument("--org", default=None, help="The organisation the remote belongs to.")
    remote_p.add_argument("--platform", default=None, help="The git platform hosting the remote (e.g. github).")
    return p


def parse_inputs(argv: list[str] | None = None) -> CliInputs:
    parser = build_parser()
    args = parser.parse_args(argv)

    command: str | None = None
    remote: dict[str, str] = {}

    if args.command == "add" and args.add_command == "remote":
        if args.name and args.name_pos:
            parser.error("NAME and --name are mutually exclusive")
        name = args.name or args.name_pos
        if not name or not name.strip():
            parser.error("add remote: a NAME (or --name) is required")
        command = "add_remote"
        remote["name"] = name
        for attr in REMOTE_ATTRS:
            value = getattr(args, attr)
            if value is not None:
                remote[attr] = value

    return CliInputs(
        config=args.config,
        init=bool(args.init),
        verbosity=int(args.verbosity or 0),
        quiet=bool(args.quiet),
        command=command,
        remote=remote,
    )
