"""Command that turns a Docker image into a runnable launcher."""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from typing import Iterable, Optional

from .generator import Generator

DEFAULT_TARGETS = ("darwin/amd64", "darwin/arm64", "linux/amd64", "windows/amd64")


def default_module(name: str, username: str) -> str:
    """Module name derived from the user name and the launcher name."""
    username = username.replace("\\", "-").replace("/", "-")
    return f"github.com/{username}/{name}"


def _split(values: Optional[Iterable[str]]) -> list[str]:
    return [part for value in values or () for part in value.split(",")]


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker2exe", description="create an executable from a docker image"
    )
    parser.add_argument("--name", required=True, help="name of your executable")
    parser.add_argument("--image", required=True, help="name of your docker image")
    parser.add_argument("--embed", action="store_true", help="embed a docker image in the binary")
    parser.add_argument("--workdir", "-w", default="", help="mount the user's current directory in the image")
    parser.add_argument("--env", "-e", action="append", help="whitelist environment variables")
    parser.add_argument("--volume", "-v", action="append", help="bind mount a volume")
    parser.add_argument("--output", default="", help="directory to output")
    parser.add_argument("--target", "-t", action="append", help="platforms and architectures to target")
    parser.add_argument("--module", default="", help="name of generated module")
    return parser


def build_generator(args: argparse.Namespace) -> Generator:
    """Turn parsed options into a Generator, filling in the defaults."""
    output = args.output or os.path.join(os.getcwd(), "dist")
    output = output.replace(os.sep, "/")
    module = args.module or default_module(args.name, getpass.getuser())
    targets = _split(args.target) or list(DEFAULT_TARGETS)
    return Generator(
        name=args.name,
        image=args.image,
        output=output,
        targets=targets,
        module=module,
        embed=bool(args.embed),
        workdir=args.workdir or "",
        env=_split(args.env),
        volumes=_split(args.volume),
    )


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    try:
        build_generator(args).run()
    except Exception as exc:  # reported like any command failure
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())