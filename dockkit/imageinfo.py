"""Command that inspects a Docker image: config, Dockerfile history, secrets."""

from __future__ import annotations

import argparse
import json
import os
import shutil
import subprocess
import tempfile
from typing import IO, Optional

from termcolor import colored

from .layers import (
    ImageArchiveError,
    attach_layers,
    extract_layers,
    format_dockerfile,
    parse_image_archive,
)
from .secrets import load_patterns


class DockerError(Exception):
    """A docker command failed."""


class DockerEngine:
    """Talks to the Docker daemon through the docker command line."""

    def __init__(self, api_version: Optional[str] = None, executable: str = "docker"):
        self.api_version = api_version
        self.executable = executable

    def _env(self) -> dict:
        env = dict(os.environ)
        if self.api_version:
            env["DOCKER_API_VERSION"] = self.api_version
        return env

    def _run(self, *args: str, capture: bool = True, stdout=None) -> subprocess.CompletedProcess:
        try:
            proc = subprocess.run(
                [self.executable, *args],
                stdout=stdout if stdout is not None else (subprocess.PIPE if capture else None),
                stderr=subprocess.PIPE,
                env=self._env(),
            )
        except OSError as exc:
            raise DockerError(str(exc)) from exc
        if proc.returncode != 0:
            raise DockerError(proc.stderr.decode(errors="replace").strip() or "docker failed")
        return proc

    def inspect_image(self, image: str) -> dict:
        proc = self._run("image", "inspect", image)
        try:
            return json.loads(proc.stdout)[0]
        except (ValueError, IndexError) as exc:
            raise DockerError(f"cannot inspect {image}") from exc

    def pull_image(self, image: str) -> None:
        self._run("pull", image, capture=False)

    def save_image(self, image: str) -> IO[bytes]:
        """Return a seekable temporary file holding the saved image."""
        out = tempfile.TemporaryFile()
        try:
            self._run("save", image, stdout=out)
        except DockerError:
            out.close()
            raise
        out.seek(0)
        return out


def describe_image(info: dict) -> list[tuple[str, str]]:
    """Lines of (colour, text) describing env, ports and user of an image."""
    config = info.get("Config") or {}
    lines: list[tuple[str, str]] = []
    env = config.get("Env") or []
    if env:
        lines.append(("white", "Environment Variables"))
        lines.extend(("yellow", f"|{e}") for e in env)
        lines.append(("white", ""))
    ports = config.get("ExposedPorts") or {}
    if ports:
        lines.append(("white", "Open Ports"))
        lines.extend(("green", f"|{p}") for p in ports)
        lines.append(("white", ""))
    lines.append(("white", "Image user"))
    user = config.get("User") or ""
    if user:
        lines.append(("blue", f"|Image is running as User: {user}"))
    else:
        lines.append(("red", "|User is root"))
    lines.append(("white", ""))
    return lines


def _say(color: str, text: str) -> None:
    print(colored(text, color))


def analyze(engine, image_id: str, verbose: bool = False, filter_noise: bool = True, extract: bool = False):
    """Print a report about one image; return its history, or None on error."""
    try:
        info = engine.inspect_image(image_id)
    except DockerError:
        try:
            engine.pull_image(image_id)
            info = engine.inspect_image(image_id)
        except DockerError as exc:
            _say("red", str(exc))
            if "Maximum supported API version is" in str(exc):
                _say("yellow", f"Use the -sV flag to change your client version. ./executable -sV=1.36 {image_id}")
            return None
    _say("white", f"Analyzing {image_id}")
    _say("white", f"Docker Version: {info.get('DockerVersion', '')}")
    _say("white", f"GraphDriver: {(info.get('GraphDriver') or {}).get('Name', '')}")
    for color, text in describe_image(info):
        _say(color, text)
    try:
        _say("white", "Potential secrets:")
        with engine.save_image(image_id) as stream:
            archive = parse_image_archive(stream, load_patterns())
            for f in archive.findings:
                p = f.pattern
                _say("green", f"|Found match {f.filename} {p.description} {p.value} {f.location}")
            if not archive.manifests:
                raise ImageArchiveError("unable to parse manifest.json")
            history = attach_layers(archive.history, archive.manifests[0], archive.layers)
            _say("white", "Dockerfile:")
            for line in format_dockerfile(history, verbose, filter_noise):
                _say("blue" if verbose and line.startswith("\t") else "green", line)
            _say("white", "")
            if extract:
                stream.seek(0)
                extract_layers(stream, image_id, history, ".", verbose)
    except (DockerError, ImageArchiveError, OSError) as exc:
        _say("red", str(exc))
        return None
    return history


def read_image_list(path) -> list[str]:
    """Read image names, one per line."""
    with open(path, encoding="utf-8") as fh:
        return fh.read().splitlines()


def _bool(text: str) -> bool:
    value = text.strip().lower()
    if value in ("1", "t", "true"):
        return True
    if value in ("0", "f", "false"):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {text!r}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="imageinfo")
    parser.add_argument("-f", dest="filelist", default="", help="File containing images to analyze separated by line")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Print all details about the image")
    parser.add_argument("-filter", dest="filter", type=_bool, default=True, help="Filter noisy filenames such as node_modules")
    parser.add_argument("-x", dest="extract", action="store_true", help="Save layers to current directory")
    parser.add_argument("-sV", dest="version", default="", help="Set the docker client API version, e.g. -sV=1.36")
    parser.add_argument("repo", nargs="?", default="")
    args = parser.parse_args(argv)

    engine = DockerEngine(api_version=args.version or None)
    if args.filelist:
        images = read_image_list(args.filelist)
    elif args.repo:
        images = [args.repo]
    else:
        _say("red", "Please provide a repository image to analyze. ./executable nginx:latest")
        return 0
    if shutil.which(engine.executable) is None:
        _say("red", "docker executable not found")
        return 1
    for image in images:
        analyze(engine, image, args.verbose, args.filter, args.extract)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())