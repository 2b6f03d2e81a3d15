"""Reading `docker save` archives: manifest, history, layer contents."""

from __future__ import annotations

import json
import os
import tarfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import IO, Iterable, Optional
from urllib.parse import quote_plus

from .ignore import is_noise
from .secrets import Pattern, scan_filename

FILE_PERMS = 0o700


class ImageArchiveError(Exception):
    """The image archive could not be read."""


class LayerMismatchError(ImageArchiveError):
    """History commands and layers do not line up one to one."""


@dataclass
class Manifest:
    config: str = ""
    repo_tags: list[str] = field(default_factory=list)
    layers: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Manifest":
        return cls(
            config=data.get("Config") or "",
            repo_tags=list(data.get("RepoTags") or []),
            layers=list(data.get("Layers") or []),
        )


@dataclass
class HistoryEntry:
    created: str = ""
    created_by: str = ""
    empty_layer: bool = False
    layer_id: str = ""
    layers: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            created=data.get("created") or "",
            created_by=data.get("created_by") or "",
            empty_layer=bool(data.get("empty_layer", False)),
        )

    @property
    def adds_files(self) -> bool:
        return "ADD" in self.created_by or "COPY" in self.created_by


@dataclass(frozen=True)
class SecretFinding:
    filename: str
    pattern: Pattern
    location: str


@dataclass
class ImageArchive:
    manifests: list[Manifest] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)
    layers: dict[str, list[str]] = field(default_factory=dict)
    findings: list[SecretFinding] = field(default_factory=list)


def clean_string(text: str) -> str:
    """Turn a history ``created_by`` command into Dockerfile-like text."""
    s = " ".join(text.split())
    s = s.replace("&&", " \\\n\t&&")
    if not s.startswith("/bin/sh -c #(nop)"):
        return s.replace("/bin/sh -c ", "RUN ")
    return s.replace("/bin/sh -c ", "").replace("#(nop) ", "")


def _scan_layer(data: IO[bytes], location: str, patterns, archive: ImageArchive) -> None:
    names = archive.layers.setdefault(location, [])
    with tarfile.open(fileobj=data, mode="r|") as inner:
        for member in inner:
            names.append(member.name)
            if is_noise(member.name):
                continue
            hit = scan_filename(member.name, patterns)
            if hit is not None:
                archive.findings.append(SecretFinding(member.name, hit, location))


def parse_image_archive(
    fileobj: IO[bytes], patterns: Optional[Iterable[Pattern]] = None
) -> ImageArchive:
    """Read a saved image tarball, listing layer files and flagging secrets."""
    patterns = tuple(patterns) if patterns is not None else None
    archive = ImageArchive()
    try:
        with tarfile.open(fileobj=fileobj, mode="r|") as outer:
            for member in outer:
                name = member.name
                if ".json" in name and name != "manifest.json":
                    raw = outer.extractfile(member)
                    try:
                        history = json.load(raw)["history"]
                        archive.history = [HistoryEntry.from_dict(h) for h in history]
                    except (ValueError, KeyError, TypeError, AttributeError) as exc:
                        raise ImageArchiveError(
                            "unable to parse history from json file"
                        ) from exc
                if name == "manifest.json":
                    raw = outer.extractfile(member)
                    try:
                        archive.manifests = [Manifest.from_dict(m) for m in json.load(raw)]
                    except (ValueError, TypeError, AttributeError) as exc:
                        raise ImageArchiveError("unable to parse manifest.json") from exc
                if "layer.tar" in name:
                    _scan_layer(outer.extractfile(member), name, patterns, archive)
    except tarfile.TarError as exc:
        raise ImageArchiveError(str(exc)) from exc
    return archive


def attach_layers(
    history: Iterable[HistoryEntry], manifest: Manifest, layers: dict[str, list[str]]
) -> list[HistoryEntry]:
    """Pair each non-empty history entry with its layer and file list."""
    result: list[HistoryEntry] = []
    remaining = iter(manifest.layers)
    used = 0
    for entry in history:
        if entry.empty_layer:
            result.append(entry)
            continue
        layer_id = next(remaining, None)
        if layer_id is None:
            raise LayerMismatchError("layers should always be 1:1 with commands")
        used += 1
        result.append(replace(entry, layer_id=layer_id, layers=list(layers.get(layer_id, []))))
    if used != len(manifest.layers):
        raise LayerMismatchError("layers should always be 1:1 with commands")
    return result


def format_dockerfile(
    history: list[HistoryEntry], verbose: bool = False, filter_noise: bool = True
) -> list[str]:
    """Render history as Dockerfile lines, with files added by ADD/COPY."""
    lines: list[str] = []
    if verbose:
        for entry in history:
            lines.append(clean_string(entry.created_by))
            lines.extend(f"\t{name}" for name in entry.layers)
        return lines
    for entry in history[1:]:
        lines.append(clean_string(entry.created_by))
        if entry.adds_files:
            lines.extend(
                f"\t{name}"
                for name in entry.layers
                if not (filter_noise and is_noise(name))
            )
            lines.append("")
    return lines


def _safe_join(root: Path, name: str) -> Optional[Path]:
    target = (root / name).resolve()
    if target != root.resolve() and root.resolve() not in target.parents:
        return None
    return target


def extract_layers(
    fileobj: IO[bytes],
    image_id: str,
    history: list[HistoryEntry],
    output_root: "os.PathLike[str] | str" = ".",
    verbose: bool = False,
) -> Path:
    """Write files of ADD/COPY layers under ``output_root``; return the image dir."""
    output_dir = Path(output_root) / quote_plus(image_id)
    output_dir.mkdir(mode=FILE_PERMS, parents=True, exist_ok=True)
    start = 0 if verbose else 1
    wanted: set[str] = set()
    with open(output_dir / "mapping.txt", "w", encoding="utf-8") as mapping:
        for entry in history[start:]:
            if entry.adds_files:
                wanted.add(entry.layer_id)
                mapping.write(f"{entry.layer_id.split('/')[0]}:{entry.created_by}\n")
    try:
        with tarfile.open(fileobj=fileobj, mode="r|") as outer:
            for member in outer:
                if member.name not in wanted:
                    continue
                layer_dir = output_dir / member.name.split("/")[0]
                layer_dir.mkdir(mode=FILE_PERMS, parents=True, exist_ok=True)
                with tarfile.open(fileobj=outer.extractfile(member), mode="r|") as inner:
                    for item in inner:
                        target = _safe_join(layer_dir, item.name)
                        if target is None:
                            continue
                        if item.isdir():
                            target.mkdir(mode=FILE_PERMS, parents=True, exist_ok=True)
                        elif item.isreg():
                            target.parent.mkdir(mode=FILE_PERMS, parents=True, exist_ok=True)
                            target.write_bytes(inner.extractfile(item).read())
                            target.chmod(FILE_PERMS)
    except tarfile.TarError as exc:
        raise ImageArchiveError(str(exc)) from exc
    return output_dir