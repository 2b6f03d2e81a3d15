"""Build self-contained launchers that run a command inside a Docker image."""

from __future__ import annotations

import json
import os
import string
import subprocess
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

_LAUNCHER = string.Template('''"""Run the packaged command inside its Docker image."""

import gzip
import json
import os
import subprocess
import sys
import zipfile

from shim import Shim

CONFIG = json.loads($config)


def main():
    shim = Shim(
        image=CONFIG["image"],
        workdir=CONFIG["workdir"],
        env=CONFIG["env"],
        volumes=CONFIG["volumes"],
    )
    try:
        if not shim.exists():
            if CONFIG["embed"]:
                bundle_path = os.path.dirname(os.path.abspath(__file__))
                with zipfile.ZipFile(bundle_path) as bundle, bundle.open(
                    "image.tar.gz"
                ) as raw, gzip.GzipFile(fileobj=raw) as image:
                    shim.load(image)
            else:
                shim.pull()
        shim.exec(sys.argv[1:])
    except subprocess.CalledProcessError as exc:
        return exc.returncode
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
''')


def _python() -> str:
    return f'"{Path(sys.executable).as_posix()}"'


@dataclass
class Generator:
    """Settings for one launcher and the work of building it."""

    name: str
    image: str
    output: str = "dist"
    targets: list[str] = field(default_factory=list)
    module: str = ""
    embed: bool = False
    workdir: str = ""
    env: list[str] = field(default_factory=list)
    volumes: list[str] = field(default_factory=list)

    def render_makefile(self) -> str:
        """Return the Makefile that builds one launcher per target."""
        sources = ["app/__main__.py", "app/shim.py"]
        if self.embed:
            sources.append("app/image.tar.gz")
        lines = [
            f"NAME = {self.name}",
            f"OUTPUT = {self.output}",
            f"MODULE = {self.module}",
            f"IMAGE = {self.image}",
            f"SOURCES = {' '.join(sources)}",
            f"TARGETS = {' '.join(self.targets)}",
            "DOCKER ?= docker",
            f"PYTHON ?= {_python()}",
            "",
            "os = $(word 1, $(subst /, ,$@))",
            "arch = $(word 2, $(subst /, ,$@))",
            "",
            ".PHONY: all",
            "all: $(TARGETS)",
            "",
            "app/image.tar.gz:",
            "\t$(DOCKER) save $(IMAGE) | gzip > app/image.tar.gz",
            "",
            "$(TARGETS): $(SOURCES)",
            '\t$(PYTHON) -m zipapp app -p "/usr/bin/env python3" '
            '-o "$(OUTPUT)/$(NAME)-$(os)-$(arch)$(if $(filter windows,$(os)),.pyz,)"',
            "",
        ]
        return "\n".join(lines)

    def _launcher(self) -> str:
        config = {
            "image": self.image,
            "workdir": self.workdir,
            "env": list(self.env),
            "volumes": list(self.volumes),
            "embed": self.embed,
        }
        return _LAUNCHER.substitute(config=repr(json.dumps(config)))

    def write_files(self, dest) -> list[Path]:
        """Write the Makefile and launcher sources under ``dest``."""
        dest = Path(dest)
        app = dest / "app"
        app.mkdir(parents=True, exist_ok=True)
        makefile = dest / "Makefile"
        makefile.write_text(self.render_makefile(), encoding="utf-8")
        main = app / "__main__.py"
        main.write_text(self._launcher(), encoding="utf-8")
        shim = app / "shim.py"
        shim.write_bytes(Path(__file__).with_name("shim.py").read_bytes())
        return [makefile, main, shim]

    def run(self) -> None:
        """Build the launchers into the output directory."""
        Path(self.output).mkdir(mode=0o755, parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(prefix=self.name) as tmp:
            self.write_files(tmp)
            run_make(tmp)


def run_make(cwd) -> None:
    """Run make in ``cwd``; raise CalledProcessError if it fails."""
    if os.environ.get("OS") == "Windows_NT":
        cmd = ["cmd", "/c", "make"]
    else:
        cmd = ["make"]
    subprocess.run(cmd, cwd=cwd, check=True)