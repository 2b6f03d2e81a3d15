"""Run a command inside a Docker image as if it were a local program."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from typing import IO, Optional, Sequence


def docker_executable() -> str:
    """Return the docker command to use; the DOCKER variable overrides it."""
    override = os.environ.get("DOCKER")
    if override:
        return override
    return "docker.exe" if sys.platform.startswith("win") else "docker"


@dataclass
class Shim:
    """Runs commands in ``image``, pulling or loading it when it is missing.

    ``stdout`` and ``stderr`` receive the output of docker's own commands
    (inspect aside); None means they go to this process's streams.
    """

    image: str
    workdir: str = ""
    env: list[str] = field(default_factory=list)
    volumes: list[str] = field(default_factory=list)
    stdout: Optional[IO] = None
    stderr: Optional[IO] = None

    def _command(self, *args: str) -> list[str]:
        return [docker_executable(), *args]

    def exists(self) -> bool:
        """Return True if the image is present locally."""
        try:
            proc = subprocess.run(
                self._command("inspect", self.image),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            return False
        return proc.returncode == 0

    def pull(self) -> None:
        """Pull the image; raise CalledProcessError if docker fails."""
        subprocess.run(
            self._command("pull", self.image),
            stdout=self.stdout,
            stderr=self.stderr,
            check=True,
        )

    def load(self, file: IO[bytes]) -> None:
        """Feed an image archive to ``docker load``."""
        cmd = self._command("load")
        with subprocess.Popen(
            cmd, stdin=subprocess.PIPE, stdout=self.stdout, stderr=self.stderr
        ) as proc:
            try:
                shutil.copyfileobj(file, proc.stdin)
            finally:
                proc.stdin.close()
            code = proc.wait()
        if code:
            raise subprocess.CalledProcessError(code, cmd)

    def run_args(
        self,
        container_args: Sequence[str],
        tty: bool = False,
        cwd: Optional[str] = None,
    ) -> list[str]:
        """Build the arguments of ``docker run`` for ``container_args``."""
        args = ["run", "--rm"]
        if tty:
            args.append("-it")
        for env in self.env:
            args += ["-e", env]
        for volume in self.volumes:
            args += ["-v", volume]
        if self.workdir:
            if cwd is None:
                cwd = os.getcwd()
            args += ["-w", self.workdir, "-v", f"{cwd}:{self.workdir}"]
        args.append(self.image)
        args.extend(container_args)
        return args

    def exec(self, container_args: Sequence[str]) -> None:
        """Run ``container_args`` in the image, attached to this terminal."""
        args = self.run_args(container_args, tty=sys.stdout.isatty())
        print(f"Executing Docker command: docker {' '.join(args)}", flush=True)
        subprocess.run([docker_executable(), *args], check=True)