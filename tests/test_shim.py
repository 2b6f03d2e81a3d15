import io
import json
import os
import subprocess
import sys
from unittest import mock

import pytest

from dockkit.shim import Shim, docker_executable


@pytest.fixture
def python_as_docker(monkeypatch, tmp_path):
    """Make the interpreter stand in for docker, with scripts in tmp_path."""
    monkeypatch.setenv("DOCKER", sys.executable)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_run_args_minimal():
    assert Shim(image="alpine").run_args(["echo", "hi"]) == [
        "run", "--rm", "alpine", "echo", "hi",
    ]


def test_run_args_tty_env_volumes_workdir_order():
    shim = Shim(image="alpine", workdir="/work", env=["A=1", "B"], volumes=["/a:/b"])
    args = shim.run_args(["ls"], tty=True, cwd="/home/me")
    assert args == [
        "run", "--rm", "-it",
        "-e", "A=1", "-e", "B",
        "-v", "/a:/b",
        "-w", "/work", "-v", "/home/me:/work",
        "alpine", "ls",
    ]


def test_run_args_workdir_defaults_to_current_directory(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    args = Shim(image="alpine", workdir="/w").run_args([])
    assert args[-3:] == ["-v", f"{os.getcwd()}:/w", "alpine"]


def test_docker_executable_honours_environment(monkeypatch):
    monkeypatch.setenv("DOCKER", "/opt/bin/podman")
    assert docker_executable() == "/opt/bin/podman"


def test_docker_executable_on_windows(monkeypatch):
    monkeypatch.delenv("DOCKER", raising=False)
    with mock.patch("sys.platform", "win32"):
        assert docker_executable() == "docker.exe"


def test_docker_executable_elsewhere(monkeypatch):
    monkeypatch.delenv("DOCKER", raising=False)
    with mock.patch("sys.platform", "linux"):
        assert docker_executable() == "docker"


def test_exists_false_when_docker_missing(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCKER", str(tmp_path / "no-such-docker"))
    assert Shim(image="alpine").exists() is False


def test_exists_false_when_inspect_fails(python_as_docker):
    assert Shim(image="alpine").exists() is False


def test_exists_true_when_inspect_succeeds(python_as_docker):
    (python_as_docker / "inspect").write_text("import sys\nsys.exit(0)\n")
    assert Shim(image="alpine").exists() is True


def test_pull_raises_on_failure(python_as_docker):
    with pytest.raises(subprocess.CalledProcessError):
        Shim(image="alpine", stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL).pull()


def test_load_streams_archive_to_docker(python_as_docker):
    (python_as_docker / "load").write_text(
        "import sys\nopen('got.bin', 'wb').write(sys.stdin.buffer.read())\n"
    )
    result = Shim(image="alpine").load(io.BytesIO(b"image bytes"))
    received = (python_as_docker / "got.bin").read_bytes()
    assert (result, received) == (None, b"image bytes")


def test_load_raises_on_failure(python_as_docker):
    (python_as_docker / "load").write_text("import sys\nsys.stdin.read()\nsys.exit(3)\n")
    with pytest.raises(subprocess.CalledProcessError) as info:
        Shim(image="alpine").load(io.BytesIO(b"x"))
    assert info.value.returncode == 3


def test_exec_runs_docker_with_arguments(python_as_docker, capsys):
    (python_as_docker / "run").write_text(
        "import json, sys\njson.dump(sys.argv[1:], open('argv.json', 'w'))\n"
    )
    Shim(image="alpine", env=["A=1"]).exec(["echo", "hi"])
    recorded = json.loads((python_as_docker / "argv.json").read_text())
    assert recorded == ["--rm", "-e", "A=1", "alpine", "echo", "hi"]
    assert "Executing Docker command: docker run --rm -e A=1 alpine echo hi" in capsys.readouterr().out


def test_exec_raises_on_failure(python_as_docker):
    (python_as_docker / "run").write_text("import sys\nsys.exit(5)\n")
    with pytest.raises(subprocess.CalledProcessError) as info:
        Shim(image="alpine").exec([])
    assert info.value.returncode == 5