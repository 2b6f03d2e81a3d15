import ast
import json
import subprocess
from pathlib import Path
from unittest import mock

import pytest

import dockkit.shim
from dockkit.generator import Generator, run_make


def _generator(**overrides):
    settings = dict(
        name="tool",
        image="alpine",
        output="/tmp/out",
        targets=["linux/amd64", "windows/amd64"],
        module="example/tool",
    )
    settings.update(overrides)
    return Generator(**settings)


def _config_of(launcher: str) -> dict:
    line = next(l for l in launcher.splitlines() if l.startswith("CONFIG = json.loads("))
    argument = line[len("CONFIG = json.loads("):-1]
    return json.loads(ast.literal_eval(argument))


def test_makefile_variables():
    lines = _generator().render_makefile().splitlines()
    assert "NAME = tool" in lines
    assert "OUTPUT = /tmp/out" in lines
    assert "MODULE = example/tool" in lines
    assert "IMAGE = alpine" in lines
    assert "TARGETS = linux/amd64 windows/amd64" in lines


def test_makefile_embed_adds_image_source():
    plain = _generator().render_makefile()
    embedded = _generator(embed=True).render_makefile()
    sources = [l for l in embedded.splitlines() if l.startswith("SOURCES =")]
    assert sources[0].endswith("app/image.tar.gz")
    assert "app/image.tar.gz" not in next(
        l for l in plain.splitlines() if l.startswith("SOURCES =")
    )


def test_write_files_creates_launcher(tmp_path):
    written = _generator(workdir="/w", env=["A"], volumes=["/x:/y"], embed=True).write_files(tmp_path)
    assert sorted(p.relative_to(tmp_path).as_posix() for p in written) == [
        "Makefile", "app/__main__.py", "app/shim.py",
    ]
    config = _config_of((tmp_path / "app" / "__main__.py").read_text())
    assert config == {
        "image": "alpine", "workdir": "/w", "env": ["A"], "volumes": ["/x:/y"], "embed": True,
    }


def test_write_files_copies_shim(tmp_path):
    _generator().write_files(tmp_path)
    original = Path(dockkit.shim.__file__).read_bytes()
    assert (tmp_path / "app" / "shim.py").read_bytes() == original


def test_run_makes_output_and_runs_make(tmp_path, monkeypatch):
    monkeypatch.delenv("OS", raising=False)
    seen = {}

    def fake_run(cmd, cwd=None, check=False):
        seen["cmd"] = cmd
        seen["makefile"] = (Path(cwd) / "Makefile").read_text()
        return subprocess.CompletedProcess(cmd, 0)

    out = tmp_path / "dist"
    with mock.patch("subprocess.run", side_effect=fake_run):
        _generator(output=out.as_posix()).run()
    assert out.is_dir()
    assert seen["cmd"] == ["make"]
    assert f"OUTPUT = {out.as_posix()}" in seen["makefile"]


def test_run_make_uses_cmd_on_windows(tmp_path, monkeypatch):
    monkeypatch.setenv("OS", "Windows_NT")
    with mock.patch("subprocess.run") as fake:
        run_make(tmp_path)
    assert fake.call_args.args[0] == ["cmd", "/c", "make"]
    assert fake.call_args.kwargs["cwd"] == tmp_path


def test_run_make_propagates_failure(tmp_path):
    error = subprocess.CalledProcessError(2, ["make"])
    with mock.patch("subprocess.run", side_effect=error):
        with pytest.raises(subprocess.CalledProcessError):
            run_make(tmp_path)