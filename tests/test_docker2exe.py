import argparse
import os
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from dockkit.docker2exe import DEFAULT_TARGETS, build_generator, default_module, main


def _args(**overrides):
    values = dict(
        name="tool", image="alpine", embed=False, workdir="", env=None,
        volume=None, output="", target=None, module="",
    )
    values.update(overrides)
    return argparse.Namespace(**values)


def test_default_module_replaces_separators():
    assert default_module("tool", "DOMAIN\\me/x") == "github.com/DOMAIN-me-x/tool"


def test_build_generator_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOGNAME", "dev\\user")
    gen = build_generator(_args())
    assert gen.targets == list(DEFAULT_TARGETS)
    assert gen.module == "github.com/dev-user/tool"
    assert gen.output == (Path(os.getcwd()) / "dist").as_posix()
    assert gen.env == [] and gen.volumes == []


def test_build_generator_keeps_given_values():
    gen = build_generator(
        _args(output="/out", module="m", embed=True, workdir="/w",
              env=["A", "B=1"], volume=["/a:/b"], target=["linux/amd64"])
    )
    assert (gen.output, gen.module, gen.embed, gen.workdir) == ("/out", "m", True, "/w")
    assert gen.env == ["A", "B=1"]
    assert gen.volumes == ["/a:/b"]
    assert gen.targets == ["linux/amd64"]


def test_build_generator_splits_commas():
    gen = build_generator(_args(module="m", target=["linux/amd64,darwin/arm64"]))
    assert gen.targets == ["linux/amd64", "darwin/arm64"]


def test_main_requires_name():
    with pytest.raises(SystemExit) as info:
        main(["--image", "alpine"])
    assert info.value.code == 2


def test_main_builds(tmp_path, monkeypatch):
    monkeypatch.delenv("OS", raising=False)
    out = tmp_path / "out"
    with mock.patch("subprocess.run", return_value=subprocess.CompletedProcess(["make"], 0)) as fake:
        code = main(["--name", "tool", "--image", "alpine", "--module", "m", "--output", str(out)])
    assert code == 0
    assert out.is_dir()
    assert fake.call_args.args[0] == ["make"]


def test_main_reports_failure(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("OS", raising=False)
    error = subprocess.CalledProcessError(2, ["make"])
    with mock.patch("subprocess.run", side_effect=error):
        code = main(["--name", "tool", "--image", "alpine", "--module", "m",
                     "--output", str(tmp_path / "out")])
    assert code == 1
    assert "make" in capsys.readouterr().err