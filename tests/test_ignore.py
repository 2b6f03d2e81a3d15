import pytest

from dockkit.ignore import NOISE_PATTERNS, is_noise, noise_regex


@pytest.mark.parametrize(
    "path",
    [
        "app/node_modules/lodash/index.js",
        "usr/share/doc/readme",
        "static/jquery.js",
        "types/index.d.ts",
        "Jenkinsfile",
        "deps/lib.c",
    ],
)
def test_noise_paths(path):
    assert is_noise(path) is True


@pytest.mark.parametrize(
    "path", ["etc/passwd", "app/main.py", "home/user/.ssh/id_rsa"]
)
def test_regular_paths(path):
    assert is_noise(path) is False


def test_anchored_patterns_only_at_start():
    assert is_noise("deps/x") is True
    assert is_noise("src/deps/x") is False


def test_regex_is_cached_and_covers_all():
    assert noise_regex() is noise_regex()
    assert noise_regex().pattern.count("|") >= len(NOISE_PATTERNS) - 1