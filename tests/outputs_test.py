"""Test GitHub Actions step outputs."""

from pathlib import Path

import pytest

from build_and_push.exceptions import OutputError
from build_and_push.storage.outputs import ActionOutputs


def test_set_output(github_output: Path) -> None:
    outputs = ActionOutputs()
    outputs.set_output("location", "registry.example.com/svc:1.0")
    outputs.set_output("other", "x")
    assert github_output.read_text() == (
        "location=registry.example.com/svc:1.0\nother=x\n"
    )


def test_set_output_multiline(github_output: Path) -> None:
    ActionOutputs().set_output("log", "line one\nline two")
    lines = github_output.read_text().splitlines()
    assert lines[0].startswith("log<<ghadelimiter_")
    delimiter = lines[0].removeprefix("log<<")
    assert lines[1:] == ["line one", "line two", delimiter]


def test_set_output_legacy(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    ActionOutputs().set_output("location", "r/svc:1")
    assert "::set-output name=location::r/svc:1\n" in capsys.readouterr().out


def test_set_output_unwritable(tmp_path: Path) -> None:
    outputs = ActionOutputs(tmp_path)
    with pytest.raises(OutputError, match="cannot write output location"):
        outputs.set_output("location", "r/svc:1")
