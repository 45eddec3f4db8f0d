"""
Tests for the inkwell command line interface.
"""
import io
import json
import sys

import pytest

import inkwell


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["inkwell", *argv])
    inkwell.main()


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A working directory initialized with the example templates."""
    monkeypatch.chdir(tmp_path)
    run_cli(monkeypatch, "init")
    return tmp_path


class TestInit:
    def test_creates_templates(self, project):
        assert (project / "layout.html").exists()
        assert (project / "page.html").exists()


class TestRender:
    """Tests for the render command."""

    def test_render_with_data(self, project, monkeypatch, capsys):
        (project / "data.json").write_text(json.dumps({"title": "T", "name": "Ann"}))
        run_cli(monkeypatch, "render", "page.html", "--data", "data.json")
        out = capsys.readouterr().out
        assert "<title>T</title>" in out
        assert "<h1>Hello, Ann!</h1>" in out

    def test_render_defaults(self, project, monkeypatch, capsys):
        run_cli(monkeypatch, "render", "page.html")
        assert "Hello, world!" in capsys.readouterr().out

    def test_render_to_file(self, project, monkeypatch):
        run_cli(monkeypatch, "render", "page.html", "--output", "out.html")
        assert "<title></title>" in (project / "out.html").read_text()

    def test_missing_data_file(self, project, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "render", "page.html", "--data", "nope.json")
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_data_must_be_object(self, project, monkeypatch):
        (project / "data.json").write_text("[1, 2]")
        with pytest.raises(SystemExit):
            run_cli(monkeypatch, "render", "page.html", "--data", "data.json")

    def test_stdin_data_must_be_object(self, project, monkeypatch, capsys):
        """Bindings read from stdin get the same object check as files."""
        monkeypatch.setattr(sys, "stdin", io.StringIO("[1, 2]"))
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "render", "page.html", "--data", "-")
        assert exc_info.value.code == 1
        assert "must contain a JSON object" in capsys.readouterr().err

    def test_stdin_data(self, project, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO('{"name": "Bo"}'))
        run_cli(monkeypatch, "render", "page.html", "--data", "-")
        assert "Hello, Bo!" in capsys.readouterr().out

    def test_malformed_data_file(self, project, monkeypatch, capsys):
        (project / "data.json").write_text("{not json")
        with pytest.raises(SystemExit):
            run_cli(monkeypatch, "render", "page.html", "--data", "data.json")
        assert "not valid JSON" in capsys.readouterr().err

    @pytest.mark.parametrize("content", ["{broken", '{"escape": "sometimes"}', "[]"])
    def test_bad_config_exits(self, project, monkeypatch, capsys, content):
        """A broken inkwell.json should be reported, not raised."""
        (project / "inkwell.json").write_text(content)
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "render", "page.html")
        assert exc_info.value.code == 1
        assert "inkwell.json" in capsys.readouterr().err

    def test_escaping_disabled_by_config(self, project, monkeypatch, capsys):
        """inkwell.json may turn HTML escaping off."""
        (project / "inkwell.json").write_text(json.dumps({"escape": False}))
        (project / "data.json").write_text(json.dumps({"title": "<b>"}))
        run_cli(monkeypatch, "render", "page.html", "--data", "data.json")
        assert "<title><b></title>" in capsys.readouterr().out


class TestOtherCommands:
    """Tests for check, dump and analyse."""

    def test_compile_error_exits(self, project, monkeypatch, capsys):
        (project / "broken.html").write_text("{% block a %}")
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "check", "broken.html")
        assert exc_info.value.code == 1
        assert "Compilation Failed" in capsys.readouterr().err

    def test_check(self, project, monkeypatch, capsys):
        run_cli(monkeypatch, "check", "page.html")
        assert "2 file(s)" in capsys.readouterr().err

    def test_dump(self, project, monkeypatch, capsys):
        run_cli(monkeypatch, "dump", "page.html")
        out = capsys.readouterr().out
        assert "scope {" in out
        assert "$$0 = title" in out

    def test_analyse_saves_report(self, project, monkeypatch, capsys):
        run_cli(monkeypatch, "analyse", "page.html", "--save-report", "report.json")
        report = json.loads((project / "report.json").read_text())
        assert report["files"]["page.html"]["includes"] == [
            {"file": "layout.html", "overrides": ["title", "content"]}
        ]
        assert report["files"]["layout.html"]["blocks"] == ["title", "content"]
        assert "INKWELL ANALYSIS REPORT" in capsys.readouterr().out
