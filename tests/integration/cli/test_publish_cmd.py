"""Integration tests for the publish and serve CLI commands"""

from typer.testing import CliRunner

from trydocs.cli.cli import app


runner = CliRunner()


def test_publish_cmd_writes_html(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "hello.md").write_text("# Hello\n\n```python\nprint(1)\n```\n")

    result = runner.invoke(app, ["publish", "docs", "--target-dir", "site", "--format", "html"])

    assert result.exit_code == 0, result.output
    assert "Published '" in result.output
    assert (tmp_path / "site" / "hello.html").exists()


def test_publish_cmd_uses_config_yaml(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("source_dir: docs\ntarget_dir: md-out\noutput_format: markdown\n")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "hello.md").write_text("# Hello\n")

    result = runner.invoke(app, ["publish"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "md-out" / "hello.md").read_text() == "# Hello\n"


def test_publish_cmd_no_files_exits_negative(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()

    result = runner.invoke(app, ["publish", "docs", "--target-dir", "site"])

    assert result.exit_code == -1
    assert not (tmp_path / "site").exists()


def test_publish_cmd_rejects_unknown_format(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "hello.md").write_text("# Hello\n")

    result = runner.invoke(app, ["publish", "docs", "--target-dir", "site", "--format", "pdf"])

    assert result.exit_code == 1
    assert not (tmp_path / "site").exists()


def test_publish_cmd_reports_file_failure(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "bad.md").write_text("```python --source-file nope.py\n```\n")

    result = runner.invoke(app, ["publish", "docs", "--target-dir", "site"])

    assert result.exit_code == 1
    assert not (tmp_path / "site" / "bad.html").exists()


def test_serve_cmd_runs_uvicorn(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    calls = {}

    def fake_run(app_, host, port):
        calls.update(host=host, port=port)

    monkeypatch.setattr("uvicorn.run", fake_run)
    result = runner.invoke(app, ["serve", "--port", "9001"])

    assert result.exit_code == 0, result.output
    assert calls == {"host": "127.0.0.1", "port": 9001}


def test_publish_cmd_gfm_table_to_markdown(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "t.md").write_text("|a|b|\n|-|-|\n|1|2|\n")

    result = runner.invoke(app, [
        "publish", "docs", "--target-dir", "site", "--format", "markdown", "--parser-config", "gfm-like",
    ])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "site" / "t.md").read_text().startswith("|")
