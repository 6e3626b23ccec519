"""Tests for the command line interface."""

from __future__ import annotations

from typer.testing import CliRunner

from htmltool import __version__
from htmltool.cli.main import app


runner = CliRunner()


class TestCli:
    """Tests for mode dispatch, flags and exit codes."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_tags_from_file(self, write_html):
        path = write_html("page.html", "<html><head><title>Hello</title></head><body><h1>World</h1></body></html>")

        result = runner.invoke(app, ["tags", "title", "h1"], input=f"{path}\n")

        assert result.exit_code == 0
        assert result.output.splitlines() == ["Hello", "World"]

    def test_attribs_from_file_are_verbatim(self, write_html):
        path = write_html("page.html", '<html><body><a href="/x">x</a><img src="i.png"></body></html>')

        result = runner.invoke(app, ["attribs", "href", "src"], input=f"{path}\n")

        assert result.exit_code == 0
        assert result.output.splitlines() == ["/x", "i.png"]

    def test_comments(self, write_html):
        path = write_html("page.html", "<html><!-- one\ntwo --><body></body></html>")

        result = runner.invoke(app, ["comments"], input=f"{path}\n")

        assert result.exit_code == 0
        assert result.output.splitlines() == ["one two"]

    def test_query(self, write_html):
        path = write_html("page.html", '<html><body><p class="x">First</p><p>Second</p></body></html>')

        result = runner.invoke(app, ["query", "p.x"], input=f"{path}\n")

        assert result.exit_code == 0
        assert result.output.splitlines() == ["First"]

    def test_invalid_mode(self):
        result = runner.invoke(app, ["frobnicate"], input="")

        assert result.exit_code == 2

    def test_invalid_concurrency(self):
        result = runner.invoke(app, ["-c", "0", "comments"], input="")

        assert result.exit_code == 2

    def test_invalid_selector_is_not_fatal(self, write_html):
        path = write_html("page.html", "<html><head><title>Hi</title></head></html>")

        result = runner.invoke(app, ["query", ":::bad"], input=f"{path}\n")

        assert result.exit_code == 0
        assert "failed to parse CSS selector" in result.output
        assert "Hi" not in result.output

    def test_quiet_suppresses_errors(self, tmp_path):
        missing = tmp_path / "missing.html"

        result = runner.invoke(app, ["-q", "tags", "title"], input=f"{missing}\n")

        assert result.exit_code == 0
        assert result.output == ""

    def test_missing_file_reported(self, tmp_path):
        missing = tmp_path / "missing.html"

        result = runner.invoke(app, ["tags", "title"], input=f"{missing}\n")

        assert result.exit_code == 0
        assert "failed to open file" in result.output

    def test_bad_url_is_fatal(self):
        result = runner.invoke(app, ["tags", "title"], input="http://example.com:notaport/\n")

        assert result.exit_code == 1
        assert "failed to create request for" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "comments"], input="")

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output
