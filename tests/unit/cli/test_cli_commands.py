"""
Tests for the xmlcompose command-line interface.

These tests run the Typer application in-process and check exit codes,
printed output and the files written by the render and compose commands.
"""

import json
import logging

import pytest
from typer.testing import CliRunner

from xmlcompose.cli import app
from xmlcompose.core.xml import parse, query_all
from xmlcompose.core.logging_utils import log_json_callback, logger

# Initialize CLI runner
runner = CliRunner()

DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


@pytest.fixture
def site_args(site_file):
    """Return the site template path with its placeholders filled in."""
    return [
        str(site_file),
        "-r", "@SITE_NAME@=shop",
        "-r", "@HOST@=shop.example.org",
    ]


class TestRenderCommand:
    """Tests for the render command."""

    def test_render_to_stdout(self, site_args):
        result = runner.invoke(app, ["render"] + site_args)

        assert result.exit_code == 0
        assert DECLARATION in result.stdout
        assert '<site name="shop">' in result.stdout
        assert "    <host>shop.example.org</host>" in result.stdout

    def test_render_to_file(self, site_args, tmp_path):
        output = tmp_path / "out" / "site.xml"

        result = runner.invoke(app, ["render"] + site_args + ["--cdata", "description", "-o", str(output)])

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert text.startswith(DECLARATION + "\n<site name=\"shop\">\n")
        assert "<description><![CDATA[Shop & more <b>today</b>]]></description>" in text

    def test_render_with_replacement_file(self, site_file, fixture_path, tmp_path):
        output = tmp_path / "site.xml"

        result = runner.invoke(
            app,
            ["render", str(site_file), "--replacements", str(fixture_path / "replacements.json"), "-o", str(output)],
        )

        assert result.exit_code == 0
        assert parse(output).getroot().get("name") == "blog"

    def test_inline_pairs_override_file(self, site_file, fixture_path, tmp_path):
        output = tmp_path / "site.xml"

        result = runner.invoke(
            app,
            [
                "render", str(site_file),
                "--replacements", str(fixture_path / "replacements.yaml"),
                "-r", "@SITE_NAME@=outlet",
                "-o", str(output),
            ],
        )

        assert result.exit_code == 0
        root = parse(output).getroot()
        assert root.get("name") == "outlet"
        assert root.find("host").text == "shop.example.org"

    def test_render_indent_and_encoding(self, site_args, tmp_path):
        output = tmp_path / "site.xml"

        result = runner.invoke(
            app, ["render"] + site_args + ["--indent", "2", "-e", "ISO-8859-1", "-o", str(output)]
        )

        assert result.exit_code == 0
        text = output.read_bytes().decode("latin-1")
        assert text.startswith('<?xml version="1.0" encoding="ISO-8859-1"?>\n')
        assert "\n  <host>" in text

    def test_settings_file(self, site_args, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text('{"indent": 1, "cdata_elements": ["description"]}', encoding="utf-8")
        output = tmp_path / "site.xml"

        result = runner.invoke(app, ["render"] + site_args + ["-s", str(settings), "-o", str(output)])

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert "\n <host>" in text
        assert "<![CDATA[" in text

    def test_missing_source(self, tmp_path):
        result = runner.invoke(app, ["render", str(tmp_path / "missing.xml")])
        assert result.exit_code == 2

    def test_malformed_source(self, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_text("<site>", encoding="utf-8")

        result = runner.invoke(app, ["render", str(path)])

        assert result.exit_code == 1

    def test_bad_replacement_pair(self, site_file):
        result = runner.invoke(app, ["render", str(site_file), "-r", "NOEQUALS"])
        assert result.exit_code == 1

    def test_replacement_breaking_markup(self, site_file):
        result = runner.invoke(app, ["render", str(site_file), "-r", "@HOST@=<"])
        assert result.exit_code == 1


class TestQueryCommand:
    """Tests for the query command."""

    def test_query_all_attributes(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "//module/@name"])

        assert result.exit_code == 0
        assert "core" in result.stdout

    def test_query_all_elements(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "//enabled"])

        assert result.exit_code == 0
        assert "<enabled>true</enabled>" in result.stdout

    def test_query_single(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "/site/port", "--mode", "single"])

        assert result.exit_code == 0
        assert "<port>8080</port>" in result.stdout

    def test_query_string_with_replacement(self, site_file):
        result = runner.invoke(
            app, ["query", str(site_file), "/site/host", "-m", "string", "-r", "@HOST@=example.org"]
        )

        assert result.exit_code == 0
        assert result.stdout.strip() == "example.org"

    def test_query_int(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "/site/port", "-m", "int"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "8080"

    def test_query_int_not_a_number(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "/site/host", "-m", "int"])
        assert result.exit_code == 1

    @pytest.mark.parametrize("mode", ["single", "string", "int"])
    def test_query_missing_node(self, site_file, mode):
        result = runner.invoke(app, ["query", str(site_file), "/site/missing", "-m", mode])
        assert result.exit_code == 1

    def test_query_no_matches(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "//missing"])
        assert result.exit_code == 0

    def test_invalid_xpath(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "//["])
        assert result.exit_code == 1

    def test_invalid_mode(self, site_file):
        result = runner.invoke(app, ["query", str(site_file), "/site", "-m", "everything"])
        assert result.exit_code == 2

    def test_failure_is_reported_once(self, site_file, caplog):
        """A failing command prints its error once and logs nothing at error level."""
        result = runner.invoke(app, ["query", str(site_file), "/site/missing", "-m", "single"])

        assert result.exit_code == 1
        assert result.output.count("No node matches") == 1
        assert not [record for record in caplog.records if record.levelno >= logging.ERROR]


class TestComposeCommand:
    """Tests for the compose command."""

    def test_compose_includes(self, site_args, module_file, tmp_path):
        output = tmp_path / "composed.xml"

        result = runner.invoke(
            app,
            ["compose"] + site_args + [
                "--at", "/site/modules",
                "-i", str(module_file),
                "-i", str(module_file),
                "-r", "@MODULE@=cache",
                "-o", str(output),
            ],
        )

        assert result.exit_code == 0
        document = parse(output)
        assert query_all(document, "/site/modules/module/@name") == ["core", "cache", "cache"]
        assert query_all(document, "/site/@name") == ["shop"]

    def test_compose_to_stdout(self, site_args, module_file):
        result = runner.invoke(
            app, ["compose"] + site_args + ["-a", "/site/modules", "-i", str(module_file)]
        )

        assert result.exit_code == 0
        assert '        <module name="@MODULE@">' in result.stdout
        assert "            <timeout>30</timeout>" in result.stdout

    def test_compose_missing_parent(self, site_args, module_file):
        result = runner.invoke(
            app, ["compose"] + site_args + ["-a", "/site/plugins", "-i", str(module_file)]
        )
        assert result.exit_code == 1

    def test_compose_missing_include(self, site_args, tmp_path):
        result = runner.invoke(
            app, ["compose"] + site_args + ["-a", "/site/modules", "-i", str(tmp_path / "missing.xml")]
        )
        assert result.exit_code == 2

    def test_compose_requires_include(self, site_args):
        result = runner.invoke(app, ["compose"] + site_args + ["-a", "/site/modules"])
        assert result.exit_code == 2


class TestLoggingOptions:
    """Tests for the global logging options."""

    @pytest.fixture(autouse=True)
    def detach_file_handlers(self):
        yield
        log_json_callback(False)
        for handler in logger.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                logger.removeHandler(handler)
                handler.close()

    def test_log_json_to_file(self, site_args, tmp_path):
        log_path = tmp_path / "run.log"
        output = tmp_path / "site.xml"

        result = runner.invoke(
            app, ["--log-json", "--log-file", str(log_path), "render"] + site_args + ["-o", str(output)]
        )

        assert result.exit_code == 0
        records = [json.loads(line) for line in log_path.read_text().splitlines() if line.strip()]
        saved = [record for record in records if record["message"].startswith("Saved XML document")]
        assert saved[0]["path"] == str(output)
        assert saved[0]["bytes"] == output.stat().st_size

    def test_plain_log_file(self, site_args, tmp_path):
        log_path = tmp_path / "run.log"
        output = tmp_path / "site.xml"

        result = runner.invoke(app, ["--log-file", str(log_path), "render"] + site_args + ["-o", str(output)])

        assert result.exit_code == 0
        text = log_path.read_text()
        assert " - INFO - Saved XML document - path=" in text
        assert not text.lstrip().startswith("{")
