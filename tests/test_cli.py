"""Tests for the command-line interface."""

import io
import json

import openpyxl
import pytest

from sheetfill.cli import load_data, main, run_render

from conftest import build_workbook


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.xlsx"
    build_workbook({1: {"A": "{{customer.name}}", "B": "{{customer.zip}}"}}).save(path)
    return path


@pytest.fixture
def data_file(tmp_path, order_data):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(order_data), encoding="utf-8")
    return path


class TestRunRender:
    """Test the render command."""

    def test_renders_file(self, tmp_path, template_file, data_file, capsys):
        output = tmp_path / "out.xlsx"

        exit_code = run_render(str(template_file), str(data_file), str(output), False)

        assert exit_code == 0
        ws = openpyxl.load_workbook(output).active
        assert ws["A1"].value == "John"
        assert ws["B1"].value == "00501"
        assert "Sheet1: 0 table(s)" in capsys.readouterr().out

    def test_auto_parse_numbers(self, tmp_path, template_file, data_file):
        output = tmp_path / "out.xlsx"

        run_render(str(template_file), str(data_file), str(output), True)

        assert openpyxl.load_workbook(output).active["B1"].value == 501

    def test_missing_template(self, tmp_path, data_file, capsys):
        exit_code = run_render(str(tmp_path / "nope.xlsx"), str(data_file), str(tmp_path / "o.xlsx"), False)

        assert exit_code == 1
        assert "Failed to render template" in capsys.readouterr().err

    def test_invalid_data(self, tmp_path, template_file):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")

        assert run_render(str(template_file), str(bad), str(tmp_path / "o.xlsx"), False) == 1


class TestMain:
    """Test argument handling."""

    def test_load_data_from_stdin(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO('{"a": 1}'))
        assert load_data("-") == {"a": 1}

    def test_render_command_exit_code(self, tmp_path, template_file, data_file):
        output = tmp_path / "out.xlsx"

        with pytest.raises(SystemExit) as exc_info:
            main(["render", str(template_file), str(data_file), str(output)])

        assert exc_info.value.code == 0
        assert output.exists()

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "render" in capsys.readouterr().out
