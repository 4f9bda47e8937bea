# tests/test_cli.py
"""
Tests for the command line entry point (run_expression_search.py).

Tests:
- JSON output to a file and to stdout
- Text report
- Config file and flag overrides
- Friendly errors and exit codes
"""

import argparse
import json

import pytest

from component_6_search_config import SearchConfig
from component_7_expression_search import ExpressionSearchService
from run_expression_search import (
    build_parser,
    generate_report_text,
    main,
    resolve_config,
)


@pytest.fixture(autouse=True)
def isolated(fresh_cache_manager, restore_logging):
    """Every CLI run gets a fresh cache and leaves logging untouched"""
    yield


class TestOutput:
    """Tests for JSON and report output"""

    def test_json_file(self, tmp_path):
        output = tmp_path / "expressions.json"
        assert main(["1", "--output", str(output)]) == 0

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["max_operations"] == 1
        assert len(data["levels"]) == 2
        assert data["levels"][0] == {"69": "69", "-69": "-69"}
        assert data["levels"][1]["0"] == "(69 - 69)"
        assert data["levels"][1]["3"] == "(-6 + 9)"

    def test_json_stdout(self, capsys):
        assert main(["0"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"max_operations": 0, "levels": [{"69": "69", "-69": "-69"}]}

    def test_report(self, tmp_path):
        output = tmp_path / "expressions.json"
        report = tmp_path / "report.txt"
        assert main(["1", "--no-power", "--output", str(output), "--report", str(report)]) == 0

        text = report.read_text(encoding="utf-8")
        assert "SIXNINE EXPRESSION SEARCH REPORT" in text
        assert "Max Operations: 1" in text
        assert "Operators: + - * /" in text

    def test_no_power_flag(self, tmp_path):
        output = tmp_path / "expressions.json"
        assert main(["1", "--no-power", "--output", str(output)]) == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert "10077696" not in data["levels"][1]

    def test_parallel_flag_gives_same_result(self, tmp_path):
        serial = tmp_path / "serial.json"
        parallel = tmp_path / "parallel.json"
        assert main(["2", "--no-power", "--output", str(serial)]) == 0
        assert main(
            ["2", "--no-power", "--parallel", "--workers", "2", "--output", str(parallel)]
        ) == 0
        assert json.loads(serial.read_text(encoding="utf-8")) == json.loads(
            parallel.read_text(encoding="utf-8")
        )


class TestConfigResolution:
    """Tests for resolve_config"""

    def test_flags_override_config_file(self, tmp_path):
        path = tmp_path / "search.yml"
        path.write_text(
            "search:\n  max_operations: 5\n  include_power: true\n  max_workers: 2\n",
            encoding="utf-8",
        )
        args = build_parser().parse_args(
            ["2", "--config", str(path), "--no-power", "--parallel", "--workers", "6"]
        )
        config = resolve_config(args)
        assert config.max_operations == 2
        assert config.include_power is False
        assert config.enable_parallel_execution is True
        assert config.max_workers == 6

    def test_config_file_values_kept(self, tmp_path):
        path = tmp_path / "search.yml"
        path.write_text("search:\n  max_workers: 3\n", encoding="utf-8")
        config = resolve_config(build_parser().parse_args(["1", "--config", str(path)]))
        assert config.max_workers == 3
        assert config.include_power is True

    def test_parser_defaults(self):
        args = build_parser().parse_args(["3"])
        assert isinstance(args, argparse.Namespace)
        assert args.max_operations == 3
        assert args.workers is None
        assert args.log_level == "WARNING"


class TestErrors:
    """Tests for error handling and exit codes"""

    def test_negative_budget(self, capsys):
        assert main(["-1"]) == 1
        err = capsys.readouterr().err
        assert "[ERROR] Invalid configuration" in err

    def test_invalid_workers(self, capsys):
        assert main(["1", "--workers", "0"]) == 1
        assert "max_workers" in capsys.readouterr().err

    def test_malformed_config(self, tmp_path, capsys):
        path = tmp_path / "broken.yml"
        path.write_text("search: [unclosed\n", encoding="utf-8")
        assert main(["1", "--config", str(path)]) == 1
        assert "broken.yml" in capsys.readouterr().err

    def test_missing_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


class TestReportText:
    """Tests for generate_report_text"""

    def test_one_row_per_level(self):
        result = ExpressionSearchService(SearchConfig(include_power=False)).search(2)
        lines = generate_report_text(result).splitlines()
        header = next(i for i, line in enumerate(lines) if line.lstrip().startswith("Level"))
        rows = lines[header + 1 : header + 4]
        assert [int(row.split()[0]) for row in rows] == [0, 1, 2]
