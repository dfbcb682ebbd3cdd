import json

import pytest

from shapecheck.cli import EXIT_ERROR, EXIT_INVALID, EXIT_VALID, load_document, main
from shapecheck.config import Settings, get_settings

SCHEMA = {"type": "object", "properties": {"port": {"type": "integer"}}, "required": ["port"]}


@pytest.fixture
def files(tmp_path):
    def _write(name: str, content) -> str:
        path = tmp_path / name
        path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
        return str(path)
    return _write


def test_valid_document(files, capsys):
    code = main([files("schema.json", SCHEMA), files("data.json", {"port": 80})])
    assert code == EXIT_VALID
    assert capsys.readouterr().out.strip() == "valid"


def test_invalid_document_lists_findings(files, capsys):
    code = main([files("schema.json", SCHEMA), files("data.json", {"port": "80"})])
    assert code == EXIT_INVALID
    assert "/port: Invalid type: string [INVALID_TYPE]" in capsys.readouterr().out


def test_coerce_prints_value(files, capsys):
    code = main([files("schema.json", SCHEMA), files("data.json", {"port": "80"}), "--coerce"])
    assert code == EXIT_VALID
    assert json.loads(capsys.readouterr().out) == {"port": 80}


def test_yaml_input_and_json_report(files, capsys):
    data = files("data.yaml", "port: eighty\n")
    code = main([files("schema.json", SCHEMA), data, "--json"])
    assert code == EXIT_INVALID
    report = json.loads(capsys.readouterr().out)
    assert report["valid"] is False
    assert report["errors"][0]["data_path"] == "/port"


def test_fail_fast_reports_one_finding(files, capsys):
    schema = {"properties": {"a": {"type": "string"}, "b": {"type": "string"}}}
    code = main([files("schema.json", schema), files("data.json", {"a": 1, "b": 2}), "--fail-fast", "--json"])
    assert code == EXIT_INVALID
    assert json.loads(capsys.readouterr().out)["error_count"] == 1


def test_option_flags(files, capsys):
    schema = {"properties": {"a": {"type": "string"}}, "required": ["a"]}
    args = [files("schema.json", schema), files("data.json", {}), "--coerce"]
    assert main(args) == EXIT_VALID
    assert main([*args, "--no-implicit-default"]) == EXIT_INVALID


def test_schema_fault_exit_code(files, capsys):
    code = main([files("schema.json", {"type": "nope"}), files("data.json", 1)])
    assert code == EXIT_ERROR
    assert "/type" in capsys.readouterr().err


def test_unreadable_input(files, tmp_path, capsys):
    code = main([files("schema.json", SCHEMA), str(tmp_path / "missing.json")])
    assert code == EXIT_ERROR
    assert main([files("schema.json", SCHEMA), files("bad.json", "{not json")]) == EXIT_ERROR


def test_load_document_picks_parser_by_suffix(tmp_path):
    path = tmp_path / "doc.yml"
    path.write_text("a: [1, 2]\n", encoding="utf-8")
    assert load_document(path) == {"a": [1, 2]}


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SHAPECHECK_NO_IMPLICIT_DEFAULT", "true")
    monkeypatch.setenv("SHAPECHECK_LOG_LEVEL", "DEBUG")
    settings = Settings()
    assert settings.LOG_LEVEL == "DEBUG"
    options = settings.validation_options(set_missing_to_default=True)
    assert options.no_implicit_default
    assert options.set_missing_to_default
    assert not options.enable_ignore_null_properties


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
