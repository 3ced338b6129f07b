import json

import pytest
from typer.testing import CliRunner

from rulescout import __version__
from rulescout.linter import RuleCatalog
from rulescout.main import app

pytestmark = pytest.mark.integration

runner = CliRunner()


def test_discover_json_output(temp_project):
    result = runner.invoke(app, ["discover", str(temp_project)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["command"] == "discover"
    assert payload["status"] == "success"
    assert payload["summary"]["file_count"] == 2
    assert payload["trials"] > 0
    assert payload["failing_rules"] == ["no-unused-vars"]

    config = payload["config"]
    assert config["extends"] == "rulescout:recommended"
    # The preset already sets no-unused-vars to error
    assert "no-unused-vars" not in config["rules"]
    assert config["rules"]["quotes"] == [2, "single"]


def test_discover_without_recommended(temp_project):
    result = runner.invoke(app, ["discover", str(temp_project), "--no-extend-recommended"])
    assert result.exit_code == 0
    config = json.loads(result.stdout)["config"]
    assert "extends" not in config
    assert config["rules"]["no-unused-vars"] == 2
    assert list(config["rules"]) == list(RuleCatalog.builtin().rule_ids)


def test_discover_keeps_base_config(temp_project, tmp_path):
    base = tmp_path / "base.json"
    base.write_text(json.dumps({"env": {"py3": True}, "rules": {"semi": 0}}))
    result = runner.invoke(app, ["discover", str(temp_project), "--base-config", str(base)])
    assert result.exit_code == 0
    config = json.loads(result.stdout)["config"]
    assert config["env"] == {"py3": True}
    assert config["rules"]["semi"] == [2, "never"]


def test_discover_parse_error(write_corpus):
    root = write_corpus({"broken.py": "def broken(:\n"})
    result = runner.invoke(app, ["discover", str(root)])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["status"] == "error"
    assert payload["code"] == "PARSE_ERROR"
    assert "broken.py" in payload["message"]


def test_discover_empty_corpus(temp_dir):
    result = runner.invoke(app, ["discover", f"{temp_dir}/nothing/*.py"])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["code"] == "EMPTY_CORPUS"
    assert payload["input"] == f"{temp_dir}/nothing/*.py"


def test_discover_invalid_base_config(temp_project, tmp_path):
    base = tmp_path / "base.json"
    base.write_text(json.dumps({"rules": {"semi": "sometimes"}}))
    result = runner.invoke(app, ["discover", str(temp_project), "-c", str(base)])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "CONFIG_ERROR"


def test_discover_respects_user_config(temp_project, tmp_path):
    local_dir = tmp_path / ".rulescout"
    local_dir.mkdir()
    (local_dir / "config.json").write_text(json.dumps({"discovery": {"extend_recommended": False}}))

    result = runner.invoke(app, ["discover", str(temp_project)])
    assert result.exit_code == 0
    assert "extends" not in json.loads(result.stdout)["config"]


def test_discover_extension_filter(write_corpus):
    root = write_corpus({"a.py": "x = 1\n", "b.pyw": "y = 2\n"})
    result = runner.invoke(app, ["discover", str(root), "--ext", ".pyw"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["summary"]["file_count"] == 1


def test_discover_human_mode(temp_project):
    result = runner.invoke(app, ["--human", "discover", str(temp_project)])
    assert result.exit_code == 0
    assert "Enabled" in result.stdout


def test_rules_json():
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["count"] == len(RuleCatalog.builtin())

    by_id = {row["rule_id"]: row for row in payload["rules"]}
    assert by_id["no-bare-except"]["recommended"] is True
    assert by_id["quotes"]["candidates"][0] == 2
    assert len(by_id["quotes"]["candidates"]) == 5


def test_rules_human_table():
    result = runner.invoke(app, ["-H", "rules"])
    assert result.exit_code == 0
    assert "semi" in result.stdout


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_discover_invalid_user_config(temp_project, tmp_path):
    local_dir = tmp_path / ".rulescout"
    local_dir.mkdir()
    (local_dir / "config.json").write_text(json.dumps({"discovery": {"extensions": 5}}))

    result = runner.invoke(app, ["discover", str(temp_project)])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["code"] == "CONFIG_ERROR"
    assert "Extensions" in payload["message"]
