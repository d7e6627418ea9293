import io
import json

import pytest

import main


def test_cli_reads_file_and_prints_report(tmp_path, capsys, master_data, job_description):
    input_file = tmp_path / "input.json"
    input_file.write_text(json.dumps({
        "master_resume": master_data,
        "tailored_resume": master_data,
        "job_description": job_description,
    }), encoding="utf-8")

    main.main([str(input_file)])

    report = json.loads(capsys.readouterr().out)
    assert 0 <= report["overall_score"] <= 100
    assert "recommendations" in report


def test_cli_reads_stdin(monkeypatch, capsys):
    payload = json.dumps({"master_resume": {}, "tailored_resume": {}, "job_description": "Python developer"})
    monkeypatch.setattr("sys.stdin", io.StringIO(payload))

    main.main([])

    report = json.loads(capsys.readouterr().out)
    assert report["skills_analysis"]["missing_skills"][0]["name"] == "Python"


def test_cli_rejects_invalid_json(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))

    with pytest.raises(SystemExit) as exc_info:
        main.main([])

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"].startswith("Invalid input")


def test_cli_requires_job_description(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"tailored_resume": {}})))

    with pytest.raises(SystemExit):
        main.main([])

    assert "job_description" in json.loads(capsys.readouterr().out)["error"]


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main.main([str(tmp_path / "nope.json")])

    assert "Could not read input file" in json.loads(capsys.readouterr().out)["error"]
