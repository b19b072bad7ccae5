# tests/test_app.py

"""Tests for the command line entry point."""

import json

import pytest
import yaml

from scholarmatch import app


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(app, "configure_logging", lambda verbose=False: None)


@pytest.fixture
def data_files(tmp_path):
    profile = tmp_path / "profile.yaml"
    profile.write_text(yaml.safe_dump({
        "name": "Riley",
        "academic": {"gpa": 3.7},
        "demographics": {"gender": "Female", "state": "OR"},
    }), encoding="utf-8")

    scholarships = tmp_path / "scholarships.yaml"
    scholarships.write_text(yaml.safe_dump({"scholarships": [
        {"id": "open", "name": "Open Award", "awardAmount": 1000},
        {
            "id": "gpa",
            "name": "Honors Award",
            "awardAmount": 5000,
            "eligibilityCriteria": {"academic": {"minGPA": 3.9}},
        },
    ]}), encoding="utf-8")
    return profile, scholarships


class TestScoreCommand:

    def test_score_and_export(self, tmp_path, data_files, capsys):
        profile, scholarships = data_files
        out = tmp_path / "ranked.json"

        code = app.main(["score", str(profile), str(scholarships), "--export", str(out)])

        assert code == 0
        assert "Scholarship Matches" in capsys.readouterr().out
        data = json.loads(out.read_text(encoding="utf-8"))
        assert {m["scholarship_id"] for m in data["matches"]} == {"open", "gpa"}

    def test_missing_profile_exit_code(self, tmp_path, data_files):
        _, scholarships = data_files
        code = app.main(["score", str(tmp_path / "nobody.yaml"), str(scholarships)])
        assert code == 2

    def test_broken_yaml_exit_code(self, tmp_path, data_files):
        _, scholarships = data_files
        broken = tmp_path / "broken.yaml"
        broken.write_text("academic: {gpa: [3.5\n", encoding="utf-8")
        assert app.main(["score", str(broken), str(scholarships)]) == 2

    def test_unsupported_export_exit_code(self, tmp_path, data_files):
        profile, scholarships = data_files
        code = app.main(["score", str(profile), str(scholarships), "--export", str(tmp_path / "x.txt")])
        assert code == 2


class TestAnalyzeCommand:

    def test_analyze(self, data_files, capsys):
        profile, scholarships = data_files
        code = app.main(["analyze", str(profile), str(scholarships), "--id", "gpa"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Honors Award" in out
        assert "GPA 3.70 below minimum 3.90" in out

    def test_unknown_id(self, data_files):
        profile, scholarships = data_files
        assert app.main(["analyze", str(profile), str(scholarships), "--id", "nope"]) == 1
