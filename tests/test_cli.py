"""Tests for the command line interface."""

import json

import pandas as pd
import pytest
from rich.console import Console
from typer.testing import CliRunner

from course_scheduler import cli
from course_scheduler.loaders import load_input, write_input
from course_scheduler.scheduler.models import Schedule, Semester

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep table cells on one line so output assertions are stable."""
    monkeypatch.setattr(cli, "console", Console(width=200))


@pytest.fixture
def input_file(tmp_path, config, make_course, make_faculty):
    path = tmp_path / "input.json"
    courses = [make_course(code="LPPS 3010"), make_course(code="LPPS 3020", faculty_id="f2")]
    faculty = [make_faculty("f1"), make_faculty("f2")]
    write_input(config, courses, faculty, path)
    return path


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_json_output(self, tmp_path, input_file):
        output = tmp_path / "result.json"

        result = runner.invoke(cli.app, ["generate", str(input_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Summary" in result.output
        assert "backtracking" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["success"] is True
        assert len(data["schedule"]["sections"]) == 2

    def test_excel_output_gets_suffix(self, tmp_path, input_file):
        output = tmp_path / "result"

        result = runner.invoke(
            cli.app, ["generate", str(input_file), "-o", str(output), "-f", "excel"]
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "result.xlsx").exists()

    def test_save_dir(self, tmp_path, input_file):
        save_dir = tmp_path / "versions"

        result = runner.invoke(cli.app, ["generate", str(input_file), "--save-dir", str(save_dir)])

        assert result.exit_code == 0, result.output
        assert "Saved Schedule" in result.output
        assert len(list(save_dir.glob("*.json"))) == 1

    def test_verbose_lists_sections(self, input_file):
        result = runner.invoke(cli.app, ["generate", str(input_file), "-v", "--time-limit", "5"])

        assert result.exit_code == 0, result.output
        assert "Sections" in result.output
        assert "LPPS 3020" in result.output

    def test_balance_workload(self, tmp_path, config, make_course, make_faculty):
        path = tmp_path / "input.json"
        courses = [make_course(), make_course(candidate_faculty_ids=["f2"])]
        write_input(config, courses, [make_faculty("f1"), make_faculty("f2")], path)

        result = runner.invoke(cli.app, ["generate", str(path), "--balance-workload"])

        assert result.exit_code == 0, result.output

    def test_invalid_input(self, tmp_path, config, make_course, make_faculty):
        path = tmp_path / "input.json"
        write_input(config, [make_course(number_of_sections=0)], [make_faculty()], path)

        result = runner.invoke(cli.app, ["generate", str(path)])

        assert result.exit_code == 1
        assert "number of sections" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(cli.app, ["generate", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({"courses": []}), encoding="utf-8")

        result = runner.invoke(cli.app, ["generate", str(path)])

        assert result.exit_code == 1
        assert "Missing 'config' section" in result.output


    def test_invalid_json(self, tmp_path):
        path = tmp_path / "input.json"
        path.write_text('{"config": ', encoding="utf-8")

        result = runner.invoke(cli.app, ["generate", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def _write_schedule(self, path, sections):
        schedule = Schedule(
            id="schedule-1",
            name="Checked Schedule",
            semester=Semester.FALL,
            year=2025,
            sections=sections,
        )
        path.write_text(json.dumps(schedule.to_dict()), encoding="utf-8")
        return path

    def test_clean_schedule(self, tmp_path, config, make_course, make_faculty, place, tr_morning, room_a):
        course = make_course()
        input_path = tmp_path / "input.json"
        write_input(config, [course], [make_faculty()], input_path)
        schedule_path = self._write_schedule(
            tmp_path / "schedule.json", [place("s1", course, tr_morning, room_a)]
        )

        result = runner.invoke(cli.app, ["check", str(schedule_path), str(input_path)])

        assert result.exit_code == 0, result.output
        assert "No conflicts" in result.output

    def test_double_booking_fails(
        self, tmp_path, config, make_course, make_faculty, place, tr_morning, room_a
    ):
        first, second = make_course(), make_course()
        input_path = tmp_path / "input.json"
        write_input(config, [first, second], [make_faculty()], input_path)
        schedule_path = self._write_schedule(
            tmp_path / "schedule.json",
            [place("s1", first, tr_morning, room_a), place("s2", second, tr_morning, room_a)],
        )

        result = runner.invoke(cli.app, ["check", str(schedule_path), str(input_path)])

        assert result.exit_code == 1
        assert "Room Double Booked" in result.output
        assert "2 error(s)" in result.output


class TestCatalogCommands:
    """Tests for the slots and rooms commands."""

    def test_slots(self):
        result = runner.invoke(cli.app, ["slots"])

        assert result.exit_code == 0
        assert "mw-1200-1250" in result.output
        assert "disc-" not in result.output

    def test_discussion_slots(self):
        result = runner.invoke(cli.app, ["slots", "--discussions"])

        assert result.exit_code == 0
        assert "disc-m-0930-50" in result.output

    def test_rooms(self):
        result = runner.invoke(cli.app, ["rooms"])

        assert result.exit_code == 0
        assert "rouss-403" in result.output

    def test_rooms_bad_config(self, tmp_path):
        (tmp_path / "rooms.csv").write_text(
            "id,name,type,capacity\na,A,auditorium,10\n", encoding="utf-8"
        )

        result = runner.invoke(cli.app, ["rooms", "--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "auditorium" in result.output


class TestImportTablesCommand:
    """Tests for the import-tables command."""

    def test_import(self, tmp_path):
        faculty_path = tmp_path / "faculty.csv"
        courses_path = tmp_path / "courses.csv"
        pd.DataFrame(
            [{"facultyName": "Ada Smith", "cannotTeachDays": "Friday"}]
        ).to_csv(faculty_path, index=False)
        pd.DataFrame(
            [{"code": "LPPS 3010", "type": "Elective", "faculty": "Ada", "enrollmentCap": 25}]
        ).to_csv(courses_path, index=False)
        output = tmp_path / "input"

        result = runner.invoke(
            cli.app,
            [
                "import-tables",
                str(courses_path),
                str(faculty_path),
                "-o",
                str(output),
                "--semester",
                "Spring",
                "--year",
                "2026",
            ],
        )

        assert result.exit_code == 0, result.output
        config, courses, faculty = load_input(tmp_path / "input.json")
        assert config.semester == Semester.SPRING
        assert config.year == 2026
        assert courses[0].faculty_id == faculty[0].id

    def test_missing_columns(self, tmp_path):
        faculty_path = tmp_path / "faculty.csv"
        courses_path = tmp_path / "courses.csv"
        pd.DataFrame([{"facultyName": "Ada"}]).to_csv(faculty_path, index=False)
        pd.DataFrame([{"code": "LPPS 3010"}]).to_csv(courses_path, index=False)

        result = runner.invoke(
            cli.app,
            ["import-tables", str(courses_path), str(faculty_path), "-o", str(tmp_path / "x.json")],
        )

        assert result.exit_code == 1
