"""Tests for schedule exporters."""

import json

import pandas as pd
import pytest
from openpyxl import load_workbook

from course_scheduler.exporters import (
    ExcelExporter,
    JSONExporter,
    format_section_row,
    get_exporter,
)
from course_scheduler.scheduler import CourseScheduler
from course_scheduler.scheduler.models import ScheduleGenerationResult


@pytest.fixture
def scenario(config, make_course, make_faculty, single_slot_catalog, two_rooms):
    """Two courses sharing a faculty member and a single slot: one placed, one not."""
    courses = [make_course(code="LPPS 3010"), make_course(code="LPPS 3020")]
    faculty = [make_faculty(name="Ada Smith")]
    result = CourseScheduler(
        config, courses, faculty, catalog=single_slot_catalog, rooms=two_rooms
    ).generate()
    return result, courses, faculty


class TestJSONExporter:
    """Tests for JSONExporter."""

    def test_export(self, tmp_path, scenario):
        result, courses, faculty = scenario
        output = tmp_path / "out" / "result.json"

        JSONExporter(courses, faculty).export(result, output)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["success"] is True
        assert data["strategy"] == "greedy"
        assert len(data["schedule"]["sections"]) == 1
        assert data["unscheduled_sections"][0]["reason"] == "constraint_violation"


class TestExcelExporter:
    """Tests for ExcelExporter."""

    def test_sheets(self, tmp_path, scenario):
        result, courses, faculty = scenario
        output = tmp_path / "result.xlsx"

        ExcelExporter(courses, faculty).export(result, output)

        assert pd.ExcelFile(output).sheet_names == [
            "Schedule",
            "Conflicts",
            "Summary",
            "Unscheduled",
        ]

    def test_schedule_sheet_uses_lookups(self, tmp_path, scenario):
        result, courses, faculty = scenario
        output = tmp_path / "result.xlsx"

        ExcelExporter(courses, faculty).export(result, output)
        df = pd.read_excel(output, sheet_name="Schedule")

        assert df.iloc[0]["Course Code"] == "LPPS 3010"
        assert df.iloc[0]["Faculty"] == "Ada Smith"
        assert df.iloc[0]["Days"] == "Tuesday, Thursday"
        assert df.iloc[0]["Start Time"] == "09:30"

    def test_unscheduled_and_empty_conflicts(self, tmp_path, scenario):
        result, courses, faculty = scenario
        output = tmp_path / "result.xlsx"

        ExcelExporter(courses, faculty).export(result, output)
        conflicts = pd.read_excel(output, sheet_name="Conflicts")
        unscheduled = pd.read_excel(output, sheet_name="Unscheduled")

        assert conflicts.empty
        assert list(conflicts.columns) == ["ID", "Type", "Severity", "Description", "Affected Sections"]
        assert unscheduled.iloc[0]["Course Code"] == "LPPS 3020"

    def test_header_styled(self, tmp_path, scenario):
        result, courses, faculty = scenario
        output = tmp_path / "result.xlsx"

        ExcelExporter(courses, faculty).export(result, output)
        worksheet = load_workbook(output)["Schedule"]

        assert worksheet["A1"].font.bold
        assert worksheet.freeze_panes == "A2"

    def test_failed_result(self, tmp_path):
        result = ScheduleGenerationResult(success=False, errors=["No valid time slots"])
        output = tmp_path / "failed.xlsx"

        ExcelExporter().export(result, output)
        summary = pd.read_excel(output, sheet_name="Summary")

        assert "No valid time slots" in summary["Value"].astype(str).tolist()
        assert pd.read_excel(output, sheet_name="Schedule").empty


class TestHelpers:
    """Tests for exporter helpers."""

    def test_get_exporter(self):
        assert isinstance(get_exporter("json"), JSONExporter)
        assert isinstance(get_exporter("excel"), ExcelExporter)

    def test_unsupported_format(self):
        with pytest.raises(ValueError, match="Unsupported format: csv"):
            get_exporter("csv")

    def test_format_section_row(self, scenario):
        result, courses, _ = scenario
        section = result.schedule.sections[0]

        row = format_section_row(section, {c.id: c for c in courses})

        assert row == ["LPPS 3010", "1", "lecture", "TR 09:30-10:45", "Room A"]
