"""Export functionality for schedule generation results."""

import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .scheduler.models import Course, Faculty, ScheduleGenerationResult
from .scheduler.utils import format_slot

FONT_HEADER = Font(bold=True)
ALIGN_HEADER = Alignment(horizontal="center", vertical="center", wrap_text=True)

SCHEDULE_COLUMNS = [
    "Course Code",
    "Course Name",
    "Section",
    "Kind",
    "Faculty",
    "Days",
    "Start Time",
    "End Time",
    "Room",
    "Capacity",
    "Enrollment",
    "Conflicts",
]
CONFLICT_COLUMNS = ["ID", "Type", "Severity", "Description", "Affected Sections"]
UNSCHEDULED_COLUMNS = ["Section", "Course Code", "Kind", "Reason", "Details"]


class BaseExporter(ABC):
    """Base class for exporters."""

    def __init__(
        self,
        courses: list[Course] | None = None,
        faculty: list[Faculty] | None = None,
    ):
        """Initialize exporter.

        Args:
            courses: Courses used to label sections (optional)
            faculty: Faculty used to label sections (optional)
        """
        self.courses_by_id = {c.id: c for c in courses or []}
        self.faculty_by_id = {f.id: f for f in faculty or []}

    @abstractmethod
    def export(self, result: ScheduleGenerationResult, output_path: str | Path) -> None:
        """Export a generation result to file.

        Args:
            result: ScheduleGenerationResult to export
            output_path: Path to output file
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(
        self,
        courses: list[Course] | None = None,
        faculty: list[Faculty] | None = None,
        indent: int = 2,
        ensure_ascii: bool = False,
    ):
        super().__init__(courses, faculty)
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: ScheduleGenerationResult, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    def export(self, result: ScheduleGenerationResult, output_path: str | Path) -> None:
        """Export a generation result to an Excel file.

        Creates workbook with sheets:
        - Schedule: One row per placed section
        - Conflicts: Detected conflicts
        - Summary: Run statistics
        - Unscheduled: Sections that could not be placed

        Args:
            result: ScheduleGenerationResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._export_schedule_sheet(result, writer)
            self._export_conflicts_sheet(result, writer)
            self._export_summary_sheet(result, writer)
            self._export_unscheduled_sheet(result, writer)

            for worksheet in writer.book.worksheets:
                self._style_header(worksheet)

    def _export_schedule_sheet(
        self, result: ScheduleGenerationResult, writer: pd.ExcelWriter
    ) -> None:
        """Export placed sections to Excel sheet."""
        rows = []
        sections = result.schedule.sections if result.schedule else []
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            member = self.faculty_by_id.get(section.faculty_id)
            slot = section.time_slot
            rows.append(
                {
                    "Course Code": course.code if course else section.course_id,
                    "Course Name": course.name if course else "",
                    "Section": section.section_number,
                    "Kind": section.kind.value,
                    "Faculty": member.name if member else section.faculty_id,
                    "Days": ", ".join(day.value for day in slot.days) if slot else "",
                    "Start Time": slot.start_time if slot else "",
                    "End Time": slot.end_time if slot else "",
                    "Room": section.room.name if section.room else "",
                    "Capacity": section.room.capacity if section.room else None,
                    "Enrollment": section.enrollment_cap,
                    "Conflicts": len(section.conflicts),
                }
            )

        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=SCHEDULE_COLUMNS)
        df.to_excel(writer, sheet_name="Schedule", index=False)

    def _export_conflicts_sheet(
        self, result: ScheduleGenerationResult, writer: pd.ExcelWriter
    ) -> None:
        """Export conflicts to Excel sheet."""
        conflicts = result.schedule.conflicts if result.schedule else []
        rows = [
            {
                "ID": conflict.id,
                "Type": conflict.type.value,
                "Severity": conflict.severity.value,
                "Description": conflict.description,
                "Affected Sections": ", ".join(conflict.affected_sections),
            }
            for conflict in conflicts
        ]
        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=CONFLICT_COLUMNS)
        df.to_excel(writer, sheet_name="Conflicts", index=False)

    def _export_summary_sheet(
        self, result: ScheduleGenerationResult, writer: pd.ExcelWriter
    ) -> None:
        """Export run summary to Excel sheet."""
        rows = [
            {"Metric": "Success", "Value": result.success},
            {
                "Metric": "Strategy",
                "Value": result.strategy.value if result.strategy else "",
            },
        ]
        if result.schedule:
            rows.append({"Metric": "Schedule", "Value": result.schedule.name})

        stats = result.statistics
        if stats:
            rows.extend(
                [
                    {"Metric": "Total Sections", "Value": stats.total_sections},
                    {"Metric": "Scheduled Sections", "Value": stats.scheduled_sections},
                    {"Metric": "Unscheduled Sections", "Value": stats.unscheduled_sections},
                    {"Metric": "Scheduling Rate", "Value": f"{stats.scheduling_rate:.1%}"},
                    {"Metric": "Total Conflicts", "Value": stats.total_conflicts},
                    {"Metric": "Errors", "Value": stats.error_conflicts},
                    {"Metric": "Warnings", "Value": stats.warning_conflicts},
                    {"Metric": "Info", "Value": stats.info_conflicts},
                    {
                        "Metric": "Search Time (s)",
                        "Value": round(stats.search_time_seconds, 3),
                    },
                ]
            )

        rows.extend({"Metric": "Error", "Value": error} for error in result.errors)

        df = pd.DataFrame(rows)
        df.to_excel(writer, sheet_name="Summary", index=False)

    def _export_unscheduled_sheet(
        self, result: ScheduleGenerationResult, writer: pd.ExcelWriter
    ) -> None:
        """Export unscheduled sections to Excel sheet."""
        rows = [
            {
                "Section": entry.section_id,
                "Course Code": entry.course_code,
                "Kind": entry.kind.value,
                "Reason": entry.reason.value,
                "Details": entry.details,
            }
            for entry in result.unscheduled_sections
        ]
        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=UNSCHEDULED_COLUMNS)
        df.to_excel(writer, sheet_name="Unscheduled", index=False)

    def _style_header(self, worksheet) -> None:
        """Bold the header row and size columns to their header text."""
        for col_idx, cell in enumerate(worksheet[1], start=1):
            cell.font = FONT_HEADER
            cell.alignment = ALIGN_HEADER
            width = max(12, len(str(cell.value or "")) + 4)
            worksheet.column_dimensions[get_column_letter(col_idx)].width = width
        worksheet.freeze_panes = "A2"


def format_section_row(section, courses_by_id: dict[str, Course]) -> list[str]:
    """Display cells for one section: code, section, kind, slot, room."""
    course = courses_by_id.get(section.course_id)
    return [
        course.code if course else section.course_id,
        str(section.section_number),
        section.kind.value,
        format_slot(section.time_slot),
        section.room.name if section.room else "",
    ]


def get_exporter(
    format_type: str,
    courses: list[Course] | None = None,
    faculty: list[Faculty] | None = None,
) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'excel')
        courses: Courses used to label sections
        faculty: Faculty used to label sections

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type](courses=courses, faculty=faculty)
