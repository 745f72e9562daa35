"""Tests for input validation."""

from dataclasses import replace

from course_scheduler.validators import (
    validate_course,
    validate_faculty_references,
    validate_generation_input,
)


class TestValidateCourse:
    """Tests for validate_course."""

    def test_valid_course(self, make_course):
        assert validate_course(make_course()) == []

    def test_zero_sections(self, make_course):
        errors = validate_course(make_course(code="LPPS 1010", number_of_sections=0))
        assert len(errors) == 1
        assert errors[0].startswith("Course LPPS 1010: number of sections")

    def test_negative_values(self, make_course):
        course = make_course(enrollment_cap=-1, number_of_discussions=-2)
        errors = validate_course(course)
        assert any("negative enrollment cap" in e for e in errors)
        assert any("negative number of discussions" in e for e in errors)

    def test_meeting_pattern(self, make_course):
        errors = validate_course(make_course(duration=0, sessions_per_week=6))
        assert len(errors) == 2

    def test_discussion_duration_only_checked_with_discussions(self, make_course):
        assert validate_course(make_course(discussion_duration=0)) == []
        assert len(validate_course(make_course(discussion_duration=0, number_of_discussions=1))) == 1


class TestValidateFacultyReferences:
    """Tests for validate_faculty_references."""

    def test_unknown_faculty(self, make_course, make_faculty):
        warnings = validate_faculty_references(
            [make_course(code="LPPS 2010", faculty_id="ghost")], [make_faculty()]
        )
        assert warnings == ["Course LPPS 2010 references unknown faculty 'ghost'"]

    def test_unknown_partner(self, make_faculty):
        warnings = validate_faculty_references([], [make_faculty("f1", name="Ada", partner="f9")])
        assert warnings == ["Faculty Ada lists unknown parenting partner 'f9'"]

    def test_one_sided_partnership(self, make_faculty):
        faculty = [make_faculty("f1", name="Ada", partner="f2"), make_faculty("f2", name="Bo")]
        warnings = validate_faculty_references([], faculty)
        assert warnings == [
            "Parenting partnership between Ada and Bo is only declared on one side"
        ]

    def test_mutual_partnership(self, make_faculty):
        faculty = [make_faculty("f1", partner="f2"), make_faculty("f2", partner="f1")]
        assert validate_faculty_references([], faculty) == []


class TestValidateGenerationInput:
    """Tests for validate_generation_input."""

    def test_valid(self, config, make_course, make_faculty):
        errors, warnings = validate_generation_input(config, [make_course()], [make_faculty()])
        assert errors == []
        assert warnings == []

    def test_missing_config_and_courses(self, make_faculty):
        errors, _ = validate_generation_input(None, [], [make_faculty()])
        assert errors == ["Missing scheduler configuration", "No courses to schedule"]

    def test_time_limit(self, config, make_course, make_faculty):
        errors, _ = validate_generation_input(
            replace(config, backtrack_time_limit=0), [make_course()], [make_faculty()]
        )
        assert len(errors) == 1
        assert "time limit" in errors[0]

    def test_duplicate_ids(self, config, make_course, make_faculty):
        courses = [make_course(id="c1"), make_course(id="c1")]
        errors, _ = validate_generation_input(config, courses, [make_faculty(), make_faculty()])
        assert "Duplicate course id: c1" in errors
        assert "Duplicate faculty id: f1" in errors

    def test_reference_problems_are_warnings(self, config, make_course, make_faculty):
        errors, warnings = validate_generation_input(
            config, [make_course(faculty_id="ghost")], [make_faculty()]
        )
        assert errors == []
        assert len(warnings) == 1
