"""
Marks rules for a subject configured on a class.

THEORY    — no practical component
PRACTICAL — no theory component
BOTH      — theory + practical must add up to total when both are given
"""

from dataclasses import dataclass
from typing import Optional

from database.models import SubjectType


class MarksRuleError(ValueError):
    pass


# Components a subject type may not carry
FORBIDDEN_COMPONENTS = {
    SubjectType.THEORY: ("practical_marks", "practical_passing_marks"),
    SubjectType.PRACTICAL: ("theory_marks", "theory_passing_marks"),
}


@dataclass
class SubjectMarks:
    total_marks: int
    passing_marks: int
    theory_marks: Optional[int] = None
    practical_marks: Optional[int] = None
    theory_passing_marks: Optional[int] = None
    practical_passing_marks: Optional[int] = None


def check_marks_distribution(subject_type: SubjectType, marks: SubjectMarks) -> None:
    """Raise MarksRuleError on the first rule the marks break."""
    if marks.total_marks is None or marks.total_marks < 1:
        raise MarksRuleError("Total marks must be at least 1")
    if marks.passing_marks is None or marks.passing_marks < 1:
        raise MarksRuleError("Passing marks must be at least 1")
    if marks.passing_marks > marks.total_marks:
        raise MarksRuleError("Passing marks cannot exceed total marks")

    if subject_type == SubjectType.THEORY:
        if marks.practical_marks is not None:
            raise MarksRuleError("Theory subjects cannot have practical marks")
    elif subject_type == SubjectType.PRACTICAL:
        if marks.theory_marks is not None:
            raise MarksRuleError("Practical subjects cannot have theory marks")
    elif subject_type == SubjectType.BOTH:
        if marks.theory_marks is not None and marks.practical_marks is not None:
            if marks.theory_marks + marks.practical_marks != marks.total_marks:
                raise MarksRuleError("Theory marks + Practical marks must equal total marks")
    else:
        raise MarksRuleError(f"Invalid subject type: {subject_type}")

    if marks.theory_marks is not None and marks.theory_passing_marks is not None:
        if marks.theory_passing_marks > marks.theory_marks:
            raise MarksRuleError("Theory passing marks cannot exceed theory marks")
    if marks.practical_marks is not None and marks.practical_passing_marks is not None:
        if marks.practical_passing_marks > marks.practical_marks:
            raise MarksRuleError("Practical passing marks cannot exceed practical marks")
