"""Display labels for enum values."""

from database.models import QuestionType, SubjectType

QUESTION_TYPE_LABELS: dict = {
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice Questions",
    QuestionType.SHORT_ANSWER:    "Short Answer Questions",
    QuestionType.LONG_ANSWER:     "Long Answer Questions",
    QuestionType.TRUE_FALSE:      "True/False Questions",
    QuestionType.FILL_IN_BLANKS:  "Fill in the Blanks",
    QuestionType.PRACTICAL:       "Practical Questions",
}

SUBJECT_TYPE_LABELS: dict = {
    SubjectType.THEORY:    "Theory Only",
    SubjectType.PRACTICAL: "Practical Only",
    SubjectType.BOTH:      "Theory and Practical",
}


def section_name(question_type) -> str:
    return QUESTION_TYPE_LABELS.get(question_type, "Unknown")


def subject_type_label(subject_type) -> str:
    return SUBJECT_TYPE_LABELS.get(subject_type, "Unknown")
