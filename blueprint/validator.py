"""
Step 3 — Paper Validator

Checks whether an authored question paper satisfies a blueprint.
Blueprint-driven: each distribution is checked against the paper's questions
for its chapter and type; paper content no distribution mentions is ignored.

Issue order follows the blueprint's stored distribution order.
Count mismatches are errors; marks drift beyond MARKS_TOLERANCE is a warning.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from database import crud, models
from database.schemas import BlueprintValidationResult, ValidationIssue, ValidationSeverity
from blueprint.errors import NotFoundError

log = logging.getLogger("blueprint.engine")

MARKS_TOLERANCE = 0.01


def group_questions(questions: Iterable[models.Question]) -> Dict[str, Dict[str, List[models.Question]]]:
    """chapter_name → question_type → [Question]"""
    grouped: Dict[str, Dict[str, List[models.Question]]] = defaultdict(lambda: defaultdict(list))
    for q in questions:
        grouped[q.chapter_name][q.question_type].append(q)
    return grouped


def _format_marks(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def reconcile(
    distributions: Iterable[models.ChapterDistribution],
    questions: Iterable[models.Question],
) -> List[ValidationIssue]:
    """Compare distributions with questions; return issues in distribution order."""
    grouped = group_questions(questions)
    issues: List[ValidationIssue] = []

    for dist in distributions:
        chapter = dist.chapter_name
        qtype = dist.question_type

        if chapter not in grouped:
            issues.append(ValidationIssue(
                chapter_name=chapter,
                question_type=qtype,
                message="Chapter not found in question paper",
                severity=ValidationSeverity.ERROR,
            ))
            continue

        by_type = grouped[chapter]
        if qtype not in by_type:
            issues.append(ValidationIssue(
                chapter_name=chapter,
                question_type=qtype,
                message=f"No questions of type {models.QuestionType(qtype).value} for chapter {chapter}",
                severity=ValidationSeverity.ERROR,
            ))
            continue

        found = by_type[qtype]
        if len(found) != dist.question_count:
            issues.append(ValidationIssue(
                chapter_name=chapter,
                question_type=qtype,
                message=f"Expected {dist.question_count} questions but found {len(found)}",
                severity=ValidationSeverity.ERROR,
            ))

        actual_marks = sum(q.marks for q in found)
        # round() keeps float noise (e.g. 10.01 - 10) from flagging an exact 0.01 drift
        if round(abs(actual_marks - dist.total_marks), 9) > MARKS_TOLERANCE:
            issues.append(ValidationIssue(
                chapter_name=chapter,
                question_type=qtype,
                message=(
                    f"Expected {_format_marks(dist.total_marks)} total marks "
                    f"but found {_format_marks(actual_marks)}"
                ),
                severity=ValidationSeverity.WARNING,
            ))

    return issues


def validate_blueprint(db: Session, blueprint_id: int, question_paper_id: int) -> BlueprintValidationResult:
    """
    Validate a question paper against a blueprint.

    A failed validation is a result (is_valid=False), not an exception.

    Raises:
        NotFoundError: blueprint or question paper does not exist
    """
    blueprint = crud.get_blueprint(db, blueprint_id)
    if blueprint is None:
        raise NotFoundError("Blueprint", blueprint_id)

    paper = crud.get_question_paper(db, question_paper_id)
    if paper is None:
        raise NotFoundError("Question paper", question_paper_id)

    questions = crud.get_questions_by_paper(db, question_paper_id)
    issues = reconcile(blueprint.chapter_distributions, questions)

    errors = sum(1 for i in issues if i.severity is ValidationSeverity.ERROR)
    log.info(
        f"[VALIDATE] blueprint={blueprint_id} paper={question_paper_id}: "
        f"{len(questions)} questions, {errors} errors, {len(issues) - errors} warnings"
    )
    return BlueprintValidationResult(is_valid=not issues, issues=issues)
