"""
Step 2 — Blueprint Builder

Turns chapter distributions (chapter → question-type entries) into a
persisted ExamBlueprint with one ChapterDistribution row per entry.

Updates never diff: every existing distribution row is deleted and the new
set inserted, inside the same transaction as the approval check.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from database import crud, models
from database.schemas import (
    ChapterDistributionCreate,
    BlueprintResponse,
    ChapterDistributionView,
    SectionDistributionView,
)
from blueprint.approval import ensure_mutable, state_of
from blueprint.errors import NotFoundError
from blueprint.labels import section_name
from blueprint.weightage import compute_weightage

log = logging.getLogger("blueprint.engine")


def _build_distributions(
    chapters: List[ChapterDistributionCreate],
    paper_total_marks,
) -> List[models.ChapterDistribution]:
    """Flatten chapters into distribution rows, keeping request order."""
    rows: List[models.ChapterDistribution] = []
    for chapter in chapters:
        for section in chapter.section_distributions:
            rows.append(models.ChapterDistribution(
                position=len(rows),
                chapter_name=chapter.chapter_name,
                question_type=section.question_type,
                question_count=section.question_count,
                total_marks=section.total_marks,
                weightage_percentage=compute_weightage(section.total_marks, paper_total_marks),
            ))
    return rows


def _paper_total(structure: Optional[models.QuestionPaperStructure]):
    return structure.total_marks if structure is not None else None


def create_blueprint(
    db: Session,
    exam_configuration_id: int,
    name: str,
    description: Optional[str],
    chapter_distributions: List[ChapterDistributionCreate],
) -> models.ExamBlueprint:
    """
    Create a DRAFT blueprint bound to the exam configuration's paper structure.

    Raises:
        NotFoundError: exam configuration does not exist
        InvalidPaperTotalError: the paper structure has no positive total marks
    """
    exam_config = crud.get_exam_configuration(db, exam_configuration_id)
    if exam_config is None:
        raise NotFoundError("Exam configuration", exam_configuration_id)

    structure = exam_config.paper_structure
    try:
        rows = _build_distributions(chapter_distributions, _paper_total(structure))

        blueprint = models.ExamBlueprint(
            name=name,
            description=description,
            exam_configuration_id=exam_config.id,
            paper_structure_id=structure.id if structure is not None else None,
            is_approved=False,
        )
        blueprint.chapter_distributions = rows
        db.add(blueprint)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(blueprint)
    log.info(f"[CREATE] blueprint={blueprint.id} '{name}' with {len(rows)} distributions")
    return blueprint


def update_blueprint(
    db: Session,
    blueprint_id: int,
    name: str,
    description: Optional[str],
    chapter_distributions: List[ChapterDistributionCreate],
) -> models.ExamBlueprint:
    """
    Replace a DRAFT blueprint's name, description and every distribution.

    Raises:
        NotFoundError: blueprint does not exist
        InvalidStateError: blueprint is approved (nothing is changed)
        InvalidPaperTotalError: the bound paper structure has no positive total
    """
    try:
        blueprint = crud.get_blueprint(db, blueprint_id, for_update=True)
        if blueprint is None:
            raise NotFoundError("Blueprint", blueprint_id)
        ensure_mutable(blueprint, "update")

        rows = _build_distributions(chapter_distributions, _paper_total(blueprint.paper_structure))

        blueprint.name = name
        blueprint.description = description

        removed = len(blueprint.chapter_distributions)
        blueprint.chapter_distributions.clear()
        db.flush()

        blueprint.chapter_distributions.extend(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(blueprint)
    log.info(f"[UPDATE] blueprint={blueprint_id}: replaced {removed} distributions with {len(rows)}")
    return blueprint


def delete_blueprint(db: Session, blueprint_id: int) -> None:
    """
    Delete a DRAFT blueprint and its distributions.

    Raises:
        NotFoundError: blueprint does not exist
        InvalidStateError: blueprint is approved
    """
    try:
        blueprint = crud.get_blueprint(db, blueprint_id, for_update=True)
        if blueprint is None:
            raise NotFoundError("Blueprint", blueprint_id)
        ensure_mutable(blueprint, "delete")

        db.delete(blueprint)
        db.commit()
    except Exception:
        db.rollback()
        raise

    log.info(f"[DELETE] blueprint={blueprint_id}")


def get_blueprint(db: Session, blueprint_id: int) -> models.ExamBlueprint:
    blueprint = crud.get_blueprint(db, blueprint_id)
    if blueprint is None:
        raise NotFoundError("Blueprint", blueprint_id)
    return blueprint


def list_blueprints_by_exam(db: Session, exam_id: int) -> List[models.ExamBlueprint]:
    return crud.get_blueprints_by_exam_id(db, exam_id)


def to_blueprint_response(blueprint: models.ExamBlueprint) -> BlueprintResponse:
    """
    Read model: distributions grouped per chapter in the order chapters
    first appear, with per-question marks and summed chapter weightage.
    """
    chapters: dict = {}
    for dist in blueprint.chapter_distributions:
        chapters.setdefault(dist.chapter_name, []).append(dist)

    chapter_views = []
    for chapter_name, distributions in chapters.items():
        sections = [
            SectionDistributionView(
                section_name=section_name(d.question_type),
                question_type=d.question_type,
                question_count=d.question_count,
                marks_per_question=d.total_marks / d.question_count if d.question_count else 0.0,
                total_marks=d.total_marks,
                weightage_percentage=d.weightage_percentage,
            )
            for d in distributions
        ]
        chapter_views.append(ChapterDistributionView(
            chapter_name=chapter_name,
            section_distributions=sections,
            total_marks=sum(d.total_marks for d in distributions),
            weightage_percentage=sum(d.weightage_percentage for d in distributions),
        ))

    exam_config = blueprint.exam_configuration
    return BlueprintResponse(
        id=blueprint.id,
        exam_id=exam_config.exam_id if exam_config is not None else None,
        exam_configuration_id=blueprint.exam_configuration_id,
        name=blueprint.name,
        description=blueprint.description,
        state=state_of(blueprint).value,
        is_approved=blueprint.is_approved,
        approved_by=blueprint.approved_by,
        approval_date=blueprint.approval_date,
        paper_total_marks=_paper_total(blueprint.paper_structure),
        chapter_distributions=chapter_views,
    )
