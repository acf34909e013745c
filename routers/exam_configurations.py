"""
Exam configuration and question paper API endpoints
Reference data the blueprint engine reads: paper totals and authored questions
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from database import schemas, crud, models
from database.database import get_db

router = APIRouter(tags=["exam-configurations"])


def _exam_configuration_response(config: models.ExamConfiguration) -> schemas.ExamConfigurationResponse:
    structure = config.paper_structure
    return schemas.ExamConfigurationResponse(
        id=config.id,
        exam_id=config.exam_id,
        grade=config.grade,
        subject=config.subject,
        exam_type=config.exam_type,
        academic_year=config.academic_year,
        paper_structure_id=config.paper_structure_id,
        paper_total_marks=structure.total_marks if structure else None,
    )


@router.post(
    "/exam-configurations/",
    response_model=schemas.ExamConfigurationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_exam_configuration(configuration: schemas.ExamConfigurationCreate, db: Session = Depends(get_db)):
    """
    Create an exam configuration with its question paper structure
    """
    return _exam_configuration_response(crud.create_exam_configuration(db, configuration))


@router.get("/exam-configurations/{exam_configuration_id}", response_model=schemas.ExamConfigurationResponse)
def get_exam_configuration(exam_configuration_id: int, db: Session = Depends(get_db)):
    config = crud.get_exam_configuration(db, exam_configuration_id)
    if not config:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exam configuration with ID {exam_configuration_id} not found"
        )
    return _exam_configuration_response(config)


@router.post("/question-papers/", response_model=schemas.QuestionPaperResponse, status_code=status.HTTP_201_CREATED)
def create_question_paper(paper: schemas.QuestionPaperCreate, db: Session = Depends(get_db)):
    """
    Register an authored question paper, optionally with its questions
    """
    if paper.exam_configuration_id is not None and not crud.get_exam_configuration(db, paper.exam_configuration_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exam configuration with ID {paper.exam_configuration_id} not found"
        )
    db_paper = crud.create_question_paper(db, paper)
    return schemas.QuestionPaperResponse(
        id=db_paper.id,
        title=db_paper.title,
        exam_configuration_id=db_paper.exam_configuration_id,
        question_count=len(db_paper.questions),
    )


@router.post(
    "/question-papers/{paper_id}/questions",
    response_model=List[schemas.QuestionResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_questions(paper_id: int, questions: List[schemas.QuestionCreate], db: Session = Depends(get_db)):
    if not crud.get_question_paper(db, paper_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Question paper with ID {paper_id} not found"
        )
    return crud.add_questions(db, paper_id, questions)


@router.get("/question-papers/{paper_id}/questions", response_model=List[schemas.QuestionResponse])
def list_questions(paper_id: int, db: Session = Depends(get_db)):
    if not crud.get_question_paper(db, paper_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Question paper with ID {paper_id} not found"
        )
    return crud.get_questions_by_paper(db, paper_id)
