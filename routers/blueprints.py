"""
Blueprint Router — /blueprints

Endpoints:
  POST   /blueprints/                            — create a draft blueprint
  GET    /blueprints/{id}                        — get one blueprint
  PUT    /blueprints/{id}                        — replace a draft blueprint's distributions
  DELETE /blueprints/{id}                        — delete a draft blueprint
  GET    /blueprints/exam/{exam_id}              — blueprints of an exam
  POST   /blueprints/{id}/validate/{paper_id}    — validate a question paper
  POST   /blueprints/{id}/validate?question_paper_id=N — same, paper id as a query parameter
  POST   /blueprints/{id}/approve                — lock the blueprint
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import schemas
from database.database import get_db
from blueprint import builder
from blueprint.approval import approve_blueprint
from blueprint.errors import BlueprintError, NotFoundError, InvalidPaperTotalError
from blueprint.validator import validate_blueprint

router = APIRouter(prefix="/blueprints", tags=["blueprints"])


def _http_error(e: BlueprintError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, InvalidPaperTotalError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/", response_model=schemas.BlueprintResponse, status_code=status.HTTP_201_CREATED)
def create_blueprint(request: schemas.BlueprintCreate, db: Session = Depends(get_db)):
    """
    Create a draft blueprint
    Weightage of every distribution is computed from the exam configuration's paper total
    """
    try:
        blueprint = builder.create_blueprint(
            db,
            exam_configuration_id=request.exam_configuration_id,
            name=request.name,
            description=request.description,
            chapter_distributions=request.chapter_distributions,
        )
    except BlueprintError as e:
        raise _http_error(e)
    return builder.to_blueprint_response(blueprint)


@router.get("/exam/{exam_id}", response_model=List[schemas.BlueprintResponse])
def list_blueprints_by_exam(exam_id: int, db: Session = Depends(get_db)):
    """
    List every blueprint whose exam configuration belongs to the exam
    """
    return [builder.to_blueprint_response(b) for b in builder.list_blueprints_by_exam(db, exam_id)]


@router.get("/{blueprint_id}", response_model=schemas.BlueprintResponse)
def get_blueprint(blueprint_id: int, db: Session = Depends(get_db)):
    try:
        blueprint = builder.get_blueprint(db, blueprint_id)
    except BlueprintError as e:
        raise _http_error(e)
    return builder.to_blueprint_response(blueprint)


@router.put("/{blueprint_id}", response_model=schemas.BlueprintResponse)
def update_blueprint(
    blueprint_id: int,
    request: schemas.BlueprintUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a draft blueprint
    All existing distributions are replaced; approved blueprints are rejected with 409
    """
    try:
        blueprint = builder.update_blueprint(
            db,
            blueprint_id,
            name=request.name,
            description=request.description,
            chapter_distributions=request.chapter_distributions,
        )
    except BlueprintError as e:
        raise _http_error(e)
    return builder.to_blueprint_response(blueprint)


@router.delete("/{blueprint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blueprint(blueprint_id: int, db: Session = Depends(get_db)):
    """
    Delete a draft blueprint and its distributions
    """
    try:
        builder.delete_blueprint(db, blueprint_id)
    except BlueprintError as e:
        raise _http_error(e)
    return None


@router.post("/{blueprint_id}/validate/{paper_id}", response_model=schemas.BlueprintValidationResult)
def validate_paper(blueprint_id: int, paper_id: int, db: Session = Depends(get_db)):
    """
    Validate a question paper against a blueprint
    An invalid paper is a 200 response with is_valid=false and the issues found
    """
    try:
        return validate_blueprint(db, blueprint_id, paper_id)
    except BlueprintError as e:
        raise _http_error(e)


@router.post("/{blueprint_id}/validate", response_model=schemas.BlueprintValidationResult)
def validate_paper_by_query(blueprint_id: int, question_paper_id: int, db: Session = Depends(get_db)):
    return validate_paper(blueprint_id, question_paper_id, db)


@router.post("/{blueprint_id}/approve", response_model=schemas.BlueprintResponse)
def approve(blueprint_id: int, request: schemas.BlueprintApprove, db: Session = Depends(get_db)):
    """
    Approve a blueprint; it can no longer be updated or deleted
    """
    try:
        blueprint = approve_blueprint(db, blueprint_id, request.approved_by)
    except BlueprintError as e:
        raise _http_error(e)
    return builder.to_blueprint_response(blueprint)
