"""
Configuration subject API endpoints
Marks and type of one subject inside a class configuration
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import schemas, crud
from database.database import get_db
from configuration.marks import MarksRuleError, SubjectMarks, check_marks_distribution

router = APIRouter(prefix="/configuration-subjects", tags=["configuration-subjects"])


@router.get("/{configuration_subject_id}", response_model=schemas.ConfigurationSubjectResponse)
def get_configuration_subject(configuration_subject_id: int, db: Session = Depends(get_db)):
    subject = crud.get_configuration_subject_by_id(db, configuration_subject_id)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration subject with ID {configuration_subject_id} not found"
        )
    return subject


@router.put("/{configuration_subject_id}", response_model=schemas.ConfigurationSubjectResponse)
def update_configuration_subject(
    configuration_subject_id: int,
    update: schemas.ConfigurationSubjectUpdate,
    db: Session = Depends(get_db)
):
    """
    Replace a configuration subject's type and marks
    The new marks must fit the new effective type
    """
    subject = crud.get_configuration_subject_by_id(db, configuration_subject_id)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration subject with ID {configuration_subject_id} not found"
        )

    marks = SubjectMarks(**update.model_dump(exclude={"effective_subject_type", "is_active"}))
    try:
        check_marks_distribution(update.effective_subject_type or subject.subject_master.subject_type, marks)
    except MarksRuleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return crud.update_configuration_subject(db, subject, update)


@router.delete("/{configuration_subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_configuration_subject(configuration_subject_id: int, db: Session = Depends(get_db)):
    """
    Deactivate a configuration subject; it drops out of the class listing and copy
    """
    if not crud.delete_configuration_subject(db, configuration_subject_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration subject with ID {configuration_subject_id} not found"
        )
    return None
