"""
Class configuration API endpoints
Class/section/year configurations, their subjects, and configuration copy
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from database import schemas, crud
from database.database import get_db
from blueprint.errors import NotFoundError
from configuration.copier import copy_configuration, preview_copy
from configuration.marks import MarksRuleError, SubjectMarks, check_marks_distribution

router = APIRouter(prefix="/class-configurations", tags=["class-configurations"])


@router.post("/", response_model=schemas.ClassConfigurationResponse, status_code=status.HTTP_201_CREATED)
def create_class_configuration(configuration: schemas.ClassConfigurationCreate, db: Session = Depends(get_db)):
    """
    Create a class configuration
    One configuration per class, section and academic year
    """
    existing = crud.get_class_configuration_by_details(
        db, configuration.class_name, configuration.section, configuration.academic_year
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Configuration already exists: {existing.full_display_name}"
        )
    return crud.create_class_configuration(db, configuration)


@router.get("/", response_model=List[schemas.ClassConfigurationResponse])
def list_class_configurations(
    academic_year: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """
    List active class configurations, optionally for one academic year
    """
    return crud.get_class_configurations(db, academic_year=academic_year, skip=skip, limit=limit)


@router.post("/copy", response_model=schemas.CopyConfigurationResponse)
def copy_class_configuration(request: schemas.CopyConfigurationRequest, db: Session = Depends(get_db)):
    """
    Copy a configuration's subjects to another class/section/year
    Per-subject failures are reported in the response, not as an error status
    """
    try:
        return copy_configuration(db, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{configuration_id}", response_model=schemas.ClassConfigurationWithSubjects)
def get_class_configuration(configuration_id: int, db: Session = Depends(get_db)):
    """
    Get a class configuration with its active subjects
    """
    configuration = crud.get_class_configuration(db, configuration_id)
    if not configuration:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration with ID {configuration_id} not found"
        )
    response = schemas.ClassConfigurationWithSubjects.model_validate(configuration)
    response.subjects = [
        schemas.ConfigurationSubjectResponse.model_validate(s)
        for s in crud.get_configuration_subjects(db, configuration_id, active_only=True)
    ]
    return response


@router.put("/{configuration_id}", response_model=schemas.ClassConfigurationResponse)
def update_class_configuration(
    configuration_id: int,
    update: schemas.ClassConfigurationUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a class configuration
    Only provided fields will be updated; deactivating also deactivates its subjects
    """
    configuration = crud.get_class_configuration(db, configuration_id)
    if not configuration:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration with ID {configuration_id} not found"
        )

    class_name = update.class_name or configuration.class_name
    section = update.section or configuration.section
    academic_year = update.academic_year or configuration.academic_year
    existing = crud.get_class_configuration_by_details(db, class_name, section, academic_year)
    if existing and existing.id != configuration_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Configuration already exists: {existing.full_display_name}"
        )

    return crud.update_class_configuration(db, configuration_id, update)


@router.delete("/{configuration_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class_configuration(configuration_id: int, db: Session = Depends(get_db)):
    """
    Delete a class configuration and all of its configuration subjects
    """
    if not crud.delete_class_configuration(db, configuration_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration with ID {configuration_id} not found"
        )
    return None


@router.post(
    "/{configuration_id}/subjects",
    response_model=schemas.ConfigurationSubjectResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_configuration_subject(
    configuration_id: int,
    subject: schemas.ConfigurationSubjectCreate,
    db: Session = Depends(get_db)
):
    """
    Configure a subject for a class
    Marks must fit the subject's effective type
    """
    if not crud.get_class_configuration(db, configuration_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration with ID {configuration_id} not found"
        )
    master = crud.get_subject_master(db, subject.subject_master_id)
    if not master:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subject master with ID {subject.subject_master_id} not found"
        )
    existing = crud.get_configuration_subject(db, configuration_id, subject.subject_master_id)
    if existing and existing.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subject is already configured for this class"
        )

    marks = SubjectMarks(**subject.model_dump(exclude={"subject_master_id", "effective_subject_type"}))
    try:
        check_marks_distribution(subject.effective_subject_type or master.subject_type, marks)
    except MarksRuleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if existing:
        # deleted subjects are reactivated with the new marks
        return crud.update_configuration_subject(db, existing, schemas.ConfigurationSubjectUpdate(
            **subject.model_dump(exclude={"subject_master_id"}), is_active=True
        ))
    return crud.create_configuration_subject(db, configuration_id, subject)


@router.get(
    "/{source_id}/copy-preview/{target_id}",
    response_model=List[schemas.ConfigurationSubjectResponse],
)
def get_copy_preview(source_id: int, target_id: int, db: Session = Depends(get_db)):
    """
    Subjects of the source configuration not yet configured on the target
    """
    try:
        return preview_copy(db, source_id, target_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
