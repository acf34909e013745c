"""
Subject master API endpoints
CRUD operations for the subject catalog
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from database import schemas, crud
from database.database import get_db

router = APIRouter(prefix="/subject-masters", tags=["subject-masters"])


@router.post("/", response_model=schemas.SubjectMasterResponse, status_code=status.HTTP_201_CREATED)
def create_subject_master(subject: schemas.SubjectMasterCreate, db: Session = Depends(get_db)):
    """
    Create a new subject master
    Subject codes must be unique
    """
    existing = crud.get_subject_master_by_code(db, subject.code)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Subject with code '{subject.code}' already exists"
        )

    return crud.create_subject_master(db, subject)


@router.get("/", response_model=List[schemas.SubjectMasterResponse])
def list_subject_masters(active_only: bool = False, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """
    List subject masters ordered by code
    """
    return crud.get_subject_masters(db, active_only=active_only, skip=skip, limit=limit)


@router.get("/in-use", response_model=List[schemas.SubjectMasterResponse])
def list_subject_masters_in_use(db: Session = Depends(get_db)):
    """
    Subject masters referenced by an active class configuration subject
    """
    return crud.get_subject_masters_by_usage(db, in_use=True)


@router.get("/not-in-use", response_model=List[schemas.SubjectMasterResponse])
def list_subject_masters_not_in_use(db: Session = Depends(get_db)):
    return crud.get_subject_masters_by_usage(db, in_use=False)


@router.get("/{subject_master_id}", response_model=schemas.SubjectMasterResponse)
def get_subject_master(subject_master_id: int, db: Session = Depends(get_db)):
    subject = crud.get_subject_master(db, subject_master_id)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subject master with ID {subject_master_id} not found"
        )
    return subject


@router.put("/{subject_master_id}", response_model=schemas.SubjectMasterResponse)
def update_subject_master(
    subject_master_id: int,
    subject_update: schemas.SubjectMasterUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a subject master
    Only provided fields will be updated
    """
    subject = crud.update_subject_master(db, subject_master_id, subject_update)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subject master with ID {subject_master_id} not found"
        )
    return subject


@router.delete("/{subject_master_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject_master(subject_master_id: int, db: Session = Depends(get_db)):
    """
    Deactivate a subject master
    Refused while any active class configuration subject references it
    """
    if not crud.get_subject_master(db, subject_master_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subject master with ID {subject_master_id} not found"
        )
    if crud.is_subject_master_in_use(db, subject_master_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete subject that is currently in use in configurations"
        )
    crud.delete_subject_master(db, subject_master_id)
    return None
