"""
CRUD operations for exam configuration and blueprint tables
Loads return None when the row does not exist; callers decide whether that is an error
"""

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from database import models, schemas


# ==========================================
# SUBJECT MASTER CRUD
# ==========================================

def create_subject_master(db: Session, subject: schemas.SubjectMasterCreate) -> models.SubjectMaster:
    """Create a new subject master"""
    db_subject = models.SubjectMaster(
        code=subject.code.strip(),
        name=subject.name.strip(),
        description=subject.description,
        subject_type=subject.subject_type,
        is_active=subject.is_active,
    )
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return db_subject


def get_subject_master(db: Session, subject_master_id: int) -> Optional[models.SubjectMaster]:
    """Get subject master by ID"""
    return db.query(models.SubjectMaster).filter(models.SubjectMaster.id == subject_master_id).first()


def get_subject_master_by_code(db: Session, code: str) -> Optional[models.SubjectMaster]:
    """Get subject master by its unique code"""
    return db.query(models.SubjectMaster).filter(models.SubjectMaster.code == code.strip()).first()


def get_subject_masters(db: Session, active_only: bool = False, skip: int = 0, limit: int = 100) -> List[models.SubjectMaster]:
    """Get subject masters ordered by code"""
    query = db.query(models.SubjectMaster)
    if active_only:
        query = query.filter(models.SubjectMaster.is_active.is_(True))
    return query.order_by(models.SubjectMaster.code).offset(skip).limit(limit).all()


def update_subject_master(db: Session, subject_master_id: int, update: schemas.SubjectMasterUpdate) -> Optional[models.SubjectMaster]:
    """Update an existing subject master"""
    db_subject = get_subject_master(db, subject_master_id)
    if not db_subject:
        return None

    update_data = update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_subject, field, value)

    db.commit()
    db.refresh(db_subject)
    return db_subject


def _active_subject_master_ids():
    return select(models.ConfigurationSubject.subject_master_id).where(
        models.ConfigurationSubject.is_active.is_(True)
    )


def get_subject_masters_by_usage(db: Session, in_use: bool = True) -> List[models.SubjectMaster]:
    """Subject masters that are (or are not) referenced by an active configuration subject"""
    used = models.SubjectMaster.id.in_(_active_subject_master_ids())
    return db.query(models.SubjectMaster).filter(used if in_use else ~used).order_by(models.SubjectMaster.code).all()


def is_subject_master_in_use(db: Session, subject_master_id: int) -> bool:
    return db.query(models.ConfigurationSubject.id).filter(
        models.ConfigurationSubject.subject_master_id == subject_master_id,
        models.ConfigurationSubject.is_active.is_(True),
    ).first() is not None


def delete_subject_master(db: Session, subject_master_id: int) -> bool:
    """
    Soft delete a subject master
    Configuration subjects keep their foreign key, so the row stays and is deactivated
    """
    db_subject = get_subject_master(db, subject_master_id)
    if not db_subject:
        return False

    db_subject.is_active = False
    db.commit()
    return True


# ==========================================
# CLASS CONFIGURATION CRUD
# ==========================================

def create_class_configuration(db: Session, configuration: schemas.ClassConfigurationCreate) -> models.ClassConfiguration:
    """Create a new class configuration"""
    db_configuration = models.ClassConfiguration(
        class_name=configuration.class_name.strip(),
        section=configuration.section.strip(),
        academic_year=configuration.academic_year.strip(),
        description=configuration.description.strip() if configuration.description else None,
        is_active=configuration.is_active,
    )
    db.add(db_configuration)
    db.commit()
    db.refresh(db_configuration)
    return db_configuration


def get_class_configuration(db: Session, configuration_id: int) -> Optional[models.ClassConfiguration]:
    """Get class configuration by ID"""
    return db.query(models.ClassConfiguration).filter(models.ClassConfiguration.id == configuration_id).first()


def get_class_configuration_by_details(
    db: Session, class_name: str, section: str, academic_year: str
) -> Optional[models.ClassConfiguration]:
    """Get the configuration for one class, section and academic year"""
    return db.query(models.ClassConfiguration).filter(
        models.ClassConfiguration.class_name == class_name.strip(),
        models.ClassConfiguration.section == section.strip(),
        models.ClassConfiguration.academic_year == academic_year.strip(),
    ).first()


def get_class_configurations(
    db: Session, academic_year: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[models.ClassConfiguration]:
    """Get active class configurations, optionally for one academic year"""
    query = db.query(models.ClassConfiguration).filter(models.ClassConfiguration.is_active.is_(True))
    if academic_year:
        query = query.filter(models.ClassConfiguration.academic_year == academic_year.strip())
    return query.order_by(
        models.ClassConfiguration.academic_year.desc(),
        models.ClassConfiguration.class_name,
        models.ClassConfiguration.section,
    ).offset(skip).limit(limit).all()


def update_class_configuration(
    db: Session, configuration_id: int, update: schemas.ClassConfigurationUpdate
) -> Optional[models.ClassConfiguration]:
    """Update a class configuration; deactivating it deactivates its subjects"""
    db_configuration = get_class_configuration(db, configuration_id)
    if not db_configuration:
        return None

    update_data = update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_configuration, field, value.strip() if isinstance(value, str) else value)
    if update_data.get("is_active") is False:
        for subject in db_configuration.subjects:
            subject.is_active = False

    db.commit()
    db.refresh(db_configuration)
    return db_configuration


def delete_class_configuration(db: Session, configuration_id: int) -> bool:
    """Delete a class configuration (cascades to its configuration subjects)"""
    db_configuration = get_class_configuration(db, configuration_id)
    if not db_configuration:
        return False

    db.delete(db_configuration)
    db.commit()
    return True


def get_configuration_subjects(db: Session, configuration_id: int, active_only: bool = True) -> List[models.ConfigurationSubject]:
    """Get the subjects of a class configuration in insertion order"""
    query = db.query(models.ConfigurationSubject).options(
        joinedload(models.ConfigurationSubject.subject_master)
    ).filter(models.ConfigurationSubject.class_configuration_id == configuration_id)
    if active_only:
        query = query.filter(models.ConfigurationSubject.is_active.is_(True))
    return query.order_by(models.ConfigurationSubject.id).all()


def get_configuration_subject(db: Session, configuration_id: int, subject_master_id: int) -> Optional[models.ConfigurationSubject]:
    """Get the configuration subject binding a subject master to a class configuration"""
    return db.query(models.ConfigurationSubject).filter(
        models.ConfigurationSubject.class_configuration_id == configuration_id,
        models.ConfigurationSubject.subject_master_id == subject_master_id,
    ).first()


def get_configuration_subject_by_id(db: Session, configuration_subject_id: int) -> Optional[models.ConfigurationSubject]:
    """Get configuration subject by ID"""
    return db.query(models.ConfigurationSubject).options(
        joinedload(models.ConfigurationSubject.subject_master)
    ).filter(models.ConfigurationSubject.id == configuration_subject_id).first()


def create_configuration_subject(
    db: Session, configuration_id: int, subject: schemas.ConfigurationSubjectCreate
) -> models.ConfigurationSubject:
    """Add a subject to a class configuration"""
    db_subject = models.ConfigurationSubject(
        class_configuration_id=configuration_id,
        **subject.model_dump(),
    )
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return db_subject


def update_configuration_subject(
    db: Session, db_subject: models.ConfigurationSubject, update: schemas.ConfigurationSubjectUpdate
) -> models.ConfigurationSubject:
    """Replace a configuration subject's type and marks"""
    update_data = update.model_dump()
    is_active = update_data.pop("is_active")
    for field, value in update_data.items():
        setattr(db_subject, field, value)
    if is_active is not None:
        db_subject.is_active = is_active

    db.commit()
    db.refresh(db_subject)
    return db_subject


def delete_configuration_subject(db: Session, configuration_subject_id: int) -> bool:
    """Soft delete a configuration subject"""
    db_subject = get_configuration_subject_by_id(db, configuration_subject_id)
    if not db_subject:
        return False

    db_subject.is_active = False
    db.commit()
    return True


# ==========================================
# EXAM CONFIGURATION CRUD
# ==========================================

def create_exam_configuration(db: Session, configuration: schemas.ExamConfigurationCreate) -> models.ExamConfiguration:
    """Create an exam configuration and its paper structure"""
    structure = models.QuestionPaperStructure(
        name=configuration.paper_name,
        total_marks=configuration.paper_total_marks,
    )
    db.add(structure)
    db.flush()

    db_configuration = models.ExamConfiguration(
        exam_id=configuration.exam_id,
        grade=configuration.grade,
        subject=configuration.subject,
        exam_type=configuration.exam_type,
        academic_year=configuration.academic_year,
        paper_structure_id=structure.id,
    )
    db.add(db_configuration)
    db.commit()
    db.refresh(db_configuration)
    return db_configuration


def get_exam_configuration(db: Session, exam_configuration_id: int) -> Optional[models.ExamConfiguration]:
    """Get exam configuration with its paper structure"""
    return db.query(models.ExamConfiguration).options(
        joinedload(models.ExamConfiguration.paper_structure)
    ).filter(models.ExamConfiguration.id == exam_configuration_id).first()


# ==========================================
# BLUEPRINT READS
# ==========================================

def get_blueprint(db: Session, blueprint_id: int, for_update: bool = False) -> Optional[models.ExamBlueprint]:
    """
    Get blueprint by ID
    for_update locks the row so the approval check and the mutation it guards
    happen in one transaction
    """
    query = db.query(models.ExamBlueprint).filter(models.ExamBlueprint.id == blueprint_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_blueprints_by_exam_id(db: Session, exam_id: int) -> List[models.ExamBlueprint]:
    """Get all blueprints whose exam configuration belongs to the given exam"""
    return db.query(models.ExamBlueprint).join(models.ExamConfiguration).filter(
        models.ExamConfiguration.exam_id == exam_id
    ).order_by(models.ExamBlueprint.id).all()


# ==========================================
# QUESTION PAPER CRUD
# ==========================================

def create_question_paper(db: Session, paper: schemas.QuestionPaperCreate) -> models.QuestionPaper:
    """Create a question paper with its questions"""
    db_paper = models.QuestionPaper(
        title=paper.title,
        exam_configuration_id=paper.exam_configuration_id,
    )
    for question in paper.questions:
        db_paper.questions.append(models.Question(**question.model_dump()))
    db.add(db_paper)
    db.commit()
    db.refresh(db_paper)
    return db_paper


def add_questions(db: Session, paper_id: int, questions: List[schemas.QuestionCreate]) -> List[models.Question]:
    """Append questions to an existing paper"""
    db_questions = [models.Question(question_paper_id=paper_id, **q.model_dump()) for q in questions]
    db.add_all(db_questions)
    db.commit()
    for q in db_questions:
        db.refresh(q)
    return db_questions


def get_question_paper(db: Session, paper_id: int) -> Optional[models.QuestionPaper]:
    """Get question paper by ID"""
    return db.query(models.QuestionPaper).filter(models.QuestionPaper.id == paper_id).first()


def get_questions_by_paper(db: Session, paper_id: int) -> List[models.Question]:
    """Get all questions of a paper in authoring order"""
    return db.query(models.Question).filter(
        models.Question.question_paper_id == paper_id
    ).order_by(models.Question.id).all()
