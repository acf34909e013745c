import os

# In-memory SQLite for every test; must be set before the database package is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import crud, models, schemas
from database.database import Base, get_db
from exam_api import app


@pytest.fixture
def db():
    """Fresh schema per test; StaticPool keeps one connection so the in-memory DB survives."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def exam_configuration(db):
    """Exam 7, grade 10 mathematics, paper out of 100."""
    return crud.create_exam_configuration(db, schemas.ExamConfigurationCreate(
        exam_id=7,
        grade="10",
        subject="Mathematics",
        exam_type="FINAL",
        academic_year="2024-25",
        paper_total_marks=100,
    ))


@pytest.fixture
def make_paper(db):
    """Build a question paper from (chapter, question_type, marks) tuples."""
    def _make(questions, title="Paper"):
        return crud.create_question_paper(db, schemas.QuestionPaperCreate(
            title=title,
            questions=[
                schemas.QuestionCreate(chapter_name=chapter, question_type=qtype, marks=marks)
                for chapter, qtype, marks in questions
            ],
        ))
    return _make


@pytest.fixture
def chapter():
    """chapter("Algebra", ("SHORT_ANSWER", 3, 15), ...) → ChapterDistributionCreate"""
    def _chapter(name, *sections):
        return schemas.ChapterDistributionCreate(
            chapter_name=name,
            section_distributions=[
                schemas.SectionDistribution(question_type=qtype, question_count=count, total_marks=marks)
                for qtype, count, marks in sections
            ],
        )
    return _chapter


@pytest.fixture
def subject_masters(db):
    """MATH (theory), PHY and CHEM (theory + practical)."""
    return {
        code: crud.create_subject_master(db, schemas.SubjectMasterCreate(
            code=code, name=name, subject_type=subject_type,
        ))
        for code, name, subject_type in [
            ("MATH", "Mathematics", models.SubjectType.THEORY),
            ("PHY", "Physics", models.SubjectType.BOTH),
            ("CHEM", "Chemistry", models.SubjectType.BOTH),
        ]
    }


@pytest.fixture
def source_configuration(db, subject_masters):
    """Class 10 - A (2024-25) with all three subjects configured."""
    config = crud.create_class_configuration(db, schemas.ClassConfigurationCreate(
        class_name="10", section="A", academic_year="2024-25",
    ))
    crud.create_configuration_subject(db, config.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["MATH"].id,
        total_marks=100, passing_marks=35,
        theory_marks=100, theory_passing_marks=35,
    ))
    crud.create_configuration_subject(db, config.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["PHY"].id,
        total_marks=100, passing_marks=35,
        theory_marks=70, practical_marks=30,
        theory_passing_marks=25, practical_passing_marks=10,
    ))
    crud.create_configuration_subject(db, config.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["CHEM"].id,
        total_marks=100, passing_marks=35,
        theory_marks=80, practical_marks=20,
    ))
    return config
