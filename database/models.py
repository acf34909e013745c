"""
SQLAlchemy models for exam configuration and blueprints
SubjectMaster → ClassConfiguration → ConfigurationSubject
ExamConfiguration → ExamBlueprint → ChapterDistribution
QuestionPaper → Question

Questions are authored elsewhere; nothing in the blueprint engine writes them.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Text, Float, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from database.database import Base


class SubjectType(str, enum.Enum):
    """How a subject is examined"""
    THEORY = "THEORY"
    PRACTICAL = "PRACTICAL"
    BOTH = "BOTH"


class QuestionType(str, enum.Enum):
    """Question types a paper section (and a chapter distribution) can hold"""
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    SHORT_ANSWER = "SHORT_ANSWER"
    LONG_ANSWER = "LONG_ANSWER"
    TRUE_FALSE = "TRUE_FALSE"
    FILL_IN_BLANKS = "FILL_IN_BLANKS"
    PRACTICAL = "PRACTICAL"


# ==========================================
# CONFIGURATION: SUBJECT MASTER → CLASS → SUBJECT
# ==========================================

class SubjectMaster(Base):
    """
    Catalog entry for a subject (e.g. 'MATH101 Mathematics').
    subject_type is the declared type; a class may examine it differently
    through ConfigurationSubject.effective_subject_type.
    """
    __tablename__ = "subject_masters"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    subject_type = Column(SQLEnum(SubjectType, name="subject_type"), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    configuration_subjects = relationship("ConfigurationSubject", back_populates="subject_master")

    def __repr__(self):
        return f"<SubjectMaster(id={self.id}, code='{self.code}', type={self.subject_type})>"


class ClassConfiguration(Base):
    """
    Examination setup for one class, section and academic year (YYYY-YY).
    Owns its ConfigurationSubject rows.
    """
    __tablename__ = "class_configurations"
    __table_args__ = (
        UniqueConstraint("class_name", "section", "academic_year", name="uk_class_section_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_name = Column(String(50), nullable=False, index=True)
    section = Column(String(20), nullable=False)
    academic_year = Column(String(10), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    subjects = relationship(
        "ConfigurationSubject",
        back_populates="class_configuration",
        cascade="all, delete-orphan",
        order_by="ConfigurationSubject.id",
    )

    @property
    def full_display_name(self) -> str:
        return f"{self.class_name} - {self.section} ({self.academic_year})"

    def __repr__(self):
        return f"<ClassConfiguration(id={self.id}, name='{self.full_display_name}')>"


class ConfigurationSubject(Base):
    """
    A subject's marks and type configuration inside one ClassConfiguration.
    theory_*/practical_* splits only apply when the effective type is BOTH
    (or the single matching component for THEORY / PRACTICAL).
    """
    __tablename__ = "configuration_subjects"
    __table_args__ = (
        UniqueConstraint("class_configuration_id", "subject_master_id", name="uk_config_subject"),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_configuration_id = Column(Integer, ForeignKey("class_configurations.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_master_id = Column(Integer, ForeignKey("subject_masters.id"), nullable=False, index=True)
    effective_subject_type = Column(SQLEnum(SubjectType, name="subject_type"), nullable=True)
    total_marks = Column(Integer, nullable=False)
    passing_marks = Column(Integer, nullable=False)
    theory_marks = Column(Integer, nullable=True)
    practical_marks = Column(Integer, nullable=True)
    theory_passing_marks = Column(Integer, nullable=True)
    practical_passing_marks = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    class_configuration = relationship("ClassConfiguration", back_populates="subjects")
    subject_master = relationship("SubjectMaster", back_populates="configuration_subjects")

    def __repr__(self):
        return (
            f"<ConfigurationSubject(id={self.id}, config={self.class_configuration_id}, "
            f"subject={self.subject_master_id}, total={self.total_marks})>"
        )


# ==========================================
# EXAMS: CONFIGURATION → BLUEPRINT → DISTRIBUTION
# ==========================================

class QuestionPaperStructure(Base):
    """Paper layout; total_marks is the denominator for every weightage."""
    __tablename__ = "question_paper_structures"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    total_marks = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<QuestionPaperStructure(id={self.id}, total_marks={self.total_marks})>"


class ExamConfiguration(Base):
    """Grade + subject + exam type + year, bound to one paper structure."""
    __tablename__ = "exam_configurations"

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, nullable=False, index=True)
    grade = Column(String(50), nullable=False)
    subject = Column(String(100), nullable=False)
    exam_type = Column(String(50), nullable=True)
    academic_year = Column(String(10), nullable=True)
    paper_structure_id = Column(Integer, ForeignKey("question_paper_structures.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    paper_structure = relationship("QuestionPaperStructure")
    blueprints = relationship("ExamBlueprint", back_populates="exam_configuration")

    def __repr__(self):
        return f"<ExamConfiguration(id={self.id}, exam_id={self.exam_id}, subject='{self.subject}')>"


class ExamBlueprint(Base):
    """
    Expected composition of a question paper.
    Draft while is_approved is False; approval is one-way.
    """
    __tablename__ = "exam_blueprints"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    exam_configuration_id = Column(Integer, ForeignKey("exam_configurations.id"), nullable=False, index=True)
    paper_structure_id = Column(Integer, ForeignKey("question_paper_structures.id"), nullable=True)
    is_approved = Column(Boolean, default=False, nullable=False)
    approved_by = Column(Integer, nullable=True)
    approval_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    exam_configuration = relationship("ExamConfiguration", back_populates="blueprints")
    paper_structure = relationship("QuestionPaperStructure")
    chapter_distributions = relationship(
        "ChapterDistribution",
        back_populates="blueprint",
        cascade="all, delete-orphan",
        order_by="ChapterDistribution.position",
    )

    def __repr__(self):
        return f"<ExamBlueprint(id={self.id}, name='{self.name}', approved={self.is_approved})>"


class ChapterDistribution(Base):
    """One (chapter, question type) expectation inside a blueprint."""
    __tablename__ = "chapter_distributions"

    id = Column(Integer, primary_key=True, index=True)
    blueprint_id = Column(Integer, ForeignKey("exam_blueprints.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)  # stored order, drives validation order
    chapter_name = Column(String(255), nullable=False)
    question_type = Column(SQLEnum(QuestionType, name="question_type"), nullable=False)
    question_count = Column(Integer, nullable=False, default=0)
    total_marks = Column(Float, nullable=False)
    weightage_percentage = Column(Float, nullable=False)

    blueprint = relationship("ExamBlueprint", back_populates="chapter_distributions")

    def __repr__(self):
        return (
            f"<ChapterDistribution(chapter='{self.chapter_name}', type={self.question_type}, "
            f"count={self.question_count}, marks={self.total_marks})>"
        )


# ==========================================
# AUTHORED PAPERS
# ==========================================

class QuestionPaper(Base):
    """An authored question paper."""
    __tablename__ = "question_papers"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    exam_configuration_id = Column(Integer, ForeignKey("exam_configurations.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    questions = relationship("Question", back_populates="question_paper", cascade="all, delete-orphan")


class Question(Base):
    """Single authored question: chapter, type and marks are what validation reads."""
    __tablename__ = "paper_questions"

    id = Column(Integer, primary_key=True, index=True)
    question_paper_id = Column(Integer, ForeignKey("question_papers.id", ondelete="CASCADE"), nullable=False, index=True)
    chapter_name = Column(String(255), nullable=False)
    question_type = Column(SQLEnum(QuestionType, name="question_type"), nullable=False)
    marks = Column(Float, nullable=False)
    text = Column(Text, nullable=True)

    question_paper = relationship("QuestionPaper", back_populates="questions")
