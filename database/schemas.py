"""
Pydantic schemas for request/response validation
Separate from SQLAlchemy models for clean API contracts
"""

from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import Optional, List
from datetime import datetime
import enum

from database.models import SubjectType, QuestionType
from blueprint import labels

ACADEMIC_YEAR_PATTERN = r"^\d{4}-\d{2}$"


# ==========================================
# SUBJECT MASTER SCHEMAS
# ==========================================

class SubjectMasterBase(BaseModel):
    """Base schema for SubjectMaster - shared fields"""
    code: str = Field(..., min_length=2, max_length=20, description="Unique subject code")
    name: str = Field(..., min_length=2, max_length=100, description="Subject name")
    description: Optional[str] = Field(None, max_length=500)
    subject_type: SubjectType = Field(..., description="Declared type: THEORY | PRACTICAL | BOTH")


class SubjectMasterCreate(SubjectMasterBase):
    """Schema for creating a SubjectMaster"""
    is_active: bool = True


class SubjectMasterUpdate(BaseModel):
    """Schema for updating a SubjectMaster - all fields optional"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    subject_type: Optional[SubjectType] = None
    is_active: Optional[bool] = None


class SubjectMasterResponse(SubjectMasterBase):
    """Schema for SubjectMaster response"""
    id: int
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def subject_type_label(self) -> str:
        return labels.subject_type_label(self.subject_type)


# ==========================================
# CLASS CONFIGURATION SCHEMAS
# ==========================================

class ConfigurationSubjectCreate(BaseModel):
    """Schema for adding a subject to a class configuration"""
    subject_master_id: int = Field(..., gt=0)
    effective_subject_type: Optional[SubjectType] = None
    total_marks: int = Field(..., ge=1)
    passing_marks: int = Field(..., ge=1)
    theory_marks: Optional[int] = Field(None, ge=1)
    practical_marks: Optional[int] = Field(None, ge=1)
    theory_passing_marks: Optional[int] = Field(None, ge=1)
    practical_passing_marks: Optional[int] = Field(None, ge=1)


class ConfigurationSubjectUpdate(BaseModel):
    """Schema for updating a configuration subject - marks are replaced as a whole"""
    effective_subject_type: Optional[SubjectType] = None
    total_marks: int = Field(..., ge=1)
    passing_marks: int = Field(..., ge=1)
    theory_marks: Optional[int] = Field(None, ge=1)
    practical_marks: Optional[int] = Field(None, ge=1)
    theory_passing_marks: Optional[int] = Field(None, ge=1)
    practical_passing_marks: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class ConfigurationSubjectResponse(BaseModel):
    """Schema for ConfigurationSubject response"""
    id: int
    class_configuration_id: int
    subject_master_id: int
    effective_subject_type: Optional[SubjectType] = None
    total_marks: int
    passing_marks: int
    theory_marks: Optional[int] = None
    practical_marks: Optional[int] = None
    theory_passing_marks: Optional[int] = None
    practical_passing_marks: Optional[int] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ClassConfigurationBase(BaseModel):
    """Base schema for ClassConfiguration - shared fields"""
    class_name: str = Field(..., min_length=1, max_length=50)
    section: str = Field(..., min_length=1, max_length=20)
    academic_year: str = Field(..., pattern=ACADEMIC_YEAR_PATTERN, description="YYYY-YY, e.g. 2024-25")
    description: Optional[str] = Field(None, max_length=500)


class ClassConfigurationCreate(ClassConfigurationBase):
    """Schema for creating a ClassConfiguration"""
    is_active: bool = True


class ClassConfigurationUpdate(BaseModel):
    """Schema for updating a ClassConfiguration - all fields optional"""
    class_name: Optional[str] = Field(None, min_length=1, max_length=50)
    section: Optional[str] = Field(None, min_length=1, max_length=20)
    academic_year: Optional[str] = Field(None, pattern=ACADEMIC_YEAR_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class ClassConfigurationResponse(ClassConfigurationBase):
    """Schema for ClassConfiguration response without subjects"""
    id: int
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClassConfigurationWithSubjects(ClassConfigurationResponse):
    """Schema for ClassConfiguration response with nested subjects"""
    subjects: List[ConfigurationSubjectResponse] = []


# ==========================================
# COPY CONFIGURATION SCHEMAS
# ==========================================

class CopySubjectConfiguration(BaseModel):
    """Per-subject include flag and mark overrides for a copy"""
    subject_master_id: int
    include: bool = True
    new_subject_type: Optional[SubjectType] = None
    new_total_marks: Optional[int] = Field(None, ge=1)
    new_passing_marks: Optional[int] = Field(None, ge=1)
    new_theory_marks: Optional[int] = Field(None, ge=1)
    new_practical_marks: Optional[int] = Field(None, ge=1)
    new_theory_passing_marks: Optional[int] = Field(None, ge=1)
    new_practical_passing_marks: Optional[int] = Field(None, ge=1)


class CopyConfigurationRequest(BaseModel):
    """Copy one class's subject configuration onto another class/section/year"""
    source_configuration_id: int = Field(..., gt=0)
    target_class_name: str = Field(..., min_length=1, max_length=50)
    target_section: str = Field(..., min_length=1, max_length=20)
    target_academic_year: str = Field(..., pattern=ACADEMIC_YEAR_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    subject_configurations: List[CopySubjectConfiguration] = Field(default_factory=list)
    copy_all_subjects: bool = True
    preserve_marks: bool = True
    overwrite_existing: bool = False


class CopyStatus(str, enum.Enum):
    COPIED = "COPIED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class CopySubjectResult(BaseModel):
    """Outcome for one candidate subject: Copied{id} | Skipped{reason} | Failed{reason}"""
    subject_master_id: int
    subject_code: Optional[str] = None
    subject_name: Optional[str] = None
    status: CopyStatus
    copied: bool
    reason: str
    new_configuration_subject_id: Optional[int] = None


class CopyConfigurationResponse(BaseModel):
    """Aggregated, best-effort copy outcome"""
    success: bool
    message: str
    new_configuration_id: Optional[int] = None
    target_class_name: str
    target_section: str
    target_academic_year: str
    copied_subjects_count: int = 0
    skipped_subjects_count: int = 0
    failed_subjects_count: int = 0
    subject_results: List[CopySubjectResult] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


# ==========================================
# EXAM CONFIGURATION / PAPER SCHEMAS
# ==========================================

class ExamConfigurationCreate(BaseModel):
    """Create an exam configuration together with its paper structure"""
    exam_id: int = Field(..., gt=0)
    grade: str = Field(..., min_length=1, max_length=50)
    subject: str = Field(..., min_length=1, max_length=100)
    exam_type: Optional[str] = Field(None, max_length=50)
    academic_year: Optional[str] = Field(None, pattern=ACADEMIC_YEAR_PATTERN)
    paper_name: str = Field("Question Paper", max_length=255)
    paper_total_marks: float = Field(..., gt=0, description="Denominator for every weightage")


class ExamConfigurationResponse(BaseModel):
    id: int
    exam_id: int
    grade: str
    subject: str
    exam_type: Optional[str] = None
    academic_year: Optional[str] = None
    paper_structure_id: Optional[int] = None
    paper_total_marks: Optional[float] = None


class QuestionCreate(BaseModel):
    chapter_name: str = Field(..., min_length=1, max_length=255)
    question_type: QuestionType
    marks: float = Field(..., ge=0)
    text: Optional[str] = None


class QuestionResponse(QuestionCreate):
    id: int
    question_paper_id: int

    model_config = ConfigDict(from_attributes=True)


class QuestionPaperCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    exam_configuration_id: Optional[int] = None
    questions: List[QuestionCreate] = Field(default_factory=list)


class QuestionPaperResponse(BaseModel):
    id: int
    title: str
    exam_configuration_id: Optional[int] = None
    question_count: int = 0


# ==========================================
# BLUEPRINT SCHEMAS
# ==========================================

class SectionDistribution(BaseModel):
    """One question-type entry under a chapter"""
    question_type: QuestionType
    question_count: int = Field(..., ge=0)
    total_marks: float = Field(..., ge=0)


class ChapterDistributionCreate(BaseModel):
    """A chapter and its per-question-type expectations"""
    chapter_name: str = Field(..., min_length=1, max_length=255)
    section_distributions: List[SectionDistribution] = Field(default_factory=list)


class BlueprintCreate(BaseModel):
    exam_configuration_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    chapter_distributions: List[ChapterDistributionCreate] = Field(default_factory=list)


class BlueprintUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    chapter_distributions: List[ChapterDistributionCreate] = Field(default_factory=list)


class BlueprintApprove(BaseModel):
    approved_by: int = Field(..., gt=0)


class SectionDistributionView(BaseModel):
    section_name: str
    question_type: QuestionType
    question_count: int
    marks_per_question: float
    total_marks: float
    weightage_percentage: float


class ChapterDistributionView(BaseModel):
    chapter_name: str
    section_distributions: List[SectionDistributionView]
    total_marks: float
    weightage_percentage: float


class BlueprintResponse(BaseModel):
    id: int
    exam_id: Optional[int] = None
    exam_configuration_id: int
    name: str
    description: Optional[str] = None
    state: str
    is_approved: bool
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None
    paper_total_marks: Optional[float] = None
    chapter_distributions: List[ChapterDistributionView]


class ValidationSeverity(str, enum.Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class ValidationIssue(BaseModel):
    chapter_name: str
    question_type: QuestionType
    message: str
    severity: ValidationSeverity


class BlueprintValidationResult(BaseModel):
    is_valid: bool
    issues: List[ValidationIssue] = Field(default_factory=list)
