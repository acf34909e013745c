"""
Configuration copy

Duplicates a class configuration's subjects (types and marks) onto another
class / section / academic year, with per-subject include flags and mark
overrides.

Best effort: every subject is checked and written on its own and committed
on its own. A failing subject is reported and skipped; subjects copied
before it stay copied.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import crud, models
from database.schemas import (
    ClassConfigurationCreate,
    CopyConfigurationRequest,
    CopyConfigurationResponse,
    CopySubjectConfiguration,
    CopySubjectResult,
    CopyStatus,
)
from blueprint.errors import BlueprintError, NotFoundError, InvalidStateError
from configuration.marks import FORBIDDEN_COMPONENTS, MarksRuleError, SubjectMarks, check_marks_distribution

log = logging.getLogger("configuration.copy")

MARK_FIELDS = (
    "total_marks",
    "passing_marks",
    "theory_marks",
    "practical_marks",
    "theory_passing_marks",
    "practical_passing_marks",
)


def _resolve_target(db: Session, request: CopyConfigurationRequest, warnings: List[str]) -> models.ClassConfiguration:
    """Reuse the configuration for the target class/section/year, or create it."""
    target = crud.get_class_configuration_by_details(
        db, request.target_class_name, request.target_section, request.target_academic_year
    )
    if target is not None:
        warnings.append(f"Target configuration {target.full_display_name} already exists; copying into it")
        return target

    return crud.create_class_configuration(db, ClassConfigurationCreate(
        class_name=request.target_class_name,
        section=request.target_section,
        academic_year=request.target_academic_year,
        description=request.description,
        is_active=True,
    ))


def _resolve_marks(
    source: models.ConfigurationSubject,
    override: Optional[CopySubjectConfiguration],
    preserve_marks: bool,
) -> SubjectMarks:
    """
    Override values win field by field. Without an override value, preserve_marks
    copies the source marks verbatim; otherwise only total and passing marks
    carry over and the theory/practical split is left unset.

    An overriding subject type first clears the source components that type
    does not allow (practical marks for THEORY, theory marks for PRACTICAL).
    """
    if preserve_marks:
        values = {field: getattr(source, field) for field in MARK_FIELDS}
    else:
        values = dict.fromkeys(MARK_FIELDS)
        values["total_marks"] = source.total_marks
        values["passing_marks"] = source.passing_marks

    if override is not None:
        if override.new_subject_type is not None:
            for field in FORBIDDEN_COMPONENTS.get(override.new_subject_type, ()):
                values[field] = None
        for field in MARK_FIELDS:
            new_value = getattr(override, f"new_{field}")
            if new_value is not None:
                values[field] = new_value
    return SubjectMarks(**values)


def _result(source: models.ConfigurationSubject, status: CopyStatus, reason: str, new_id=None) -> CopySubjectResult:
    master = source.subject_master
    return CopySubjectResult(
        subject_master_id=source.subject_master_id,
        subject_code=master.code if master is not None else None,
        subject_name=master.name if master is not None else None,
        status=status,
        copied=status is CopyStatus.COPIED,
        reason=reason,
        new_configuration_subject_id=new_id,
    )


def _copy_subject(
    db: Session,
    target_id: int,
    source: models.ConfigurationSubject,
    override: Optional[CopySubjectConfiguration],
    request: CopyConfigurationRequest,
) -> CopySubjectResult:
    """Check, then write and commit one subject. Raises on failure."""
    existing = crud.get_configuration_subject(db, target_id, source.subject_master_id)
    if existing is not None and existing.is_active and not request.overwrite_existing:
        return _result(source, CopyStatus.SKIPPED, "already exists")

    master = crud.get_subject_master(db, source.subject_master_id)
    if master is None:
        raise NotFoundError("Subject master", source.subject_master_id)
    if not master.is_active:
        raise InvalidStateError(f"Subject master {master.code} is inactive")

    subject_type = source.effective_subject_type
    if override is not None and override.new_subject_type is not None:
        subject_type = override.new_subject_type

    marks = _resolve_marks(source, override, request.preserve_marks)
    check_marks_distribution(subject_type or master.subject_type, marks)

    if existing is None:
        existing = models.ConfigurationSubject(
            class_configuration_id=target_id,
            subject_master_id=master.id,
        )
        db.add(existing)
        reason = "Successfully copied"
    elif not existing.is_active:
        # a deactivated row counts as absent; it is revived with the copied values
        reason = "Successfully copied"
    else:
        reason = "Overwrote existing configuration"

    existing.effective_subject_type = subject_type
    for field in MARK_FIELDS:
        setattr(existing, field, getattr(marks, field))
    existing.is_active = True

    db.commit()
    return _result(source, CopyStatus.COPIED, reason, new_id=existing.id)


def copy_configuration(db: Session, request: CopyConfigurationRequest) -> CopyConfigurationResponse:
    """
    Copy a class configuration's subjects onto a target class/section/year.

    Raises:
        NotFoundError: source configuration does not exist
    """
    source = crud.get_class_configuration(db, request.source_configuration_id)
    if source is None:
        raise NotFoundError("Source configuration", request.source_configuration_id)

    log.info(
        f"[COPY] from configuration={source.id} to "
        f"{request.target_class_name} - {request.target_section} ({request.target_academic_year})"
    )

    warnings: List[str] = []
    errors: List[str] = []
    results: List[CopySubjectResult] = []

    target = _resolve_target(db, request, warnings)
    target_id = target.id
    target_name = target.full_display_name

    source_subjects = crud.get_configuration_subjects(db, source.id, active_only=True)
    overrides: Dict[int, CopySubjectConfiguration] = {
        sc.subject_master_id: sc for sc in request.subject_configurations
    }
    source_master_ids = {s.subject_master_id for s in source_subjects}
    for master_id in overrides:
        if master_id not in source_master_ids:
            warnings.append(f"Subject master {master_id} is not configured on the source; override ignored")

    copied = skipped = failed = 0
    for source_subject in source_subjects:
        override = overrides.get(source_subject.subject_master_id)
        if request.copy_all_subjects:
            included = override is None or override.include
        else:
            included = override is not None and override.include

        if not included:
            results.append(_result(source_subject, CopyStatus.SKIPPED, "Excluded by configuration"))
            skipped += 1
            continue

        try:
            result = _copy_subject(db, target_id, source_subject, override, request)
        except (BlueprintError, MarksRuleError, SQLAlchemyError) as e:
            db.rollback()
            log.warning(f"[COPY] subject master {source_subject.subject_master_id} failed: {e}")
            result = _result(source_subject, CopyStatus.FAILED, f"Error: {e}")
            errors.append(f"Subject master {source_subject.subject_master_id}: {e}")

        results.append(result)
        if result.status is CopyStatus.COPIED:
            copied += 1
        elif result.status is CopyStatus.SKIPPED:
            skipped += 1
        else:
            failed += 1

    success = failed == 0
    if success:
        message = f"Successfully copied {copied} subjects to {target_name}"
    else:
        message = f"Copied {copied} of {copied + failed} subjects to {target_name}; {failed} failed"

    log.info(f"[COPY] done: {copied} copied, {skipped} skipped, {failed} failed")
    return CopyConfigurationResponse(
        success=success,
        message=message,
        new_configuration_id=target_id,
        target_class_name=request.target_class_name,
        target_section=request.target_section,
        target_academic_year=request.target_academic_year,
        copied_subjects_count=copied,
        skipped_subjects_count=skipped,
        failed_subjects_count=failed,
        subject_results=results,
        warnings=warnings,
        errors=errors,
    )


def preview_copy(db: Session, source_id: int, target_id: int) -> List[models.ConfigurationSubject]:
    """Active source subjects whose subject master is not yet configured on the target."""
    if crud.get_class_configuration(db, source_id) is None:
        raise NotFoundError("Source configuration", source_id)
    if crud.get_class_configuration(db, target_id) is None:
        raise NotFoundError("Target configuration", target_id)

    existing = {s.subject_master_id for s in crud.get_configuration_subjects(db, target_id, active_only=True)}
    return [
        s for s in crud.get_configuration_subjects(db, source_id, active_only=True)
        if s.subject_master_id not in existing
    ]
