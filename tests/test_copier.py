import pytest

from database import crud, models, schemas
from database.schemas import CopyConfigurationRequest, CopySubjectConfiguration, CopyStatus
from blueprint.errors import NotFoundError
from configuration.copier import copy_configuration, preview_copy


def _request(source, **overrides):
    values = dict(
        source_configuration_id=source.id,
        target_class_name="10",
        target_section="B",
        target_academic_year="2024-25",
    )
    values.update(overrides)
    return CopyConfigurationRequest(**values)


def _results_by_code(response):
    return {r.subject_code: r for r in response.subject_results}


def _target_subject(db, response, master):
    return crud.get_configuration_subject(db, response.new_configuration_id, master.id)


def test_copy_all_subjects_to_new_class(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(source_configuration))

    assert response.success is True
    assert response.message == "Successfully copied 3 subjects to 10 - B (2024-25)"
    assert response.copied_subjects_count == 3
    assert response.skipped_subjects_count == 0
    assert response.warnings == []
    assert response.new_configuration_id != source_configuration.id

    physics = _target_subject(db, response, subject_masters["PHY"])
    assert (physics.total_marks, physics.theory_marks, physics.practical_marks) == (100, 70, 30)
    assert physics.practical_passing_marks == 10
    assert all(r.reason == "Successfully copied" for r in response.subject_results)


def test_existing_subject_is_skipped_and_others_copy(db, source_configuration, subject_masters):
    target = crud.create_class_configuration(db, schemas.ClassConfigurationCreate(
        class_name="10", section="B", academic_year="2024-25",
    ))
    crud.create_configuration_subject(db, target.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["MATH"].id, total_marks=80, passing_marks=30,
    ))

    response = copy_configuration(db, _request(source_configuration))

    results = _results_by_code(response)
    assert results["MATH"].copied is False
    assert results["MATH"].status is CopyStatus.SKIPPED
    assert results["MATH"].reason == "already exists"
    assert results["PHY"].copied is True
    assert results["CHEM"].copied is True
    assert response.success is True
    assert response.new_configuration_id == target.id
    assert response.warnings == ["Target configuration 10 - B (2024-25) already exists; copying into it"]
    assert _target_subject(db, response, subject_masters["MATH"]).total_marks == 80


def test_overwrite_existing_replaces_marks(db, source_configuration, subject_masters):
    target = crud.create_class_configuration(db, schemas.ClassConfigurationCreate(
        class_name="10", section="B", academic_year="2024-25",
    ))
    crud.create_configuration_subject(db, target.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["MATH"].id, total_marks=80, passing_marks=30,
    ))

    response = copy_configuration(db, _request(source_configuration, overwrite_existing=True))

    assert _results_by_code(response)["MATH"].reason == "Overwrote existing configuration"
    assert _target_subject(db, response, subject_masters["MATH"]).total_marks == 100
    assert response.copied_subjects_count == 3


def test_excluded_subject_is_skipped(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(
        source_configuration,
        subject_configurations=[CopySubjectConfiguration(subject_master_id=subject_masters["CHEM"].id, include=False)],
    ))

    chemistry = _results_by_code(response)["CHEM"]
    assert chemistry.status is CopyStatus.SKIPPED
    assert chemistry.reason == "Excluded by configuration"
    assert response.copied_subjects_count == 2
    assert response.skipped_subjects_count == 1
    assert _target_subject(db, response, subject_masters["CHEM"]) is None


def test_copy_only_selected_subjects(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(
        source_configuration,
        copy_all_subjects=False,
        subject_configurations=[CopySubjectConfiguration(subject_master_id=subject_masters["PHY"].id)],
    ))

    results = _results_by_code(response)
    assert results["PHY"].status is CopyStatus.COPIED
    assert results["MATH"].reason == "Excluded by configuration"
    assert results["CHEM"].reason == "Excluded by configuration"
    assert response.message == "Successfully copied 1 subjects to 10 - B (2024-25)"


def test_override_marks_and_type(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(
        source_configuration,
        subject_configurations=[
            CopySubjectConfiguration(
                subject_master_id=subject_masters["MATH"].id,
                new_total_marks=80, new_passing_marks=28,
                new_theory_marks=80, new_theory_passing_marks=28,
            ),
            CopySubjectConfiguration(
                subject_master_id=subject_masters["CHEM"].id,
                new_subject_type=models.SubjectType.THEORY,
                new_practical_marks=None,
            ),
        ],
        preserve_marks=False,
    ))

    math = _target_subject(db, response, subject_masters["MATH"])
    assert (math.total_marks, math.passing_marks, math.theory_marks) == (80, 28, 80)

    chemistry = _target_subject(db, response, subject_masters["CHEM"])
    assert chemistry.effective_subject_type is models.SubjectType.THEORY
    assert chemistry.theory_marks is None
    assert chemistry.practical_marks is None
    assert response.success is True


def test_without_preserve_marks_split_is_dropped(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(source_configuration, preserve_marks=False))

    physics = _target_subject(db, response, subject_masters["PHY"])
    assert (physics.total_marks, physics.passing_marks) == (100, 35)
    assert physics.theory_marks is None
    assert physics.practical_marks is None


def test_inactive_subject_fails_without_stopping_the_copy(db, source_configuration, subject_masters):
    crud.update_subject_master(db, subject_masters["PHY"].id, schemas.SubjectMasterUpdate(is_active=False))

    response = copy_configuration(db, _request(source_configuration))

    physics = _results_by_code(response)["PHY"]
    assert physics.status is CopyStatus.FAILED
    assert physics.copied is False
    assert physics.reason == "Error: Subject master PHY is inactive"
    assert response.success is False
    assert response.failed_subjects_count == 1
    assert response.copied_subjects_count == 2
    assert response.message == "Copied 2 of 3 subjects to 10 - B (2024-25); 1 failed"
    assert len(response.errors) == 1
    assert _target_subject(db, response, subject_masters["MATH"]) is not None
    assert _target_subject(db, response, subject_masters["PHY"]) is None


def test_override_breaking_marks_rules_fails_that_subject(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(
        source_configuration,
        subject_configurations=[
            CopySubjectConfiguration(subject_master_id=subject_masters["MATH"].id, new_passing_marks=150),
        ],
    ))

    math = _results_by_code(response)["MATH"]
    assert math.status is CopyStatus.FAILED
    assert math.reason == "Error: Passing marks cannot exceed total marks"
    assert response.copied_subjects_count == 2


def test_override_for_unknown_subject_warns(db, source_configuration):
    response = copy_configuration(db, _request(
        source_configuration,
        subject_configurations=[CopySubjectConfiguration(subject_master_id=999)],
    ))

    assert response.warnings == ["Subject master 999 is not configured on the source; override ignored"]
    assert response.success is True


def test_missing_source_configuration(db):
    with pytest.raises(NotFoundError):
        copy_configuration(db, CopyConfigurationRequest(
            source_configuration_id=404,
            target_class_name="10",
            target_section="B",
            target_academic_year="2024-25",
        ))


def test_preview_lists_subjects_missing_on_target(db, source_configuration, subject_masters):
    target = crud.create_class_configuration(db, schemas.ClassConfigurationCreate(
        class_name="10", section="C", academic_year="2024-25",
    ))
    crud.create_configuration_subject(db, target.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["PHY"].id, total_marks=100, passing_marks=35,
    ))

    preview = preview_copy(db, source_configuration.id, target.id)

    assert [s.subject_master.code for s in preview] == ["MATH", "CHEM"]
    with pytest.raises(NotFoundError):
        preview_copy(db, source_configuration.id, 999)


def test_theory_override_drops_source_practical_marks(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(
        source_configuration,
        subject_configurations=[
            CopySubjectConfiguration(
                subject_master_id=subject_masters["PHY"].id,
                new_subject_type=models.SubjectType.THEORY,
                new_theory_marks=100,
            ),
        ],
    ))

    assert _results_by_code(response)["PHY"].status is CopyStatus.COPIED
    assert response.success is True
    physics = _target_subject(db, response, subject_masters["PHY"])
    assert physics.effective_subject_type is models.SubjectType.THEORY
    assert (physics.theory_marks, physics.theory_passing_marks) == (100, 25)
    assert physics.practical_marks is None
    assert physics.practical_passing_marks is None


def test_practical_override_drops_source_theory_marks(db, source_configuration, subject_masters):
    response = copy_configuration(db, _request(
        source_configuration,
        subject_configurations=[
            CopySubjectConfiguration(
                subject_master_id=subject_masters["CHEM"].id,
                new_subject_type=models.SubjectType.PRACTICAL,
                new_practical_marks=100,
            ),
        ],
    ))

    chemistry = _target_subject(db, response, subject_masters["CHEM"])
    assert _results_by_code(response)["CHEM"].status is CopyStatus.COPIED
    assert chemistry.theory_marks is None
    assert chemistry.practical_marks == 100


def test_deactivated_target_subject_is_revived_by_copy(db, source_configuration, subject_masters):
    target = crud.create_class_configuration(db, schemas.ClassConfigurationCreate(
        class_name="10", section="B", academic_year="2024-25",
    ))
    math = crud.create_configuration_subject(db, target.id, schemas.ConfigurationSubjectCreate(
        subject_master_id=subject_masters["MATH"].id, total_marks=80, passing_marks=30,
    ))
    assert crud.delete_configuration_subject(db, math.id) is True

    preview = preview_copy(db, source_configuration.id, target.id)
    assert [s.subject_master.code for s in preview] == ["MATH", "PHY", "CHEM"]

    response = copy_configuration(db, _request(source_configuration))

    result = _results_by_code(response)["MATH"]
    assert result.status is CopyStatus.COPIED
    assert result.reason == "Successfully copied"
    assert result.new_configuration_subject_id == math.id
    assert response.copied_subjects_count == 3

    revived = _target_subject(db, response, subject_masters["MATH"])
    assert revived.is_active is True
    assert (revived.total_marks, revived.passing_marks, revived.theory_marks) == (100, 35, 100)
    assert preview_copy(db, source_configuration.id, target.id) == []
