import pytest

from database import models
from blueprint import builder
from blueprint.approval import approve_blueprint
from blueprint.errors import NotFoundError, InvalidStateError, InvalidPaperTotalError


def _distribution_rows(db, blueprint_id):
    return [
        (d.position, d.chapter_name, d.question_type, d.question_count, d.total_marks, round(d.weightage_percentage, 6))
        for d in db.query(models.ChapterDistribution)
        .filter(models.ChapterDistribution.blueprint_id == blueprint_id)
        .order_by(models.ChapterDistribution.position)
    ]


def test_create_blueprint_computes_weightage_in_request_order(db, exam_configuration, chapter):
    blueprint = builder.create_blueprint(
        db,
        exam_configuration_id=exam_configuration.id,
        name="Term 1",
        description="Mid-year paper",
        chapter_distributions=[
            chapter("Algebra", ("SHORT_ANSWER", 3, 15), ("LONG_ANSWER", 1, 10)),
            chapter("Geometry", ("MULTIPLE_CHOICE", 10, 10)),
        ],
    )

    assert blueprint.is_approved is False
    assert blueprint.paper_structure_id == exam_configuration.paper_structure_id
    assert _distribution_rows(db, blueprint.id) == [
        (0, "Algebra", models.QuestionType.SHORT_ANSWER, 3, 15.0, 15.0),
        (1, "Algebra", models.QuestionType.LONG_ANSWER, 1, 10.0, 10.0),
        (2, "Geometry", models.QuestionType.MULTIPLE_CHOICE, 10, 10.0, 10.0),
    ]


def test_create_blueprint_missing_exam_configuration(db, chapter):
    with pytest.raises(NotFoundError):
        builder.create_blueprint(db, 999, "Ghost", None, [chapter("Algebra", ("SHORT_ANSWER", 1, 5))])


def test_create_blueprint_rejects_zero_paper_total(db, chapter):
    structure = models.QuestionPaperStructure(name="Broken", total_marks=0)
    db.add(structure)
    db.flush()
    config = models.ExamConfiguration(exam_id=1, grade="9", subject="Science", paper_structure_id=structure.id)
    db.add(config)
    db.commit()

    with pytest.raises(InvalidPaperTotalError):
        builder.create_blueprint(db, config.id, "Draft", None, [chapter("Cells", ("SHORT_ANSWER", 2, 4))])

    assert db.query(models.ExamBlueprint).count() == 0
    assert db.query(models.ChapterDistribution).count() == 0


def test_update_replaces_every_distribution(db, exam_configuration, chapter):
    blueprint = builder.create_blueprint(
        db, exam_configuration.id, "Term 1", None,
        [chapter("Algebra", ("SHORT_ANSWER", 3, 15)), chapter("Geometry", ("LONG_ANSWER", 2, 20))],
    )

    updated = builder.update_blueprint(
        db, blueprint.id, "Term 1 (revised)", "fewer chapters",
        [chapter("Trigonometry", ("MULTIPLE_CHOICE", 5, 5))],
    )

    assert updated.name == "Term 1 (revised)"
    assert updated.description == "fewer chapters"
    assert _distribution_rows(db, blueprint.id) == [
        (0, "Trigonometry", models.QuestionType.MULTIPLE_CHOICE, 5, 5.0, 5.0),
    ]
    assert db.query(models.ChapterDistribution).count() == 1


def test_update_missing_blueprint(db, chapter):
    with pytest.raises(NotFoundError):
        builder.update_blueprint(db, 42, "x", None, [])


def test_approved_blueprint_rejects_update_and_keeps_distributions(db, exam_configuration, chapter):
    blueprint = builder.create_blueprint(
        db, exam_configuration.id, "Final", None, [chapter("Algebra", ("SHORT_ANSWER", 3, 15))],
    )
    approve_blueprint(db, blueprint.id, approved_by=11)
    before = _distribution_rows(db, blueprint.id)

    with pytest.raises(InvalidStateError):
        builder.update_blueprint(db, blueprint.id, "Changed", None, [chapter("Geometry", ("LONG_ANSWER", 1, 10))])

    assert _distribution_rows(db, blueprint.id) == before
    assert builder.get_blueprint(db, blueprint.id).name == "Final"


def test_approved_blueprint_rejects_delete(db, exam_configuration, chapter):
    blueprint = builder.create_blueprint(
        db, exam_configuration.id, "Final", None, [chapter("Algebra", ("SHORT_ANSWER", 3, 15))],
    )
    approve_blueprint(db, blueprint.id, approved_by=11)

    with pytest.raises(InvalidStateError):
        builder.delete_blueprint(db, blueprint.id)

    assert builder.get_blueprint(db, blueprint.id).is_approved is True
    assert len(_distribution_rows(db, blueprint.id)) == 1


def test_delete_draft_removes_distributions(db, exam_configuration, chapter):
    blueprint = builder.create_blueprint(
        db, exam_configuration.id, "Draft", None, [chapter("Algebra", ("SHORT_ANSWER", 3, 15))],
    )
    blueprint_id = blueprint.id

    builder.delete_blueprint(db, blueprint_id)

    with pytest.raises(NotFoundError):
        builder.get_blueprint(db, blueprint_id)
    assert db.query(models.ChapterDistribution).count() == 0


def test_list_blueprints_by_exam(db, exam_configuration, chapter):
    first = builder.create_blueprint(db, exam_configuration.id, "A", None, [])
    second = builder.create_blueprint(db, exam_configuration.id, "B", None, [])

    assert [b.id for b in builder.list_blueprints_by_exam(db, exam_configuration.exam_id)] == [first.id, second.id]
    assert builder.list_blueprints_by_exam(db, exam_configuration.exam_id + 1) == []


def test_response_groups_chapters_in_first_appearance_order(db, exam_configuration, chapter):
    blueprint = builder.create_blueprint(
        db, exam_configuration.id, "Grouped", None,
        [
            chapter("Geometry", ("LONG_ANSWER", 2, 20)),
            chapter("Algebra", ("SHORT_ANSWER", 3, 15), ("TRUE_FALSE", 0, 0)),
            chapter("Geometry", ("MULTIPLE_CHOICE", 5, 5)),
        ],
    )

    response = builder.to_blueprint_response(blueprint)

    assert response.state == "DRAFT"
    assert response.exam_id == 7
    assert response.paper_total_marks == 100
    assert [c.chapter_name for c in response.chapter_distributions] == ["Geometry", "Algebra"]

    geometry, algebra = response.chapter_distributions
    assert geometry.total_marks == pytest.approx(25.0)
    assert geometry.weightage_percentage == pytest.approx(25.0)
    assert [s.section_name for s in geometry.section_distributions] == [
        "Long Answer Questions", "Multiple Choice Questions",
    ]
    assert geometry.section_distributions[0].marks_per_question == pytest.approx(10.0)
    assert algebra.section_distributions[0].marks_per_question == pytest.approx(5.0)
    assert algebra.section_distributions[1].marks_per_question == 0.0
