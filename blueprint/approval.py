"""
Step 4 — Approval

DRAFT (initial) → APPROVED (terminal). There is no way back: an approved
blueprint rejects update and delete but can still be validated against.
"""

import enum
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from database import crud, models
from blueprint.errors import NotFoundError, InvalidStateError

log = logging.getLogger("blueprint.engine")


class BlueprintState(str, enum.Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"


def state_of(blueprint: models.ExamBlueprint) -> BlueprintState:
    return BlueprintState.APPROVED if blueprint.is_approved else BlueprintState.DRAFT


def ensure_mutable(blueprint: models.ExamBlueprint, action: str) -> None:
    """Raise InvalidStateError if the blueprint is locked by approval."""
    if state_of(blueprint) is BlueprintState.APPROVED:
        raise InvalidStateError(f"Cannot {action} an approved blueprint")


def approve_blueprint(db: Session, blueprint_id: int, approved_by: int) -> models.ExamBlueprint:
    """
    Lock a blueprint.

    The row is read FOR UPDATE so a concurrent update either finishes before
    approval or observes the approved state and fails. Approving twice keeps
    the first approver and date.
    """
    try:
        blueprint = crud.get_blueprint(db, blueprint_id, for_update=True)
        if blueprint is None:
            raise NotFoundError("Blueprint", blueprint_id)

        if state_of(blueprint) is BlueprintState.APPROVED:
            log.info(f"[APPROVE] blueprint={blueprint_id} already approved by {blueprint.approved_by}")
            db.commit()
            return blueprint

        blueprint.is_approved = True
        blueprint.approved_by = approved_by
        blueprint.approval_date = datetime.now(timezone.utc)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(blueprint)
    log.info(f"[APPROVE] blueprint={blueprint_id} approved by {approved_by}")
    return blueprint
