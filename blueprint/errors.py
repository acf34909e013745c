"""
Typed failures raised by the blueprint and configuration engines.

NotFoundError     — a referenced row does not exist
InvalidStateError — the row exists but the operation is not allowed in its state
InvalidPaperTotalError — the paper structure has no usable total marks, so
                         weightage cannot be computed
"""


class BlueprintError(Exception):
    """Base class for engine failures callers are expected to branch on."""


class NotFoundError(BlueprintError):
    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} with ID {entity_id} not found")


class InvalidStateError(BlueprintError):
    pass


class InvalidPaperTotalError(InvalidStateError):
    def __init__(self, paper_total_marks):
        self.paper_total_marks = paper_total_marks
        super().__init__(
            f"Paper structure total marks must be greater than zero (got {paper_total_marks})"
        )
