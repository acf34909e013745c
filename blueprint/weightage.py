"""
Step 1 — Weightage

A chapter distribution's weightage is its marks as a percentage of the
paper structure's total marks.
"""

from blueprint.errors import InvalidPaperTotalError


def compute_weightage(total_marks: float, paper_total_marks) -> float:
    """
    Return total_marks / paper_total_marks * 100.

    Raises InvalidPaperTotalError when the paper total is missing or not
    positive; the owning create/update is rejected instead of storing
    NaN or infinity.
    """
    if paper_total_marks is None or paper_total_marks <= 0:
        raise InvalidPaperTotalError(paper_total_marks)
    return float(total_marks) / float(paper_total_marks) * 100
