"""Internal contracts for the structured-completion pipeline."""

from models.schemas.attempt import ModelAttempt
from models.schemas.candidate import CandidateObject

__all__ = [
    "ModelAttempt",
    "CandidateObject",
]
