from .errors import AssessmentError, InvalidAnswerError, InvalidSelectionError, PreconditionError
from .machine import AssessmentStateMachine, is_assessment_complete
from .summary import (
    build_raw_answers,
    generate_assessment_summary,
    generate_process_validation_summary,
    generate_research_query,
)

__all__ = [
    "AssessmentError",
    "InvalidAnswerError",
    "InvalidSelectionError",
    "PreconditionError",
    "AssessmentStateMachine",
    "is_assessment_complete",
    "build_raw_answers",
    "generate_assessment_summary",
    "generate_process_validation_summary",
    "generate_research_query",
]
