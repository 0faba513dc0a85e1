from .pipeline import AssessmentPipeline, AssessmentReport

__all__ = ["AssessmentPipeline", "AssessmentReport"]
