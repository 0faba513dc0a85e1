from enum import Enum


class QualityTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Archetype(str, Enum):
    ITSM = "ITSM"
    AGENCY = "AGENCY"
    SAAS = "SAAS"
    ENTERPRISE = "ENTERPRISE"


class SearchType(str, Enum):
    VECTOR = "vector"
    FALLBACK = "fallback"


class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProcessPath(str, Enum):
    VALIDATED = "validated"
    SIMPLE = "simple"


class SolutionCategory(str, Enum):
    LEAD_QUALIFICATION = "lead-qualification"
    CONTENT_GENERATION = "content-generation"
    WORKFLOW_AUTOMATION = "workflow-automation"
    DATA_PROCESSING = "data-processing"
    GENERIC = "generic"


class Tier(float, Enum):
    """Interview stages, in the order they are answered."""

    CATEGORY = 1
    OPPORTUNITY_AREA = 2
    REVENUE_MODEL = 2.5
    CHALLENGE_AREA = 3
    METRIC = 3.5
    QUANTIFICATION = 4
    PROCESS = 5
    PROCESS_VALIDATION = 6
    COMPLETE = 7
