"""Implementation Readiness Engine.

Deterministic readiness scoring and rule-based implementation planning
for contract-management onboarding questionnaires.
"""

from .engine import IntakeValidationError, ReadinessEngine, validate_intake
from .schema import ImplementationPlan, IntakeResponse, ReadinessAssessment, ReadinessResult

__version__ = "1.0.0"

__all__ = [
    "ImplementationPlan",
    "IntakeResponse",
    "IntakeValidationError",
    "ReadinessAssessment",
    "ReadinessEngine",
    "ReadinessResult",
    "validate_intake",
]
