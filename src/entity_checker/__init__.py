"""Entity Checker - check entity graphs against a knowledge base schema."""

from entity_checker.checker import Checker
from entity_checker.errors import CheckResult, Failure, FailureKind, IntegrityError
from entity_checker.results import AssignmentResult, IDResult

__all__ = ["AssignmentResult", "CheckResult", "Checker", "Failure", "FailureKind", "IDResult", "IntegrityError"]
