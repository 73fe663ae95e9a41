"""Entity reconciliation results."""

from dataclasses import dataclass, field
from enum import Enum

from entity_checker.models import Entity


class AssignmentResult(Enum):
    """Outcome of matching an entity against the ones already stored."""

    # No match found and enough information to mint a new identity
    NEW = "new"
    # One or more matches found, the best candidate was selected
    REUSE = "reuse"
    # Not enough information to decide
    INVALID = "invalid"


@dataclass
class IDResult:
    """Result of an entity reconciliation attempt.

    Attributes:
        assignment_result: What the reconciliation decided
        url: URL of the matched entity for REUSE, of the new identity for NEW, None otherwise
        result_entity: Best candidate for REUSE, copy of the input entity with the new URL for NEW
        entities: Candidate entities for REUSE, empty otherwise
    """

    assignment_result: AssignmentResult | None
    url: str | None = None
    result_entity: Entity | None = None
    entities: list[Entity] | None = field(default_factory=list)
