"""Failure taxonomy and exceptions for entity checking."""

from dataclasses import dataclass
from enum import Enum


class FailureKind(Enum):
    """Kinds of validation failure."""

    MISSING_REFERENCE = "missing_reference"
    MALFORMED_URL = "malformed_url"
    UNRESOLVED_SCHEMA = "unresolved_schema"
    TYPE_MISMATCH = "type_mismatch"
    CARDINALITY_MISMATCH = "cardinality_mismatch"
    INVARIANT_VIOLATION = "invariant_violation"


@dataclass(frozen=True)
class Failure:
    """A single validation failure.

    Failures raised deep inside a graph are wrapped by every enclosing node on
    the way up, so the outermost failure carries the full path and the
    innermost one (``root_cause``) tells what actually went wrong.

    Attributes:
        kind: What kind of violation this is
        message: Human readable description
        path: Node segments from the checked root down to the failing node
        cause: The wrapped child failure, if any
    """

    kind: FailureKind
    message: str
    path: tuple[str, ...] = ()
    cause: "Failure | None" = None

    def wrap(self, message: str, segment: str | None = None) -> "Failure":
        """Wrap this failure into a parent failure.

        Args:
            message: Message of the parent node
            segment: Path segment identifying the parent node

        Returns:
            New failure with the same kind, having this failure as cause
        """
        path = self.path if segment is None else (segment,) + self.path
        return Failure(kind=self.kind, message=message, path=path, cause=self)

    @property
    def root_cause(self) -> "Failure":
        failure = self
        while failure.cause is not None:
            failure = failure.cause
        return failure

    def chain(self) -> list["Failure"]:
        """Return this failure followed by all of its causes."""
        chain = []
        failure: Failure | None = self
        while failure is not None:
            chain.append(failure)
            failure = failure.cause
        return chain

    def describe(self) -> str:
        """Render the failure chain as indented text."""
        lines = [f"[{self.kind.value}] {' > '.join(self.path) or '<root>'}"]
        for depth, failure in enumerate(self.chain()):
            lines.append("  " * (depth + 1) + failure.message)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a check: either ok or carrying exactly one failure."""

    failure: Failure | None = None

    @classmethod
    def success(cls) -> "CheckResult":
        return cls()

    @classmethod
    def fail(cls, kind: FailureKind, message: str, path: tuple[str, ...] = ()) -> "CheckResult":
        return cls(Failure(kind=kind, message=message, path=path))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_failure(self) -> None:
        """Raise IntegrityError if the check failed.

        Raises:
            IntegrityError: If this result carries a failure
        """
        if self.failure is not None:
            raise IntegrityError(self.failure)


class EntityCheckerError(Exception):
    """Base class for entity checker errors."""


class IntegrityError(EntityCheckerError):
    """Raised when a checked object does not comply with its schema."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> FailureKind:
        return self.failure.kind


class SchemaNotFoundError(EntityCheckerError, LookupError):
    """Raised when a schema element referenced by URL cannot be found."""


class RegistryError(EntityCheckerError):
    """Raised when a schema registry cannot serve a lookup."""


class LoaderError(EntityCheckerError, ValueError):
    """Raised when an input document cannot be turned into model objects."""
