"""Error kinds raised by the prediction cache."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    """A single violated input constraint."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class PredictionCacheError(Exception):
    """Base class for prediction cache errors."""


class PredictionValidationError(PredictionCacheError):
    """Input rejected; carries every violation found, not just the first."""

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__("; ".join(str(v) for v in self.violations))


class StoreUnavailableError(PredictionCacheError):
    """The underlying store could not complete the operation. Safe to retry."""


class StoreTimeoutError(StoreUnavailableError):
    """A store operation exceeded its timeout."""


class PredictionNotFoundError(PredictionCacheError):
    """No prediction is stored for the match."""

    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__(f"Prediction for match {match_id} not found")


class AccessDeniedError(PredictionCacheError):
    """The prediction exists but the viewer tier may not see it."""

    def __init__(self, match_id: int, category: str):
        self.match_id = match_id
        self.category = category
        super().__init__(f"Category '{category}' requires a higher viewer tier")
