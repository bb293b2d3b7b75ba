"""Validation and category assignment for ingested predictions."""

from collections.abc import Mapping
from typing import Any, NamedTuple

from pydantic import ValidationError

from predcache.exceptions import Violation
from predcache.models import Category
from predcache.schemas import PredictionCreate


class Classification(NamedTuple):
    """Outcome of classifying one raw payload."""

    category: Category | None
    errors: list[Violation]
    prediction: PredictionCreate | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


def classify(raw: Any) -> Classification:
    """Validate and normalize a raw payload and decide its category.

    Every violated constraint is reported, not only the first. An explicit
    ``category`` wins over the legacy ``is_vip`` flag; with neither, the
    payload is rejected since the generator decides the banding.
    """
    if not isinstance(raw, Mapping):
        return Classification(None, [Violation("payload", "Input should be an object")])

    errors: list[Violation] = []
    prediction = None
    try:
        prediction = PredictionCreate.model_validate(dict(raw))
    except ValidationError as e:
        errors.extend(_to_violations(e))

    if raw.get("category") is None and raw.get("is_vip") is not True:
        errors.append(
            Violation("category", "Category is required unless is_vip is set")
        )

    if errors:
        return Classification(None, errors)

    category = prediction.category or Category.VIP
    return Classification(
        category, [], prediction.model_copy(update={"category": category})
    )


def _to_violations(error: ValidationError) -> list[Violation]:
    return [
        Violation(".".join(str(part) for part in detail["loc"]), detail["msg"])
        for detail in error.errors()
    ]
