from numbers import Integral
from typing import Any, Collection

from budget_api.schemas.transaction import CategoryValidationResult


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Integral):
        return True
    return isinstance(value, float) and value.is_integer()


def validate_category_update(category_id: Any, valid_category_ids: Collection[int]) -> CategoryValidationResult:
    """Check a category reassignment before it is persisted.

    The positive-integer rule is checked first, so ``0`` or ``-3`` report that
    error even though they are also not in ``valid_category_ids``.
    """
    if not _is_integer(category_id) or category_id < 1:
        return CategoryValidationResult(
            valid=False,
            error="Invalid category_id: must be a positive integer"
        )

    if int(category_id) not in valid_category_ids:
        return CategoryValidationResult(
            valid=False,
            error=f"Category ID {int(category_id)} does not exist or is not accessible"
        )

    return CategoryValidationResult(valid=True)
