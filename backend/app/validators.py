"""
Ledgerline Backend — Entity Validators
========================================

What:  Required-field checks for create routes and the allowed-field filter
       for partial updates.
When:  Called by route handlers before the service issues any query, so a
       rejected request never touches the store.

Emptiness follows the original API: a field is missing when it is absent,
null, the empty string, or numeric zero (a zero amount or id is rejected).
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping

from app.exceptions import ValidationError

NO_FIELDS_TO_UPDATE = "No fields to update"


def is_blank(value: Any) -> bool:
    """True for None, "", 0 / 0.0 / Decimal(0) and False."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (bool, int, float, Decimal)):
        return value == 0
    return False


def require_fields(payload: Mapping[str, Any], fields: Iterable[str], message: str) -> None:
    """
    Raise ValidationError(message) if any of `fields` is blank in `payload`.

    Example:
        require_fields(body, ("name", "email"), "Name and email are required")
    """
    missing = [name for name in fields if is_blank(payload.get(name))]
    if missing:
        raise ValidationError(message=message, fields=missing)


def updatable_fields(payload: Mapping[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    """
    Subset of `allowed` that is present in the request body, in `allowed` order.

    `payload` must contain only keys the client actually sent
    (`model_dump(exclude_unset=True)`); an explicit null counts as sent.
    Unknown keys are ignored.

    Raises:
        ValidationError: nothing left to update.
    """
    changes = {name: payload[name] for name in allowed if name in payload}
    if not changes:
        raise ValidationError(message=NO_FIELDS_TO_UPDATE, context={"allowed": list(allowed)})
    return changes
