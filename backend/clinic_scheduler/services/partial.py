from typing import Any, Iterable

from pydantic import BaseModel

from clinic_scheduler.exceptions import ValidationError


def supplied_fields(changes: BaseModel, required: Iterable[str] = ()) -> dict[str, Any]:
    """
    Fields the caller actually sent, explicit nulls included.

    A field left out of the payload is absent from the result, while ``null``
    means "clear it". Clearing a column listed in ``required`` is rejected
    before anything is written.
    """
    fields = changes.model_dump(exclude_unset=True)
    cleared = sorted(name for name in required if name in fields and fields[name] is None)
    if cleared:
        raise ValidationError(
            f"Fields cannot be cleared: {', '.join(cleared)}",
            errors=[{"field": name, "message": "must not be null"} for name in cleared],
        )
    return fields
