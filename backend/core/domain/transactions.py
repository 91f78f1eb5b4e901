"""
core.domain.transactions - Helpers for safe record mutations.

Wraps ``transaction.atomic`` and ``select_for_update`` into reusable
patterns so every service mutation follows the same approach:

* the row is re-read under a lock before it is changed;
* the optional optimistic ``version`` counter is checked and bumped.

Usage::

    from core.domain.transactions import locked_for_mutation

    with locked_for_mutation(Complaint, complaint.pk,
                             expected_version=data.get("expected_version")) as locked:
        locked.status = target
        locked.save(update_fields=["status", "version", "updated_at"])
"""

from __future__ import annotations

import contextlib
from typing import Any, Iterator, TypeVar

from django.db import models, transaction

from core.domain.exceptions import NotFound, StaleWrite

M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{model_class.__name__} {pk} does not exist.")


@contextlib.contextmanager
def locked_for_mutation(
    model_class: type[M],
    pk: Any,
    *,
    expected_version: int | None = None,
    version_field: str = "version",
) -> Iterator[M]:
    """
    Lock a row, check its optimistic version, and bump it.

    The yielded instance already carries ``version + 1``; the caller only
    has to include ``version_field`` in its ``save(update_fields=...)``.

    Raises:
        NotFound:   The row no longer exists.
        StaleWrite: ``expected_version`` was given and does not match.
    """
    with transaction.atomic():
        locked = lock_for_update(model_class, pk)
        current = getattr(locked, version_field)
        if expected_version is not None and expected_version != current:
            raise StaleWrite(expected=expected_version, current=current)
        setattr(locked, version_field, current + 1)
        yield locked
