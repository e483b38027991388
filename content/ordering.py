"""
Helpers for models with a manual ``order`` column (banners, cards,
foundations, Gopal Pariwar profiles).

Orders are kept dense: new rows go to the end, deleting a row closes the
gap and moving a row shifts the rows in between by one.
"""

from typing import Iterable, List, Tuple

from django.db import transaction
from django.db.models import F, Max


class InvalidOrderList(ValueError):
    pass


def next_order(model) -> int:
    current = model._default_manager.aggregate(highest=Max("order"))["highest"]
    return (current or 0) + 1


def close_gap(model, deleted_order: int) -> int:
    """Pull every row after ``deleted_order`` up by one."""
    return model._default_manager.filter(order__gt=deleted_order).update(order=F("order") - 1)


def move_to(instance, new_order: int) -> None:
    """
    Move ``instance`` to ``new_order`` and shift the rows in between.

    Moving up pushes rows in ``[new, old)`` down by one; moving down pulls
    rows in ``(old, new]`` up by one. The instance is saved.
    """
    model = type(instance)
    old_order = instance.order
    if new_order == old_order:
        return

    siblings = model._default_manager.exclude(pk=instance.pk)
    with transaction.atomic():
        if new_order < old_order:
            siblings.filter(order__gte=new_order, order__lt=old_order).update(order=F("order") + 1)
        else:
            siblings.filter(order__gt=old_order, order__lte=new_order).update(order=F("order") - 1)
        instance.order = new_order
        instance.save(update_fields=["order", "updated_at"])


def parse_order_list(order_list) -> List[Tuple[int, int]]:
    """
    Validate a reorder payload ``[{"id": 1, "order": 0}, ...]``.

    Raises:
        InvalidOrderList: If the payload is not a list of id/order pairs
    """
    if not isinstance(order_list, list):
        raise InvalidOrderList("Invalid order list")
    pairs = []
    for item in order_list:
        try:
            pairs.append((int(item["id"]), int(item["order"])))
        except (KeyError, TypeError, ValueError):
            raise InvalidOrderList("Invalid order list")
    return pairs


def apply_order(model, pairs: Iterable[Tuple[int, int]]) -> None:
    """Write all new positions in a single transaction."""
    with transaction.atomic():
        for pk, order in pairs:
            model._default_manager.filter(pk=pk).update(order=order)
