"""
Coupon arithmetic and the rupee/paise conversions used at the gateway
boundary.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .models import BookCoupon, CouponType

TWO_PLACES = Decimal("0.01")


class CouponError(Exception):
    """A coupon cannot be applied. ``status_code`` is the HTTP answer."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class Quote:
    original: Decimal
    discount: Decimal
    final: Decimal
    coupon: Optional[BookCoupon] = None


def to_paise(amount) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_paise(paise) -> Decimal:
    return (Decimal(int(paise)) / 100).quantize(TWO_PLACES)


def discount_for(price: Decimal, coupon: BookCoupon) -> Decimal:
    """Discount of ``coupon`` on ``price``, never more than the price itself."""
    if coupon.type == CouponType.PERCENTAGE:
        discount = price * coupon.discount / Decimal(100)
    else:
        discount = coupon.discount
    return min(discount, price).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def quote(price: Decimal, coupon: Optional[BookCoupon] = None) -> Quote:
    price = Decimal(price)
    if coupon is None:
        return Quote(original=price, discount=Decimal("0.00"), final=price)
    discount = discount_for(price, coupon)
    final = max(price - discount, Decimal("0.00"))
    return Quote(original=price, discount=discount, final=final, coupon=coupon)


def check_coupon(coupon: Optional[BookCoupon]) -> BookCoupon:
    """
    Raise CouponError when ``coupon`` is missing or cannot be redeemed now.
    """
    if coupon is None:
        raise CouponError("Invalid coupon code", status_code=404)
    if not coupon.active:
        raise CouponError("This coupon is no longer active")
    if coupon.is_expired:
        raise CouponError("This coupon has expired")
    if coupon.is_exhausted:
        raise CouponError("This coupon has reached its usage limit")
    return coupon


def find_coupon(code: Optional[str]) -> Optional[BookCoupon]:
    code = (code or "").strip().upper()
    if not code:
        return None
    return BookCoupon.objects.filter(code=code).first()


def redeemable_coupon(code: Optional[str]) -> Optional[BookCoupon]:
    """The coupon behind ``code`` if it can be applied, else None."""
    coupon = find_coupon(code)
    if coupon is None:
        return None
    try:
        return check_coupon(coupon)
    except CouponError:
        return None
