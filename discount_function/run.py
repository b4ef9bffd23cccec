"""
The cart.lines.discounts.generate.run function.

Discounts the order subtotal by the configured percentage and the most
expensive cart line by twice that percentage, depending on which discount
classes the discount carries.
"""

from __future__ import annotations

import logging
import math
import re
from decimal import Decimal
from typing import Optional

from discount_function.errors import NoCartLinesError
from discount_function.models import (
    CartLine,
    CartLineTarget,
    CartLinesDiscountsGenerateRunInput,
    CartLinesDiscountsGenerateRunResult,
    CartOperation,
    DiscountClass,
    Metafield,
    OrderDiscountCandidate,
    OrderDiscountSelectionStrategy,
    OrderDiscountsAddOperation,
    OrderSubtotalTarget,
    Percentage,
    ProductDiscountCandidate,
    ProductDiscountSelectionStrategy,
    ProductDiscountsAddOperation,
)

logger = logging.getLogger(__name__)

DEFAULT_DISCOUNT_PERCENTAGE = 10.0
PRODUCT_DISCOUNT_MULTIPLIER = 2.0

# Float grammar accepted by the host: ASCII digits only, no surrounding
# whitespace, no digit separators.
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)


def parse_percentage(metafield: Optional[Metafield]) -> float:
    """
    Read the discount percentage from the discount metafield.

    Falls back to DEFAULT_DISCOUNT_PERCENTAGE when the metafield is
    missing or its value is not a number.
    """
    if metafield is None:
        return DEFAULT_DISCOUNT_PERCENTAGE
    if not _FLOAT_PATTERN.fullmatch(metafield.value):
        logger.debug("Ignoring non-numeric discount percentage %r", metafield.value)
        return DEFAULT_DISCOUNT_PERCENTAGE
    return float(metafield.value)


def format_percentage(value: float) -> str:
    """
    Format a percentage for a discount message: 10.0 -> "10", 12.5 -> "12.5".

    Fractions use the shortest round-trip digits in fixed-point notation, so
    1e-05 renders as "0.00001". Negative zero keeps its sign.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        digits = str(int(value))
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-" + digits
        return digits
    return format(Decimal(repr(value)), "f")


def find_max_cart_line(lines: list[CartLine]) -> CartLine:
    """
    Return the line with the largest subtotal amount.

    On ties the first line wins. NaN amounts never replace the current
    maximum.

    Raises:
        NoCartLinesError: If there are no lines.
    """
    if not lines:
        raise NoCartLinesError()

    max_line = lines[0]
    for line in lines[1:]:
        if line.subtotal_amount.amount > max_line.subtotal_amount.amount:
            max_line = line
    return max_line


def cart_lines_discounts_generate_run(
    run_input: CartLinesDiscountsGenerateRunInput,
) -> CartLinesDiscountsGenerateRunResult:
    """
    Generate order and product discount operations for a cart.

    Args:
        run_input: The decoded function input.

    Returns:
        The result with an order discount (ORDER class) followed by a
        product discount on the most expensive line (PRODUCT class).

    Raises:
        NoCartLinesError: If the cart is empty.
    """
    max_cart_line = find_max_cart_line(run_input.cart.lines)

    has_order_discount_class = run_input.discount.has_class(DiscountClass.ORDER)
    has_product_discount_class = run_input.discount.has_class(DiscountClass.PRODUCT)

    if not has_order_discount_class and not has_product_discount_class:
        return CartLinesDiscountsGenerateRunResult(operations=[])

    discount_percentage = parse_percentage(run_input.discount.metafield)
    operations: list[CartOperation] = []

    if has_order_discount_class:
        operations.append(
            OrderDiscountsAddOperation(
                selection_strategy=OrderDiscountSelectionStrategy.FIRST,
                candidates=[
                    OrderDiscountCandidate(
                        targets=[OrderSubtotalTarget(excluded_cart_line_ids=[])],
                        message=f"{format_percentage(discount_percentage)}% OFF ORDER",
                        value=Percentage(value=discount_percentage),
                    )
                ],
            )
        )

    if has_product_discount_class:
        product_percentage = discount_percentage * PRODUCT_DISCOUNT_MULTIPLIER
        operations.append(
            ProductDiscountsAddOperation(
                selection_strategy=ProductDiscountSelectionStrategy.FIRST,
                candidates=[
                    ProductDiscountCandidate(
                        targets=[CartLineTarget(id=max_cart_line.id, quantity=None)],
                        message=f"{format_percentage(product_percentage)}% OFF PRODUCT",
                        value=Percentage(value=product_percentage),
                    )
                ],
            )
        )

    logger.debug(
        "Generated %d discount operation(s) at %s%%",
        len(operations),
        format_percentage(discount_percentage),
    )
    return CartLinesDiscountsGenerateRunResult(operations=operations)
