"""
Data models for the cart.lines.discounts.generate.run target.

This module defines the input and output contracts of the discount function:
- DiscountClass and selection strategy enums
- Input dataclasses (cart, cart lines, discount, metafield) with from_dict
- Output dataclasses (targets, candidates, operations, result) with to_dict

Documents on the wire use camelCase keys. Input dataclasses raise InputError
naming the offending path when a document does not match the contract.
Output dataclasses omit optional fields that are None.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from discount_function.errors import InputError


# ============================================================
# Enums
# ============================================================

class DiscountClass(str, Enum):
    """Discount classes a discount is allowed to apply."""
    ORDER = "ORDER"
    PRODUCT = "PRODUCT"
    SHIPPING = "SHIPPING"


class OrderDiscountSelectionStrategy(str, Enum):
    """How the host picks among order discount candidates."""
    FIRST = "FIRST"
    MAXIMUM = "MAXIMUM"


class ProductDiscountSelectionStrategy(str, Enum):
    """How the host picks among product discount candidates."""
    FIRST = "FIRST"
    ALL = "ALL"
    MAXIMUM = "MAXIMUM"


# ============================================================
# Input helpers
# ============================================================

def _require_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InputError(f"expected an object, got {type(value).__name__}", path)
    return value


def _require_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise InputError(f"expected a list, got {type(value).__name__}", path)
    return value


def _require_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise InputError(f"expected a string, got {type(value).__name__}", path)
    return value


def parse_amount(value: Any, path: str = "amount") -> float:
    """
    Parse a Decimal scalar into a float.

    The host encodes Decimal values either as JSON numbers or as decimal
    strings such as "20.0".

    Raises:
        InputError: If the value is neither a number nor a numeric string.
    """
    if isinstance(value, bool):
        raise InputError("expected a decimal, got bool", path)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise InputError(f"invalid decimal {value!r}", path)
    raise InputError(f"expected a decimal, got {type(value).__name__}", path)


# ============================================================
# Input dataclasses
# ============================================================

@dataclass
class Money:
    """A monetary amount, optionally tagged with its currency."""
    amount: float
    currency_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "money") -> Money:
        data = _require_dict(data, path)
        if "amount" not in data:
            raise InputError("missing required field 'amount'", path)
        currency_code = data.get("currencyCode")
        if currency_code is not None:
            currency_code = _require_str(currency_code, f"{path}.currencyCode")
        return cls(
            amount=parse_amount(data["amount"], f"{path}.amount"),
            currency_code=currency_code,
        )


@dataclass
class CartLine:
    """A single line of the cart and its subtotal."""
    id: str
    subtotal_amount: Money
    quantity: int = 1

    @classmethod
    def from_dict(cls, data: Any, path: str = "line") -> CartLine:
        data = _require_dict(data, path)
        if "id" not in data:
            raise InputError("missing required field 'id'", path)
        cost = _require_dict(data.get("cost"), f"{path}.cost")
        if "subtotalAmount" not in cost:
            raise InputError("missing required field 'subtotalAmount'", f"{path}.cost")

        quantity = data.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InputError(
                f"expected an integer, got {type(quantity).__name__}", f"{path}.quantity"
            )

        return cls(
            id=_require_str(data["id"], f"{path}.id"),
            subtotal_amount=Money.from_dict(
                cost["subtotalAmount"], f"{path}.cost.subtotalAmount"
            ),
            quantity=quantity,
        )


@dataclass
class Cart:
    """The cart being evaluated, with lines in host order."""
    lines: list[CartLine] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, path: str = "cart") -> Cart:
        data = _require_dict(data, path)
        raw_lines = _require_list(data.get("lines", []), f"{path}.lines")
        return cls(
            lines=[
                CartLine.from_dict(line, f"{path}.lines[{index}]")
                for index, line in enumerate(raw_lines)
            ]
        )


@dataclass
class Metafield:
    """Free-form configuration stored on the discount."""
    value: str

    @classmethod
    def from_dict(cls, data: Any, path: str = "metafield") -> Metafield:
        data = _require_dict(data, path)
        return cls(value=_require_str(data.get("value"), f"{path}.value"))


@dataclass
class Discount:
    """The discount being evaluated and its configuration."""
    discount_classes: list[DiscountClass] = field(default_factory=list)
    metafield: Optional[Metafield] = None

    def has_class(self, discount_class: DiscountClass) -> bool:
        return discount_class in self.discount_classes

    @classmethod
    def from_dict(cls, data: Any, path: str = "discount") -> Discount:
        data = _require_dict(data, path)
        raw_classes = _require_list(
            data.get("discountClasses", []), f"{path}.discountClasses"
        )

        classes = []
        for index, raw in enumerate(raw_classes):
            class_path = f"{path}.discountClasses[{index}]"
            try:
                classes.append(DiscountClass(_require_str(raw, class_path)))
            except ValueError:
                raise InputError(f"unknown discount class {raw!r}", class_path)

        raw_metafield = data.get("metafield")
        metafield = (
            Metafield.from_dict(raw_metafield, f"{path}.metafield")
            if raw_metafield is not None
            else None
        )
        return cls(discount_classes=classes, metafield=metafield)


@dataclass
class CartLinesDiscountsGenerateRunInput:
    """Input document for the cart.lines.discounts.generate.run target."""
    cart: Cart
    discount: Discount

    @classmethod
    def from_dict(cls, data: Any) -> CartLinesDiscountsGenerateRunInput:
        """Create from a decoded JSON input document."""
        data = _require_dict(data, "input")
        for key in ("cart", "discount"):
            if key not in data:
                raise InputError(f"missing required field '{key}'", "input")
        return cls(
            cart=Cart.from_dict(data["cart"], "cart"),
            discount=Discount.from_dict(data["discount"], "discount"),
        )


# ============================================================
# Output dataclasses
# ============================================================

@dataclass
class Percentage:
    """A percentage discount value."""
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"percentage": {"value": self.value}}


@dataclass
class OrderSubtotalTarget:
    """Targets the order subtotal, minus any excluded lines."""
    excluded_cart_line_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"orderSubtotal": {"excludedCartLineIds": list(self.excluded_cart_line_ids)}}


@dataclass
class CartLineTarget:
    """Targets a single cart line, optionally limited to a quantity."""
    id: str
    quantity: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        target: dict[str, Any] = {"id": self.id}
        if self.quantity is not None:
            target["quantity"] = self.quantity
        return {"cartLine": target}


@dataclass
class OrderDiscountCandidate:
    """A proposed order-level discount."""
    targets: list[OrderSubtotalTarget]
    value: Percentage
    message: Optional[str] = None
    conditions: Optional[list[dict[str, Any]]] = None
    associated_discount_code: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        candidate: dict[str, Any] = {
            "targets": [target.to_dict() for target in self.targets],
        }
        if self.message is not None:
            candidate["message"] = self.message
        candidate["value"] = self.value.to_dict()
        if self.conditions is not None:
            candidate["conditions"] = self.conditions
        if self.associated_discount_code is not None:
            candidate["associatedDiscountCode"] = {"code": self.associated_discount_code}
        return candidate


@dataclass
class ProductDiscountCandidate:
    """A proposed product-level discount."""
    targets: list[CartLineTarget]
    value: Percentage
    message: Optional[str] = None
    associated_discount_code: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        candidate: dict[str, Any] = {
            "targets": [target.to_dict() for target in self.targets],
        }
        if self.message is not None:
            candidate["message"] = self.message
        candidate["value"] = self.value.to_dict()
        if self.associated_discount_code is not None:
            candidate["associatedDiscountCode"] = {"code": self.associated_discount_code}
        return candidate


@dataclass
class OrderDiscountsAddOperation:
    """Adds order discount candidates."""
    candidates: list[OrderDiscountCandidate]
    selection_strategy: OrderDiscountSelectionStrategy = OrderDiscountSelectionStrategy.FIRST

    def to_dict(self) -> dict[str, Any]:
        return {
            "orderDiscountsAdd": {
                "selectionStrategy": self.selection_strategy.value,
                "candidates": [candidate.to_dict() for candidate in self.candidates],
            }
        }


@dataclass
class ProductDiscountsAddOperation:
    """Adds product discount candidates."""
    candidates: list[ProductDiscountCandidate]
    selection_strategy: ProductDiscountSelectionStrategy = ProductDiscountSelectionStrategy.FIRST

    def to_dict(self) -> dict[str, Any]:
        return {
            "productDiscountsAdd": {
                "selectionStrategy": self.selection_strategy.value,
                "candidates": [candidate.to_dict() for candidate in self.candidates],
            }
        }


CartOperation = Union[OrderDiscountsAddOperation, ProductDiscountsAddOperation]


@dataclass
class CartLinesDiscountsGenerateRunResult:
    """Output document for the cart.lines.discounts.generate.run target."""
    operations: list[CartOperation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"operations": [operation.to_dict() for operation in self.operations]}
