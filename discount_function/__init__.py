"""
Discount Function - order and product percentage discounts for checkout.

Implements the cart.lines.discounts.generate.run target together with the
local tooling used to exercise it: fixture loading, structural validation,
an in-process runner and a CLI.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
