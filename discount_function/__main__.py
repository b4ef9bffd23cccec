"""
Entry point for running discount_function as a module.

Allows running as: python -m discount_function
"""

from discount_function.cli import cli_main

if __name__ == "__main__":
    cli_main()
