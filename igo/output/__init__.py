"""Terminal output for the REPL."""

from igo.output.processor import OutputProcessor

__all__ = ["OutputProcessor"]
