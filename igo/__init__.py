"""
igo - an interactive prompt for Go.

Go has no interpreter, so every statement is spliced into a program
that is recompiled and rerun from the start; only the output of the
newest statement is shown.

Usage:
    igo                # start from an empty program
    igo path/to/main.go  # extend an existing file
"""

__version__ = "0.1.0"

from igo.config.models import IgoConfig
from igo.errors import IgoError

__all__ = [
    "IgoConfig",
    "IgoError",
    "__version__",
]
