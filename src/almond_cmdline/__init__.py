"""almond-cmdline - talk to Almond from a terminal."""

from .hookspecs import hookimpl
from .identity import LocalUser
from .shell import CommandLineShell

__version__ = "0.1.0"

__all__ = ["CommandLineShell", "LocalUser", "hookimpl"]
