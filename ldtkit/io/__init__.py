"""
ldtkit I/O Module

Filesystem access for EULUMDAT files.
"""

from ldtkit.io.ldt_file import read_ldt
from ldtkit.export.ldt_writer import write_ldt

__all__ = ["read_ldt", "write_ldt"]
