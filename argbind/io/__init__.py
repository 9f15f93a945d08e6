"""Loading of argument documents and rendering of bound values."""

from .file_loader import ArgumentFileLoader
from .serializer import dump_yaml, to_plain

__all__ = ["ArgumentFileLoader", "dump_yaml", "to_plain"]
