"""docstore - An embeddable in-memory document store with filters, ordering and unique indices."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("docstore")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["__version__"]
