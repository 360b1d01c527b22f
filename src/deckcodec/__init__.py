"""deckcodec: read .pptx packages into an immutable document model and write them back."""

__version__ = "0.1.0"

from deckcodec.models import ExportResult, ImportResult, Omission, OmissionKind, Presentation
from deckcodec.reading.importer import import_presentation
from deckcodec.reading.package import InvalidPackageError
from deckcodec.writing.exporter import export_presentation

__all__ = [
    "ExportResult",
    "ImportResult",
    "InvalidPackageError",
    "Omission",
    "OmissionKind",
    "Presentation",
    "__version__",
    "export_presentation",
    "import_presentation",
]
