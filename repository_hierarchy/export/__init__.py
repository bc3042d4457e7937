"""Export of repository hierarchies as EAD/XML finding aids."""

from repository_hierarchy.export.download import (
    export_document,
    response_for_document_download,
    write_document,
)
from repository_hierarchy.export.ead import EADBuilder, build_ead_document, serialize_document

__all__ = [
    "EADBuilder",
    "build_ead_document",
    "export_document",
    "response_for_document_download",
    "serialize_document",
    "write_document",
]
