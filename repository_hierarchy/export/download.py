"""Delivery of exported documents as file downloads.

The serialized document is written into an in-memory buffer first. Failures
while filling the buffer are raised before any response is started; the
buffer is then streamed to the client and closed once it has been read.
"""

import io
import logging
from collections.abc import AsyncIterator, Callable
from pathlib import Path

from lxml import etree
from quart import Response

from repository_hierarchy.exceptions import ExportError
from repository_hierarchy.export.ead import serialize_document

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
XML_CONTENT_TYPE = "text/xml; charset=utf-8"


def export_document(
    tree: etree._ElementTree, stream_factory: Callable[[], io.BytesIO] = io.BytesIO
) -> io.BytesIO:
    """Write a document into a fresh buffer, positioned at its start.

    Args:
        tree: Document tree
        stream_factory: Creates the buffer

    Returns:
        The filled buffer; the caller closes it

    Raises:
        ExportError: If the buffer cannot be created, written or rewound
    """
    data = serialize_document(tree)

    try:
        stream = stream_factory()
    except OSError as e:
        raise ExportError("Failed to create temporary stream") from e

    try:
        written = stream.write(data)
        if written != len(data):
            raise ExportError("Unable to write to stream.  Perhaps the disk is full?")
        try:
            stream.seek(0)
        except OSError as e:
            raise ExportError("Cannot rewind temporary stream") from e
    except ExportError:
        stream.close()
        raise
    except OSError as e:
        stream.close()
        raise ExportError("Unable to write to stream.  Perhaps the disk is full?") from e

    logger.debug(f"Exported document of {len(data)} bytes")
    return stream


async def _stream_body(stream: io.BytesIO) -> AsyncIterator[bytes]:
    try:
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        stream.close()


def download_filename(filename: str) -> str:
    """File name of the download, with quotes escaped for the header."""
    return filename.replace('"', '\\"') + ".xml"


def response_for_document_download(tree: etree._ElementTree, filename: str) -> Response:
    """Create a response that downloads a document as an XML file.

    Args:
        tree: Document tree
        filename: File name without extension

    Returns:
        Streaming response with attachment headers

    Raises:
        ExportError: If the document cannot be buffered
    """
    stream = export_document(tree)
    return Response(
        _stream_body(stream),
        content_type=XML_CONTENT_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{download_filename(filename)}"',
        },
    )


def write_document(tree: etree._ElementTree, path: Path) -> int:
    """Write a document to a file.

    Args:
        tree: Document tree
        path: Output file

    Returns:
        Number of bytes written
    """
    data = serialize_document(tree)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(f"Wrote {len(data)} bytes to {path}")
    return len(data)
