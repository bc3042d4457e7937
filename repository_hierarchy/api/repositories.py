"""Repository API endpoints."""

import logging

from quart import Blueprint, current_app, jsonify
from quart.utils import run_sync

from repository_hierarchy.exceptions import ExportError, GedcomParseError, RecordNotFoundError
from repository_hierarchy.export.download import response_for_document_download
from repository_hierarchy.export.ead import build_ead_document
from repository_hierarchy.facts import default_repository_xref, repository_address_lines
from repository_hierarchy.hierarchy import build_hierarchy
from repository_hierarchy.ingestion.gedcom import GedcomFile
from repository_hierarchy.schemas.records import (
    REPOSITORY_RECORD_TYPE,
    GedcomRecord,
    RecordRepository,
)

logger = logging.getLogger(__name__)

repositories_bp = Blueprint("repositories", __name__)


async def load_records(app) -> RecordRepository | None:
    """Get the records of an app, reading the GEDCOM file on first use.

    The file is read in a worker thread so the event loop keeps serving.

    Args:
        app: Quart application

    Returns:
        The record repository, or None if no GEDCOM file is configured

    Raises:
        FileNotFoundError: If GEDCOM_PATH does not exist
        GedcomParseError: If the GEDCOM file cannot be read
    """
    records = app.config.get("RECORDS")
    if records is None and app.config.get("GEDCOM_PATH"):
        records = await run_sync(GedcomFile.from_path)(app.config["GEDCOM_PATH"])
        app.config["RECORDS"] = records
    return records


async def get_records() -> RecordRepository | None:
    """Get the records of the current app."""
    return await load_records(current_app)


def get_repository(records: RecordRepository, xref: str) -> GedcomRecord:
    """Get a repository record by xref.

    Raises:
        RecordNotFoundError: If the xref does not name a repository
    """
    record = records.record(xref)
    if record.record_type != REPOSITORY_RECORD_TYPE:
        raise RecordNotFoundError(xref)
    return record


def repository_summary(repository: GedcomRecord) -> dict:
    """Convert a repository to a dictionary for JSON responses."""
    return {
        "xref": repository.xref,
        "name": repository.name,
        "address": {
            tag: str(value) for tag, value in repository_address_lines(repository).items()
        },
    }


def _no_records_response():
    return jsonify({"error": "No GEDCOM file configured. Set GEDCOM_PATH."}), 503


@repositories_bp.errorhandler(GedcomParseError)
@repositories_bp.errorhandler(FileNotFoundError)
async def gedcom_unavailable(e: Exception):
    """Report a GEDCOM file that cannot be read."""
    logger.error(f"Cannot read GEDCOM file: {e}")
    return jsonify({"error": f"Cannot read GEDCOM file: {e!s}"}), 503


@repositories_bp.route("/api/repositories", methods=["GET"])
async def list_repositories():
    """Get list of all repositories.

    Returns:
        JSON response with the repositories and the default repository xref
    """
    records = await get_records()
    if records is None:
        return _no_records_response()

    repositories = [repository_summary(repository) for repository in records.repositories()]
    return jsonify(
        {
            "success": True,
            "count": len(repositories),
            "default_repository": default_repository_xref(records),
            "repositories": repositories,
        }
    )


@repositories_bp.route("/api/repositories/<xref>/hierarchy", methods=["GET"])
async def get_hierarchy(xref: str):
    """Get the call number hierarchy of a repository.

    Args:
        xref: Repository xref

    Returns:
        JSON with the repository and its category tree
    """
    records = await get_records()
    if records is None:
        return _no_records_response()

    try:
        repository = get_repository(records, xref)
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    hierarchy = build_hierarchy(repository, records)
    return jsonify(
        {
            "success": True,
            "repository": repository_summary(repository),
            "hierarchy": hierarchy.to_dict(current_app.config["RANGE_TOKENS"]),
        }
    )


@repositories_bp.route("/api/repositories/<xref>/ead", methods=["GET"])
async def download_ead(xref: str):
    """Download the EAD finding aid of a repository.

    Args:
        xref: Repository xref

    Returns:
        XML file download
    """
    records = await get_records()
    if records is None:
        return _no_records_response()

    try:
        repository = get_repository(records, xref)
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    tree = build_ead_document(repository, records, tokens=current_app.config["RANGE_TOKENS"])
    filename = current_app.config.get("DOWNLOAD_FILENAME_PREFIX", "") + repository.xref
    try:
        return response_for_document_download(tree, filename)
    except ExportError as e:
        logger.error(f"EAD export of {xref} failed: {e}")
        return jsonify({"error": f"Failed to export document: {e!s}"}), 500
