"""Main Quart application for the Repository Hierarchy web API."""

import logging

from quart import Quart, jsonify
from quart_cors import cors

from repository_hierarchy import __version__
from repository_hierarchy.api.config import get_config
from repository_hierarchy.api.repositories import load_records, repositories_bp
from repository_hierarchy.exceptions import GedcomParseError
from repository_hierarchy.schemas.records import RecordRepository

logger = logging.getLogger(__name__)


def create_app(config_name: str = "development", records: RecordRepository | None = None) -> Quart:
    """Create and configure the Quart application.

    Args:
        config_name: Configuration environment name
        records: Record repository to serve (default: read GEDCOM_PATH before serving)

    Returns:
        Configured Quart app
    """
    app = Quart(__name__)

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)
    if records is not None:
        app.config["RECORDS"] = records

    # Enable CORS for configured origins (only in development)
    if config.DEBUG and config.CORS_ORIGINS:
        app = cors(
            app,
            allow_origin=config.CORS_ORIGINS,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    # Register blueprints
    app.register_blueprint(repositories_bp)

    # Register routes
    register_routes(app)

    @app.before_serving
    async def read_gedcom_file():
        """Read the configured GEDCOM file before the first request."""
        try:
            await load_records(app)
        except (GedcomParseError, FileNotFoundError) as e:
            logger.error(f"Cannot read GEDCOM file: {e}")

    return app


def register_routes(app: Quart) -> None:
    """Register API routes.

    Args:
        app: Quart application
    """

    @app.route("/api/health", methods=["GET"])
    async def health_check():
        """Health check endpoint."""
        return jsonify(
            {
                "status": "healthy",
                "service": "repository-hierarchy",
                "version": __version__,
            }
        )

    @app.route("/api/info", methods=["GET"])
    async def info():
        """Get API information."""
        return jsonify(
            {
                "service": "Repository Hierarchy API",
                "version": __version__,
                "endpoints": {
                    "health": "/api/health",
                    "info": "/api/info",
                    "repositories": "/api/repositories",
                    "hierarchy": "/api/repositories/<xref>/hierarchy",
                    "ead": "/api/repositories/<xref>/ead",
                },
            }
        )


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5001, debug=True)
