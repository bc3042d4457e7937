"""Tests for the web API."""

import pytest
from lxml import etree

from repository_hierarchy.api.app import create_app
from repository_hierarchy.api.config import DevelopmentConfig, TestingConfig, get_config
from repository_hierarchy.config import settings
from repository_hierarchy.dates.locale import DEFAULT_RANGE_TOKENS
from repository_hierarchy.export.ead import EAD_NAMESPACE


@pytest.fixture
def app(records):
    return create_app("testing", records=records)


@pytest.fixture
def client(app):
    return app.test_client()


class TestConfig:
    """Configuration lookup."""

    def test_get_config(self):
        assert isinstance(get_config("testing"), TestingConfig)
        assert isinstance(get_config("unknown"), DevelopmentConfig)

    def test_app_config(self, app):
        assert app.config["RANGE_TOKENS"] is DEFAULT_RANGE_TOKENS
        assert app.config["CORS_ORIGINS"] == settings.cors_origins


class TestHealth:
    """Service endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        data = await response.get_json()
        assert data["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_info(self, client):
        response = await client.get("/api/info")
        data = await response.get_json()
        assert "repositories" in data["endpoints"]


class TestRepositories:
    """Repository listing and hierarchy endpoints."""

    @pytest.mark.asyncio
    async def test_list(self, client):
        response = await client.get("/api/repositories")
        assert response.status_code == 200
        data = await response.get_json()
        assert data["count"] == 2
        assert data["default_repository"] == "R1"
        assert data["repositories"][0]["name"] == "Stadtarchiv Musterstadt"
        assert data["repositories"][0]["address"]["CITY"] == "Musterstadt"

    @pytest.mark.asyncio
    async def test_hierarchy(self, client):
        response = await client.get("/api/repositories/R1/hierarchy")
        assert response.status_code == 200
        data = await response.get_json()
        assert data["repository"]["xref"] == "R1"
        hierarchy = data["hierarchy"]
        assert hierarchy["date_range"] == "0873/1700"
        assert [category["name"] for category in hierarchy["sub_categories"]] == ["Fonds A/"]

    @pytest.mark.asyncio
    async def test_unknown_repository(self, client):
        response = await client.get("/api/repositories/X9/hierarchy")
        assert response.status_code == 404
        data = await response.get_json()
        assert "X9" in data["error"]

    @pytest.mark.asyncio
    async def test_source_is_not_a_repository(self, client):
        response = await client.get("/api/repositories/S1/hierarchy")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_no_gedcom_configured(self):
        app = create_app("testing")
        app.config["GEDCOM_PATH"] = None
        app.config["RECORDS"] = None
        response = await app.test_client().get("/api/repositories")
        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_records_read_from_gedcom_path(self, gedcom_path):
        app = create_app("testing")
        app.config["GEDCOM_PATH"] = gedcom_path
        response = await app.test_client().get("/api/repositories")
        data = await response.get_json()
        assert data["count"] == 2
        assert app.config["RECORDS"] is not None

    @pytest.mark.asyncio
    async def test_unreadable_gedcom_file(self, mislabelled_gedcom_path):
        app = create_app("testing")
        app.config["GEDCOM_PATH"] = mislabelled_gedcom_path
        response = await app.test_client().get("/api/repositories")
        assert response.status_code == 503
        data = await response.get_json()
        assert "Cannot read GEDCOM file" in data["error"]
        assert app.config["RECORDS"] is None

    @pytest.mark.asyncio
    async def test_missing_gedcom_file(self, tmp_path):
        app = create_app("testing")
        app.config["GEDCOM_PATH"] = tmp_path / "missing.ged"
        response = await app.test_client().get("/api/repositories/R1/hierarchy")
        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_records_read_before_serving(self, gedcom_path):
        app = create_app("testing")
        app.config["GEDCOM_PATH"] = gedcom_path
        async with app.test_app():
            assert app.config["RECORDS"] is not None
            response = await app.test_client().get("/api/repositories")
            assert response.status_code == 200


class TestEADDownload:
    """EAD download endpoint."""

    @pytest.mark.asyncio
    async def test_download(self, client):
        response = await client.get("/api/repositories/R1/ead")
        assert response.status_code == 200
        assert response.headers["Content-Type"] == "text/xml; charset=utf-8"
        assert response.headers["Content-Disposition"] == 'attachment; filename="EAD_R1.xml"'
        root = etree.fromstring(await response.get_data())
        assert root.tag == f"{{{EAD_NAMESPACE}}}ead"

    @pytest.mark.asyncio
    async def test_download_unknown_repository(self, client):
        response = await client.get("/api/repositories/X9/ead")
        assert response.status_code == 404
