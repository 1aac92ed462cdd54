"""
Web API Endpoint Tests
======================
Integration tests for the health, rules and scan endpoints.

Usage:
    pip install code-complete[test]
    pytest tests/web_api/test_endpoints.py -v
"""
import pytest
from pathlib import Path


# Skip entire module if FastAPI not installed
pytest.importorskip("fastapi")


from fastapi.testclient import TestClient
from code_complete.web_api.config import Settings, settings
from code_complete.web_api.main import app


FIXTURES = Path(__file__).resolve().parents[1] / "fixtures" / "repos"

SPLIT_FUNCTION = """\
def report(users, products):
    active_users = []
    expensive_products = []
    if users:
        active_users = users
        active_users.sort()
    if products:
        expensive_products = products
        expensive_products.reverse()
    summary = len(active_users)
    summary += len(expensive_products)
    return summary
"""


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


# ============================================================================
# HEALTH ENDPOINTS
# ============================================================================

class TestHealthEndpoint:
    """Tests for GET /health and GET /ready"""

    def test_health_returns_ok_status(self, client):
        """Health endpoint returns status: ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_ready_reports_rule_count(self, client):
        """Readiness loads the schema and the registry."""
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {
            "status": "ready",
            "rules": 12,
            "presets": ["all", "recommended", "relaxed", "strict"],
        }

    def test_root_lists_api_info(self, client):
        response = client.get("/")
        data = response.json()
        assert data["name"] == "Code Complete API"
        assert data["default_preset"] == "recommended"
        assert "strict" in data["presets"]


# ============================================================================
# RULES ENDPOINT
# ============================================================================

class TestRulesEndpoint:
    """Tests for GET /rules/"""

    def test_lists_every_rule(self, client):
        response = client.get("/rules/")
        assert response.status_code == 200
        rules = {r["name"]: r for r in response.json()}
        assert len(rules) == 12
        assert rules["low-function-cohesion"]["level"] == "off"
        assert rules["max-nesting-depth"]["options"] == {"maxDepth": 3}

    def test_preset_query(self, client):
        response = client.get("/rules/", params={"preset": "strict"})
        rules = {r["name"]: r for r in response.json()}
        assert rules["low-class-cohesion"]["level"] == "warn"
        assert rules["low-class-cohesion"]["rule_ids"] == ["COH_CLASS_001"]

    def test_unknown_preset_returns_404(self, client):
        response = client.get("/rules/", params={"preset": "loose"})
        assert response.status_code == 404


# ============================================================================
# SCAN ENDPOINTS
# ============================================================================

class TestScanEndpoint:
    """Tests for POST /scan/"""

    def test_scan_fixture_repo(self, client):
        """The fixture's config enables both cohesion rules."""
        response = client.post("/scan/", json={
            "repo_path": str(FIXTURES / "low_cohesion"),
            "project_id": "fixture",
            "ci_mode": True,
        })
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "complete"
        assert data["project_id"] == "fixture"
        assert data["summary"]["files_scanned"] == 3
        assert data["summary"]["issues_found"] == 2
        assert data["summary"]["worst_severity"] == "medium"
        assert data["result"]["schema_version"] == "run_result_v1"

    def test_rule_overrides(self, client):
        response = client.post("/scan/", json={
            "repo_path": str(FIXTURES / "low_cohesion"),
            "rules": {"low-class-cohesion": "error"},
        })
        summary = response.json()["summary"]
        assert summary["worst_severity"] == "high"
        assert summary["by_rule"] == {"low-class-cohesion": 1, "low-function-cohesion": 1}

    def test_missing_path_returns_404(self, client):
        response = client.post("/scan/", json={"repo_path": "/nonexistent/path/xyz"})
        assert response.status_code == 404

    def test_bad_rule_returns_422(self, client):
        response = client.post("/scan/", json={
            "repo_path": str(FIXTURES / "clean"),
            "rules": {"no-such-rule": "warn"},
        })
        assert response.status_code == 422
        assert "unknown rule" in response.json()["detail"]

    def test_missing_repo_path_is_validation_error(self, client):
        response = client.post("/scan/", json={})
        assert response.status_code == 422

    def test_path_outside_allowed_roots_returns_403(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ALLOWED_ROOTS", [str(FIXTURES / "clean")])
        response = client.post("/scan/", json={"repo_path": str(FIXTURES / "low_cohesion")})
        assert response.status_code == 403

    def test_path_inside_allowed_roots(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ALLOWED_ROOTS", [str(FIXTURES)])
        response = client.post("/scan/", json={"repo_path": str(FIXTURES / "clean")})
        assert response.status_code == 200
        assert response.json()["summary"]["issues_found"] == 0


class TestSourceScanEndpoint:
    """Tests for POST /scan/source"""

    def test_default_preset_is_quiet_on_cohesion(self, client):
        response = client.post("/scan/source", json={"source": SPLIT_FUNCTION})
        assert response.status_code == 200
        assert response.json()["issues_found"] == 0

    def test_enabled_cohesion_rule(self, client):
        response = client.post("/scan/source", json={
            "source": SPLIT_FUNCTION,
            "path": "report.py",
            "rules": {"low-function-cohesion": "warn"},
        })
        data = response.json()
        assert data["path"] == "report.py"
        assert data["issues_found"] == 1
        finding = data["findings"][0]
        assert finding["metadata"]["rule_id"] == "COH_FUNCTION_001"
        assert finding["metadata"]["cohesion"]["componentCount"] == 2
        assert finding["location"]["path"] == "report.py"

    def test_syntax_error_returns_422(self, client):
        response = client.post("/scan/source", json={"source": "def broken(:\n"})
        assert response.status_code == 422
        assert response.json()["detail"].startswith("Syntax error at line 1")

    def test_unknown_preset_returns_422(self, client):
        response = client.post("/scan/source", json={"source": "x = 1\n", "preset": "loose"})
        assert response.status_code == 422

    def test_oversized_source_returns_413(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_SOURCE_BYTES", 10)
        response = client.post("/scan/source", json={"source": SPLIT_FUNCTION})
        assert response.status_code == 413


# ============================================================================
# SETTINGS
# ============================================================================

class TestSettings:
    """Environment overrides with the CODE_COMPLETE_ prefix"""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CODE_COMPLETE_PORT", "9000")
        monkeypatch.setenv("CODE_COMPLETE_DEBUG", "yes")
        monkeypatch.setenv("CODE_COMPLETE_CORS_ORIGINS", "http://a,http://b")
        fresh = Settings()
        assert fresh.PORT == 9000
        assert fresh.DEBUG is True
        assert fresh.CORS_ORIGINS == ["http://a", "http://b"]

    def test_defaults(self):
        fresh = Settings()
        assert fresh.DEFAULT_PRESET == "recommended"
        assert fresh.ALLOWED_ROOTS == []

    def test_allowed_roots_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CODE_COMPLETE_ALLOWED_ROOTS", f" {tmp_path} , ")
        fresh = Settings()
        assert fresh.ALLOWED_ROOTS == [str(tmp_path)]
        assert fresh.is_allowed_path(tmp_path / "pkg" / "mod.py")
        assert fresh.is_allowed_path(tmp_path)
        assert not fresh.is_allowed_path(tmp_path.parent)
