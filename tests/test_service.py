"""Tests for the request/response boundary."""

from depbridge import service
from depbridge.models import AnalysisRequest


class TestAnalyze:
    """Tests for status mapping."""

    def test_success(self, next_app_corpus):
        """Test a normal analysis."""
        response = service.analyze(AnalysisRequest("src/app/page.tsx", next_app_corpus))

        assert response.success
        assert response.status == 200
        assert response.error is None
        assert response.data["metadata"]["totalDependencies"] == 5
        assert "analyzedAt" not in response.data["metadata"]

    def test_timestamp(self, next_app_corpus):
        """Test the timestamp is passed through."""
        response = service.analyze(AnalysisRequest("src/app/page.tsx", next_app_corpus), analyzed_at="now")

        assert response.data["metadata"]["analyzedAt"] == "now"

    def test_not_found(self, next_app_corpus):
        """Test a missing source maps to 404."""
        response = service.analyze(AnalysisRequest("missing/path.ts", next_app_corpus))

        assert not response.success
        assert response.status == 404
        assert response.data is None
        assert "missing/path.ts" in response.error

    def test_unsupported_extension(self, next_app_corpus):
        """Test a file type that is not scanned maps to 400."""
        response = service.analyze(AnalysisRequest("README.md", next_app_corpus))

        assert response.status == 400
        assert ".md" in response.error

    def test_unexpected_failure(self, next_app_corpus, monkeypatch):
        """Test other errors map to 500 with a generic message."""
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(service, "build_graph", explode)

        response = service.analyze(AnalysisRequest("src/app/page.tsx", next_app_corpus))

        assert response.status == 500
        assert response.error == "Failed to analyze file dependencies"
