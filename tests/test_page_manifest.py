"""Tests for the bundled page manifest and the structure document."""

import json
from datetime import datetime, timezone

import pytest

from qa_engine.common.errors import ManifestError
from qa_engine.schemas.tools.dependency_verifier import (
    DependencyType,
    FileDependency,
    PageDependencyMap,
    PageManifest,
)
from qa_engine.tools.page_manifest import (
    APP_NAME,
    generate_app_structure_doc,
    get_all_required_files,
    get_page_dependencies,
    load_manifest,
)


@pytest.fixture
def small_manifest():
    shared = FileDependency(path="src/services/api.ts", type=DependencyType.SERVICE)
    return PageManifest(
        core=[shared],
        pages=[
            PageDependencyMap(
                page_name="Clients",
                page_url="/clients",
                frontend_file="src/pages/Clients.tsx",
                description="Client management",
                dependencies=[
                    FileDependency(path="src/pages/Clients.tsx", type=DependencyType.FRONTEND),
                    FileDependency(
                        path="src/services/api.ts",
                        type=DependencyType.SERVICE,
                        required=False,
                        description="duplicate of a core file",
                    ),
                ],
                api_endpoints=["GET /clients", "POST /clients"],
                backend_controllers=["ClientController"],
                database_tables=["clients"],
            ),
            PageDependencyMap(
                page_name="FAQ",
                page_url="/faq",
                frontend_file="src/pages/FAQ.tsx",
            ),
        ],
    )


class TestLoadManifest:
    """Loading and caching."""

    def test_bundled_manifest(self):
        manifest = load_manifest()
        urls = [p.page_url for p in manifest.pages]
        assert "/dashboard" in urls
        assert "/admin/qa" in urls
        assert manifest.core

    def test_bundled_manifest_cached(self):
        assert load_manifest() is load_manifest()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "pages.json"
        path.write_text(
            json.dumps(
                {
                    "core": [],
                    "pages": [
                        {"page_name": "Home", "page_url": "/", "frontend_file": "src/Index.tsx"}
                    ],
                }
            )
        )

        manifest = load_manifest(path)

        assert manifest.pages[0].page_name == "Home"
        assert load_manifest() is not manifest

    def test_invalid_manifest(self, tmp_path):
        path = tmp_path / "pages.json"
        path.write_text(json.dumps({"pages": [{"page_name": "No url"}]}))

        with pytest.raises(ManifestError):
            load_manifest(path)

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestError):
            load_manifest(tmp_path / "absent.json")


class TestQueries:
    """Lookups over a manifest."""

    def test_required_files_deduplicated_core_first(self, small_manifest):
        files = get_all_required_files(small_manifest)

        assert [f.path for f in files] == ["src/services/api.ts", "src/pages/Clients.tsx"]
        assert files[0].required is True

    def test_page_lookup(self, small_manifest):
        assert get_page_dependencies("/faq", small_manifest).page_name == "FAQ"
        assert get_page_dependencies("/nope", small_manifest) is None

    def test_bundled_lookup(self):
        assert get_page_dependencies("/clients").page_name == "Clients"


class TestStructureDoc:
    """Markdown rendering."""

    def test_sections(self, small_manifest):
        generated = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

        doc = generate_app_structure_doc(small_manifest, generated_at=generated)

        assert doc.startswith(f"# {APP_NAME} Application Structure")
        assert "**Generated:** 2024-05-01T12:00:00+00:00" in doc
        assert "### Clients" in doc
        assert "- **URL:** `/clients`" in doc
        assert "**API Endpoints:** GET /clients, POST /clients" in doc
        assert "**Backend Controllers:** ClientController" in doc
        assert "**Database Tables:** clients" in doc
        assert "| `src/pages/Clients.tsx` | frontend | ✅ |" in doc
        assert "| Total Files | 2 |" in doc
        assert "| Services | 1 |" in doc
        assert "**Total Pages Mapped:** 2" in doc

    def test_page_without_details_has_no_empty_sections(self, small_manifest):
        doc = generate_app_structure_doc(small_manifest)

        faq = doc.split("### FAQ", 1)[1]
        assert "**Dependencies:**" not in faq
        assert "**API Endpoints:**" not in faq

    def test_bundled_document(self):
        doc = generate_app_structure_doc()
        assert f"**Total Pages Mapped:** {len(load_manifest().pages)}" in doc
