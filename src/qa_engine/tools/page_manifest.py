# qa_engine/tools/page_manifest.py

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from qa_engine.common.errors import ManifestError
from qa_engine.config.constants import ERROR_MESSAGES
from qa_engine.schemas.tools.dependency_verifier import (
    DependencyType,
    FileDependency,
    PageDependencyMap,
    PageManifest,
)

DEFAULT_MANIFEST_PATH = Path(__file__).resolve().parent.parent / "data" / "page_dependencies.json"

APP_NAME = "Ieosuia Invoices"

_STAT_LABELS = [
    (DependencyType.FRONTEND, "Frontend Files"),
    (DependencyType.BACKEND, "Backend Files"),
    (DependencyType.COMPONENT, "Components"),
    (DependencyType.HOOK, "Hooks"),
    (DependencyType.SERVICE, "Services"),
    (DependencyType.MODEL, "Models"),
    (DependencyType.CONFIG, "Config Files"),
    (DependencyType.MIDDLEWARE, "Middleware"),
    (DependencyType.ASSET, "Assets"),
]

_cached: Optional[PageManifest] = None


def load_manifest(path: Optional[Union[str, Path]] = None) -> PageManifest:
    """Load a page manifest; the bundled one is parsed once and cached.

    Raises:
        ManifestError: The file is missing, not JSON, or has the wrong shape
    """
    global _cached
    if path is None and _cached is not None:
        return _cached

    source = Path(path) if path else DEFAULT_MANIFEST_PATH
    try:
        with open(source, "r", encoding="utf-8") as f:
            manifest = PageManifest(**json.load(f))
    except (OSError, ValueError, ValidationError) as e:
        raise ManifestError(
            ERROR_MESSAGES["manifest_unreadable"].format(path=source, error=e)
        ) from e

    if path is None:
        _cached = manifest
    return manifest


def get_all_required_files(manifest: Optional[PageManifest] = None) -> List[FileDependency]:
    """Core files first, then page files; the first entry for a path wins."""
    manifest = manifest or load_manifest()
    files: Dict[str, FileDependency] = {}
    for dep in manifest.core:
        files[dep.path] = dep
    for page in manifest.pages:
        for dep in page.dependencies:
            files.setdefault(dep.path, dep)
    return list(files.values())


def get_page_dependencies(
    page_url: str, manifest: Optional[PageManifest] = None
) -> Optional[PageDependencyMap]:
    manifest = manifest or load_manifest()
    for page in manifest.pages:
        if page.page_url == page_url:
            return page
    return None


def _dependency_table(deps: List[FileDependency]) -> List[str]:
    lines = [
        "| File Path | Type | Required | Description |",
        "|-----------|------|----------|-------------|",
    ]
    for dep in deps:
        required = "✅" if dep.required else "⚠️"
        lines.append(f"| `{dep.path}` | {dep.type.value} | {required} | {dep.description} |")
    return lines


def generate_app_structure_doc(
    manifest: Optional[PageManifest] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Markdown description of every page and the files behind it."""
    manifest = manifest or load_manifest()
    timestamp = (generated_at or datetime.now(timezone.utc)).isoformat()

    lines = [
        f"# {APP_NAME} Application Structure",
        "",
        f"**Generated:** {timestamp}",
        "**Purpose:** Complete file dependency map for production-readiness verification",
        "",
        "---",
        "",
        "## Core Application Files",
        "",
        "These files are required by all pages for the application to function:",
        "",
        *_dependency_table(manifest.core),
        "",
        "---",
        "",
        "## Page-Specific Dependencies",
        "",
    ]

    for page in manifest.pages:
        lines += [
            f"### {page.page_name}",
            "",
            f"- **URL:** `{page.page_url}`",
            f"- **Main File:** `{page.frontend_file}`",
            f"- **Description:** {page.description}",
            "",
        ]
        if page.dependencies:
            lines += ["**Dependencies:**", "", *_dependency_table(page.dependencies), ""]
        if page.api_endpoints:
            lines += [f"**API Endpoints:** {', '.join(page.api_endpoints)}", ""]
        if page.backend_controllers:
            lines += [f"**Backend Controllers:** {', '.join(page.backend_controllers)}", ""]
        if page.database_tables:
            lines += [f"**Database Tables:** {', '.join(page.database_tables)}", ""]
        lines += ["---", ""]

    all_files = get_all_required_files(manifest)
    by_type = Counter(dep.type for dep in all_files)
    lines += [
        "## Summary Statistics",
        "",
        "| Category | Count |",
        "|----------|-------|",
        f"| Total Files | {len(all_files)} |",
    ]
    lines += [f"| {label} | {by_type.get(kind, 0)} |" for kind, label in _STAT_LABELS]
    lines += ["", f"**Total Pages Mapped:** {len(manifest.pages)}", ""]

    return "\n".join(lines)
