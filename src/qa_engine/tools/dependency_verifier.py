# qa_engine/tools/dependency_verifier.py

import asyncio
import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from qa_engine.core import BaseTool
from qa_engine.common.errors import ManifestError
from qa_engine.config import settings
from qa_engine.config.constants import (
    CATCH_ALL_ROUTE,
    CRITICAL_ROUTES,
    ERROR_MESSAGES,
    KNOWN_FRONTEND_MODULES,
    NON_BUNDLED_PREFIXES,
    NON_BUNDLED_SUFFIXES,
    PARTIAL_PASS_RATE_THRESHOLD,
    REGISTERED_ROUTES,
)
from qa_engine.schemas.core import (
    Component,
    Priority,
    SystemTag,
    TestCategory,
    TestResult,
    TestStatus,
)
from qa_engine.schemas.tools.dependency_verifier import (
    CoreGroupResult,
    DependencyType,
    DependencyVerifierInput,
    DependencyVerifierOutput,
    EndpointCheck,
    FileDependency,
    PageDependencyMap,
    PageManifest,
    PageStatus,
    PageVerificationResult,
)
from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.page_manifest import load_manifest


def is_non_bundled(path: str) -> bool:
    """Backend sources and static assets never show up in a frontend build."""
    return path.startswith(NON_BUNDLED_PREFIXES) or path.endswith(NON_BUNDLED_SUFFIXES)


class ModuleResolver(ABC):
    """Answers whether a declared module exists. Implementations never raise."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass


class StaticResolver(ModuleResolver):
    """Known-module set plus the non-bundled assumption."""

    def __init__(self, known: Optional[Iterable[str]] = None):
        self.known: Set[str] = set(KNOWN_FRONTEND_MODULES if known is None else known)

    def exists(self, path: str) -> bool:
        return path in self.known or is_non_bundled(path)


class FilesystemResolver(ModuleResolver):
    """A module exists when the file is present under ``root``."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def exists(self, path: str) -> bool:
        try:
            return (self.root / path).is_file()
        except OSError:
            return False


class BuildManifestResolver(ModuleResolver):
    """
    Resolves against a Vite build manifest.

    A source module exists when it is reachable from an entry chunk through
    ``imports`` or ``dynamicImports``. Modules that are never bundled are
    assumed present, as with StaticResolver.
    """

    def __init__(self, manifest: Dict[str, dict]):
        self.reachable = self._reachable_sources(manifest)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "BuildManifestResolver":
        """
        Raises:
            ManifestError: The build manifest cannot be read
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ManifestError(
                ERROR_MESSAGES["manifest_unreadable"].format(path=path, error=e)
            ) from e
        if not isinstance(data, dict):
            raise ManifestError(
                ERROR_MESSAGES["manifest_unreadable"].format(
                    path=path, error="expected a JSON object"
                )
            )
        return cls(data)

    @staticmethod
    def _reachable_sources(manifest: Dict[str, dict]) -> Set[str]:
        pending = [key for key, chunk in manifest.items() if chunk.get("isEntry")]
        seen: Set[str] = set()
        while pending:
            key = pending.pop()
            if key in seen or key not in manifest:
                continue
            seen.add(key)
            chunk = manifest[key]
            pending.extend(chunk.get("imports", []))
            pending.extend(chunk.get("dynamicImports", []))

        sources = set()
        for key in seen:
            sources.add(key)
            src = manifest[key].get("src")
            if src:
                sources.add(src)
        return sources

    def exists(self, path: str) -> bool:
        return path in self.reachable or is_non_bundled(path)


def default_resolver() -> ModuleResolver:
    """Build manifest when one is configured, the static table otherwise."""
    if settings.BUILD_MANIFEST_PATH:
        return BuildManifestResolver.from_file(settings.BUILD_MANIFEST_PATH)
    return StaticResolver()


def route_registered(page_url: str, routes: Iterable[str] = REGISTERED_ROUTES) -> bool:
    return page_url == CATCH_ALL_ROUTE or page_url in set(routes)


def page_status(missing_required: int, pass_rate: int) -> PageStatus:
    if missing_required == 0:
        return PageStatus.PASSED
    if pass_rate >= PARTIAL_PASS_RATE_THRESHOLD:
        return PageStatus.PARTIAL
    return PageStatus.FAILED


def _pass_rate(verified: int, total: int) -> int:
    if total == 0:
        return 100
    return int(verified * 100 / total + 0.5)


def _slug(value: str) -> str:
    if value.strip() == CATCH_ALL_ROUTE:
        return "catch_all"
    slug = re.sub(r"[^a-z0-9]+", "_", value.lower()).strip("_")
    return slug or "root"


class DependencyVerifierTool(BaseTool):
    """
    Checks that every page's modules resolve and its route is registered.

    Pages are verified concurrently, bounded by a semaphore. The checks are
    read-only so ordering between pages does not matter; results still come
    back in manifest order.
    """

    def __init__(
        self,
        *,
        manifest: Optional[PageManifest] = None,
        resolver: Optional[ModuleResolver] = None,
        probe: Optional[ApiProbeTool] = None,
        routes: Optional[Iterable[str]] = None,
        max_concurrency: Optional[int] = None,
        name: str = "dependency_verifier",
        description: str = "Verifies page module and route dependencies",
        config: Optional[dict] = None,
        verbose: bool = False,
    ):
        super().__init__(
            name=name,
            description=description,
            input_schema=DependencyVerifierInput,
            output_schema=DependencyVerifierOutput,
            config=config,
            verbose=verbose,
        )
        self.manifest = manifest if manifest is not None else load_manifest()
        self.resolver = resolver or default_resolver()
        self.probe = probe
        self.routes = list(REGISTERED_ROUTES if routes is None else routes)
        self.max_concurrency = max_concurrency or settings.DEPENDENCY_VERIFIER_CONCURRENCY

    async def _execute(self, inp: DependencyVerifierInput) -> DependencyVerifierOutput:
        pages = self.manifest.pages
        if inp.page_urls is not None:
            wanted = set(inp.page_urls)
            pages = [p for p in pages if p.page_url in wanted]

        semaphore = asyncio.Semaphore(inp.max_concurrency or self.max_concurrency)

        async def bounded(page: PageDependencyMap) -> PageVerificationResult:
            async with semaphore:
                return await self.verify_page(page, check_endpoints=inp.check_endpoints)

        self.logger.info(f"Verifying {len(pages)} pages")
        results = await asyncio.gather(*(bounded(p) for p in pages))
        core = self.verify_core() if inp.include_core else []

        routes = {r: route_registered(r, self.routes) for r in CRITICAL_ROUTES}
        summary = {
            "core_groups": len(core),
            "core_failed": sum(1 for c in core if c.status == PageStatus.FAILED),
            "pages": len(results),
            "passed": sum(1 for r in results if r.status == PageStatus.PASSED),
            "partial": sum(1 for r in results if r.status == PageStatus.PARTIAL),
            "failed": sum(1 for r in results if r.status == PageStatus.FAILED),
            "routes_registered": sum(1 for ok in routes.values() if ok),
            "routes_missing": sum(1 for ok in routes.values() if not ok),
        }
        self.logger.info(
            f"Pages: {summary['passed']} passed, {summary['partial']} partial, "
            f"{summary['failed']} failed"
        )
        return DependencyVerifierOutput(
            core=core, pages=list(results), routes=routes, summary=summary
        )

    def module_exists(self, path: str) -> bool:
        try:
            return self.resolver.exists(path)
        except Exception as e:
            self.logger.debug(f"Resolver failed for {path}: {e}")
            return False

    def check_files(self, dependencies: List[FileDependency]):
        """Returns (verified count, missing required dependencies, pass rate)."""
        verified = 0
        missing = []
        for dep in dependencies:
            if self.module_exists(dep.path):
                verified += 1
            elif dep.required:
                missing.append(dep)
        return verified, missing, _pass_rate(verified, len(dependencies))

    def verify_core(self) -> List[CoreGroupResult]:
        """Verify the manifest's core files, one result per dependency type."""
        groups: Dict[DependencyType, List[FileDependency]] = {}
        for dep in self.manifest.core:
            groups.setdefault(dep.type, []).append(dep)

        results = []
        for group, dependencies in groups.items():
            verified, missing, rate = self.check_files(dependencies)
            results.append(
                CoreGroupResult(
                    group=group,
                    total_dependencies=len(dependencies),
                    verified_dependencies=verified,
                    missing_dependencies=missing,
                    pass_rate=rate,
                    status=page_status(len(missing), rate),
                )
            )
        return results

    async def verify_page(
        self, page: PageDependencyMap, check_endpoints: bool = False
    ) -> PageVerificationResult:
        verified, missing, rate = self.check_files(page.dependencies)
        total = len(page.dependencies)

        endpoint_checks = []
        if check_endpoints and self.probe is not None:
            for endpoint in page.api_endpoints:
                endpoint_checks.append(await self.check_endpoint(endpoint))

        return PageVerificationResult(
            page_name=page.page_name,
            page_url=page.page_url,
            total_dependencies=total,
            verified_dependencies=verified,
            missing_dependencies=missing,
            pass_rate=rate,
            status=page_status(len(missing), rate),
            route_registered=route_registered(page.page_url, self.routes),
            endpoint_checks=endpoint_checks,
        )

    async def check_endpoint(self, endpoint: str) -> EndpointCheck:
        """HEAD a GET endpoint; anything but 404 means the route is wired up."""
        method, _, path = endpoint.partition(" ")
        if method.upper() != "GET" or not path or self.probe is None:
            return EndpointCheck(endpoint=endpoint, reachable=True)

        result = await self.probe.probe("HEAD", path, requires_auth=False)
        reachable = result.status not in (0, 404)
        return EndpointCheck(endpoint=endpoint, reachable=reachable, status=result.status)

    @staticmethod
    def to_test_results(output: DependencyVerifierOutput) -> List[TestResult]:
        """Page verdicts and critical routes as results for a report suite."""
        status_map = {
            PageStatus.PASSED: TestStatus.PASSED,
            PageStatus.PARTIAL: TestStatus.WARNING,
            PageStatus.FAILED: TestStatus.FAILED,
        }
        results = []
        for core in output.core:
            missing = ", ".join(d.path for d in core.missing_dependencies)
            results.append(
                TestResult(
                    id=f"core_files_{core.group.value}",
                    name=f"Core Files: {core.group.value}",
                    category=TestCategory.FRONTEND,
                    priority=Priority.P0,
                    status=status_map[core.status],
                    message=(
                        f"{core.verified_dependencies}/{core.total_dependencies} "
                        f"core {core.group.value} files verified ({core.pass_rate}%)"
                    ),
                    expected=f"{core.total_dependencies} files",
                    actual=f"{core.verified_dependencies} verified",
                    error=f"Missing: {missing}" if missing else None,
                    root_cause=(
                        "Application-wide files are missing or cannot be imported"
                        if missing
                        else None
                    ),
                    fix=f"Create or fix the missing files: {missing}" if missing else None,
                    system=SystemTag.SHARED,
                    component=Component.UI,
                )
            )

        for page in output.pages:
            missing = ", ".join(d.path for d in page.missing_dependencies)
            if page.status == PageStatus.PASSED:
                message = f"All {page.total_dependencies} dependencies verified for {page.page_name}"
            else:
                message = (
                    f"{page.verified_dependencies}/{page.total_dependencies} "
                    f"dependencies verified ({page.pass_rate}%)"
                )
            results.append(
                TestResult(
                    id=f"file_deps_{_slug(page.page_url)}",
                    name=f"File Dependencies: {page.page_name}",
                    category=TestCategory.FRONTEND,
                    priority=Priority.P0,
                    status=status_map[page.status],
                    message=message,
                    expected=f"{page.total_dependencies} dependencies",
                    actual=f"{page.verified_dependencies} verified",
                    error=f"Missing: {missing}" if missing else None,
                    root_cause=(
                        "Required files are missing or cannot be imported" if missing else None
                    ),
                    fix=f"Create or fix the missing files: {missing}" if missing else None,
                    system=SystemTag.SHARED,
                    component=Component.UI,
                )
            )

            for check in page.endpoint_checks:
                if check.reachable:
                    continue
                results.append(
                    TestResult(
                        id=f"endpoint_{_slug(page.page_url)}_{_slug(check.endpoint)}",
                        name=f"Endpoint: {check.endpoint}",
                        category=TestCategory.API,
                        priority=Priority.P2,
                        status=TestStatus.WARNING,
                        message=f"{check.endpoint} used by {page.page_name} is not reachable",
                        actual=f"Status {check.status}",
                        endpoint=check.endpoint,
                        system=SystemTag.SHARED,
                        component=Component.API,
                    )
                )

        for route, exists in output.routes.items():
            results.append(
                TestResult(
                    id=f"route_{_slug(route)}",
                    name=f"Route: {route}",
                    category=TestCategory.FRONTEND,
                    priority=Priority.P0,
                    status=TestStatus.PASSED if exists else TestStatus.FAILED,
                    message=f"Route {route} is registered" if exists else f"Route {route} not found",
                    expected="Route registered in App.tsx",
                    actual="Route exists" if exists else "Route missing",
                    root_cause=None if exists else "Route may not be defined in App.tsx Routes",
                    fix=None if exists else f"Add route for {route} in src/App.tsx",
                    system=SystemTag.SHARED,
                    component=Component.UI,
                )
            )
        return results
