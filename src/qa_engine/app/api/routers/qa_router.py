# qa_engine/app/api/routers/qa_router.py

from typing import List, Optional

from fastapi import APIRouter, Header, HTTPException, Query, status
from fastapi.responses import PlainTextResponse, Response

from qa_engine.app.api.dto.qa_dto import (
    ActionResponse,
    ConsoleRunRequest,
    ConsoleRunResponse,
    DependencyRequest,
    FullRunRequest,
    TestDataRequest,
)
from qa_engine.application.services.automated_test_service import AutomatedTestService
from qa_engine.application.services.qa_console_service import QaConsoleService
from qa_engine.common.errors import AuthenticationRequiredError, ExportError
from qa_engine.infra.di.container import (
    automated_test_service_dependency,
    qa_console_service_dependency,
)
from qa_engine.schemas.core import SystemFilter, TestReport
from qa_engine.schemas.tools.qa_console import ActionOutcome
from qa_engine.schemas.tools.test_catalog import CatalogEntry, RunOptions
from qa_engine.tools.catalog import build_catalog, describe_catalog, filter_catalog
from qa_engine.tools.page_manifest import generate_app_structure_doc
from qa_engine.utils.report_utils import (
    build_snapshot,
    dump_json,
    format_error_digest,
    generate_text_report,
    snapshot_filename,
)

router = APIRouter(prefix="/qa", tags=["qa"])


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def _action_response(outcome: ActionOutcome) -> ActionResponse:
    return ActionResponse(**outcome.model_dump())


@router.post(
    "/runs",
    response_model=ConsoleRunResponse,
    status_code=status.HTTP_200_OK,
    summary="Run the QA console checks",
    description="Run the checks for one subsystem (plus shared services) and categorize the results.",
)
async def run_console_checks(
    request: ConsoleRunRequest,
    authorization: Optional[str] = Header(None),
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    try:
        run = await qa_console_service.run_tests(
            system=request.system,
            options=RunOptions(
                user_mode=request.user_mode, live_sms_mode=request.live_sms_mode
            ),
            token=request.token or _bearer(authorization),
        )
        return ConsoleRunResponse(
            system=run.system,
            user_mode=run.user_mode,
            summary=run.health.summary(),
            health=run.health,
            results=run.results,
            progress=run.progress,
            tracked_data=run.tracked_data,
            notification=run.notification,
        )
    except AuthenticationRequiredError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to run QA checks: {str(e)}",
        )


@router.post(
    "/reports",
    response_model=TestReport,
    status_code=status.HTTP_200_OK,
    summary="Run the full-system test suite",
    description="API, CRUD and page dependency suites aggregated into one report. "
    "Use format=text for the boxed plain-text rendering.",
)
async def run_full_report(
    request: FullRunRequest,
    format: str = Query("json", pattern="^(json|text)$"),
    authorization: Optional[str] = Header(None),
    automated_test_service: AutomatedTestService = automated_test_service_dependency,
):
    try:
        report = await automated_test_service.run_all(
            token=request.token or _bearer(authorization),
            include_dependencies=request.include_dependencies,
        )
        if format == "text":
            return PlainTextResponse(generate_text_report(report))
        return report
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to run full report: {str(e)}",
        )


@router.post(
    "/dependencies",
    response_model=TestReport,
    status_code=status.HTTP_200_OK,
    summary="Verify page dependencies",
)
async def verify_dependencies(
    request: DependencyRequest,
    automated_test_service: AutomatedTestService = automated_test_service_dependency,
):
    try:
        return await automated_test_service.verify_dependencies(
            check_endpoints=request.check_endpoints
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to verify dependencies: {str(e)}",
        )


@router.get(
    "/catalog",
    response_model=List[CatalogEntry],
    summary="List the QA console checks",
)
async def get_catalog(system: SystemFilter = Query(SystemFilter.ALL)):
    return describe_catalog(filter_catalog(build_catalog(), system))


@router.get(
    "/structure",
    response_class=PlainTextResponse,
    summary="Application structure document",
    description="Markdown description of every page and the files it depends on.",
)
async def get_structure():
    try:
        return PlainTextResponse(generate_app_structure_doc(), media_type="text/markdown")
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate structure document: {str(e)}",
        )


def _require_last_run(qa_console_service: QaConsoleService):
    if qa_console_service.last_run is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No QA run to export yet",
        )
    return qa_console_service.last_run


@router.post(
    "/exports/digest",
    response_class=PlainTextResponse,
    summary="Error digest of the last console run",
)
async def export_digest(
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    run = _require_last_run(qa_console_service)
    return PlainTextResponse(format_error_digest(run.health, run.user_mode, run.system))


@router.post(
    "/exports/snapshot",
    summary="JSON snapshot of the last console run",
)
async def export_snapshot(
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    run = _require_last_run(qa_console_service)
    try:
        content = dump_json(build_snapshot(run.health, run.user_mode, run.system))
    except ExportError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return Response(
        content=content,
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{snapshot_filename()}"'
        },
    )


@router.post("/seed", response_model=ActionResponse, summary="Seed tagged test data")
async def seed_test_data(
    request: TestDataRequest,
    authorization: Optional[str] = Header(None),
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    outcome = await qa_console_service.seed_test_data(
        request.system, token=request.token or _bearer(authorization)
    )
    return _action_response(outcome)


@router.delete(
    "/cleanup", response_model=ActionResponse, summary="Remove tagged test data"
)
async def cleanup_test_data(
    system: SystemFilter = Query(SystemFilter.ALL),
    authorization: Optional[str] = Header(None),
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    outcome = await qa_console_service.cleanup_test_data(
        system, token=_bearer(authorization)
    )
    return _action_response(outcome)


@router.get("/status", response_model=ActionResponse, summary="Tagged test data counts")
async def test_data_status(
    authorization: Optional[str] = Header(None),
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    outcome = await qa_console_service.check_test_data_status(token=_bearer(authorization))
    return _action_response(outcome)


@router.get("/health", response_model=ActionResponse, summary="Backend health check")
async def backend_health(
    authorization: Optional[str] = Header(None),
    qa_console_service: QaConsoleService = qa_console_service_dependency,
):
    outcome = await qa_console_service.run_health_check(token=_bearer(authorization))
    return _action_response(outcome)
