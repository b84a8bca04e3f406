# qa_engine/tools/catalog/crud_checks.py

"""Create/read/update/delete lifecycles against the live backend.

Every step is its own definition. Steps of one lifecycle hand the created id
forward through ``ctx.state``; a step whose id never materialized is reported
as skipped instead of being sent. Created ids are registered with the run's
tracker as soon as they exist and forgotten once deleted.
"""

from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional

from qa_engine.schemas.core import (
    Component,
    Priority,
    SystemTag,
    TestCategory,
    TestResult,
    TestStatus,
)
from qa_engine.schemas.tools.test_catalog import TestDefinition
from qa_engine.tools.catalog.context import RunContext
from qa_engine.tools.catalog.helpers import (
    extract_id,
    generate_test_email,
    generate_test_name,
    status_text,
)
from qa_engine.tools.data_tracker import EntityKind

Payload = Callable[[RunContext], Dict[str, Any]]

NOT_AUTHENTICATED = "Skipped - User not authenticated"


def _state_key(group: str, kind: EntityKind) -> str:
    return f"{group}.{kind.value}"


def _skip(ctx: RunContext, message: str) -> TestResult:
    return ctx.definition.result(TestStatus.SKIPPED, message)


def _create(
    group: str,
    kind: EntityKind,
    noun: str,
    payload: Payload,
    requires: Optional[EntityKind] = None,
):
    """POST a new entity and remember its id for the following steps."""
    singular = kind.value[:-1]

    async def run(ctx: RunContext) -> TestResult:
        if not ctx.token:
            return _skip(ctx, NOT_AUTHENTICATED)
        if requires is not None and not ctx.state.get(_state_key(group, requires)):
            return _skip(ctx, f"Skipped - no {requires.value[:-1]} was created")

        response = await ctx.probe.probe("POST", f"/{kind.value}", body=payload(ctx))
        entity_id = extract_id(response, singular) if response.success else None
        if entity_id:
            ctx.state[_state_key(group, kind)] = entity_id
            ctx.tracker.track(kind, entity_id)

        if response.success:
            return ctx.definition.result(
                TestStatus.PASSED,
                f"Created {noun} with ID: {entity_id}",
                expected=f"Status 200/201 with {singular} object",
                actual=status_text(response),
                data_created=response.data,
                duration_ms=response.duration_ms,
            )
        return ctx.definition.result(
            TestStatus.FAILED,
            f"Failed to create {noun}",
            error=response.error,
            expected=f"Status 200/201 with {singular} object",
            actual=status_text(response),
            root_cause="API validation failed or server error",
            fix="Check request payload, verify all required fields are provided",
            duration_ms=response.duration_ms,
        )

    return run


def _follow_up(
    group: str,
    kind: EntityKind,
    method: str,
    suffix: str,
    passed: str,
    failed: str,
    expected: Optional[str] = None,
    payload: Optional[Payload] = None,
    deletes: bool = False,
    failure_status: TestStatus = TestStatus.FAILED,
):
    """Act on the entity created earlier in the same lifecycle."""

    async def run(ctx: RunContext) -> TestResult:
        if not ctx.token:
            return _skip(ctx, NOT_AUTHENTICATED)
        entity_id = ctx.state.get(_state_key(group, kind))
        if not entity_id:
            return _skip(ctx, f"Skipped - no {kind.value[:-1]} was created")

        body = payload(ctx) if payload else None
        response = await ctx.probe.probe(
            method, f"/{kind.value}/{entity_id}{suffix}", body=body
        )
        deleted = None
        if deletes:
            deleted = response.success
            if response.success:
                ctx.tracker.untrack(kind, entity_id)
                ctx.state.pop(_state_key(group, kind), None)

        return ctx.definition.result(
            TestStatus.PASSED if response.success else failure_status,
            passed if response.success else failed,
            error=response.error,
            expected=expected,
            actual=status_text(response),
            data_deleted=deleted,
            duration_ms=response.duration_ms,
        )

    return run


def _client_payload(ctx: RunContext) -> Dict[str, Any]:
    return {
        "name": generate_test_name("Client"),
        "email": generate_test_email(),
        "phone": "+27123456789",
        "company": "Test Automation Company",
        "address": "123 Test Street, Test City",
        "status": "Active",
    }


def _invoice_client_payload(ctx: RunContext) -> Dict[str, Any]:
    return {
        "name": generate_test_name("InvoiceTestClient"),
        "email": generate_test_email(),
        "phone": "+27111111111",
        "company": "Invoice Test Company",
        "status": "Active",
    }


def _product_payload(ctx: RunContext) -> Dict[str, Any]:
    return {
        "name": generate_test_name("Product"),
        "description": "Test product created by automated testing",
        "price": 99.99,
        "tax_rate": 15,
        "category": "Test Category",
    }


def _template_payload(ctx: RunContext) -> Dict[str, Any]:
    return {
        "name": generate_test_name("Template"),
        "description": "Test template created by automated testing",
        "styles": {
            "primaryColor": "#2563eb",
            "accentColor": "#10b981",
            "fontFamily": "inter",
            "headerStyle": "left",
            "showLogo": True,
            "showBorder": True,
            "showWatermark": False,
            "tableStyle": "striped",
        },
    }


def _invoice_payload(ctx: RunContext) -> Dict[str, Any]:
    today = date.today()
    return {
        "client_id": ctx.state.get(_state_key("invoice_crud", EntityKind.CLIENTS)),
        "status": "Draft",
        "date": today.isoformat(),
        "due_date": (today + timedelta(days=30)).isoformat(),
        "notes": "Test invoice created by automated testing",
        "items": [
            {
                "name": "Test Service",
                "description": "Automated test line item",
                "quantity": 2,
                "price": 100.00,
                "tax_rate": 15,
            }
        ],
    }


def _definition(step_id: str, name: str, priority: Priority, endpoint: str, run) -> TestDefinition:
    return TestDefinition(
        id=step_id,
        name=name,
        system=SystemTag.SHARED,
        component=Component.API,
        category=TestCategory.CRUD,
        priority=priority,
        endpoint=endpoint,
        run=run,
    )


def _simple_lifecycle(
    kind: EntityKind,
    title: str,
    payload: Payload,
    update_payload: Payload,
    priority: Priority,
) -> List[TestDefinition]:
    group = f"{kind.value[:-1]}_crud"
    noun = title.lower()
    collection = f"/{kind.value}"
    item = f"{collection}/{{id}}"
    return [
        _definition(
            f"{group}_create",
            f"CREATE {title}",
            priority,
            f"POST {collection}",
            _create(group, kind, noun, payload),
        ),
        _definition(
            f"{group}_read",
            f"READ {title}",
            priority,
            f"GET {item}",
            _follow_up(
                group, kind, "GET", "",
                f"{title} retrieved successfully",
                f"Failed to read {noun}",
                expected=f"Status 200 with {noun} data",
            ),
        ),
        _definition(
            f"{group}_update",
            f"UPDATE {title}",
            priority,
            f"PUT {item}",
            _follow_up(
                group, kind, "PUT", "",
                f"{title} updated successfully",
                f"Failed to update {noun}",
                expected=f"Status 200 with updated {noun}",
                payload=update_payload,
            ),
        ),
        _definition(
            f"{group}_delete",
            f"DELETE {title}",
            priority,
            f"DELETE {item}",
            _follow_up(
                group, kind, "DELETE", "",
                f"{title} deleted successfully (cleanup complete)",
                f"Failed to delete {noun}",
                expected="Status 200",
                deletes=True,
            ),
        ),
    ]


def _invoice_lifecycle() -> List[TestDefinition]:
    group = "invoice_crud"
    invoices = EntityKind.INVOICES
    clients = EntityKind.CLIENTS
    return [
        _definition(
            f"{group}_client_create",
            "CREATE Test Client for Invoice",
            Priority.P0,
            "POST /clients",
            _create(group, clients, "test client", _invoice_client_payload),
        ),
        _definition(
            f"{group}_create",
            "CREATE Invoice",
            Priority.P0,
            "POST /invoices",
            _create(group, invoices, "invoice", _invoice_payload, requires=clients),
        ),
        _definition(
            f"{group}_read",
            "READ Invoice",
            Priority.P0,
            "GET /invoices/{id}",
            _follow_up(
                group, invoices, "GET", "",
                "Invoice retrieved successfully",
                "Failed to read invoice",
            ),
        ),
        _definition(
            f"{group}_update",
            "UPDATE Invoice",
            Priority.P0,
            "PUT /invoices/{id}",
            _follow_up(
                group, invoices, "PUT", "",
                "Invoice updated successfully",
                "Failed to update invoice",
                payload=lambda ctx: {"notes": "Updated by automated test"},
            ),
        ),
        _definition(
            f"{group}_mark_paid",
            "MARK Invoice as Paid",
            Priority.P0,
            "POST /invoices/{id}/mark-paid",
            _follow_up(
                group, invoices, "POST", "/mark-paid",
                "Invoice marked as paid successfully",
                "Failed to mark invoice as paid",
            ),
        ),
        _definition(
            f"{group}_delete",
            "DELETE Invoice",
            Priority.P0,
            "DELETE /invoices/{id}",
            _follow_up(
                group, invoices, "DELETE", "",
                "Invoice deleted successfully (cleanup)",
                "Failed to delete invoice",
                deletes=True,
            ),
        ),
        _definition(
            f"{group}_client_delete",
            "DELETE Test Client (Cleanup)",
            Priority.P1,
            "DELETE /clients/{id}",
            _follow_up(
                group, clients, "DELETE", "",
                "Test client cleaned up",
                "Failed to cleanup test client",
                deletes=True,
                failure_status=TestStatus.WARNING,
            ),
        ),
    ]


def build_crud_checks() -> List[TestDefinition]:
    """Client, product, template and invoice lifecycles, in run order."""
    return (
        _simple_lifecycle(
            EntityKind.CLIENTS,
            "Client",
            _client_payload,
            lambda ctx: {
                "name": generate_test_name("UpdatedClient"),
                "company": "Updated Test Company",
            },
            Priority.P0,
        )
        + _simple_lifecycle(
            EntityKind.PRODUCTS,
            "Product",
            _product_payload,
            lambda ctx: {"name": generate_test_name("UpdatedProduct"), "price": 149.99},
            Priority.P0,
        )
        + _simple_lifecycle(
            EntityKind.TEMPLATES,
            "Template",
            _template_payload,
            lambda ctx: {"name": generate_test_name("UpdatedTemplate")},
            Priority.P1,
        )
        + _invoice_lifecycle()
    )
