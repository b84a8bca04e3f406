"""Tests for the check catalog and the individual console checks."""

import asyncio

import pytest

from qa_engine.schemas.core import (
    Component,
    Severity,
    SystemFilter,
    SystemTag,
    TestStatus,
)
from qa_engine.schemas.tools.test_catalog import RunOptions, TestDefinition
from qa_engine.tools.catalog import (
    RunContext,
    build_catalog,
    build_crud_checks,
    build_endpoint_checks,
    describe_catalog,
    ensure_unique_ids,
    filter_catalog,
)
from qa_engine.tools.data_tracker import TestDataTracker


def by_id(definitions):
    return {d.id: d for d in definitions}


def run_check(definition, probe, token="session-token", options=None, state=None):
    ctx = RunContext(
        definition=definition,
        probe=probe,
        tracker=TestDataTracker(),
        token=token,
        options=options or RunOptions(),
        state=state if state is not None else {},
    )
    return asyncio.run(definition.run(ctx))


class TestCatalogShape:
    """Catalog contents and filtering."""

    def test_console_catalog_order(self):
        ids = [d.id for d in build_catalog()]
        assert ids[:3] == ["sms_credits_check", "sms_send_endpoint", "sms_logs_api"]
        assert ids[-2:] == ["cross_invoice_sms_credits", "cross_invoice_email_credits"]
        assert len(ids) == 20

    def test_ids_unique_across_all_catalogs(self):
        everything = build_catalog() + build_endpoint_checks() + build_crud_checks()
        ensure_unique_ids(everything)

    def test_duplicate_ids_rejected(self):
        first = build_catalog()[0]
        with pytest.raises(ValueError, match="Duplicate"):
            ensure_unique_ids([first, first])

    def test_build_returns_fresh_lists(self):
        first = build_catalog()
        first.pop()
        assert len(build_catalog()) == 20

    def test_definitions_are_frozen(self):
        definition = build_catalog()[0]
        with pytest.raises(Exception):
            definition.name = "changed"

    def test_filter_keeps_system_and_shared(self):
        selected = filter_catalog(build_catalog(), SystemFilter.SMS)
        systems = {d.system for d in selected}
        assert systems == {SystemTag.SMS, SystemTag.SHARED}
        assert selected[0].id == "sms_credits_check"

    def test_filter_preserves_relative_order(self):
        catalog = build_catalog()
        selected = filter_catalog(catalog, "invoicing")
        positions = [catalog.index(d) for d in selected]
        assert positions == sorted(positions)

    def test_filter_all_returns_copy(self):
        catalog = build_catalog()
        selected = filter_catalog(catalog, SystemFilter.ALL)
        assert selected == catalog
        assert selected is not catalog

    def test_filter_shared_only(self):
        selected = filter_catalog(build_catalog(), SystemFilter.SHARED)
        assert all(d.system == SystemTag.SHARED for d in selected)
        assert "auth_user" in by_id(selected)

    def test_unknown_filter_rejected(self):
        with pytest.raises(ValueError):
            filter_catalog(build_catalog(), "billing")

    def test_cross_system_flags(self):
        flagged = [d.id for d in build_catalog() if d.cross_system]
        assert flagged == ["cross_invoice_sms_credits", "cross_invoice_email_credits"]

    def test_describe_catalog_drops_callable(self):
        entries = describe_catalog(build_catalog())
        dumped = entries[0].model_dump()
        assert "run" not in dumped
        assert dumped["id"] == "sms_credits_check"


class TestDefinitionResult:
    """Results inherit their definition's metadata."""

    def test_result_copies_metadata(self):
        definition = by_id(build_catalog())["cross_invoice_sms_credits"]
        result = definition.result(TestStatus.FAILED, "broken")

        assert result.id == definition.id
        assert result.system == SystemTag.INVOICING
        assert result.component == Component.LOGIC
        assert result.cross_system is True
        assert result.severity == Severity.ERROR
        assert result.endpoint == "GET /credits/check?type=sms"

    def test_passed_result_has_no_severity(self):
        definition = build_catalog()[0]
        assert definition.result(TestStatus.PASSED).severity is None


class TestConsoleChecks:
    """Behavior of the subsystem checks against a fake backend."""

    def test_sms_credits_sufficient(self, backend, probe):
        backend.routes[("GET", "/credits/check")] = (200, {"sufficient": True})
        result = run_check(by_id(build_catalog())["sms_credits_check"], probe)
        assert result.status == TestStatus.PASSED
        assert result.message == "Credits available"

    def test_sms_credits_exhausted_still_passes(self, backend, probe):
        backend.routes[("GET", "/credits/check")] = (200, {"sufficient": False})
        result = run_check(by_id(build_catalog())["sms_credits_check"], probe)
        assert result.status == TestStatus.PASSED
        assert result.message == "No SMS credits available"

    def test_sms_credits_missing_field_warns(self, backend, probe):
        backend.routes[("GET", "/credits/check")] = (200, {"balance": 3})
        result = run_check(by_id(build_catalog())["sms_credits_check"], probe)
        assert result.status == TestStatus.WARNING

    def test_sms_credits_backend_message_preferred(self, backend, probe):
        backend.routes[("GET", "/credits/check")] = (500, {"message": "Credits DB down"})
        result = run_check(by_id(build_catalog())["sms_credits_check"], probe)
        assert result.status == TestStatus.FAILED
        assert result.message == "Credits DB down"

    def test_sms_send_mock_mode_makes_no_call(self, backend, probe):
        result = run_check(by_id(build_catalog())["sms_send_endpoint"], probe)
        assert result.status == TestStatus.PASSED
        assert backend.requests == []

    def test_sms_send_live_mode_warns(self, probe):
        result = run_check(
            by_id(build_catalog())["sms_send_endpoint"],
            probe,
            options=RunOptions(live_sms_mode=True),
        )
        assert result.status == TestStatus.WARNING

    def test_listing_counts_entries(self, backend, probe):
        backend.routes[("GET", "/invoices")] = (200, {"data": [{"id": 1}, {"id": 2}]})
        result = run_check(by_id(build_catalog())["invoice_list"], probe)
        assert result.status == TestStatus.PASSED
        assert result.message == "Found 2 invoices"

    def test_listing_failure_uses_default_message(self, probe):
        result = run_check(by_id(build_catalog())["invoice_list"], probe)
        assert result.status == TestStatus.FAILED
        assert result.message == "Not found"

    def test_qr_checks_are_missing(self, probe):
        catalog = by_id(build_catalog())
        for check_id in ("qr_controller", "qr_routes", "qr_table", "qr_ui_page"):
            result = run_check(catalog[check_id], probe)
            assert result.status == TestStatus.MISSING
            assert result.severity == Severity.MISSING
            assert result.suggested_fix

    def test_auth_user_needs_user_object(self, backend, probe):
        backend.routes[("GET", "/user")] = (200, {"user": None})
        result = run_check(by_id(build_catalog())["auth_user"], probe)
        assert result.status == TestStatus.WARNING

        backend.routes[("GET", "/user")] = (200, {"user": {"id": 1}})
        result = run_check(by_id(build_catalog())["auth_user"], probe)
        assert result.status == TestStatus.PASSED

    def test_credits_usage_summary(self, backend, probe):
        backend.routes[("GET", "/credits/usage")] = (
            200,
            {"plan": "pro", "credits": {"email": {"remaining": 42}}},
        )
        result = run_check(by_id(build_catalog())["credits_usage"], probe)
        assert result.message == "Plan: pro, Email: 42 remaining"

    def test_cross_system_flow_warns_without_credits(self, backend, probe):
        backend.routes[("GET", "/credits/check")] = (200, {"sufficient": False})
        result = run_check(by_id(build_catalog())["cross_invoice_email_credits"], probe)
        assert result.status == TestStatus.WARNING
        assert backend.requests[0].url.params["type"] == "email"

    def test_cross_system_flow_fails_on_error(self, probe):
        result = run_check(by_id(build_catalog())["cross_invoice_sms_credits"], probe)
        assert result.status == TestStatus.FAILED
        assert result.message == "Cross-system credit check failed"

    def test_custom_definition_runs(self, probe):
        async def run(ctx):
            return ctx.definition.result(TestStatus.PASSED, ctx.options.user_mode.value)

        definition = TestDefinition(
            id="custom", name="Custom", system=SystemTag.QR, component=Component.UI, run=run
        )
        assert run_check(definition, probe).message == "admin"
