# qa_engine/config/constants.py

"""Constants for the QA verification engine."""

# Probe defaults
DEFAULT_EXPECTED_STATUS = 200
DEFAULT_PROBE_TIMEOUT_MS = 15000
JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Page verdict tolerance: a page missing required files is still "partial"
# while at least this share of its dependencies resolve
PARTIAL_PASS_RATE_THRESHOLD = 80

# Routes registered in the frontend router
REGISTERED_ROUTES = [
    "/",
    "/login",
    "/register",
    "/dashboard",
    "/clients",
    "/products",
    "/invoices",
    "/recurring-invoices",
    "/payments",
    "/templates",
    "/reports",
    "/reminders",
    "/profile",
    "/settings",
    "/subscription",
    "/billing",
    "/notifications",
    "/email-templates",
    "/tests",
    "/contact",
    "/faq",
    "/docs",
    "/support",
    "/privacy",
    "/terms",
    "/cookies",
    "/popia",
    "/careers",
    "/verify-email",
    "/forgot-password",
    "/reset-password",
    "/payment/success",
    "/payment/failed",
    "/auth/google/callback",
    "/verify-email-reminder",
    "/admin",
    "/admin/users",
    "/admin/subscriptions",
    "/admin/activity",
    "/admin/emails",
    "/admin/settings",
    "/admin/qa",
    "/admin/submissions",
]
CATCH_ALL_ROUTE = "*"

# Routes whose absence breaks the product outright
CRITICAL_ROUTES = [
    "/",
    "/login",
    "/register",
    "/dashboard",
    "/clients",
    "/products",
    "/invoices",
    "/payments",
    "/templates",
]

# Bundled frontend modules known to load; everything else in src/ must be
# proven by a build manifest or the filesystem
KNOWN_FRONTEND_MODULES = [
    "src/main.tsx",
    "src/App.tsx",
    "src/components/ProtectedRoute.tsx",
    "src/components/ui/button.tsx",
    "src/components/ui/card.tsx",
    "src/components/ui/dialog.tsx",
    "src/components/ui/form.tsx",
    "src/components/ui/input.tsx",
    "src/components/ui/table.tsx",
    "src/components/ui/toast.tsx",
    "src/components/ui/toaster.tsx",
    "src/pages/Dashboard.tsx",
    "src/pages/Login.tsx",
    "src/pages/Register.tsx",
    "src/pages/Clients.tsx",
    "src/pages/Products.tsx",
    "src/pages/Invoices.tsx",
    "src/pages/Payments.tsx",
    "src/pages/Templates.tsx",
    "src/pages/Reports.tsx",
    "src/pages/Profile.tsx",
    "src/pages/Settings.tsx",
    "src/pages/Index.tsx",
    "src/pages/AutomatedTests.tsx",
    "src/contexts/AuthContext.tsx",
    "src/hooks/useClients.ts",
    "src/hooks/useProducts.ts",
    "src/hooks/useInvoices.ts",
    "src/hooks/usePayments.ts",
    "src/hooks/useReports.ts",
    "src/services/api.ts",
    "src/lib/testRunner.ts",
    "src/lib/fileDependencyMap.ts",
    "src/lib/exportUtils.ts",
]

# Files that are never part of the JS bundle and are assumed deployed
NON_BUNDLED_PREFIXES = ("api/",)
NON_BUNDLED_SUFFIXES = (".json", ".css", ".html", ".config.ts")

# Prefixes used by the backend when seeding tagged test data
SEED_PREFIXES = {
    "sms": "SMS_TEST_",
    "qr": "QR_TEST_",
    "invoicing": "INV_TEST_",
    "shared": "SHARED_TEST_",
    "all": "TEST_",
}

# Generated test entities
TEST_NAME_PREFIX = "[TEST]"
TEST_EMAIL_DOMAIN = "testautomation.local"

# Export
SNAPSHOT_FILENAME_TEMPLATE = "qa-report-{date}.json"
DIGEST_FALLBACK_FILENAME_TEMPLATE = "qa-errors-{timestamp}.txt"

# Error Messages
ERROR_MESSAGES = {
    "missing_token": "No session token found. Log in again before running tests.",
    "test_execution_failed": "Test execution failed",
    "no_result": "Check returned no result",
    "export_failed": "Failed to export report: {error}",
    "clipboard_failed": "Clipboard unavailable, digest written to {path}",
    "seed_failed": "Failed to seed test data",
    "cleanup_failed": "Failed to cleanup test data",
    "status_failed": "Failed to check status",
    "health_failed": "Failed to run health check",
    "manifest_unreadable": "Could not read manifest {path}: {error}",
}
