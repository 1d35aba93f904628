"""Prometheus metrics for document rendering, proposal storage and logins"""

from prometheus_client import Counter, Histogram

# Document metrics
document_render_counter = Counter(
    "proposal_documents_rendered_total",
    "Proposal documents rendered to HTML",
    ["print_on_load"],  # true | false
)

document_render_failures_counter = Counter(
    "proposal_document_render_failures_total",
    "Proposal documents that failed to render",
)

# Storage metrics
proposal_saved_counter = Counter(
    "proposal_saved_total",
    "Saved proposals",
    ["outcome"],  # created | updated
)

proposal_deleted_counter = Counter(
    "proposal_deleted_total",
    "Deleted proposals",
)

# Auth metrics
login_counter = Counter(
    "proposal_login_total",
    "Login attempts",
    ["outcome"],  # success | failure
)

# Logo client metrics
logo_fetch_failures_counter = Counter(
    "logo_fetch_failures_total",
    "Failed company logo downloads",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_document_rendered(print_on_load: bool) -> None:
    document_render_counter.labels(print_on_load=str(print_on_load).lower()).inc()


def record_proposal_saved(created: bool) -> None:
    proposal_saved_counter.labels(outcome="created" if created else "updated").inc()


def record_login(success: bool) -> None:
    login_counter.labels(outcome="success" if success else "failure").inc()
