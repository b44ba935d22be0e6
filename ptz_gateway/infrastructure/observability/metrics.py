"""Prometheus metrics for monitoring eligibility outcomes, storage and notifications"""

from prometheus_client import Counter, Histogram

# Submission metrics
submission_counter = Counter(
    "ptz_submission_total",
    "Total PTZ simulations submitted",
    ["outcome"],  # eligible | ineligible
)

loan_amount_bucket_counter = Counter(
    "ptz_loan_amount_bucket",
    "Computed PTZ amounts by bucket",
    ["bucket"],  # 0, 0-25k, 25k-50k, 50k-100k, 100k+
)

# Store metrics
store_retry_counter = Counter(
    "ptz_store_retries_total",
    "Submission writes retried after a database error",
)

store_failure_counter = Counter(
    "ptz_store_failures_total",
    "Submissions that could not be stored after all retries",
)

# Notification metrics
notification_failure_counter = Counter(
    "ptz_notification_failures_total",
    "Failed confirmation deliveries",
    ["channel"],  # email | sheets
)

webhook_latency_histogram = Histogram(
    "ptz_sheets_webhook_latency_seconds",
    "Spreadsheet mirror webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_submission(eligible: bool, loan_amount: int) -> None:
    """Record outcome metrics for monitoring eligibility rates and loan distribution"""
    outcome = "eligible" if eligible else "ineligible"
    submission_counter.labels(outcome=outcome).inc()

    # Bucket loan amounts for distribution analysis
    if loan_amount == 0:
        bucket = "0"
    elif loan_amount <= 25_000:
        bucket = "0-25k"
    elif loan_amount <= 50_000:
        bucket = "25k-50k"
    elif loan_amount <= 100_000:
        bucket = "50k-100k"
    else:
        bucket = "100k+"

    loan_amount_bucket_counter.labels(bucket=bucket).inc()
