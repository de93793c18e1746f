"""Prometheus metrics for monitoring receipts issued, funds allocated and rejections"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Payment metrics
receipts_issued_counter = Counter(
    "receipts_issued_total",
    "Receipts issued by combined payments",
)

payments_created_counter = Counter(
    "payments_created_total",
    "Payment rows created (one per invoice receiving funds)",
)

funds_allocated_counter = Counter(
    "funds_allocated_total",
    "Funds applied to invoices",
    ["source"],  # tender | credit_balance
)

invoices_per_receipt_histogram = Histogram(
    "invoices_per_receipt",
    "Invoices settled or reduced by a single receipt",
    buckets=[1, 2, 3, 5, 10, 25],
)

rejection_counter = Counter(
    "payment_rejections_total",
    "Combined payments refused",
    ["reason"],  # ValidationError | InsufficientCreditBalance | ExcessPayment | NotFound
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_combined_payment(total_amount: Decimal, credit_balance_applied: Decimal, payment_count: int) -> None:
    """Record a registered combined payment"""
    receipts_issued_counter.inc()
    payments_created_counter.inc(payment_count)
    invoices_per_receipt_histogram.observe(payment_count)

    if total_amount > 0:
        funds_allocated_counter.labels(source="tender").inc(float(total_amount))
    if credit_balance_applied > 0:
        funds_allocated_counter.labels(source="credit_balance").inc(float(credit_balance_applied))


def record_rejection(reason: str) -> None:
    rejection_counter.labels(reason=reason).inc()
