"""
Prometheus metrics for bookings, inventory, ratings and visit requests.

This module defines all Prometheus metrics used throughout the application for
observability and monitoring. Metrics are exposed via the /metrics endpoint for
scraping by Prometheus.

Metric Types:
    - Counter: Cumulative metrics that only increase (e.g., bookings confirmed)
    - Histogram: Observations bucketed by value (e.g., transaction latency)

Example:
    >>> from stayledger.metrics import inventory_operations
    >>> inventory_operations.labels(operation="reserve", outcome="committed").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Metrics
# =============================================================================

bookings_total = Counter(
    "stayledger_bookings_total",
    "Booking ledger operations by outcome",
    ["operation", "outcome"],
)
"""
Counter for booking ledger operations.

Labels:
    operation: confirm, cancel, move_in_date, room_assignment
    outcome: success or the error tag (OutOfInventory, ListingNotFound, ...)
"""

# =============================================================================
# Inventory Metrics
# =============================================================================

inventory_operations = Counter(
    "stayledger_inventory_operations_total",
    "Inventory store reserve/release operations by outcome",
    ["operation", "outcome"],
)
"""
Counter for inventory mutations.

Labels:
    operation: reserve or release
    outcome: committed, out_of_inventory, not_found, clamped
"""

release_overflows = Counter(
    "stayledger_release_overflows_total",
    "Releases that would have pushed available above total capacity",
)
"""Counter for release calls without a matching reservation (clamped, not written)."""

# =============================================================================
# Rating / Visit Metrics
# =============================================================================

reviews_added = Counter(
    "stayledger_reviews_added_total",
    "Reviews appended and aggregated into listing ratings",
)

visit_requests_total = Counter(
    "stayledger_visit_requests_total",
    "Visit request registry actions",
    ["action"],
)
"""
Counter for visit request actions.

Labels:
    action: created, rescheduled, approved, rejected
"""

# =============================================================================
# Database Metrics
# =============================================================================

transaction_duration = Histogram(
    "stayledger_transaction_duration_seconds",
    "Duration of core database transactions in seconds",
    ["operation"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)
"""
Histogram for transaction duration, including lock waits.

Labels:
    operation: reserve, release, confirm_booking, cancel_booking, add_review, ...
"""
