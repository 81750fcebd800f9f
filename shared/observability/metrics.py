from prometheus_client import Counter, Histogram

# Business Metrics
shop_order_submissions_total = Counter(
    "shop_order_submissions_total",
    "Total order submissions processed",
    ["status"] # Labels: 'accepted', 'rejected'
)

shop_order_rejections_total = Counter(
    "shop_order_rejections_total",
    "Order submissions rejected, by the intake step that failed",
    ["step"] # Labels: 'validate_shape', 'reconcile_price', etc.
)

shop_order_intake_duration_seconds = Histogram(
    "shop_order_intake_duration_seconds",
    "Order intake duration in seconds"
)

shop_alias_collisions_total = Counter(
    "shop_alias_collisions_total",
    "Alias candidates that were already taken and had to be suffixed"
)
