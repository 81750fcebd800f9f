from .setup import setup_observability
from .metrics import (
    shop_order_submissions_total,
    shop_order_rejections_total,
    shop_order_intake_duration_seconds,
    shop_alias_collisions_total
)
