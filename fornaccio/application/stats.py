from datetime import datetime, time

import pytz

from fornaccio.core.config import settings
from fornaccio.domain.schemas import AdminStats, BestSeller

BEST_SELLER_LIMIT = 5


def start_of_today(tz_name: str | None = None, now: datetime | None = None) -> datetime:
    """Midnight in the pizzeria's timezone, expressed in UTC."""
    tz = pytz.timezone(tz_name or settings.TIMEZONE)
    local_now = now.astimezone(tz) if now else datetime.now(tz)
    midnight = tz.localize(datetime.combine(local_now.date(), time.min))
    return midnight.astimezone(pytz.utc)


def compute_admin_stats(order_repo, tz_name: str | None = None) -> AdminStats:
    """Dashboard figures. Cancelled orders never count."""
    today_count, daily_revenue = order_repo.revenue_summary(created_after=start_of_today(tz_name))
    total_count, total_revenue = order_repo.revenue_summary()

    best_sellers = [
        BestSeller(name=name, count=count, total=round(total, 2))
        for name, count, total in order_repo.best_sellers(limit=BEST_SELLER_LIMIT)
    ]

    return AdminStats(
        daily_revenue=round(daily_revenue, 2),
        today_count=today_count,
        total_revenue=round(total_revenue, 2),
        total_count=total_count,
        best_sellers=best_sellers,
        best_seller_name=best_sellers[0].name if best_sellers else "N/A",
        best_seller_count=best_sellers[0].count if best_sellers else 0,
    )
