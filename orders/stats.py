"""Aggregate read models over orders."""

from datetime import datetime, timedelta

from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from .models import Order
from .pricing import ZERO

INTERVALS = ('day', 'week', 'month')
MAX_PERIOD = 365


def financial_summary():
    overall = Order.objects.aggregate(
        total_orders=Count('id'),
        total_revenue=Sum('total_price'),
        total_deposits=Sum('deposit'),
        total_remaining=Sum('remaining_amount'),
    )
    for key in ('total_revenue', 'total_deposits', 'total_remaining'):
        overall[key] = overall[key] or ZERO
    by_state = (
        Order.objects.values('order_state')
        .annotate(count=Count('id'), total_value=Sum('total_price'))
        .order_by('order_state')
    )
    return {'overall': overall, 'by_state': list(by_state)}


def parse_timeseries_params(period, interval):
    """Validate ``interval`` and clamp ``period`` to ``1..MAX_PERIOD``."""
    interval = (interval or 'day').strip().lower()
    if interval not in INTERVALS:
        raise ValidationError({'interval': f'Interval must be one of: {", ".join(INTERVALS)}.'})
    default = 7 if interval == 'day' else 6
    try:
        period = int(period) if period not in (None, '') else default
    except (TypeError, ValueError):
        period = default
    return min(max(period, 1), MAX_PERIOD), interval


def _bucket_start(day, interval):
    if interval == 'week':
        return day - timedelta(days=day.weekday())
    if interval == 'month':
        return day.replace(day=1)
    return day


def _shift_months(day, months):
    index = day.year * 12 + (day.month - 1) - months
    return day.replace(year=index // 12, month=index % 12 + 1, day=1)


def bucket_starts(period, interval, today):
    """First day of each of the last ``period`` buckets, oldest first."""
    current = _bucket_start(today, interval)
    if interval == 'day':
        starts = [current - timedelta(days=i) for i in range(period)]
    elif interval == 'week':
        starts = [current - timedelta(weeks=i) for i in range(period)]
    else:
        starts = [_shift_months(current, i) for i in range(period)]
    return list(reversed(starts))


def _label(start, interval):
    return start.strftime('%Y-%m') if interval == 'month' else start.isoformat()


def build_timeseries(rows, period, interval, today):
    """Bucket ``(created_at, total_price)`` rows into parallel label/count/revenue lists."""
    starts = bucket_starts(period, interval, today)
    index = {start: i for i, start in enumerate(starts)}
    orders = [0] * period
    revenue = [ZERO] * period
    for created_at, total_price in rows:
        day = timezone.localtime(created_at).date()
        i = index.get(_bucket_start(day, interval))
        if i is None:
            continue
        orders[i] += 1
        revenue[i] += total_price or ZERO
    return {
        'labels': [_label(start, interval) for start in starts],
        'orders': orders,
        'revenue': revenue,
    }


def order_timeseries(period, interval, today=None):
    today = today or timezone.localdate()
    first = bucket_starts(period, interval, today)[0]
    since = timezone.make_aware(datetime(first.year, first.month, first.day))
    rows = Order.objects.filter(created_at__gte=since).values_list('created_at', 'total_price')
    return build_timeseries(rows, period, interval, today)
