"""Revenue report: order totals of paid invoices, overall and per month."""

from collections import defaultdict

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.invoice.invoice import Invoice
from ordering.order.detail import OrderDetail
from ordering.order.order import Order


def revenue_report() -> dict:
    total = 0.0
    monthly: dict[str, float] = defaultdict(float)

    for invoice in current_domain.repository_for(Invoice).find_paid():
        try:
            detail = current_domain.repository_for(OrderDetail).get(invoice.order_detail_id)
            order = current_domain.repository_for(Order).get(detail.order_id)
        except ObjectNotFoundError:
            continue
        total += order.total_amount
        paid_on = invoice.payment_date or order.paid_at
        if paid_on is not None:
            monthly[f"{paid_on.year}-{paid_on.month:02d}"] += order.total_amount

    return {
        "total_revenue": total,
        "monthly_revenue": [{"month": month, "revenue": monthly[month]} for month in sorted(monthly)],
    }
