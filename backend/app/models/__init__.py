"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from app.models.tenant_settings import TenantSettings
from app.models.client import Client
from app.models.order import Order, OrderStatus, OrderStatusHistory
from app.models.invoice import Invoice, InvoiceStatus, DocumentType, NumberSeries
from app.models.recurring_invoice import RecurringInvoiceTemplate, RecurringFrequency
from app.models.referral import Referral, ReferralStatus

__all__ = [
    "TenantSettings",
    "Client",
    "Order",
    "OrderStatus",
    "OrderStatusHistory",
    "Invoice",
    "InvoiceStatus",
    "DocumentType",
    "NumberSeries",
    "RecurringInvoiceTemplate",
    "RecurringFrequency",
    "Referral",
    "ReferralStatus",
]
