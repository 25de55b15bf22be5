"""
ORM models. Importing this package registers every table on Base.metadata
(Alembic autogenerate and the test suite's create_all rely on it).
"""

from servicehub.models.appointment import Appointment, AppointmentStatus
from servicehub.models.base import TenantScopedMixin, utcnow
from servicehub.models.catalog import ServiceOffering
from servicehub.models.customer import Customer
from servicehub.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from servicehub.models.location import Location
from servicehub.models.notification import Notification
from servicehub.models.payment import Payment, PaymentMethod
from servicehub.models.product import Product
from servicehub.models.work_order import ItemType, WorkOrder, WorkOrderItem, WorkOrderStatus

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Customer",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "ItemType",
    "Location",
    "Notification",
    "Payment",
    "PaymentMethod",
    "Product",
    "ServiceOffering",
    "TenantScopedMixin",
    "WorkOrder",
    "WorkOrderItem",
    "WorkOrderStatus",
    "utcnow",
]
