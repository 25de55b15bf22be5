"""ServiceHub Backend — Dashboard Schemas"""

import uuid
from datetime import datetime
from typing import List

from pydantic import Field

from servicehub.schemas.common import CamelModel, Money


class TopService(CamelModel):
    service_id: uuid.UUID
    service_name: str
    count: int
    # count × the service's current catalog price
    revenue: Money


class RecentAppointment(CamelModel):
    id: uuid.UUID
    customer_name: str
    scheduled_start: datetime
    status: str


class DashboardStats(CamelModel):
    start_date: datetime = Field(description="Start of the reporting window")
    end_date: datetime = Field(description="End of the reporting window")
    total_revenue: Money = Field(description="Total of Paid invoices dated in the window")
    total_appointments: int = Field(description="Appointments starting in the window")
    active_appointments: int = Field(
        description="Appointments not yet Completed, Cancelled or NoShow"
    )
    total_customers: int
    pending_invoices: int = Field(description="Invoices neither Paid nor Cancelled")
    pending_invoice_amount: Money = Field(description="Unpaid balance of the pending invoices")
    low_stock_products: int = Field(description="Active products at or below their threshold")
    top_services: List[TopService] = Field(default_factory=list)
    recent_appointments: List[RecentAppointment] = Field(default_factory=list)
