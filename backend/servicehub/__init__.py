"""
ServiceHub Backend — Application Package Initializer
=====================================================

What: Multi-tenant field-service management API (customers, locations,
      catalog services, work orders, invoices, payments, notifications).
Who:  Imported by uvicorn (`servicehub.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, status codes
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← validation, tenant checks, totals
    ├─────────────────────────────────────┤
    │   Repository + Paged Query (Data)   │  ← tenant scoping, filters, paging
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Every service call receives an explicit RequestContext carrying the
    caller's tenant id. No record is ever read or written outside that tenant.
"""

__version__ = "1.0.0"
