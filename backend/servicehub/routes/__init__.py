"""
ServiceHub Backend — API Routes Package
=========================================

Route Inventory (prefix /api unless noted):
    customers.py:      GET/POST /customers, GET/PUT/DELETE /customers/{id}
    locations.py:      GET/POST /locations, GET/PUT/DELETE /locations/{id}
    services.py:       GET/POST /services, GET/PUT/DELETE /services/{id}
    products.py:       GET/POST /products, GET/PUT/DELETE /products/{id}
    appointments.py:   GET/POST /appointments, GET/PUT/DELETE /appointments/{id},
                       PUT /appointments/{id}/status
    work_orders.py:    GET/POST /workorders, GET/PUT/DELETE /workorders/{id},
                       POST /workorders/{id}/items, DELETE /workorders/{id}/items/{itemId}
    invoices.py:       GET /invoices, GET /invoices/{id},
                       POST /invoices/from-workorder/{workOrderId}
    payments.py:       GET/POST /payments
    notifications.py:  GET /notifications, PUT /notifications/{id}/read,
                       PUT /notifications/mark-all-read
    dashboard.py:      GET /dashboard/stats
    health.py:         GET /health (no prefix)

Routes stay thin: read parameters, call the service with the request's
RequestContext, choose the status code.
"""
