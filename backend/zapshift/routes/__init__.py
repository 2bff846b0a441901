# Routes package init
"""
zapShift Backend — API Routes Package
=======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - health.py:     GET  /, GET /health
    - users.py:      POST /users, GET /users/search, GET /users/role,
                     PATCH /users/{id}/role                      (admin)
    - riders.py:     POST /riders, GET /riders/pending (admin),
                     GET /riders/active (admin), GET /riders/by-district,
                     PATCH /riders/{id}
    - parcels.py:    GET /parcels, GET /api/parcels (identity),
                     GET /api/parcels/{id}, POST /parcels,
                     DELETE /parcels/{id}, PATCH /parcels/{id}/mark-paid
    - payments.py:   GET /payments (identity, self only), POST /payments,
                     POST /create-payment-intent
    - trackings.py:  POST /trackings

Design Principle:
    Routes are THIN. They extract path/query/body values, resolve
    dependencies (store, guards, gateway), call one service method and wrap
    the result in a response envelope. Errors propagate as ZapShiftError
    subclasses to the global handlers in main.py.
"""
