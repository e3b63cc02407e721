"""
Bug Reporter Backend — API Routes Package
===========================================

Route Inventory:
    - bugs.py:    /api/bugs CRUD (list, get, create, status, priority,
                  metadata, delete)
    - health.py:  GET /health

Routes stay thin: they extract request data, call BugService, and set
status codes and headers.
"""
