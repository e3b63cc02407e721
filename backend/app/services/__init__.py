"""
Bug Reporter Backend — Services Layer
=======================================

Service Inventory:
    - BugService: CRUD façade over the `bugs` table (the record store gateway)
"""
