# Services package init
"""
Product API Backend: Services Layer
====================================

What:  The product store handlers, sitting between the route table and the
       database.

Service Inventory:
    - ProductService: list, get, create, update, toggle availability, delete

Services never see raw request data. The dispatcher hands them typed values
that already passed the route's field validators.
"""
