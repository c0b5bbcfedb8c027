# Routes package init
"""
Product API Backend: API Routes Package
========================================

Route Inventory:
    - products.py:  the product route table (six routes under /api/products)
    - registry.py:  RouteDefinition and the validate-then-handle dispatcher
    - health.py:    GET /health

Design Principle:
    Routes are THIN. Input shape is checked by the field validators declared
    in the route table; persistence lives in services.
"""
