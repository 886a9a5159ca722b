# Routes package init
"""
Snippetbox — Host Routes
==========================

What:  FastAPI routes served by the host application, outside the pipeline.

Route Inventory:
    - health.py:  GET /health   (service health check)

Snippet and user routes live on the pipeline's Router (snippetbox.application).
"""
