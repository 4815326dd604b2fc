"""
Main Blog Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:    POST   /register
                  POST   /login
    - blogs.py:   POST   /blogs/create
                  GET    /blogs
                  GET    /blogs/search
                  PUT    /blogs/update/{blog_id}
                  DELETE /blogs/{blog_id}
    - health.py:  GET    /health

Routes stay thin: extract inputs, call the service, return its response
model. Errors propagate as exceptions to the global handlers in main.py.
"""
