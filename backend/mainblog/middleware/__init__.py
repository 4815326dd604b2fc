"""
Main Blog Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: generate correlation ID for logging and error bodies
    2. Logging: log method, path, status and duration with that ID
    3. GZip / CORS: Starlette middleware configured in main.py
"""
