# Middleware package init
"""
RecipeShare Backend - Middleware Package
=========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the logging middleware can tag its line with it.
"""
