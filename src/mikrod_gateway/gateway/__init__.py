"""
Gateway Composition Root
========================

This subpackage provides the gateway application factory.

Modules:
- app: FastAPI application factory with explicit configuration

Usage:
    from mikrod_gateway.gateway import create_app

    app = create_app()  # Creates configured FastAPI app
"""

from .app import create_app

__all__ = [
    "create_app",
]
