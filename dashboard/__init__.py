"""
Dashboard Package.

REST boundary in front of the waste intelligence engine.

Modules:
- api: application factory
- routers/: waste, baselines and health endpoints
- schemas: request/response models
- dependencies: engine lookup and error mapping
"""

from .api import create_app

__all__ = ["create_app"]
