"""
Feeder Alerts Web Blueprints Package.

This package contains Flask Blueprints for modular route organization.
"""

from web.blueprints.api_v1 import api_v1

__all__ = ["api_v1"]
