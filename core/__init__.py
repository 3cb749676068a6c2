"""
Feeder Alerts Core Package.

This package contains the core business logic of the application,
separated from the web layer. Rule evaluation, alert history and
preference handling are coordinated through core modules.

ARCHITECTURE RULES:
- core/ modules may only import from:
  - Python standard library
  - utils/ (file and channel adapters)
  - feeder/ (shared interfaces)
  - config (for global configuration)

- core/ modules MUST NOT import from:
  - web/ (no Flask dependencies)
  - flask, werkzeug, or any web-specific packages

- All new business logic should be placed here, not in web/
"""

__all__ = [
    "alerts_core",
    "event_log_core",
    "maintenance_core",
    "preferences_core",
]
