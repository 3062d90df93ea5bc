"""
hireguard
=========

Profile validation and error classification for a freelance job marketplace.

Subpackages:
- business: rule tables, field and profile validators, form sessions, error taxonomy
- integrations: error classifier, console and remote error loggers, retrying error handler
- monitoring: structlog configuration and correlation ids
- blueprints: Flask endpoints exposing validation and error collection
- config: environment-specific settings

The Flask application factory lives in ``hireguard.app``.
"""

__version__ = "1.0.0"
__title__ = "hireguard"
__description__ = "Profile validation and error handling for a job marketplace"
