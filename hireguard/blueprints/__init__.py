"""
Flask blueprints and their registration.

Blueprint Organization:
- Profiles Blueprint (/api/v1/*): profile and field validation, upload checks, health
- Errors Blueprint (/api/errors): collection endpoint for remote error loggers
"""

import structlog
from flask import Flask

from hireguard.blueprints.errors import errors_bp
from hireguard.blueprints.profiles import profiles_bp

logger = structlog.get_logger("blueprints")

BLUEPRINTS = (profiles_bp, errors_bp)


def register_blueprints(app: Flask) -> None:
    """Register every application blueprint on ``app``."""
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
        logger.debug("Blueprint registered",
                     blueprint=blueprint.name,
                     url_prefix=blueprint.url_prefix)


__all__ = [
    'BLUEPRINTS',
    'errors_bp',
    'profiles_bp',
    'register_blueprints',
]
