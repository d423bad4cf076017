"""
API Module
==========
Flask API routes and blueprints.
"""
from html_translator.api.routes import (
    create_units_blueprint,
    create_languages_blueprint,
    create_health_blueprint,
    create_logs_blueprint
)

__all__ = [
    'create_units_blueprint',
    'create_languages_blueprint',
    'create_health_blueprint',
    'create_logs_blueprint'
]
