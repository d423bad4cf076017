"""
HTML Translator - Bulk HTML translation with markup preservation
================================================================
This package provides a Flask-based web application that translates the
text content of pasted HTML fragments with the Gemini API while keeping
tags, attributes and whitespace intact. Up to twenty fragments can be
translated independently or all at once.

Version: 1.0.0
"""

__version__ = "1.0.0"

from html_translator.app import create_app, run_server

__all__ = ["create_app", "run_server", "__version__"]
