"""
HTML Translator - Test Suite
============================
Unit and integration tests for the HTML Translator application.
Run with: pytest tests/ -v
"""
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
