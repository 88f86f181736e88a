"""
tinyshape CLI - Command-line interface for the shape cache.

Usage:
    tinyshape-cli render shapes/button.yaml --output button.png
    tinyshape-cli fingerprint shapes/button.yaml
"""

__version__ = "1.0.0"
