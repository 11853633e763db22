"""Cataloging assistant for secondhand-fashion resale."""

__version__ = "0.1.0"
