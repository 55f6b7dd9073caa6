"""Utility modules for xmlit."""
