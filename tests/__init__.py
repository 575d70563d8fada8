"""Test package for mongoflow-studio

Shared test utilities and markers.
"""
