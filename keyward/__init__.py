"""Keyward: resolve secrets from pluggable backends, detect drift, redact output."""

__version__ = "0.1.0"
