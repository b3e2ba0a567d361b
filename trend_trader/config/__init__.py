"""
Configuration module.

Default parameters, YAML loading with layered precedence, and validation.
"""
