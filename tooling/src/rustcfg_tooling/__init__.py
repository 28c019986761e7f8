"""Build-configuration resolver for a multi-stage bootstrapped compiler."""

__version__ = "0.1.0"
