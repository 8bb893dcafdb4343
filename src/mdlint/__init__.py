"""mdlint - configurable markdown style linter."""

__version__ = "0.3.0"
