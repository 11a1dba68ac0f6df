"""
Exception types raised by the audit engine.

Fatal errors (configuration) stop a run before any work begins. Everything
else is contained at the unit of work that raised it: one device, one
PageSpeed strategy, or one image.
"""


class AuditError(Exception):
    """Base exception for audit errors."""

    pass


class ConfigError(AuditError):
    """Exception raised when required configuration is missing or invalid."""

    pass


class InsightsError(AuditError):
    """Exception raised when the PageSpeed Insights call fails."""

    pass


class InspectionError(AuditError):
    """Exception raised when inspecting a page for one device fails."""

    pass


class AccessibilityScanError(InspectionError):
    """Exception raised when axe-core cannot be loaded or run."""

    pass


class StorageError(AuditError):
    """Exception raised when the run directory or report cannot be written."""

    pass


class ArchiveError(AuditError):
    """Exception raised when the run directory cannot be archived."""

    pass
