"""
Custom exception hierarchy for the domain model importer.

Every error carries a human-readable message plus optional context and
recovery suggestions, rendered together by ``__str__``.
"""

from typing import Dict, Any, Optional, List


class DomainImporterError(Exception):
    """
    Base exception for all domain model importer errors.

    Provides rich context and error recovery guidance.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [super().__str__()]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)


class ConfigurationError(DomainImporterError):
    """Raised when importer settings are invalid or missing."""

    def __init__(self, message: str, config_file: str = None, **kwargs):
        context = kwargs.get('context', {})
        if config_file:
            context['config_file'] = config_file

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the configuration file syntax",
                "Verify the console URL and package name",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CONFIG_ERROR"
        )


class ValidationError(DomainImporterError):
    """
    Raised when a domain model or import option fails local validation.

    ``field`` names the attribute the user has to correct, e.g. ``keyType``,
    ``indexes[1]`` or ``packageName``.
    """

    def __init__(self, message: str, field: str = None, **kwargs):
        context = kwargs.get('context', {})
        if field:
            context['field'] = field
        self.field = field

        super().__init__(
            message,
            context=context,
            suggestions=kwargs.get('suggestions', []),
            error_code="VALIDATION_ERROR"
        )


class DiscoveryError(DomainImporterError):
    """Raised when listing drivers, schemas or tables fails remotely."""

    def __init__(self, message: str, step: str = None, **kwargs):
        context = kwargs.get('context', {})
        if step:
            context['step'] = step
        self.step = step

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check that the agent is running and connected to the console",
                "Verify the JDBC URL, user and password",
                "Retry the step or cancel the import",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="DISCOVERY_ERROR"
        )


class PersistenceError(DomainImporterError):
    """Raised when saving or removing domain models fails remotely."""

    def __init__(self, message: str, operation: str = None, **kwargs):
        context = kwargs.get('context', {})
        if operation:
            context['operation'] = operation
        self.operation = operation

        super().__init__(
            message,
            context=context,
            suggestions=kwargs.get('suggestions', []),
            error_code="PERSISTENCE_ERROR"
        )


class UnsupportedTypeError(DomainImporterError):
    """Raised when a column's database type has no Java mapping."""

    def __init__(self, message: str, db_type: Any = None, **kwargs):
        context = kwargs.get('context', {})
        if db_type is not None:
            context['db_type'] = db_type
        self.db_type = db_type

        super().__init__(
            message,
            context=context,
            suggestions=kwargs.get('suggestions', []),
            error_code="UNSUPPORTED_TYPE"
        )


class WizardStateError(DomainImporterError):
    """Raised when a wizard transition is requested from a state that does not allow it."""

    def __init__(self, message: str, action: str = None, **kwargs):
        context = kwargs.get('context', {})
        if action:
            context['action'] = action
        self.action = action

        super().__init__(
            message,
            context=context,
            suggestions=kwargs.get('suggestions', []),
            error_code="WIZARD_STATE_ERROR"
        )


class ImportInterrupted(DomainImporterError):
    """Raised when the user declines a confirmation and the import stops."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            context=kwargs.get('context', {}),
            error_code="IMPORT_INTERRUPTED"
        )
