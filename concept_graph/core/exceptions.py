"""
Custom exceptions for the concept graph engine.

This module provides a hierarchy of exceptions for consistent error handling
across the engine. All exceptions inherit from KnowledgeGraphError and carry
a machine-readable ``code`` so HTTP handlers and callers can branch on it.

Example:
    try:
        order = await service.get_topological_order(project_id)
    except CircularDependencyError as e:
        logger.warning(f"Learning order unavailable: {e}")
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class KnowledgeGraphErrorCode(str, Enum):
    """Error codes shared by every engine exception."""

    API_KEY_MISSING = "API_KEY_MISSING"
    GRAPH_BUILD_FAILED = "GRAPH_BUILD_FAILED"
    DATABASE_ERROR = "DATABASE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"


class KnowledgeGraphError(Exception):
    """
    Base exception class for all concept graph errors.

    Attributes:
        message: Human-readable description of the error.
        code: Error code identifying the failure kind.
        details: Optional diagnostic context (project id, candidate, ...).
    """

    def __init__(
        self,
        message: str,
        code: KnowledgeGraphErrorCode,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable description of the error.
            code: Error code identifying the failure kind.
            details: Optional diagnostic context.
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation with optional details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class MissingAPIKeyError(KnowledgeGraphError):
    """Raised when the relationship extractor has no LLM credentials."""

    def __init__(self, setting_name: str = "GROQ_API_KEY") -> None:
        self.setting_name = setting_name
        super().__init__(
            f"API key is required. Set the {setting_name} environment variable.",
            KnowledgeGraphErrorCode.API_KEY_MISSING,
        )


class ExtractionFailure(KnowledgeGraphError):
    """
    Exception raised when the relationship extraction call fails.

    The build is aborted before anything is written to the store.

    Attributes:
        project_id: Project whose build failed, when known.
        original_error: The underlying exception if available.
    """

    def __init__(
        self,
        message: str,
        project_id: Optional[str] = None,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.project_id = project_id
        self.original_error = original_error

        enhanced_message = f"Failed to identify relationships: {message}"
        if original_error:
            enhanced_message = (
                f"{enhanced_message} | Caused by: "
                f"{type(original_error).__name__}: {str(original_error)[:200]}"
            )

        context = dict(details or {})
        if project_id:
            context.setdefault("project_id", project_id)

        super().__init__(
            enhanced_message, KnowledgeGraphErrorCode.GRAPH_BUILD_FAILED, context
        )


class ValidationError(KnowledgeGraphError):
    """
    Exception raised when a candidate relationship is out of domain.

    Attributes:
        field: Name of the offending field.
        candidate: The rejected candidate, as a plain dict.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        candidate: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.candidate = candidate

        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if candidate is not None:
            details["candidate"] = candidate

        super().__init__(message, KnowledgeGraphErrorCode.VALIDATION_ERROR, details)


class DatabaseError(KnowledgeGraphError):
    """
    Exception raised when any relational store read or write fails.

    Attributes:
        operation: The store operation that failed (e.g. 'upsert_edges').
        original_error: The underlying driver exception if available.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        self.original_error = original_error

        enhanced_message = message
        if operation:
            enhanced_message = f"{enhanced_message} (operation: {operation})"
        if original_error:
            enhanced_message = (
                f"{enhanced_message} | Caused by: "
                f"{type(original_error).__name__}: {str(original_error)[:200]}"
            )

        super().__init__(
            enhanced_message, KnowledgeGraphErrorCode.DATABASE_ERROR, details
        )


class CircularDependencyError(KnowledgeGraphError):
    """
    Exception raised when prerequisite edges form a cycle.

    Callers match on the word "circular" in the message, keep it there.

    Attributes:
        project_id: Project whose learning order was requested, when known.
        cycle: One offending cycle as a list of node ids, when known.
        unresolved: Nodes that could not be placed in the order.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        cycle: Optional[List[Any]] = None,
        unresolved: Optional[List[Any]] = None,
    ) -> None:
        self.project_id = project_id
        self.cycle = list(cycle or [])
        self.unresolved = list(unresolved or [])

        details: Dict[str, Any] = {}
        if project_id:
            details["project_id"] = project_id
        if self.cycle:
            details["cycle"] = self.cycle
        if self.unresolved:
            details["unresolved"] = self.unresolved

        super().__init__(
            "Cannot determine learning order: circular dependency detected",
            KnowledgeGraphErrorCode.CIRCULAR_DEPENDENCY,
            details,
        )
