# utils/error_handler.py
from typing import Optional, Dict, Any
import logging
from functools import wraps

class GraphError(Exception):
    """Base class for validator errors."""
    def __init__(self, message: str, error_code: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}

class SchemaLoadError(GraphError):
    """Error raised when a vocabulary stream cannot be read."""
    pass

class UnknownClassError(GraphError):
    """Error raised when no schema class carries the requested label."""
    def __init__(self, label: str):
        super().__init__(
            f"Could not find class {label} in the schema",
            'unknown_class',
            {'label': label}
        )
        self.label = label

class ConfigurationError(GraphError):
    """Error raised for configuration-related failures."""
    pass

class GraphSourceError(GraphError):
    """Error raised when an instance graph cannot be loaded."""
    pass

def handle_errors(logger: logging.Logger):
    """
    Decorator that logs failures of the wrapped function.
    GraphErrors are re-raised as they are; any other exception is re-raised
    as a GraphError with code 'unexpected_error', chained to the original.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except GraphError as e:
                logger.error(f"{type(e).__name__} in {func.__name__}: {str(e)}",
                             extra={'error_code': e.error_code})
                raise
            except Exception as e:
                logger.exception(f"Unexpected error in {func.__name__}: {str(e)}")
                raise GraphError(
                    f"Unexpected error in {func.__name__}: {str(e)}",
                    'unexpected_error',
                    {'original_error': type(e).__name__}
                ) from e
        return wrapper
    return decorator

def format_error_message(error: GraphError) -> str:
    """Format error message with details."""
    lines = [f"Error: {str(error)} (Code: {error.error_code})"]
    lines.extend(f"  {key}: {value}" for key, value in error.details.items())
    return "\n".join(lines)
