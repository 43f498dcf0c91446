"""
Error hierarchy for Terrafile and translation of git transport failures.

Every failure raised while installing a module derives from TerrafileError so
the orchestrator can log it with the module's context and move on to the
next module.
"""

import functools
from typing import Any, Callable, Dict, Optional, TypeVar

from dulwich.client import HTTPUnauthorized
from dulwich.errors import GitProtocolError, HangupException, NotGitRepository

from .logger import logger


F = TypeVar("F", bound=Callable[..., Any])


####
##      EXCEPTIONS
#####
class TerrafileError(Exception):
    """Base exception for module installation errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        self.context: Dict[str, str] = {}
        super().__init__(message)

    def add_context(self, **context: Any) -> "TerrafileError":
        """Attach diagnostic fields, keeping values set closer to the failure."""
        for key, value in context.items():
            if value is None or key in self.context:
                continue
            self.context[key] = str(value)
        return self

    def __str__(self) -> str:
        text = self.message
        if self.context:
            details = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            text = f"{text} ({details})"
        if self.original_error:
            text = f"{text}. Original: {self.original_error}"
        return text


class ConfigurationError(TerrafileError):
    """Raised when the Terrafile cannot be read, parsed or validated."""


class CloneError(TerrafileError):
    """Raised when a repository cannot be fetched into memory."""


class ReferenceNotFoundError(TerrafileError):
    """Raised when a version matches no branch, remote branch or tag."""

    def __init__(self, version: str, source: str = "", original_error: Optional[Exception] = None):
        self.version = version
        self.source = source
        message = f"unable to resolve version {version}"
        if source:
            message = f"{message} in {source}"
        super().__init__(message, original_error)


class DirectoryNotFoundError(TerrafileError):
    """Raised when a module directory does not exist at the resolved commit."""

    def __init__(self, directory: str, version: str, original_error: Optional[Exception] = None):
        self.directory = directory
        self.version = version
        super().__init__(f"unable to find {directory} for version {version}", original_error)


class MaterializeError(TerrafileError):
    """Raised when module files cannot be written to disk."""


class LinkError(TerrafileError):
    """Raised when a secondary destination cannot be linked."""


####
##      DECORATORS
#####
def handle_git_error(func: F) -> F:
    """
    Translate dulwich transport and protocol errors into CloneError.

    TerrafileError subclasses raised by the wrapped function pass through
    untouched.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except TerrafileError:
            raise
        except HTTPUnauthorized as e:
            logger.debug(f"Authentication rejected in {func.__name__}: {e}")
            raise CloneError("authentication failed", e) from e
        except HangupException as e:
            raise CloneError("remote end hung up unexpectedly", e) from e
        except NotGitRepository as e:
            raise CloneError("not a git repository", e) from e
        except GitProtocolError as e:
            raise CloneError("git protocol error", e) from e
        except OSError as e:
            raise CloneError("connection failed", e) from e

    return wrapper  # type: ignore[return-value]


__all__ = [
    "TerrafileError",
    "ConfigurationError",
    "CloneError",
    "ReferenceNotFoundError",
    "DirectoryNotFoundError",
    "MaterializeError",
    "LinkError",
    "handle_git_error",
]
