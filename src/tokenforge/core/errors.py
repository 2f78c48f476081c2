"""
Error types for token loading, resolution, transformation and output.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class TokenForgeError(Exception):
    """Base exception for all tokenforge errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class TokenParseError(TokenForgeError):
    """
    Raised when a token file cannot be read or interpreted.

    Examples:
    - Invalid JSON or YAML
    - Top-level document that is not a mapping
    - Token node that is neither a group nor a token
    - Duplicate token paths when warnings are errors
    """

    pass


class ConfigError(TokenForgeError):
    """
    Raised when the build configuration is invalid.

    Examples:
    - Malformed tokenforge.toml
    - Unknown platform, transform, transform group or format
    """

    pass


class UnresolvedReferenceError(TokenForgeError):
    """Raised when a reference points at a path that is not a token."""

    def __init__(
        self,
        reference: str,
        context: Optional["ErrorContext"] = None,
    ):
        self.reference = reference
        super().__init__(f"Reference {{{reference}}} does not resolve to a token", context)


class CircularReferenceError(TokenForgeError):
    """Raised when following references leads back to a token already visited."""

    def __init__(
        self,
        chain: list[str],
        context: Optional["ErrorContext"] = None,
    ):
        self.chain = chain
        super().__init__(f"Circular reference: {' -> '.join(chain)}", context)


class ReferenceResolutionError(TokenForgeError):
    """
    Raised once per resolution pass, collecting every broken reference.

    Attributes:
        errors: The individual unresolved or circular reference errors
    """

    def __init__(self, errors: list[TokenForgeError]):
        self.errors = errors
        lines = [f"{len(errors)} reference error(s):"]
        lines.extend(f"  {err}" for err in errors)
        super().__init__("\n".join(lines))


class TransformError(TokenForgeError):
    """Raised when a value or name transform fails on a token."""

    pass


class FormatError(TokenForgeError):
    """
    Raised when a formatter cannot render its tokens.

    Examples:
    - A token path that is both a value and a group in nested output
    """

    pass


class BuildError(TokenForgeError):
    """Raised when writing or removing output files fails."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        file: Token source file, if known
        token: Dotted path of the token involved, if any
    """

    file: Path | None = None
    token: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "tokens/color.json: color.action.primary"
        """
        parts = [str(part) for part in (self.file, self.token) if part]
        return ": ".join(parts) if parts else "<unknown>"


def make_token_error(
    cls: type[TokenForgeError],
    message: str,
    file: Path | None = None,
    token: str | None = None,
) -> TokenForgeError:
    """
    Helper to create a token error with optional context.

    Args:
        cls: Error class to instantiate
        message: Error description
        file: Optional source file path
        token: Optional dotted token path

    Returns:
        Error instance with context if a location is provided
    """
    if file or token:
        return cls(message, ErrorContext(file=file, token=token))
    return cls(message)
