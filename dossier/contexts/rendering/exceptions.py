"""Custom exceptions for rendering context."""

from typing import List, Optional


class RenderTargetNotFoundError(LookupError):
    """
    Exception raised when the document subtree to export is not in the markup.

    Attributes:
        target_id: Element id that was searched for
    """

    def __init__(self, target_id: str):
        self.target_id = target_id
        super().__init__(f"Render target '#{target_id}' not found in document markup")


class RasterizationError(RuntimeError):
    """
    Exception raised when the prepared snapshot cannot be rasterized.

    Attributes:
        message: Error description
        original_error: The rasterizer's own exception, if any
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error

        parts = [message]
        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class ValidationBlockedError(ValueError):
    """
    Exception raised when export or print is attempted on a document with validation errors.

    Attributes:
        messages: Flat list of validation messages
    """

    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__(
            f"Document has {len(messages)} validation error(s); fix them before exporting"
        )
