"""Core parameter types shared by the binder and the expander."""

from enum import Enum
from typing import Optional

__all__ = ("ParameterInfo", "ParameterStyle", "RenderedFragment")


class ParameterStyle(str, Enum):
    """Parameter style enumeration with string values."""

    NONE = "none"
    QMARK = "qmark"
    NAMED_COLON = "named_colon"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


class ParameterInfo:
    """Immutable parameter information."""

    __slots__ = ("name", "ordinal", "placeholder_text", "position", "style")

    def __init__(
        self, name: Optional[str], style: ParameterStyle, position: int, ordinal: int, placeholder_text: str
    ) -> None:
        self.name = name
        self.style = style
        self.position = position
        self.ordinal = ordinal
        self.placeholder_text = placeholder_text

    @property
    def end(self) -> int:
        """Offset just past the placeholder text."""
        return self.position + len(self.placeholder_text)

    def __eq__(self, other: object) -> bool:
        """Equality comparison for ParameterInfo objects."""
        if not isinstance(other, type(self)):
            return False
        return self.name == other.name and self.style == other.style and self.position == other.position

    def __repr__(self) -> str:
        """String representation compatible with dataclass.__repr__."""
        return (
            f"{type(self).__name__}(name={self.name!r}, ordinal={self.ordinal!r}, "
            f"placeholder_text={self.placeholder_text!r}, position={self.position!r}, style={self.style!r})"
        )

    def __hash__(self) -> int:
        """Make ParameterInfo hashable.

        Returns:
            Hash value based on name, style, and position attributes.
        """
        return hash((self.name, self.style, self.position))


class RenderedFragment:
    """Replacement text for the span ``[position, end)`` of an original SQL string.

    A fragment with ``end == position`` is a pure insertion.
    """

    __slots__ = ("end", "position", "text")

    def __init__(self, position: int, end: int, text: str) -> None:
        self.position = position
        self.end = end
        self.text = text

    @property
    def is_insertion(self) -> bool:
        return self.end == self.position

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (self.position, self.end, self.text) == (other.position, other.end, other.text)

    def __hash__(self) -> int:
        return hash((self.position, self.end, self.text))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(position={self.position!r}, end={self.end!r}, text={self.text!r})"
