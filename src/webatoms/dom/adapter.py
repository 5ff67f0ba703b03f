"""
DOM Adapter - Abstract interface for low-level element access.

The atoms never touch the browser directly. Everything they need to know
about an element (attribute text, property values, selection state,
geometry) is read through a DomAdapter.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

ElementT = TypeVar("ElementT")

PropertyKind = Literal[
    "undefined",
    "null",
    "string",
    "number",
    "boolean",
    "bigint",
    "object",
    "function",
    "symbol",
]

PRIMITIVE_KINDS = frozenset({"string", "number", "boolean", "bigint"})
STRUCTURED_KINDS = frozenset({"object", "function", "symbol"})

# Numbers at or above this print in exponent form
EXPONENT_FORM_THRESHOLD = 10**21


@dataclass(frozen=True)
class Rect:
    """Element rectangle in CSS pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class Coordinate:
    """Point in client (viewport) space."""

    x: float
    y: float


@dataclass(frozen=True)
class PropertyValue:
    """
    A DOM property value tagged with its JavaScript type.

    Only primitive kinds carry a Python ``value``. Structured values
    (objects, functions, symbols) keep an optional ``description``, and so
    do numbers read over CDP, where it is the browser's own string form.
    """

    kind: PropertyKind
    value: Any = None
    description: str | None = None

    @classmethod
    def undefined(cls) -> "PropertyValue":
        return cls(kind="undefined")

    @classmethod
    def null(cls) -> "PropertyValue":
        return cls(kind="null")

    @classmethod
    def of(cls, value: Any) -> "PropertyValue":
        """Wrap a plain Python value read by value from the page."""
        if value is None:
            return cls.null()
        if isinstance(value, bool):
            return cls(kind="boolean", value=value)
        if isinstance(value, int | float):
            return cls(kind="number", value=value)
        if isinstance(value, str):
            return cls(kind="string", value=value)
        return cls(kind="object", value=value)

    @property
    def is_absent(self) -> bool:
        return self.kind in ("undefined", "null")

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    @property
    def is_structured(self) -> bool:
        return self.kind in STRUCTURED_KINDS

    @property
    def is_truthy(self) -> bool:
        """JavaScript truthiness, spelled out per kind."""
        if self.is_absent:
            return False
        if self.kind == "boolean":
            return self.value is True
        if self.kind == "string":
            return self.value != ""
        if self.kind in ("number", "bigint"):
            return not (self.value == 0 or _is_nan(self.value))
        return True

    def to_js_string(self) -> str:
        """String form as produced by JavaScript's ``value + ''``."""
        if self.kind == "undefined":
            return "undefined"
        if self.kind == "null":
            return "null"
        if self.kind == "boolean":
            return "true" if self.value else "false"
        if self.kind == "number":
            if self.description is not None:
                return self.description
            return _format_number(self.value)
        if self.kind in ("string", "bigint"):
            return str(self.value)
        return self.description or "[object Object]"


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _format_number(value: int | float) -> str:
    """ECMAScript Number::toString for a Python int or float."""
    if isinstance(value, int) and abs(value) < EXPONENT_FORM_THRESHOLD:
        return str(value)
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    digits, point = _shortest_digits(abs(value))
    count = len(digits)
    if count <= point <= 21:
        text = digits + "0" * (point - count)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        exponent = point - 1
        mantissa = digits if count == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"
    return sign + text


def _shortest_digits(value: float) -> tuple[str, int]:
    """
    Shortest round-trip digits of a positive float.

    Returns the significant digits and the position of the decimal point
    relative to the first of them, so ``value == 0.<digits> * 10**point``.
    """
    mantissa, _, exponent = repr(value).partition("e")
    whole, _, fraction = mantissa.partition(".")
    digits = whole + fraction
    significant = digits.lstrip("0")
    point = len(whole) + int(exponent or 0) - (len(digits) - len(significant))
    return significant.rstrip("0"), point


class DomAdapter(ABC, Generic[ElementT]):
    """Reads element state for the atoms. All methods may raise DOMError."""

    @abstractmethod
    async def is_selectable(self, element: ElementT) -> bool:
        """Whether the element is a checkbox, radio button or option."""
        pass

    @abstractmethod
    async def is_selected(self, element: ElementT) -> bool:
        """Whether a selectable element is checked or selected."""
        pass

    @abstractmethod
    async def get_attribute(self, element: ElementT, name: str) -> str | None:
        """Raw attribute text, or None when the attribute is absent."""
        pass

    @abstractmethod
    async def get_property(self, element: ElementT, name: str) -> PropertyValue:
        """
        Live property value tagged with its JavaScript type.

        Any error other than BrowserError is treated by the resolver as an
        absent property.
        """
        pass

    @abstractmethod
    async def get_style_text(self, element: ElementT) -> str | None:
        """Inline style serialized as CSS text."""
        pass

    @abstractmethod
    async def is_element_of_tag(self, element: ElementT, tag: str) -> bool:
        """Whether the element has the given (lower-case) tag name."""
        pass

    @abstractmethod
    async def is_shown(self, element: ElementT) -> bool:
        """Whether the element is displayed to the user."""
        pass

    @abstractmethod
    async def get_bounds(self, element: ElementT) -> Rect | None:
        """Bounding rectangle in page coordinates."""
        pass

    @abstractmethod
    async def scroll_into_view(self, element: ElementT, region: Rect | None = None) -> None:
        """Scroll the element, or a region relative to it, into view."""
        pass

    @abstractmethod
    async def get_client_region(self, element: ElementT, region: Rect | None = None) -> Rect:
        """Client-space rectangle of the element, or of a region relative to it."""
        pass

    @abstractmethod
    async def get_visible_text(self, element: ElementT, composed: bool = False) -> str:
        """Text as rendered to the user."""
        pass
