"""
Session Models

Key Models:
- StyleConfig: font size, pen color, paper and font style of the preview
- DocumentText: the text being rendered (replaced by uploads, appended by voice and OCR)
- ImageBatch: handwriting samples waiting to be sent for extraction
- ExtractionResult: text returned for one batch
- Notification: user-facing message raised by a client action

Nothing here is persisted; all objects live for one page session or one request.
"""
import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional


class PenColor(enum.Enum):
    BLACK = "black"
    BLUE = "blue"
    RED = "red"


class PageType(enum.Enum):
    PLAIN = "plain"
    RULED = "ruled"
    NOTEBOOK = "notebook"


class FontStyle(enum.Enum):
    CURSIVE = "cursive"
    PRINT = "print"
    ELEGANT = "elegant"


class NotificationLevel(enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 48


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Invalid {enum_cls.__name__} {value!r} (expected one of: {allowed})")


class StyleConfig:
    """Visual presentation of the preview. Changed only through the setters."""

    def __init__(self, font_size: int = 24, pen_color=PenColor.BLUE,
                 page_type=PageType.RULED, font_style=FontStyle.CURSIVE):
        self._font_size = MIN_FONT_SIZE
        self._pen_color = PenColor.BLUE
        self._page_type = PageType.RULED
        self._font_style = FontStyle.CURSIVE
        self.set_font_size(font_size)
        self.set_pen_color(pen_color)
        self.set_page_type(page_type)
        self.set_font_style(font_style)

    @property
    def font_size(self) -> int:
        return self._font_size

    @property
    def pen_color(self) -> PenColor:
        return self._pen_color

    @property
    def page_type(self) -> PageType:
        return self._page_type

    @property
    def font_style(self) -> FontStyle:
        return self._font_style

    def set_font_size(self, size) -> None:
        try:
            size = int(size)
        except (TypeError, ValueError):
            raise ValueError(f"Font size must be an integer, got {size!r}")
        if size < MIN_FONT_SIZE or size > MAX_FONT_SIZE:
            raise ValueError(f"Font size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}")
        self._font_size = size

    def set_pen_color(self, color) -> None:
        self._pen_color = _coerce(PenColor, color)

    def set_page_type(self, page_type) -> None:
        self._page_type = _coerce(PageType, page_type)

    def set_font_style(self, style) -> None:
        self._font_style = _coerce(FontStyle, style)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "StyleConfig":
        """Build from a JSON payload; missing keys keep their defaults."""
        data = data or {}
        style = cls()
        if data.get("fontSize") is not None or data.get("font_size") is not None:
            style.set_font_size(data.get("fontSize", data.get("font_size")))
        if data.get("penColor") or data.get("pen_color"):
            style.set_pen_color(data.get("penColor") or data.get("pen_color"))
        if data.get("pageType") or data.get("page_type"):
            style.set_page_type(data.get("pageType") or data.get("page_type"))
        if data.get("fontStyle") or data.get("font_style"):
            style.set_font_style(data.get("fontStyle") or data.get("font_style"))
        return style

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fontSize": self._font_size,
            "penColor": self._pen_color.value,
            "pageType": self._page_type.value,
            "fontStyle": self._font_style.value,
        }

    def __eq__(self, other):
        if not isinstance(other, StyleConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"StyleConfig({self.to_dict()!r})"


class DocumentText:
    """The single mutable string shown in the editor and the preview."""

    def __init__(self, value: str = ""):
        self.value = value or ""

    def replace(self, text: str) -> None:
        self.value = text or ""

    def append(self, text: str) -> None:
        if text:
            self.value += text

    def clear(self) -> None:
        self.value = ""

    def __str__(self):
        return self.value

    def __len__(self):
        return len(self.value)


class ImageBatch:
    """Ordered data-URI encodings of the uploaded handwriting samples."""

    def __init__(self, images: Optional[Iterable[str]] = None):
        self._images: List[str] = list(images or [])

    def extend(self, images: Iterable[str]) -> None:
        self._images.extend(images)

    def remove(self, index: int) -> str:
        return self._images.pop(index)

    def clear(self) -> None:
        self._images = []

    def to_list(self) -> List[str]:
        return list(self._images)

    def __len__(self):
        return len(self._images)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._images))

    def __getitem__(self, index: int) -> str:
        return self._images[index]


@dataclass
class ExtractionResult:
    text: str
    image_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass
class Notification:
    level: NotificationLevel
    message: str
