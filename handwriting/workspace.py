"""
Page session: the text being written, its style, and the actions the page offers.

Every action reports its outcome through the Notifier and never raises to the
caller (style setters excepted; their inputs are bounded by the widgets).
"""
import logging
import os
from typing import Callable, Dict, Optional
from urllib.parse import quote

from PIL import Image

from handwriting.extraction_client import ExtractionWorkflow
from handwriting.models import DocumentText, StyleConfig
from handwriting.notifications import Notifier
from handwriting.services import pdf_service, render_service
from handwriting.voice import RecognizerFactory, VoiceCapture

logger = logging.getLogger(__name__)

PREVIEW_ID = "handwriting-preview"
SHARE_MESSAGE = "Check out my handwritten text! Created with Text to Handwriting app."


class Workspace:
    def __init__(self, api_url: str = "", font_dir: Optional[str] = None,
                 notifier: Optional[Notifier] = None,
                 recognizer_factory: Optional[RecognizerFactory] = None):
        self.notifier = notifier or Notifier()
        self.text = DocumentText()
        self.style = StyleConfig()
        self.font_dir = font_dir
        self.exporting = False
        self.previews: Dict[str, Callable[[], Image.Image]] = {}
        self.extraction = ExtractionWorkflow(api_url, self.notifier)
        self.voice = VoiceCapture(self.text, self.notifier, recognizer_factory)
        self.register_preview(PREVIEW_ID)

    @classmethod
    def from_config(cls, cfg, **kwargs) -> "Workspace":
        """Build from a config object (e.g. config.TestingConfig or app.config)."""
        get = cfg.get if isinstance(cfg, dict) else lambda k, d=None: getattr(cfg, k, d)
        return cls(api_url=get("HANDWRITING_API_URL", ""), font_dir=get("FONT_DIR"), **kwargs)

    # ----- style -----

    def set_font_size(self, size: int) -> None:
        self.style.set_font_size(size)

    def set_pen_color(self, color) -> None:
        self.style.set_pen_color(color)

    def set_page_type(self, page_type) -> None:
        self.style.set_page_type(page_type)

    def set_font_style(self, style) -> None:
        self.style.set_font_style(style)

    # ----- text input -----

    def set_text(self, text: str) -> None:
        self.text.replace(text)

    def load_text_file(self, name: str, content_type: str, data: bytes) -> bool:
        """Replace the text with the contents of an uploaded .txt file."""
        if content_type != "text/plain":
            self.notifier.error("Please upload a text file (.txt)")
            return False
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError:
            self.notifier.error(f"Could not read {name}: not valid UTF-8 text")
            return False
        self.text.replace(content)
        self.notifier.success("File uploaded successfully!")
        return True

    def apply_extracted_text(self, text: str) -> None:
        if not text:
            return
        if self.text.value and not self.text.value.endswith("\n"):
            self.text.append("\n\n")
        self.text.append(text)

    def extract_handwriting(self) -> Optional[str]:
        return self.extraction.submit(self.apply_extracted_text)

    def toggle_voice(self):
        return self.voice.toggle()

    # ----- preview & export -----

    def register_preview(self, element_id: str,
                         capture: Optional[Callable[[], Image.Image]] = None) -> None:
        self.previews[element_id] = capture or self.render_preview

    def render_preview(self) -> Image.Image:
        return render_service.render_preview(self.text.value, self.style, self.font_dir)

    def export_pdf(self, element_id: str = PREVIEW_ID, directory: str = ".") -> Optional[str]:
        """Capture a registered preview into handwritten-text.pdf inside directory.

        Returns the written path, or None after reporting the failure.
        """
        self.exporting = True
        try:
            capture = self.previews.get(element_id)
            if capture is None:
                self.notifier.error("Preview not found")
                return None

            self.notifier.info("Generating PDF...")
            data = pdf_service.build_pdf(capture())
            path = os.path.join(directory, pdf_service.PDF_FILENAME)
            with open(path, "wb") as f:
                f.write(data)
        except Exception:
            logger.exception("Error exporting PDF")
            self.notifier.error("Failed to export PDF")
            return None
        finally:
            self.exporting = False

        self.notifier.success("PDF downloaded successfully!")
        return path

    def share_url(self) -> str:
        return f"https://wa.me/?text={quote(SHARE_MESSAGE)}"
