"""
Client side of handwriting extraction.

Collects image samples selected by the user, turns them into data URIs and
submits the whole batch to the /extract-handwriting endpoint.
"""
import base64
import logging
import mimetypes
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

import requests

from handwriting.models import ImageBatch
from handwriting.notifications import Notifier

logger = logging.getLogger(__name__)

EXTRACT_PATH = "/extract-handwriting"


@dataclass
class ImageUpload:
    """A file picked by the user. `content_type` is the type the picker declared."""
    name: str
    content_type: str = ""
    data: Optional[bytes] = None
    path: Optional[str] = None

    @classmethod
    def from_path(cls, path: str) -> "ImageUpload":
        content_type = mimetypes.guess_type(path)[0] or ""
        return cls(name=os.path.basename(path), content_type=content_type, path=path)

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").lower().startswith("image/")

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if not self.path:
            raise ValueError("no file content")
        with open(self.path, "rb") as f:
            return f.read()


def to_data_uri(upload: ImageUpload) -> str:
    encoded = base64.b64encode(upload.read()).decode("ascii")
    return f"data:{upload.content_type};base64,{encoded}"


class ExtractionWorkflow:
    def __init__(self, base_url: str, notifier: Optional[Notifier] = None,
                 timeout: float = 120, max_workers: int = 4):
        self.base_url = (base_url or "").rstrip("/")
        self.notifier = notifier or Notifier()
        self.timeout = timeout
        self.max_workers = max_workers
        self.samples = ImageBatch()
        self.busy = False

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{EXTRACT_PATH}"

    def _read(self, upload: ImageUpload) -> Tuple[ImageUpload, Optional[str], str]:
        try:
            return upload, to_data_uri(upload), ""
        except Exception as e:
            logger.warning("Could not read %s: %s: %s", upload.name, type(e).__name__, e)
            return upload, None, str(e) or type(e).__name__

    def add_files(self, files: Iterable[ImageUpload]) -> int:
        """Read a selection of files and append the images to the sample set.

        Reads run concurrently; results are gathered before anything is
        appended, so samples keep the selection order. Returns how many
        images were added.
        """
        files = list(files or [])
        if not files:
            self.notifier.error("No files selected")
            return 0

        accepted: List[ImageUpload] = []
        for upload in files:
            if upload.is_image:
                accepted.append(upload)
            else:
                self.notifier.error(f"{upload.name} is not an image file")
        if not accepted:
            return 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            results = list(pool.map(self._read, accepted))

        images = []
        for upload, uri, err in results:
            if uri is None:
                self.notifier.error(f"Could not read {upload.name}: {err}")
                continue
            images.append(uri)

        self.samples.extend(images)
        if images:
            self.notifier.success(f"{len(images)} image(s) uploaded successfully!")
        return len(images)

    def remove_sample(self, index: int) -> None:
        self.samples.remove(index)

    def clear(self) -> None:
        self.samples.clear()

    def submit(self, on_text: Callable[[str], None]) -> Optional[str]:
        """Send the whole batch for extraction and hand the text to on_text.

        Returns the extracted text, or None when the request failed.
        """
        if not len(self.samples):
            self.notifier.error("Please upload at least one handwriting image")
            return None

        self.busy = True
        try:
            text = self._post(self.samples.to_list())
        except Exception as e:
            logger.exception("Handwriting extraction failed")
            self.notifier.error(str(e) or "Failed to extract handwriting")
            return None
        finally:
            self.busy = False

        try:
            on_text(text)
        except Exception:
            logger.exception("Could not apply extracted text")
            self.notifier.error("Failed to insert the extracted text")
            return None
        self.notifier.success("Handwriting extracted successfully!")
        return text

    def _post(self, images: List[str]) -> str:
        try:
            resp = requests.post(self.endpoint, json={"images": images}, timeout=self.timeout)
        except requests.RequestException as e:
            raise RuntimeError(f"Extraction service unreachable: {type(e).__name__}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if not resp.ok:
            raise RuntimeError(data.get("error") or f"Extraction failed ({resp.status_code})")
        return data.get("text") or ""
