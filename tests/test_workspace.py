"""
Workspace Tests: text input, PDF export, end-to-end extraction
"""
import os

import pytest
from PIL import Image

from config import TestingConfig
from conftest import status_error
from handwriting import extraction_client
from handwriting.extraction_client import ImageUpload
from handwriting.models import NotificationLevel, PenColor
from handwriting.voice import RecognitionResult, VoiceState
from handwriting.workspace import PREVIEW_ID, Workspace


class RoutedResponse:
    """Wraps a Flask test response in the parts of requests.Response the client reads."""

    def __init__(self, response):
        self.status_code = response.status_code
        self._json = response.get_json(silent=True)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError('No JSON')
        return self._json


@pytest.fixture
def workspace():
    return Workspace.from_config(TestingConfig)


@pytest.fixture
def routed(monkeypatch, client):
    """Send the client workflow's HTTP calls to the Flask test app."""
    def post(url, json=None, timeout=None):
        path = url.replace(TestingConfig.HANDWRITING_API_URL, '')
        return RoutedResponse(client.post(path, json=json))

    monkeypatch.setattr(extraction_client.requests, 'post', post)


class TestTextInput:

    def test_text_file_replaces(self, workspace):
        workspace.set_text('old text')
        assert workspace.load_text_file('notes.txt', 'text/plain', b'fresh\ncontent')
        assert workspace.text.value == 'fresh\ncontent'
        assert workspace.notifier.last.message == 'File uploaded successfully!'

    def test_wrong_type_rejected(self, workspace):
        workspace.set_text('keep me')
        assert not workspace.load_text_file('notes.md', 'text/markdown', b'# hi')
        assert workspace.text.value == 'keep me'
        assert workspace.notifier.last.message == 'Please upload a text file (.txt)'

    def test_undecodable_file(self, workspace):
        assert not workspace.load_text_file('bin.txt', 'text/plain', b'\xff\xfe\xfa')
        assert workspace.notifier.last.level == NotificationLevel.ERROR

    def test_extracted_text_appended(self, workspace):
        workspace.set_text('Intro')
        workspace.apply_extracted_text('Hello\n\nWorld')
        assert workspace.text.value == 'Intro\n\nHello\n\nWorld'

    def test_extracted_text_into_empty(self, workspace):
        workspace.apply_extracted_text('Hello')
        workspace.apply_extracted_text('')
        assert workspace.text.value == 'Hello'

    def test_style_setters(self, workspace):
        workspace.set_pen_color('red')
        workspace.set_font_size(30)
        assert workspace.style.pen_color == PenColor.RED
        with pytest.raises(ValueError):
            workspace.set_font_size(60)

    def test_share_url(self, workspace):
        url = workspace.share_url()
        assert url.startswith('https://wa.me/?text=')
        assert 'Check%20out%20my%20handwritten%20text' in url


class TestExportPdf:

    def test_missing_preview_reports_error(self, workspace, tmp_path):
        assert workspace.export_pdf('no-such-preview', str(tmp_path)) is None
        assert workspace.notifier.last.message == 'Preview not found'
        assert workspace.exporting == False
        assert os.listdir(tmp_path) == []

    def test_export_writes_pdf(self, workspace, tmp_path):
        workspace.register_preview(PREVIEW_ID, lambda: Image.new('RGB', (120, 170), 'white'))
        path = workspace.export_pdf(directory=str(tmp_path))

        assert path == os.path.join(str(tmp_path), 'handwritten-text.pdf')
        with open(path, 'rb') as f:
            assert f.read(4) == b'%PDF'
        assert workspace.notifier.last.message == 'PDF downloaded successfully!'
        assert workspace.exporting == False

    def test_export_default_preview(self, workspace, tmp_path):
        workspace.set_text('Rendered for real')
        assert workspace.export_pdf(directory=str(tmp_path)) is not None

    def test_capture_failure_reported(self, workspace, tmp_path):
        def broken():
            raise RuntimeError('canvas tainted')

        workspace.register_preview('broken', broken)
        assert workspace.export_pdf('broken', str(tmp_path)) is None
        assert workspace.notifier.last.message == 'Failed to export PDF'
        assert workspace.exporting == False


class TestExtractionRoundTrip:
    """Workspace -> HTTP -> proxy -> scripted upstream"""

    def test_extracted_text_lands_in_editor(self, workspace, routed, upstream):
        upstream('Hello', 'World')
        workspace.extraction.add_files([
            ImageUpload('a.png', 'image/png', b'AAA'),
            ImageUpload('b.png', 'image/png', b'BBB'),
        ])

        assert workspace.extract_handwriting() == 'Hello\n\nWorld'
        assert workspace.text.value == 'Hello\n\nWorld'

    def test_upstream_rate_limit_leaves_text(self, workspace, routed, upstream):
        upstream(status_error(429))
        workspace.set_text('unchanged')
        workspace.extraction.add_files([ImageUpload('a.png', 'image/png', b'AAA')])

        assert workspace.extract_handwriting() is None
        assert workspace.text.value == 'unchanged'
        assert workspace.notifier.last.message == 'Rate limit exceeded. Please try again later.'


class TestVoiceInWorkspace:

    def test_transcript_goes_to_document(self):
        created = []

        class Recognizer:
            def __init__(self, **options):
                self.options = options
                created.append(self)

            def start(self):
                pass

            def stop(self):
                pass

        class Timer:
            def __init__(self, interval, function):
                pass

            def start(self):
                pass

            def cancel(self):
                pass

        workspace = Workspace(recognizer_factory=Recognizer)
        workspace.voice.timer_factory = Timer
        workspace.set_text('Dictated: ')

        assert workspace.toggle_voice() == VoiceState.LISTENING
        created[0].options['on_result']([RecognitionResult('hello', True)])
        assert workspace.text.value == 'Dictated: hello '
        assert workspace.toggle_voice() == VoiceState.IDLE
