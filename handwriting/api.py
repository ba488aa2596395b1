"""
API Blueprint

- /extract-handwriting: OCR proxy in front of the vision model (CORS enabled)
- /render_preview: handwriting page as PNG
- /export_pdf: handwriting page as a single-page A4 PDF
"""
import io
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from handwriting.exceptions import HandwritingError
from handwriting.models import StyleConfig
from handwriting.services import openai_service, pdf_service, render_service

api_bp = Blueprint('api', __name__)


# ============ Helper Functions ============

def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": current_app.config.get("CORS_ALLOW_ORIGIN", "*"),
        "Access-Control-Allow-Headers": current_app.config.get("CORS_ALLOW_HEADERS", ""),
    }


# App-wide so routing errors (404/405) carry the headers too
@api_bp.after_app_request
def add_cors_headers(response: Response) -> Response:
    response.headers.update(cors_headers())
    return response


def error_response(message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"error": message}), status


def model_name() -> str:
    return (current_app.config.get("OPENAI_MODEL") or "").strip() or "gpt-4.1"


def get_client():
    cfg = current_app.config
    return openai_service.get_client(
        cfg.get("OPENAI_API_KEY", ""),
        base_url=cfg.get("OPENAI_BASE_URL"),
        timeout=cfg.get("OPENAI_TIMEOUT", 60),
    )


def style_from_payload(payload: Dict[str, Any]) -> StyleConfig:
    style = payload.get("style") or {}
    if not isinstance(style, dict):
        raise ValueError("style must be an object")
    return StyleConfig.from_dict(style)


def render_from_payload(payload: Any):
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    text = payload.get("text")
    text = "" if text is None else str(text)
    style = style_from_payload(payload)
    return render_service.render_preview(text, style, current_app.config.get("FONT_DIR"))


# ============ Routes ============

@api_bp.route("/extract-handwriting", methods=["POST", "OPTIONS"])
def extract_handwriting():
    if request.method == "OPTIONS":
        return "", 200

    try:
        payload = request.get_json(silent=True) or {}
        images = payload.get("images") if isinstance(payload, dict) else None
        if not images or not isinstance(images, list):
            return error_response("No images provided", 400)

        result = openai_service.extract_handwriting(get_client(), model_name(), images)
        return jsonify(result.to_dict()), 200
    except HandwritingError as e:
        if e.status_code >= 500:
            current_app.logger.error("Error in extract-handwriting: %s", e.message)
        return error_response(e.message or "Unknown error", e.status_code)
    except Exception as e:
        current_app.logger.exception("Error in extract-handwriting")
        return error_response(str(e) or "Unknown error", 500)


@api_bp.route("/render_preview", methods=["POST"])
def render_preview():
    payload = request.get_json(silent=True) or {}
    try:
        image = render_from_payload(payload)
    except ValueError as e:
        return error_response(str(e), 400)

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    buf.seek(0)
    return send_file(buf, mimetype="image/png")


@api_bp.route("/export_pdf", methods=["POST"])
def export_pdf():
    payload = request.get_json(silent=True) or {}
    try:
        image = render_from_payload(payload)
    except ValueError as e:
        return error_response(str(e), 400)

    filename = current_app.config.get("PDF_FILENAME") or pdf_service.PDF_FILENAME
    try:
        data = pdf_service.build_pdf(image, title=filename)
    except Exception as e:
        current_app.logger.exception("PDF export failed")
        return error_response(f"PDF export failed: {type(e).__name__}: {str(e)}", 500)

    return send_file(io.BytesIO(data), as_attachment=True, download_name=filename,
                     mimetype="application/pdf")
