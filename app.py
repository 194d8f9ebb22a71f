"""
Document → JSON – pure API back-end

Endpoints
─────────
GET  /health          → {"status": "ok"}
POST /api/process     → structured JSON for an uploaded document
POST /api/contact     → relays a contact form message over SMTP
(no HTML rendered; UI lives in React/Vite front-end)
"""

# SPDX-License-Identifier: AGPL-3.0-only

# ── imports ──────────────────────────────────────────────────────
import logging

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from flask_cors import CORS                 # allow front-end origin
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from common.mailer import MailConfigurationError, send_contact_message
from extraction.config import config
from extraction.errors import NoFileUploaded, ProcessingError, UnsupportedFileType
from extraction.models import UploadedFile
from extraction.pipeline import build_pipeline
from validators import ContactRequestSchema, ProcessRequestSchema, first_error

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=getattr(logging, str(config.log_level).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")

app = Flask(__name__)

CORS(
    app,
    resources={r"/api/*": {"origins": config.cors_origins}}
)

# ── config ───────────────────────────────────────────────────────
app.config["MAX_CONTENT_LENGTH"] = config.max_file_size

_pipeline = build_pipeline(config)
_process_schema = ProcessRequestSchema()
_contact_schema = ContactRequestSchema()


def _plain(message: str, status: int):
    """Plain-text response, as the upload client reads error bodies with .text()."""
    return message, status, {"Content-Type": "text/plain; charset=utf-8"}


def read_upload():
    """Pull the uploaded file out of the multipart form.

    Raises:
        NoFileUploaded: If the form has no usable file field
    """
    if "file" not in request.files:
        raise NoFileUploaded()
    fileobj = request.files["file"]
    if not fileobj.filename:
        raise NoFileUploaded()

    return UploadedFile(
        filename=fileobj.filename,
        content=fileobj.read(),
        mimetype=fileobj.mimetype,
    )


# ── ROUTES ───────────────────────────────────────────────────────
@app.get("/")
def root():
    """Simple root for anyone hitting the API directly."""
    return {"service": "Document to JSON API", "docs": "/health"}, 200


@app.get("/health")
def health():
    """Used by React (and uptime checks) to verify API is alive."""
    return jsonify(status="ok"), 200


@app.post("/api/process")
def process_file():
    """
    1) Accept one uploaded document (or ZIP of documents).
    2) Validate the model selector and the caller's API key.
    3) Extract text, chunk it if needed, and convert it with the chosen provider.
    4) Return the provider's JSON, or a multi_file / chunked_document wrapper.
    """
    try:
        upload = read_upload()
        try:
            form = _process_schema.load(request.form.to_dict())
        except ValidationError as err:
            return _plain(first_error(err), 400)
        if not config.is_allowed_extension(upload.extension):
            raise UnsupportedFileType(upload.extension)

        result = _pipeline.process(upload, form["model"], form["api_key"])
        return jsonify(result)

    except ProcessingError as e:
        if e.status_code >= 500:
            logger.error("Error processing file: %s", e)
        return _plain(str(e), e.status_code)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unexpected error processing file")
        return _plain(str(e) or "Internal server error", 500)


@app.post("/api/contact")
def contact():
    try:
        data = _contact_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({'error': first_error(err)}), 400

    try:
        send_contact_message(
            name=data['name'],
            email=data['email'],
            message=data['message'],
            subject=data.get('subject'),
        )
        return jsonify({'message': 'Email sent successfully'}), 200

    except MailConfigurationError as e:
        logger.error("Contact form unavailable: %s", e)
        return jsonify({'error': 'Email service is not configured'}), 500
    except Exception as e:
        logger.exception("Failed to send contact email")
        return jsonify({'error': str(e)}), 500


@app.errorhandler(413)
def file_too_large(e):
    limit_mb = config.max_file_size // (1024 * 1024)
    return jsonify(error=f"File too large (max {limit_mb} MB)"), 413
