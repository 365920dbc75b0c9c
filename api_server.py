#!/usr/bin/env python3
"""
Image Filters API Server
Each uploaded or named image becomes a session; filters are applied per request
and every step replaces the stored session with its result.
"""

import os
import math
import logging
import uuid
from io import BytesIO
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from imagefilters.errors import (
    DecodeError,
    ImageFiltersError,
    InvalidFactorError,
    ResourceNotFoundError,
    UnknownFilterError,
)
from imagefilters.models.filter_name import FilterName
from imagefilters.repositories.image_repository import ImageRepository
from imagefilters.services.image_session import ImageSession

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "data/temp_uploads")
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "100"))

app.config['UPLOAD_FOLDER'] = UPLOAD_FOLDER
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

image_repository = ImageRepository()

logger = logging.getLogger(__name__)

# In-memory session storage, oldest evicted first once MAX_SESSIONS is reached
sessions: Dict[str, ImageSession] = {}

# operation → session call taking one explicit argument
ADJUSTMENTS = {
    "lighten": lambda s, v: s.lighten(v),
    "darken": lambda s, v: s.darken(v),
    "lessContrast": lambda s, v: s.less_contrast(v),
    "moreContrast": lambda s, v: s.more_contrast(v),
    "changeContrast": lambda s, v: s.change_contrast(v),
}


def session_payload(session_id: str, session: ImageSession) -> dict:
    return {
        'success': True,
        'session_id': session_id,
        'width': session.width,
        'height': session.height,
        'averages': session.rgba_averages(),
    }


def get_session(session_id: str):
    session = sessions.get(session_id)
    if session is None:
        return None, (jsonify({'success': False, 'message': 'Session not found'}), 404)
    return session, None


def store_session(session: ImageSession) -> str:
    """Register a new session, evicting the oldest ones past MAX_SESSIONS."""
    while sessions and len(sessions) >= MAX_SESSIONS:
        oldest = next(iter(sessions))
        del sessions[oldest]
        logger.info(f"Evicted session {oldest} (limit {MAX_SESSIONS})")
    session_id = str(uuid.uuid4())
    sessions[session_id] = session
    return session_id


def load_upload(file) -> ImageSession:
    """Save the upload temporarily, decode it and wrap it in a session."""
    upload_dir = Path(app.config['UPLOAD_FOLDER'])
    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = secure_filename(file.filename) or "upload"
    temp_path = upload_dir / f"upload_{uuid.uuid4().hex}_{filename}"
    file.save(str(temp_path))
    try:
        return ImageSession(image_repository.read(temp_path))
    finally:
        if temp_path.exists():
            temp_path.unlink()


@app.route('/api/sessions', methods=['POST'])
def create_session():
    """Create a session from an uploaded image or a named resource."""
    try:
        if 'image' in request.files:
            file = request.files['image']
            if file.filename == '':
                return jsonify({'success': False, 'message': 'No file selected'}), 400
            session = load_upload(file)
        else:
            body = request.get_json(silent=True) or {}
            resource = body.get('resource')
            if resource:
                session = ImageSession.from_name(resource, image_repository)
            else:
                session = ImageSession.from_default(image_repository)

        session_id = store_session(session)
        logger.info(f"Created session {session_id} ({session.width}x{session.height})")
        return jsonify(session_payload(session_id, session)), 201

    except ResourceNotFoundError as e:
        return jsonify({'success': False, 'message': str(e)}), 404
    except DecodeError as e:
        return jsonify({'success': False, 'message': f'Could not decode image: {e}'}), 400
    except Exception as e:
        logger.error(f"Session creation error: {e}")
        return jsonify({'success': False, 'message': 'Error creating session'}), 500


@app.route('/api/sessions/<session_id>/filter', methods=['POST'])
def filter_session(session_id):
    """Apply one or more named filters with their default parameters."""
    session, error = get_session(session_id)
    if error:
        return error

    body = request.get_json(silent=True) or {}
    names = body.get('filters')
    if not names or not isinstance(names, (str, list)):
        return jsonify({'success': False, 'message': 'No filters provided'}), 400

    try:
        result = session.filter(names, strict=bool(body.get('strict', False)))
    except UnknownFilterError as e:
        return jsonify({'success': False, 'message': str(e), 'known': FilterName.names()}), 400
    except ImageFiltersError as e:
        logger.error(f"Filter error in session {session_id}: {e}")
        return jsonify({'success': False, 'message': str(e)}), 500

    sessions[session_id] = result
    logger.info(f"Applied {names} to session {session_id}")
    return jsonify(session_payload(session_id, result))


@app.route('/api/sessions/<session_id>/adjust', methods=['POST'])
def adjust_session(session_id):
    """Apply a single filter with an explicit value, e.g. {"operation": "darken", "value": 30}."""
    session, error = get_session(session_id)
    if error:
        return error

    body = request.get_json(silent=True) or {}
    operation = body.get('operation')
    if operation == FilterName.GREY_SCALE.value:
        result = session.grey_scale()
    elif operation in ADJUSTMENTS:
        value = body.get('value')
        if value is not None and (
            isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value)
        ):
            return jsonify({'success': False, 'message': 'value must be a finite number or null'}), 400
        try:
            result = ADJUSTMENTS[operation](session, value)
        except InvalidFactorError as e:
            return jsonify({'success': False, 'message': str(e)}), 400
    else:
        return jsonify({'success': False, 'message': f'Unknown operation: {operation!r}'}), 400

    sessions[session_id] = result
    return jsonify(session_payload(session_id, result))


@app.route('/api/sessions/<session_id>/averages', methods=['GET'])
def session_averages(session_id):
    session, error = get_session(session_id)
    if error:
        return error
    return jsonify({'success': True, 'session_id': session_id, 'averages': session.rgba_averages()})


@app.route('/api/sessions/<session_id>/image', methods=['GET'])
def session_image(session_id):
    """Serve the session's current image as PNG."""
    session, error = get_session(session_id)
    if error:
        return error
    buffer = BytesIO()
    session.image.save(buffer, format='PNG')
    buffer.seek(0)
    return send_file(buffer, mimetype='image/png')


@app.route('/api/sessions/<session_id>', methods=['DELETE'])
def clear_session(session_id):
    """Drop a session and free memory."""
    if sessions.pop(session_id, None) is None:
        return jsonify({'success': False, 'message': 'Session not found'}), 404
    return jsonify({'success': True, 'message': 'Session cleared'})


@app.route('/api/filters', methods=['GET'])
def list_filters():
    return jsonify({'filters': FilterName.names()})


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Image Filters API is running',
        'active_sessions': len(sessions)
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    logger.info(f"Upload directory: {UPLOAD_FOLDER}")
    logger.info(f"Resource directory: {image_repository.resource_dir}")
    logger.info(f"Filters: {', '.join(FilterName.names())}")
    app.run(host='0.0.0.0', port=int(os.getenv("API_PORT", "5000")), debug=False, threaded=False)
