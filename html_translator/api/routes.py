"""
API Routes
==========
Flask blueprints for all API endpoints.
"""
import json
import time
from flask import Blueprint, request, jsonify, Response

from html_translator import __version__
from html_translator.config import config, SUPPORTED_LANGUAGES, TargetLanguage
from html_translator.api.middleware import rate_limit, require_access_key
from html_translator.models.schemas import (
    UpdateUnitRequest,
    SetLanguageRequest,
    TranslateResponse,
    TranslateAllResponse,
    HealthStatus
)
from html_translator.services.gemini_client import get_gemini_client
from html_translator.services.workspace import BulkTranslator, UnitNotFoundError
from html_translator.utils.logging import get_logger, debug_print

SSE_HEADERS = {
    'Cache-Control': 'no-cache',
    'Connection': 'keep-alive',
    'X-Accel-Buffering': 'no'
}


def create_units_blueprint(translator: BulkTranslator) -> Blueprint:
    """Create translation unit routes blueprint."""
    bp = Blueprint('units', __name__, url_prefix='/api')
    store = translator.store
    logger = get_logger().api_logger

    @bp.errorhandler(UnitNotFoundError)
    def unit_not_found(e):
        return jsonify({'error': str(e)}), 404

    @bp.route('/units', methods=['GET'])
    def list_units():
        return jsonify({
            'units': [unit.to_dict() for unit in store.snapshot()],
            'target_language': store.target_language.value,
            'version': store.version
        })

    @bp.route('/units/<int:unit_id>', methods=['GET'])
    def get_unit(unit_id: int):
        return jsonify(store.get(unit_id).to_dict())

    @bp.route('/units/<int:unit_id>', methods=['PUT'])
    @require_access_key
    def update_unit(unit_id: int):
        """Replace a unit's input HTML."""
        update = UpdateUnitRequest.from_json(request.get_json(silent=True))
        errors = update.validate()
        if errors:
            return jsonify({'error': '; '.join(errors)}), 400

        unit = store.set_input(unit_id, update.input_html)
        return jsonify(unit.to_dict())

    @bp.route('/units/<int:unit_id>/translate', methods=['POST'])
    @require_access_key
    @rate_limit
    def translate_unit(unit_id: int):
        """Start translating one unit."""
        if store.get(unit_id).is_loading:
            return jsonify({'error': f'Unit {unit_id} is already translating'}), 409

        future = translator.submit_unit(unit_id)
        if future is None:
            return jsonify(TranslateResponse(
                unit_id=unit_id, started=False, message='Input is empty'
            ).to_dict())

        logger.info(f"Translation started for unit {unit_id}")
        return jsonify(TranslateResponse(unit_id=unit_id, started=True).to_dict()), 202

    @bp.route('/units/<int:unit_id>/output', methods=['GET'])
    def get_unit_output(unit_id: int):
        """Raw translated HTML, for copying to the clipboard."""
        return Response(store.get(unit_id).output_html, mimetype='text/plain')

    @bp.route('/translate-all', methods=['POST'])
    @require_access_key
    @rate_limit
    def translate_all():
        """Start translating every populated, idle unit."""
        started = translator.translate_all()
        logger.info(f"Translate all started units {sorted(started)}")
        return jsonify(TranslateAllResponse(started=sorted(started)).to_dict()), 202

    @bp.route('/units/stream', methods=['GET'])
    def stream_units():
        """Stream the unit list via SSE whenever the store changes."""
        def generate():
            last_version = -1
            while True:
                version = store.version
                if version != last_version:
                    payload = {
                        'version': version,
                        'target_language': store.target_language.value,
                        'units': [unit.to_dict() for unit in store.snapshot()]
                    }
                    yield f"data: {json.dumps(payload)}\n\n"
                    last_version = version
                time.sleep(0.5)

        return Response(generate(), mimetype='text/event-stream', headers=SSE_HEADERS)

    return bp


def create_languages_blueprint(translator: BulkTranslator) -> Blueprint:
    """Create target language routes blueprint."""
    bp = Blueprint('languages', __name__, url_prefix='/api')
    store = translator.store

    @bp.route('/languages', methods=['GET'])
    def list_languages():
        return jsonify({'languages': SUPPORTED_LANGUAGES})

    @bp.route('/language', methods=['GET'])
    def get_language():
        return jsonify({'language': store.target_language.value})

    @bp.route('/language', methods=['PUT'])
    @require_access_key
    def set_language():
        """Change the target language used by every unit."""
        change = SetLanguageRequest.from_json(request.get_json(silent=True))
        errors = change.validate()
        if errors:
            return jsonify({'error': '; '.join(errors)}), 400

        store.set_target_language(TargetLanguage(change.language))
        debug_print(f"Target language set to {change.language}", 'INFO', 'API')
        return jsonify({'language': store.target_language.value})

    return bp


def create_health_blueprint() -> Blueprint:
    """Create health check routes blueprint."""
    bp = Blueprint('health', __name__, url_prefix='/api')

    @bp.route('/health', methods=['GET'])
    def health_check():
        client = get_gemini_client()
        configured = bool(client.api_key)
        reachable = client.is_healthy() if configured else False

        return jsonify(HealthStatus(
            status='healthy' if reachable else 'degraded',
            api_key_configured=configured,
            model_reachable=reachable,
            model=client.model,
            version=__version__
        ).to_dict())

    @bp.route('/models/current', methods=['GET'])
    def get_current_model():
        return jsonify({
            'model': config.gemini.model,
            'temperature': config.gemini.temperature
        })

    return bp


def create_logs_blueprint() -> Blueprint:
    """Create logs routes blueprint for frontend console panel."""
    from html_translator.utils.logging import log_buffer

    bp = Blueprint('logs', __name__)

    @bp.route('/logs', methods=['GET'])
    def get_logs():
        since_id = request.args.get('since', 0, type=int)
        unit_id = request.args.get('unit', None, type=int)
        return jsonify({'logs': log_buffer.entries(since_id, unit_id=unit_id)})

    @bp.route('/logs/stream')
    def stream_logs():
        """Stream logs in real-time using Server-Sent Events."""
        unit_id = request.args.get('unit', None, type=int)

        def generate():
            last_id = 0
            while True:
                for log in log_buffer.entries(last_id):
                    last_id = log['id']
                    if unit_id is None or log['unit_id'] == unit_id:
                        yield f"data: {json.dumps(log)}\n\n"
                time.sleep(0.5)

        return Response(generate(), mimetype='text/event-stream', headers=SSE_HEADERS)

    @bp.route('/logs/clear', methods=['POST'])
    def clear_logs():
        log_buffer.clear()
        return jsonify({'message': 'Logs cleared'})

    return bp
