"""
HTTP API for parsing and rendering card descriptions.

    POST /api/v1/parse_card   {"text": "..."} -> card record JSON
    POST /api/v1/render_card  {"text": "..."} -> {"card": ..., "imageData": <base64 PNG>}
    GET  /health
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import config
from .card_renderer import CardRenderer
from .text_processing import CardParseError, parse_card

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Built once at import; symbol images and fonts are read from the configured directories
renderer = CardRenderer.from_config()


def _card_text_from_request():
    """
    Pull the card description out of the JSON body.

    Returns:
        (text, None) on success, (None, error response tuple) otherwise
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return None, (jsonify({'error': 'No JSON data provided'}), 400)

    text = data.get('text', '')
    if not isinstance(text, str) or not text.strip():
        return None, (jsonify({'error': 'No card text provided'}), 400)
    return text, None


@app.route('/api/v1/parse_card', methods=['POST'])
def parse_card_endpoint():
    """Parse a card description and return the structured record"""
    text, error = _card_text_from_request()
    if error:
        return error

    try:
        card = parse_card(text)
    except CardParseError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify(card.to_dict()), 200


@app.route('/api/v1/render_card', methods=['POST'])
def render_card_endpoint():
    """Parse a card description and render it to a base64 PNG"""
    text, error = _card_text_from_request()
    if error:
        return error

    try:
        card = parse_card(text)
    except CardParseError as e:
        return jsonify({'error': str(e)}), 400

    try:
        image_data = renderer.render_base64(card)
    except Exception as e:
        logger.exception("Rendering failed for '%s'", card.name)
        return jsonify({'error': f'Card rendering failed: {str(e)}'}), 500

    return jsonify({'card': card.to_dict(), 'imageData': image_data}), 200


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint - always returns 200 to indicate server is running"""
    return jsonify({
        'status': 'healthy',
        'symbols_loaded': len(renderer.symbols),
        'fonts_loaded': sorted(renderer.fonts),
    }), 200


if __name__ == '__main__':
    logging.basicConfig(level=config.LOG_LEVEL)
    logger.info('Starting card server on %s:%d', config.HOST, config.PORT)
    app.run(debug=False, host=config.HOST, port=config.PORT)
