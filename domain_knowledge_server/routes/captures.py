"""Capture ingestion endpoint"""

from flask import Blueprint, jsonify, request

from domain_knowledge import CaptureAnalyzer, CaptureSample
from domain_knowledge_server.routes import get_knowledge

captures_bp = Blueprint('captures', __name__)


@captures_bp.route('/api/v1/captures', methods=['POST'])
def ingest_capture():
    """Learn selector (and category) outcomes from one captured product"""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"ok": False, "error": "JSON object required"}), 400

    sample = CaptureSample.from_dict(data)
    if not sample.domain:
        return jsonify({"ok": False, "error": "domain or url required"}), 400

    result = CaptureAnalyzer(get_knowledge()).analyze(sample)
    return jsonify({"ok": True, **result.to_dict()})
