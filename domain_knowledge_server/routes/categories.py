"""Learned categories endpoints"""

from flask import Blueprint, jsonify, request

from domain_knowledge import Outcome, normalize_domain
from domain_knowledge_server.routes import get_knowledge, parse_flag

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('/api/v1/categories', methods=['GET'])
def list_categories():
    """Top category and ranked alternatives for ?domain="""
    domain = normalize_domain(request.args.get('domain'))
    if not domain:
        return jsonify({"error": "domain parameter required"}), 400

    return jsonify(get_knowledge().category_report(domain))


@categories_bp.route('/api/v1/categories/outcomes', methods=['POST'])
def record_category_outcome():
    """Record that a user accepted or overrode a suggested category"""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"ok": False, "error": "JSON object required"}), 400

    domain = data.get('domain')
    domain = normalize_domain(domain) if isinstance(domain, str) else ""
    if not domain:
        return jsonify({"ok": False, "error": "domain required"}), 400

    success = parse_flag(data.get('success'), default=True)
    if success is None:
        return jsonify({"ok": False, "error": "success must be a boolean"}), 400

    category = data.get('category')
    category = category if isinstance(category, str) else ''
    record = get_knowledge().record_category_outcome(domain, category, Outcome.from_bool(success))

    return jsonify({"ok": True, "recorded": record is not None})
