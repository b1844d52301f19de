"""Learned selectors endpoint"""

from flask import Blueprint, jsonify, request

from domain_knowledge import normalize_domain
from domain_knowledge_server.routes import get_knowledge

selectors_bp = Blueprint('selectors', __name__)


@selectors_bp.route('/api/v1/selectors', methods=['GET'])
def list_selectors():
    """Best learned selectors for ?domain=ikea.pl, with stats for debugging"""
    domain = normalize_domain(request.args.get('domain'))
    if not domain:
        return jsonify({"error": "Missing domain parameter"}), 400

    return jsonify(get_knowledge().selector_report(domain))
