"""Domain analytics endpoint"""

from flask import Blueprint, jsonify

from domain_knowledge_server.routes import get_knowledge

domains_bp = Blueprint('domains', __name__)


@domains_bp.route('/api/v1/domains', methods=['GET'])
def list_domains():
    """Learning summary for every known domain"""
    domains = get_knowledge().domain_overview()
    return jsonify({"count": len(domains), "domains": domains})
