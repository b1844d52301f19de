"""Health check endpoint"""

from flask import Blueprint, jsonify

from domain_knowledge import config

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        "status": "healthy",
        "database": config.db_path,
        "version": "1.0.0"
    })
