"""Flask application setup for domain knowledge server"""

import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from domain_knowledge import DomainKnowledge, ObservationStoreError
from domain_knowledge_server.routes.health import health_bp
from domain_knowledge_server.routes.selectors import selectors_bp
from domain_knowledge_server.routes.categories import categories_bp
from domain_knowledge_server.routes.captures import captures_bp
from domain_knowledge_server.routes.domains import domains_bp

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(knowledge: Optional[DomainKnowledge] = None) -> Flask:
    """Build the Flask app around a knowledge engine (SQLite-backed by default)."""
    app = Flask(__name__)
    CORS(app)

    app.extensions['domain_knowledge'] = knowledge or DomainKnowledge()

    # Register blueprints
    app.register_blueprint(health_bp)
    app.register_blueprint(selectors_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(captures_bp)
    app.register_blueprint(domains_bp)

    @app.errorhandler(ObservationStoreError)
    def handle_store_error(e):
        logger.error(f"Observation store failure: {e}")
        return jsonify({"ok": False, "error": str(e)}), 500

    return app
