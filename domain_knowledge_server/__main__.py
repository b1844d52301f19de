"""Main entry point for domain knowledge server"""

import logging

from domain_knowledge import config
from domain_knowledge_server.app import create_app

logger = logging.getLogger(__name__)


def main():
    """Run the domain knowledge API server"""
    app = create_app()
    logger.info(f"Starting domain knowledge API server on port {config.api_port}...")
    logger.info(f"Database: {config.db_path}")
    logger.info(
        f"Selector gates: min_samples={config.selector_min_samples}, "
        f"min_confidence={config.selector_min_confidence}, "
        f"discovered_min_confidence={config.discovered_min_confidence}"
    )
    app.run(host='0.0.0.0', port=config.api_port, debug=config.enable_debug, use_reloader=False)


if __name__ == '__main__':
    main()
