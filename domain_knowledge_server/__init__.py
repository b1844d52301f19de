"""
domain_knowledge_server - HTTP API for the domain knowledge engine
Serves learned selectors/categories to the browser extension and ingests captures
"""

from domain_knowledge_server.app import create_app

__all__ = [
    'create_app',
]
