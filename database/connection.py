# database/connection.py
from typing import List, Dict, Any
import logging
from neo4j import GraphDatabase
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from config import Config
from utils.error_handler import ConfigurationError, GraphSourceError

logger = logging.getLogger(__name__)

NODES_QUERY = """
MATCH (n)
RETURN elementId(n) AS id, labels(n) AS labels, properties(n) AS properties
"""

RELATIONSHIPS_QUERY = """
MATCH (n)-[r]->(m)
RETURN elementId(n) AS source, type(r) AS rel_type, elementId(m) AS target
"""

class Neo4jConnection:
    """Read-only access to a Neo4j database holding a graph to validate."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = logger

        neo4j_config = config.neo4j_config
        missing = [k for k in ('uri', 'user', 'password') if k not in neo4j_config]
        if missing:
            raise ConfigurationError(
                f"Neo4j configuration is missing {', '.join(missing)}",
                'neo4j_config',
                {'missing': missing}
            )

        self.database = neo4j_config.get('database')
        self._driver = GraphDatabase.driver(
            neo4j_config['uri'],
            auth=(neo4j_config['user'], neo4j_config['password'])
        )

    def _run(self, query: str) -> List[Dict[str, Any]]:
        try:
            with self._driver.session(database=self.database) as session:
                return session.run(query).data()
        except (Neo4jError, ServiceUnavailable) as e:
            self.logger.error(f"Error querying Neo4j: {str(e)}")
            raise GraphSourceError(
                f"Unable to read graph from Neo4j: {str(e)}",
                'neo4j_error',
                {'uri': self.config.neo4j_config['uri']}
            ) from e

    def fetch_nodes(self) -> List[Dict[str, Any]]:
        return self._run(NODES_QUERY)

    def fetch_relationships(self) -> List[Dict[str, Any]]:
        return self._run(RELATIONSHIPS_QUERY)

    def close(self):
        """Close the database connection."""
        self._driver.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
