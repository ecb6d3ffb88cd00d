"""
sqlfluent - fluent SQL query construction and compilation

Code is organized in layers
- config/ and connection/ load server profiles and open connections
- primitives/ run compiled (sql, bindings) pairs and wrap results
- query/ and schema/ build statements and DDL without touching a connection
- Database and Schema are the class-level facades tying them together
"""

# Layer 1: Core connectivity
from sqlfluent.config import load_server, list_servers
from sqlfluent.connection import SnowflakeConnector
from sqlfluent.context import ConnectionContext

# Layer 2: Primitives
from sqlfluent.primitives import QueryResult, Executor, execute_sql

# Layer 3: Builders
from sqlfluent.query import QueryBuilder, CaseExpression, JoinClause
from sqlfluent.schema import TableBlueprint, Schema

# Layer 4: Facade
from sqlfluent.database import Database, QueryReturnType, ServerChain, UpdateChain
from sqlfluent.exceptions import DatabaseError, DuplicateServerConfiguration, TransactionFailure

__version__ = "0.1.0"
__all__ = [
    # Layer 1
    "load_server",
    "list_servers",
    "SnowflakeConnector",
    "ConnectionContext",
    # Layer 2
    "QueryResult",
    "Executor",
    "execute_sql",
    # Layer 3
    "QueryBuilder",
    "CaseExpression",
    "JoinClause",
    "TableBlueprint",
    "Schema",
    # Layer 4
    "Database",
    "QueryReturnType",
    "ServerChain",
    "UpdateChain",
    "DatabaseError",
    "DuplicateServerConfiguration",
    "TransactionFailure",
]
