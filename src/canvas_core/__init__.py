"""Canvas Core - workspace, project and task operations.

Modules:
- config: environment-driven settings
- models: status enums and SQLAlchemy table models
- results: success/error result envelope
- gateway: datastore gateway interface (rest_gateway, sql_gateway implement it)
- context: per-process dependencies handed to every operation
- workspaces, projects, tasks: entity operations
- progress: project progress synchronization
"""

__version__ = "1.0.0"
