"""
Geo Workflow Engine (gwe) - Declarative task chains over geospatial payloads

Builds workflows from YAML step definitions and runs them with:
- Step-ordered, dependency-gated task execution
- Pluggable jobs resolved from a startup registry
- Persisted task results and aggregated workflow status
"""

__version__ = "0.1.0"
__package_name__ = "geo-workflow-engine"
__short_name__ = "gwe"
