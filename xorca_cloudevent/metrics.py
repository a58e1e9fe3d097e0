"""
Prometheus counters for event construction.

Label values come from schema names and schema field names only, never from
caller-supplied record values, so series counts stay bounded.
"""

from prometheus_client import Counter

events_created = Counter('xorca_events_created_total', 'XOrca CloudEvents constructed', ['schema'])
schema_validation_errors = Counter('xorca_schema_validation_errors_total', 'Schema validation errors', ['schema', 'field'])
