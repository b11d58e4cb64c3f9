"""
Spanner IT Resources

Ephemeral Cloud Spanner instances and databases for integration tests of
data-processing pipelines: provisioning, data access, metrics and teardown.
"""

__version__ = "0.1.0"
