"""
Organization Repository Relationship and Aggregation Engine.

Derives an organization-level summary from a batch of repository
records: language and topic aggregates, topic clusters, contributor
overlap, and a graph of inferred relationships between repositories.
"""

__version__ = "1.0.0"
__author__ = "orgscan"
