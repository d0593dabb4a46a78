"""
Storage collaborators: Cloud Storage objects and the relational job table.
"""

from .object_store import ObjectStore, object_name_from_url
from .job_store import JobStore, create_db_engine, init_schema

__all__ = [
    'ObjectStore',
    'object_name_from_url',
    'JobStore',
    'create_db_engine',
    'init_schema'
]
