"""
Database Module

This module provides MongoDB connectivity and the document store
primitives for Quill.

Architecture Overview:
======================
┌─────────────────────────────────────────────────────────────────────────────┐
│                        DATABASE LAYER                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   FastAPI Route                                                             │
│       │                                                                     │
│       │  Dependency Injection: get_db()                                     │
│       ▼                                                                     │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              AsyncIOMotorDatabase (from client.py)          │          │
│   └─────────────────────────────────────────────────────────────┘          │
│       │                              │                                      │
│       ▼                              ▼                                      │
│   ┌──────────────────────┐   ┌──────────────────────────────────┐          │
│   │ Repositories         │   │ MongoDocumentStore (store.py)    │          │
│   │ CRUD + queries       │   │ 8 primitives for the             │          │
│   │                      │   │ ReferenceManager                 │          │
│   └──────────────────────┘   └──────────────────────────────────┘          │
│       │                              │                                      │
│       ▼                              ▼                                      │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              MongoDB                                        │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Components:
===========
- client.py: motor client, get_db dependency, init/close lifecycle, indexes
- store.py: DocumentStore protocol and its MongoDB implementation
"""

from quill.shared.db.client import (
    get_db,
    get_client,
    get_database,
    ensure_indexes,
    init_db,
    close_db,
)
from quill.shared.db.store import DocumentStore, MongoDocumentStore

__all__ = [
    "get_db",
    "get_client",
    "get_database",
    "ensure_indexes",
    "init_db",
    "close_db",
    "DocumentStore",
    "MongoDocumentStore",
]
