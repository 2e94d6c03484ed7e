"""
Shared Module

Domain code used by the API:
- Models: Document records for MongoDB
- Repositories: Data access layer
- Services: Business logic and the ReferenceManager
- Schemas: Pydantic request/response models
- Core: Logging, exceptions

Package Structure:
==================
    shared/
    ├── core/           ← Logging, exceptions
    ├── db/             ← Motor client, indexes, document store
    ├── models/         ← Document models
    ├── repositories/   ← Data access layer
    ├── services/       ← Business logic
    ├── schemas/        ← Pydantic schemas
    └── utils/          ← Identifiers, password hashing

Usage:
======
    from quill.shared.models import User, Post, Category
    from quill.shared.repositories import PostRepository
    from quill.shared.services import PostService, ReferenceManager
    from quill.shared.schemas import PostCreate, PostResponse
    from quill.shared.core import logger, QuillException
"""
