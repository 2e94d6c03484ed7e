"""
Quill Backend

Blogging API over MongoDB: users write posts, posts are filed under
categories, and the back-references on users and categories are kept in
step with the posts.

Package Structure:
==================
    quill/
    ├── api/        ← FastAPI application
    ├── shared/     ← Shared code (models, services, etc.)
    └── config/     ← Configuration

Running the Application:
========================
    uvicorn quill.api.main:app --reload
"""
