"""
API Module

FastAPI application exposing users, posts and categories over HTTP.

Package Structure:
==================
    api/
    ├── main.py           ← App factory, lifespan (MongoDB connect/close)
    ├── routes.py         ← Router registration under /users, /posts, /categories
    ├── dependencies/     ← Database handle, pagination, service factories
    ├── handlers/         ← One router per resource plus health checks
    └── middleware/       ← QuillException → JSON error envelope

Usage:
======
    uvicorn quill.api.main:app --reload
"""
