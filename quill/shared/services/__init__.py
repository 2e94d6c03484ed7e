"""
Business Logic Services

Services encapsulate business logic and coordinate between repositories
and the ReferenceManager.

Service Pattern:
================
    Handler → Service → Repository → Database
                ↘ ReferenceManager → DocumentStore

Services should:
- Contain business logic and validation
- Route every relationship write through the ReferenceManager
- NOT handle HTTP concerns (that's for handlers)

Available Services:
===================
- UserService: Accounts, profile updates, cascading deletion of posts
- PostService: Posts with author and category relationships
- CategoryService: Categories, detaching from posts on delete
- ReferenceManager: Back-reference maintenance and cascades

Usage:
======
    from quill.shared.services import PostService

    service = PostService(db)
    view = await service.get_post(post_id)
"""

from quill.shared.services.reference_manager import ReferenceManager, ReferenceUpdateResult
from quill.shared.services.user_service import UserService, UserStats, UserView
from quill.shared.services.post_service import PostService, PostView
from quill.shared.services.category_service import CategoryService, CategoryView

__all__ = [
    "ReferenceManager",
    "ReferenceUpdateResult",
    "UserService",
    "UserStats",
    "UserView",
    "PostService",
    "PostView",
    "CategoryService",
    "CategoryView",
]
