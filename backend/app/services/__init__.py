# Services package init
"""
Murmur Backend — Services Layer
=================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Stateless singletons; each call receives the request's AsyncSession.

Service Inventory:
    - PostService:    create/list/read/download/delete posts
    - CommentService: create/delete comments
    - LikeService:    like/unlike posts
    - FollowService:  follow/unfollow users
    - UploadService:  multipart upload → in-memory UploadedFile
"""
