# Routes package init
"""
Murmur Backend — API Routes Package
=====================================

Route Inventory:
    - posts.py:    /posts, /posts/{id}, /posts/{id}/file
    - comments.py: /comments, /comments/{id}
    - likes.py:    /likes, /likes/{postId}
    - follows.py:  /follow, /unfollow/{id}
    - health.py:   /health

Routes stay thin: read the request, call a service, return its model.
Status codes for failures come from the exception handlers in main.py.
"""
