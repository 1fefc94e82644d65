# Schemas package init
"""
Murmur Backend — Pydantic Schemas
===================================

What:  API contracts (request bodies and response models).
How:   Attributes are snake_case in Python and camelCase on the wire
       (`authorId`, `likedByUser`, ...) through `CamelModel`.
"""
