"""Domain operations performed on behalf of the signed-in user.

Modules:
- authorization: ownership checkpoint for books and lectures
- books: add/list/get/edit/remove books
- lectures: topic validation, active-lecture selection, lecture CRUD
- dashboard: book count and lectures logged this week
- uploads: cover image validation and upload
"""

__all__ = [
    "authorization",
    "books",
    "lectures",
    "dashboard",
    "uploads",
]
