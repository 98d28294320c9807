"""
Template Library — read-only access to the local template file tree.

Layout: <base>/<category>/<template>/content.html and content.txt.
Every operation returns a Result Envelope and never raises.
"""

from .store import (
    CONTENT_FILES,
    list_categories,
    list_templates_in_category,
    get_template_content,
    get_template_ideas,
)

__all__ = [
    "CONTENT_FILES",
    "list_categories",
    "list_templates_in_category",
    "get_template_content",
    "get_template_ideas",
]
