"""Response schemas — backend payloads normalized once at the API boundary.

Learn: the backend speaks camelCase JSON and is loose about shapes
(numbers as strings, optional fields missing). Every schema inherits
ApiModel, which accepts camelCase aliases, ignores unknown fields and
exposes snake_case attributes to Python callers.
"""

from clubdesk.schemas.common import ApiModel

__all__ = ["ApiModel"]
