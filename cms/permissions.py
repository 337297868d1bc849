"""
Role permission maps.

A role's ``permissions`` column holds JSON shaped like::

    {"blog": {"create": true, "delete": false}, "media": {"upload": true}}

It is parsed into a ``PermissionMap`` (module x action -> bool) before any
authorization decision, so unknown modules/actions or non-boolean values are
rejected at load time instead of silently granting or denying.
"""

import enum
from typing import Any, Dict

from pydantic import RootModel, StrictBool, ValidationError


class Module(str, enum.Enum):
    USERS = "users"
    BLOG = "blog"
    SERVICES = "services"
    CAREERS = "careers"
    MEDIA = "media"
    SETTINGS = "settings"


class Action(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    UPLOAD = "upload"


class RoleSlug(str, enum.Enum):
    SUPER_ADMIN = "super-admin"
    EDITOR = "editor"
    VIEWER = "viewer"


CONTENT_MANAGERS = (RoleSlug.SUPER_ADMIN.value, RoleSlug.EDITOR.value)


class InvalidPermissionMap(ValueError):
    pass


class PermissionMap(RootModel[Dict[Module, Dict[Action, StrictBool]]]):
    @classmethod
    def load(cls, raw: Any) -> "PermissionMap":
        try:
            return cls.model_validate(raw or {})
        except ValidationError as e:
            raise InvalidPermissionMap(str(e)) from e

    def allows(self, module: Module, action: Action) -> bool:
        return self.root.get(Module(module), {}).get(Action(action), False) is True

    def to_json(self) -> Dict[str, Dict[str, bool]]:
        return {m.value: {a.value: v for a, v in actions.items()} for m, actions in self.root.items()}


def _grant(create, read, update, delete, publish=None):
    actions = {"create": create, "read": read, "update": update, "delete": delete}
    if publish is not None:
        actions["publish"] = publish
    return actions


DEFAULT_ROLES = [
    {
        "name": "Super Admin",
        "slug": RoleSlug.SUPER_ADMIN.value,
        "description": "Full system access with all permissions",
        "permissions": {
            "users": _grant(True, True, True, True),
            "blog": _grant(True, True, True, True, True),
            "services": _grant(True, True, True, True, True),
            "careers": _grant(True, True, True, True, True),
            "media": {"upload": True, "read": True, "update": True, "delete": True},
            "settings": {"read": True, "update": True},
        },
    },
    {
        "name": "Editor",
        "slug": RoleSlug.EDITOR.value,
        "description": "Can create and manage content",
        "permissions": {
            "users": _grant(False, True, False, False),
            "blog": _grant(True, True, True, False, True),
            "services": _grant(True, True, True, False, True),
            "careers": _grant(True, True, True, False, True),
            "media": {"upload": True, "read": True, "update": True, "delete": False},
            "settings": {"read": True, "update": False},
        },
    },
    {
        "name": "Viewer",
        "slug": RoleSlug.VIEWER.value,
        "description": "Read-only access to content",
        "permissions": {
            "users": _grant(False, False, False, False),
            "blog": _grant(False, True, False, False, False),
            "services": _grant(False, True, False, False, False),
            "careers": _grant(False, True, False, False, False),
            "media": {"upload": False, "read": True, "update": False, "delete": False},
            "settings": {"read": True, "update": False},
        },
    },
]
