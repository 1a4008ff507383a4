from rest_framework.permissions import BasePermission

from apps.accounts.permissions import Principal, is_allowed

METHOD_ACTIONS = {
    "GET": "view",
    "HEAD": "view",
    "OPTIONS": "view",
    "POST": "add",
    "PUT": "edit",
    "PATCH": "edit",
    "DELETE": "delete",
}

VIEWSET_ACTIONS = {
    "list": "view",
    "retrieve": "view",
    "create": "add",
    "update": "edit",
    "partial_update": "edit",
    "destroy": "delete",
}


class ResourcePermission(BasePermission):
    """Checks (resource, action) against the authenticated principal.

    Viewsets declare `permission_resource` and may map extra actions in
    `permission_actions`; otherwise the viewset action name or the HTTP
    method decides.
    """

    message = "Permission denied"
    resource = None
    action = None

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        resource = self.resource or getattr(view, "permission_resource", None)
        action = self.action or self.resolve_action(request, view)
        if not resource or not action:
            return False
        return is_allowed(Principal.from_user(user), resource, action)

    def resolve_action(self, request, view):
        view_action = getattr(view, "action", None)
        overrides = getattr(view, "permission_actions", None) or {}
        if view_action in overrides:
            return overrides[view_action]
        if view_action in VIEWSET_ACTIONS:
            return VIEWSET_ACTIONS[view_action]
        return METHOD_ACTIONS.get(request.method)


def resource_permission(resource, action=None):
    """ResourcePermission bound to a resource, for function views."""
    name = f"{resource.title()}{(action or '').title()}Permission"
    return type(name, (ResourcePermission,), {"resource": resource, "action": action})


def role_required(*roles):
    class RoleRequired(BasePermission):
        message = "Permission denied"

        def has_permission(self, request, view):
            user = request.user
            if not user or not user.is_authenticated:
                return False
            return user.role in roles

    return RoleRequired
