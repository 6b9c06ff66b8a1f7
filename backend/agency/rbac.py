from typing import List

from fastapi import Depends

from agency.deps import get_current_active_user
from agency.exceptions import AuthorizationError
from agency.models import Role, User

# Roles allowed to edit clients, projects and web documentation
EDITOR_ROLES = [Role.ADMIN, Role.AGENT]


def require_any_role(required_roles: List[Role]):
    """Dependency to require any of the specified roles"""
    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in required_roles:
            raise AuthorizationError(
                f"Keine Berechtigung. Erforderliche Rollen: {', '.join(r.value for r in required_roles)}"
            )
        return current_user
    return dependency


require_editor = require_any_role(EDITOR_ROLES)
require_admin = require_any_role([Role.ADMIN])
