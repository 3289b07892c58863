# app/core/rbac.py
from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from app.api.deps import get_current_principal

def _role_names(principal: Dict[str, Any]) -> set[str]:
    roles = principal.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return {str(r).lower() for r in roles}

def require_roles(*roles: str):
    allowed = {r.lower() for r in roles}
    def dep(principal: Dict[str, Any] = Depends(get_current_principal)):
        if not (_role_names(principal) & allowed):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return principal
    return dep
