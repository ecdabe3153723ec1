from fastapi import Depends, HTTPException, status

from student_portal.dependencies.auth import get_current_identity
from student_portal.schemas.auth import Identity
from student_portal.services.access_policy import Role


def get_current_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role != Role.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator privileges required",
        )
    return identity
