from fastapi import HTTPException, Request, status


def get_optional_principal(request: Request) -> str | None:
    """Principal set by the security middleware, if any."""
    return getattr(request.state, "principal", None)


def get_required_principal(request: Request) -> str:
    principal = get_optional_principal(request)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials or token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal
