from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from sqlalchemy.orm import Session
from cafe_api.database import get_db
from cafe_api.dependencies import get_authenticator
from cafe_api.exceptions import UnauthorizedError
from cafe_api.security import Authenticator
from cafe_api import crud, schemas
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Resolve the bearer token to the calling user.

    Raises:
        UnauthorizedError: no token, a token that fails verification, or a
            token for a user that no longer exists
    """
    if credentials is None:
        raise UnauthorizedError("No token provided")

    user_id = authenticator.verify_token(credentials.credentials)

    db_user = crud.get_user(db, user_id)
    if not db_user:
        logger.info(f"Token for unknown user {user_id}")
        raise UnauthorizedError("Invalid token")

    return schemas.CurrentUser(
        id=db_user.id,
        email=db_user.email,
        name=db_user.name
    )
