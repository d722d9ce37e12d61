import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth import credentials, jwt_handler
from backend.auth.dependencies import get_current_user
from backend.auth.schemas import LoginRequest, LoginResponse, SessionUser, VerifyResponse
from backend.database import get_db

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)


@router.post('/login', response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    if not data.username or not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Email and password are required',
        )

    try:
        user = credentials.authenticate(db, data.username, data.password)
    except SQLAlchemyError as exc:
        logger.exception('Login lookup failed')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Internal server error',
        ) from exc

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Invalid credentials',
        )

    return LoginResponse(token=jwt_handler.issue_token(user), user=user)


@router.get('/verify', response_model=VerifyResponse)
def verify(current_user: SessionUser = Depends(get_current_user)):
    return VerifyResponse(user=current_user)
