from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from portal.auth.schemas import LoginRequest
from portal.auth.services import login, logout
from portal.common.errors import PortalError, error_response
from portal.common.logger import get_logger
from portal.common.schemas import SuccessResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=SuccessResponse)
async def login_endpoint(credentials: LoginRequest):
    """
    Exchange the shared username/password for the session cookie.

    Returns:
        200 with the cookie set, 401 on a mismatch, 500 if the server
        credential is not configured
    """
    try:
        response = JSONResponse(status_code=status.HTTP_200_OK, content=SuccessResponse().model_dump())
        login(credentials.username, credentials.password, response)
        return response
    except PortalError as e:
        return error_response(e)
    except Exception:
        logger.exception("Login failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Login failed"},
        )


@router.post("/logout", response_model=SuccessResponse)
async def logout_endpoint():
    response = JSONResponse(status_code=status.HTTP_200_OK, content=SuccessResponse().model_dump())
    logout(response)
    return response
