from fastapi import APIRouter, Depends, Request
from app.schemas.auth_schemas import LoginRequest, LoginResponse
from app.schemas.product_schemas import ErrorResponse
from app.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    token = auth_service.login(body.username, body.password)
    return LoginResponse(token=token)
