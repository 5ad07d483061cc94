from http import HTTPStatus

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from island_api.api.dependencies import get_verification_service
from island_api.schemas.verification import (SendCodeRequest,
                                             VerificationError,
                                             VerificationResponse,
                                             VerificationResult,
                                             VerifyCodeRequest)
from island_api.services.verification_service import VerificationCodeService

router = APIRouter()


def _to_response(result: VerificationResult) -> JSONResponse:
    if result.success:
        status_code = HTTPStatus.OK
    elif result.error == VerificationError.infrastructure_error:
        status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    else:
        status_code = HTTPStatus.BAD_REQUEST
    body = VerificationResponse(success=result.success, message=result.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post("/send", response_model=VerificationResponse)
async def send_verification_code(
    request: SendCodeRequest,
    service: VerificationCodeService = Depends(get_verification_service),
):
    """发送邮箱验证码"""
    result = await service.issue(request.email, request.type)
    return _to_response(result)


@router.post("/verify", response_model=VerificationResponse)
async def verify_code(
    request: VerifyCodeRequest,
    service: VerificationCodeService = Depends(get_verification_service),
):
    """校验邮箱验证码"""
    result = await service.verify(request.email, request.code, request.type)
    return _to_response(result)
