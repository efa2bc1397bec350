import asyncio
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from app.api.check_in import schemas
from app.api.check_in.crud import check_in as check_in_crud
from app.api.check_in.dependencies import get_today
from app.api.event_staff.crud import event_staff as event_staff_crud
from app.core.config import CORS_HEADERS, Settings, get_settings
from app.core.database import get_session_factory
from app.core.exceptions.check_in_exceptions import InternalServerError
from app.core.logger import logger
from app.core.security import IdentityProvider, authenticate, get_identity_provider

router = APIRouter()


def _verify_qr(
    session_factory: sessionmaker,
    scan: schemas.VerifyQRRequest,
    identity_provider: IdentityProvider,
    authorization: Optional[str],
    refresh_token: Optional[str],
    today: date,
    config: Settings,
) -> schemas.CheckInResult:
    user = authenticate(identity_provider, authorization, refresh_token)
    logger.info('Check-in scan by %s for event %s', user.user_id, scan.event_id)
    # The session lives and dies in this worker thread
    with session_factory() as db:
        event_staff_crud.authorize(db, scan.event_id, user)
        return check_in_crud.new_qr_check_in(
            db,
            qr_payload=scan.qr_payload,
            event_id=scan.event_id,
            user=user,
            today=today,
            secret=config.QR_SIGNING_SECRET,
            device_info=scan.device_info,
        )


@router.options('', status_code=status.HTTP_204_NO_CONTENT)
def verify_qr_preflight():
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.post('', response_model=schemas.CheckInResult)
async def verify_qr(
    scan: schemas.VerifyQRRequest,
    response: Response,
    authorization: Optional[str] = Header(None),
    x_refresh_token: Optional[str] = Header(None),
    session_factory: sessionmaker = Depends(get_session_factory),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    today: date = Depends(get_today),
    config: Settings = Depends(get_settings),
):
    response.headers.update(CORS_HEADERS)
    try:
        return await asyncio.wait_for(
            run_in_threadpool(
                _verify_qr,
                session_factory,
                scan,
                identity_provider,
                authorization,
                x_refresh_token,
                today,
                config,
            ),
            timeout=config.CHECK_IN_TIMEOUT_SECONDS,
        )
    except HTTPException:
        raise
    except asyncio.TimeoutError:
        logger.error('Check-in for event %s timed out', scan.event_id)
        raise InternalServerError()
    except Exception as e:
        logger.exception('Unexpected error verifying QR: %s', str(e))
        raise InternalServerError()
