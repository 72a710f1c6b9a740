import logging
import os

from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app as make_prom_app
from starlette.concurrency import run_in_threadpool

from providers.fitting_remote import ImagePayload

from .auth import require_user
from .db import init_db
from .exceptions import CommonException, ErrorCode, common_exception_handler
from .fitting_service import FittingService, get_fitting_service
from .logging_config import setup_logging
from .models import ErrorResponse, FittingRequestResponse, FittingResultResponse, ImageUploadResponse
from .queue import get_workers
from .validators import enforce_max_upload_size

logger = logging.getLogger(__name__)

app = FastAPI(title="LookIT Fitting API", version="0.1.0")

origins = os.environ.get("CORS_ORIGINS", "*")
origin_list = [o.strip() for o in origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(CommonException, common_exception_handler)
app.mount("/metrics", make_prom_app())

AUTH_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
}
UPLOAD_ERRORS = {**AUTH_ERRORS, 413: {"model": ErrorResponse}}


async def _payload(upload: UploadFile) -> ImagePayload:
    # Read now: the upload's temp file is closed once the response is sent.
    return ImagePayload(
        content=await upload.read(),
        filename=upload.filename or "image.png",
        content_type=upload.content_type,
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/v1/fittings", response_model=FittingRequestResponse, status_code=202, responses=UPLOAD_ERRORS)
async def request_fitting(
    clothesImage: UploadFile = File(...),
    bodyImage: UploadFile = File(...),
    user_id: int = Depends(require_user),
    _lim=Depends(enforce_max_upload_size),
    service: FittingService = Depends(get_fitting_service),
):
    clothes = await _payload(clothesImage)
    body = await _payload(bodyImage)
    # enqueue blocks while the worker queue is full; keep that off the event loop
    task_id = await run_in_threadpool(service.submit, user_id, clothes, body)
    return FittingRequestResponse(task_id=task_id)


@app.get("/v1/fittings", response_model=list[FittingResultResponse], responses=AUTH_ERRORS)
def list_fitting_results(
    user_id: int = Depends(require_user),
    service: FittingService = Depends(get_fitting_service),
):
    return [FittingResultResponse.model_validate(r) for r in service.list_results(user_id)]


@app.post("/v1/images", response_model=ImageUploadResponse, status_code=201, responses={**UPLOAD_ERRORS, 502: {"model": ErrorResponse}})
def upload_image(
    file: UploadFile = File(...),
    _user: int = Depends(require_user),
    _lim=Depends(enforce_max_upload_size),
    service: FittingService = Depends(get_fitting_service),
):
    try:
        url = service.upload_user_image(file)
    except IOError as e:
        logger.warning("User image upload failed: %s", e.__cause__ or e)
        raise CommonException(ErrorCode.S3_UPLOAD_ERROR) from e
    return ImageUploadResponse(url=url)


@app.on_event("startup")
def _startup():
    setup_logging()
    init_db()
    get_workers().ensure_workers()


@app.on_event("shutdown")
def _shutdown():
    get_workers().shutdown(wait=True)
