from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import require_bearer_token
from .configuration import Settings, get_settings
from .errors import AwardsError
from .kv_store import KeyValueStore
from .middleware import RequestLoggingMiddleware
from .models import (
    Awardee,
    AwardeeBatch,
    AwardeeList,
    AwardeeSaved,
    CategoriesSaved,
    CategoryList,
    HealthStatus,
    SuccessResponse,
    UploadResult,
)
from .repository import AwardeeRepository
from .storage import PhotoStorage
from .utils import make_photo_filename

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

store = KeyValueStore(settings.db_path)
photo_storage = PhotoStorage.from_settings(settings)


def get_photo_storage() -> PhotoStorage:
    return photo_storage


def get_repository(
    storage: PhotoStorage = Depends(get_photo_storage),
    config: Settings = Depends(get_settings),
) -> AwardeeRepository:
    return AwardeeRepository(
        store,
        storage,
        key_prefix=config.key_prefix,
        categories_key=config.categories_key,
        signed_url_expiry=config.signed_url_expiry,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    storage = app.dependency_overrides.get(get_photo_storage, get_photo_storage)()
    try:
        storage.ensure_bucket()
    except AwardsError as exc:
        logger.error(f"Could not ensure storage bucket exists: {exc}")
    yield


app = FastAPI(title="Award Slides API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=600,
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(AwardsError)
async def awards_error_handler(request: Request, exc: AwardsError) -> JSONResponse:
    logger.error(f"Error handling {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


router = APIRouter(dependencies=[Depends(require_bearer_token)])


@router.get("/health", response_model=HealthStatus)
def healthcheck() -> HealthStatus:
    return HealthStatus()


@router.get("/awardees", response_model=AwardeeList, response_model_exclude_none=True)
def list_awardees(repository: AwardeeRepository = Depends(get_repository)) -> AwardeeList:
    return AwardeeList(awardees=repository.list_awardees())


@router.post("/awardees", response_model=AwardeeSaved, response_model_exclude_none=True)
def save_awardee(awardee: Awardee, repository: AwardeeRepository = Depends(get_repository)) -> AwardeeSaved:
    return AwardeeSaved(awardee=repository.save(awardee))


@router.post("/awardees/batch", response_model=SuccessResponse)
def save_awardees_batch(batch: AwardeeBatch, repository: AwardeeRepository = Depends(get_repository)) -> SuccessResponse:
    repository.save_many(batch.awardees)
    return SuccessResponse()


@router.delete("/awardees/{awardee_id}", response_model=SuccessResponse)
def delete_awardee(awardee_id: int, repository: AwardeeRepository = Depends(get_repository)) -> SuccessResponse:
    repository.delete(awardee_id)
    return SuccessResponse()


@router.post("/upload-photo", response_model=UploadResult, response_model_exclude_none=True)
async def upload_photo(
    photo: Optional[UploadFile] = File(None),
    storage: PhotoStorage = Depends(get_photo_storage),
    config: Settings = Depends(get_settings),
):
    if photo is None or not photo.filename:
        return JSONResponse(status_code=400, content={"error": "No file uploaded"})

    data = await photo.read()
    await photo.close()
    if len(data) > config.max_upload_bytes:
        return JSONResponse(status_code=400, content={"error": "File too large"})

    filename = make_photo_filename(photo.filename)
    storage.upload(filename, data, photo.content_type)
    photo_url = storage.signed_url(filename, config.signed_url_expiry)
    return UploadResult(photo_path=filename, photo_url=photo_url)


@router.get("/custom-categories", response_model=CategoryList)
def get_custom_categories(repository: AwardeeRepository = Depends(get_repository)) -> CategoryList:
    return CategoryList(categories=repository.get_categories())


@router.post("/custom-categories", response_model=CategoriesSaved)
def save_custom_categories(payload: CategoryList, repository: AwardeeRepository = Depends(get_repository)) -> CategoriesSaved:
    return CategoriesSaved(categories=repository.set_categories(payload.categories))


app.include_router(router)
