import datetime as dt

from pydantic import BaseModel, ConfigDict


class FittingRequestResponse(BaseModel):
    task_id: str


class FittingResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    result_image_url: str
    created_at: dt.datetime


class ImageUploadResponse(BaseModel):
    url: str


class ErrorResponse(BaseModel):
    code: int
    message: str
