# electra/utils/images.py

"""
Работа с изображениями заказов на Cloudinary.

Загрузка при создании заказа идёт с параметрами хранилища (папка, форматы,
трансформации), при обновлении - прямым вызовом upload. Удаление выполняется
по public_id, полученному из имени файла в URL.
"""

import cloudinary
import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from electra.config import settings

ALLOWED_FORMATS = ["jpg", "jpeg", "png", "pdf"]

TRANSFORMATION = [
    {"width": 1000, "crop": "limit"},
    {"quality": "auto:good"},
    {"fetch_format": "auto"},
    {"flags": "lossy"},
]


class ImageUploadError(Exception):
    pass


def configure_cloudinary():
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


def _image_url(result: dict) -> str:
    url = result.get("secure_url") or result.get("url")
    if not url:
        raise ImageUploadError("Cloudinary не вернул URL изображения")
    return url


async def store_order_image(upload: UploadFile) -> str:
    """Загрузка нового изображения заказа с параметрами хранилища."""
    try:
        result = await run_in_threadpool(
            cloudinary.uploader.upload,
            upload.file,
            folder=settings.ORDER_IMAGE_FOLDER,
            allowed_formats=ALLOWED_FORMATS,
            transformation=TRANSFORMATION,
        )
    except Exception as e:
        raise ImageUploadError(str(e)) from e
    return _image_url(result)


async def upload_image(upload: UploadFile) -> str:
    """Прямая загрузка файла (используется при обновлении заказа)."""
    try:
        result = await run_in_threadpool(
            cloudinary.uploader.upload,
            upload.file,
            folder=settings.ORDER_IMAGE_FOLDER,
        )
    except Exception as e:
        raise ImageUploadError(str(e)) from e
    return _image_url(result)


def public_id_from_url(url: str | None) -> str | None:
    """
    https://res.cloudinary.com/x/image/upload/v1/sarathi-orders/abc.jpg
    -> sarathi-orders/abc
    """
    if not url:
        return None
    filename = url.rstrip("/").split("/")[-1]
    name = filename.split(".")[0]
    if not name:
        return None
    return f"{settings.ORDER_IMAGE_FOLDER}/{name}"


async def delete_image(public_id: str) -> dict:
    return await run_in_threadpool(cloudinary.uploader.destroy, public_id)
