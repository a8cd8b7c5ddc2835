"""
ML Module - Clients for the optional external ML services.

Usage:
    from ml import get_urgency_client

    client = get_urgency_client()   # None when ML_API_URL is not set
    if client:
        response = await client.send("Water main burst on 5th street")
        print(response.payload)

Services:
- urgency: text -> score / label / urgency / confidence
- image: image URL -> predicted class
"""
from typing import Optional

import httpx

from config import settings
from .base import MLClient, MLClientError, MLResponse
from .urgency import UrgencyAPIClient
from .image import ImageClassificationClient, ImageClassificationError


def get_urgency_client(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[UrgencyAPIClient]:
    """
    Get the text urgency client.

    Args:
        url: Endpoint URL. Defaults to settings.ML_API_URL
        timeout: Per-call deadline in seconds. Defaults to settings.ML_TEXT_TIMEOUT
        transport: Optional httpx transport (tests)

    Returns:
        Configured client, or None if no endpoint is configured
    """
    url = url if url is not None else settings.ML_API_URL
    if not url:
        return None
    return UrgencyAPIClient(
        url=url,
        timeout=timeout or settings.ML_TEXT_TIMEOUT,
        timeout_buffer=settings.ML_CLIENT_TIMEOUT_BUFFER,
        transport=transport,
    )


def get_image_client(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[ImageClassificationClient]:
    """
    Get the image classification client.

    Returns:
        Configured client, or None if IMAGE_CLASSIFICATION_API_URL is not set
    """
    url = url if url is not None else settings.IMAGE_CLASSIFICATION_API_URL
    if not url:
        return None
    return ImageClassificationClient(
        url=url,
        timeout=timeout or settings.ML_IMAGE_TIMEOUT,
        timeout_buffer=settings.ML_CLIENT_TIMEOUT_BUFFER,
        transport=transport,
    )


__all__ = [
    "get_urgency_client",
    "get_image_client",
    "MLClient",
    "MLClientError",
    "MLResponse",
    "UrgencyAPIClient",
    "ImageClassificationClient",
    "ImageClassificationError",
]
