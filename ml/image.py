"""
Image classification client.

Request:  POST multipart/form-data with field image_url
Response: JSON object with one of predicted_class / classification / class.
"""
from typing import Any, Dict, Optional

from loguru import logger

from .base import MLClient, MLClientError

# Checked in order; the first string value wins
CLASS_FIELDS = ("predicted_class", "classification", "class")


class ImageClassificationError(MLClientError):
    """The image classification service could not be reached or answered badly."""
    pass


class ImageClassificationClient(MLClient):
    """Client for the external image classification model."""

    def build_request(self, value: str) -> Dict[str, Any]:
        # (None, value) makes httpx send a plain form field as multipart
        return {"files": {"image_url": (None, value)}}

    async def classify(self, image_url: str) -> Optional[str]:
        """
        Classify an image by URL.

        Args:
            image_url: Public URL of the image

        Returns:
            Predicted class, or None if the image URL is empty or the
            response has no recognized field

        Raises:
            ImageClassificationError: If the service call fails
        """
        if not image_url:
            return None

        try:
            response = await self.send(image_url)
        except MLClientError as e:
            raise ImageClassificationError(str(e), e.reason) from e

        for field_name in CLASS_FIELDS:
            value = response.payload.get(field_name)
            if isinstance(value, str):
                classified = value.strip()
                logger.info(f"image_classification: {field_name}: {classified}")
                return classified

        logger.warning(f"image_classification: could not extract predicted class from response {response.payload}")
        return None
