"""
Image generation routes.

Standalone text-to-image (and image edit) endpoint, independent of any
conversation.
"""

import logging
from datetime import timedelta

from quart import Blueprint, request
from quart_rate_limiter import rate_limit

from application.models.request_models import GenerateImageRequest
from application.models.response_models import GeneratedImageResponse
from application.routes.common.rate_limiting import default_rate_limit_key
from application.routes.common.response import APIResponse
from application.routes.common.validation import validate_json
from application.services.service_factory import get_service_factory
from common.constants import RATE_LIMIT_IMAGE_GENERATION
from common.exception import GatewayError, NoImageDataError
from common.middleware import require_auth

logger = logging.getLogger(__name__)

images_bp = Blueprint("images", __name__)


@images_bp.route("/generate-image", methods=["POST"])
@rate_limit(RATE_LIMIT_IMAGE_GENERATION, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
@validate_json(GenerateImageRequest)
async def generate_image():
    """
    Generate an image from a prompt, optionally editing a source image.

    Request body:
        {"prompt": "a red fox", "sourceImage": "data:image/png;base64,..."}

    Returns:
        200: {"b64_json": "...", "mimeType": "image/png"}
        400: Missing prompt or undecodable source image
        500: No image data in the model response, or the model call failed
    """
    data: GenerateImageRequest = request.validated_data

    gateway = get_service_factory().model_gateway
    try:
        image = await gateway.generate_image(data.prompt, source_image=data.source_image)
    except NoImageDataError:
        logger.warning(f"No image data returned for prompt: {data.prompt[:80]}")
        return APIResponse.internal_error("No image data in response")
    except GatewayError as e:
        logger.error(f"Error generating image: {e}", exc_info=True)
        return APIResponse.internal_error("Failed to generate image")

    response = GeneratedImageResponse(b64_json=image.b64_data, mime_type=image.mime_type)
    return APIResponse.success(response.model_dump(by_alias=True))
