# =============================================================================
# core/image_generation.py  -  The "generate-image" tool (Hugging Face)
# =============================================================================
#
# Runs a fast text-to-image model through the Hugging Face inference API and
# returns the picture as a base64 PNG content block.
#
# CREDENTIAL:
#   ToolContext.image_client() raises MissingCredentialError when no HF token
#   is configured.  Only this tool needs it; the other five keep working.
#
# CLIENT:
#   The AsyncInferenceClient is created once per ToolContext and reused.
#   text_to_image() returns a PIL image, which is re-encoded as PNG here.
# =============================================================================

import base64
import io
import logging
from typing import Any

from core.context import ToolContext
from core.errors import ImageGenerationError
from core.models import InvocationResult
from core.schemas import ImageInput

logger = logging.getLogger(__name__)

IMAGE_MODEL = "black-forest-labs/FLUX.1-schnell"
NUM_INFERENCE_STEPS = 5  # schnell is tuned for very few steps
IMAGE_MIME_TYPE = "image/png"


def encode_png(image: Any) -> str:
    """Base64-encode a PIL image (or raw bytes) as PNG data."""
    if isinstance(image, (bytes, bytearray)):
        raw = bytes(image)
    else:
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        raw = buffer.getvalue()
    return base64.b64encode(raw).decode("ascii")


async def generate_image(args: ImageInput, context: ToolContext) -> InvocationResult:
    """Generate one image for ``args.prompt``.

    Raises:
        MissingCredentialError: no HF token is configured.
        ImageGenerationError: the inference call (or PNG encoding) failed.
    """
    client = context.image_client()

    logger.info("Generating image with %s (%d steps)", IMAGE_MODEL, NUM_INFERENCE_STEPS)
    try:
        image = await client.text_to_image(
            args.prompt,
            model=IMAGE_MODEL,
            num_inference_steps=NUM_INFERENCE_STEPS,
        )
        data = encode_png(image)
    except Exception as exc:
        raise ImageGenerationError(str(exc) or type(exc).__name__) from exc

    return InvocationResult.image(data, mime_type=IMAGE_MIME_TYPE)
