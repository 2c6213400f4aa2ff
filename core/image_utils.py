"""Pure image transformation functions for page caching."""

import io
import math

from PIL import Image


def calculate_scale_factor(
    width: int, height: int, max_pixels: int
) -> float:
    """Return downscale factor to fit within max_pixels. Always <= 1.0."""
    total = width * height
    if total <= max_pixels:
        return 1.0
    return math.sqrt(max_pixels / total)


def fit_within(image: Image.Image, max_pixels: int) -> Image.Image:
    """Downscale image to fit within max_pixels using Lanczos. Never upscales."""
    width, height = image.size
    factor = calculate_scale_factor(width, height, max_pixels)
    if factor >= 1.0:
        return image

    new_w = max(1, int(width * factor))
    new_h = max(1, int(height * factor))
    return image.resize((new_w, new_h), Image.LANCZOS)


def convert_rgba_to_rgb(image: Image.Image) -> Image.Image:
    """Composite RGBA onto white background, returning RGB."""
    if image.mode != "RGBA":
        return image.convert("RGB") if image.mode != "RGB" else image

    background = Image.new("RGB", image.size, (255, 255, 255))
    background.paste(image, mask=image.split()[3])
    return background


def encode_to_png(image: Image.Image) -> bytes:
    """Encode PIL Image to PNG bytes. Handles RGBA → RGB conversion."""
    rgb_image = convert_rgba_to_rgb(image)
    buffer = io.BytesIO()
    rgb_image.save(buffer, format="PNG")
    return buffer.getvalue()
