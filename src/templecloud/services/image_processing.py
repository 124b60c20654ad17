"""Resizing and favicon generation with Pillow.

These functions are CPU-bound; the upload service runs them in a worker
thread. Undecodable input raises ``PIL.UnidentifiedImageError`` (an
``OSError``).
"""

import io

from PIL import Image, ImageDraw, ImageOps

JPEG_QUALITY = 85
FAVICON_SIZE = 32
FAVICON_CORNER_RATIO = 0.2

LOGO_MAX = (500, 500)
COVER_MAX = (1920, 1080)
GALLERY_MAX = (1200, 800)


def _open(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    # Respect camera orientation before resizing
    return ImageOps.exif_transpose(image)


def resize_within(data: bytes, max_size: tuple[int, int], quality: int = JPEG_QUALITY) -> bytes:
    """Fit the image inside ``max_size`` (never enlarging) and encode as progressive JPEG."""
    image = _open(data)
    if image.width > max_size[0] or image.height > max_size[1]:
        image.thumbnail(max_size, Image.Resampling.LANCZOS)

    if image.mode in ("RGBA", "LA", "P"):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        image = background
    elif image.mode != "RGB":
        image = image.convert("RGB")

    out = io.BytesIO()
    image.save(out, format="JPEG", quality=quality, progressive=True, optimize=True)
    return out.getvalue()


def make_favicon(data: bytes, size: int = FAVICON_SIZE) -> bytes:
    """Centre-crop to a ``size``x``size`` square with rounded corners, as PNG."""
    image = _open(data).convert("RGBA")
    square = ImageOps.fit(image, (size, size), Image.Resampling.LANCZOS, centering=(0.5, 0.5))

    radius = round(size * FAVICON_CORNER_RATIO)
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, size - 1, size - 1), radius=radius, fill=255)
    square.putalpha(mask)

    out = io.BytesIO()
    square.save(out, format="PNG")
    return out.getvalue()
