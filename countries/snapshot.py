import logging
import os
import tempfile

from django.conf import settings
from django.db import DatabaseError
from PIL import Image, ImageDraw, ImageFont

from . import store, utils


SUMMARY_FILENAME = "summary.png"
IMAGE_SIZE = (800, 500)
TOP_N = 5

logger = logging.getLogger(__name__)


def get_summary_image_path():
    """Return full path to the summary image in the cache directory."""
    return os.path.join(str(settings.SUMMARY_CACHE_DIR), SUMMARY_FILENAME)


def _load_fonts():
    try:
        return ImageFont.truetype("DejaVuSans.ttf", 28), ImageFont.truetype("DejaVuSans.ttf", 20)
    except OSError:
        font = ImageFont.load_default()
        return font, font


def generate_summary_image(total_countries, top_countries, timestamp, path=None):
    """
    Draw the summary PNG: title, total country count, the top countries by
    estimated GDP and the last refresh timestamp. Overwrites any previous image.
    """
    path = path or get_summary_image_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    img = Image.new("RGB", IMAGE_SIZE, color="white")
    draw = ImageDraw.Draw(img)
    font_title, font_body = _load_fonts()

    draw.text((20, 20), "Country Summary", fill="black", font=font_title)
    draw.text((20, 70), f"Total countries: {total_countries}", fill="black", font=font_body)
    draw.text((20, 120), f"Top {TOP_N} countries by estimated GDP:", fill="black", font=font_body)

    y = 160
    if not top_countries:
        draw.text((40, y), "No GDP data available.", fill="gray", font=font_body)
    for rank, country in enumerate(top_countries[:TOP_N], start=1):
        draw.text((40, y), f"{rank}. {country.name} - {country.estimated_gdp or 0:.2f}", fill="blue", font=font_body)
        y += 30

    draw.text((20, 400), f"Last refreshed: {timestamp.isoformat()}", fill="black", font=font_body)

    # readers of path only ever see a complete image
    fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path), prefix=".summary-", suffix=".png")
    try:
        with os.fdopen(fd, "wb") as f:
            img.save(f, "PNG")
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
    return path


def render_summary_snapshot():
    timestamp = store.latest_refresh_timestamp() or utils.get_now()
    return generate_summary_image(
        store.count_countries(),
        store.top_countries_by_gdp(TOP_N),
        timestamp,
    )


def render_summary_snapshot_safely():
    """Render the snapshot; failures are logged and reported as False, never raised."""
    try:
        path = render_summary_snapshot()
    except (OSError, ValueError, DatabaseError):
        logger.exception("Summary image generation failed")
        return False
    logger.info("Summary image written to %s", path)
    return True
