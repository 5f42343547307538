"""
PDF and JPG rendering of certificates.

HTML certificates are reduced to their text and laid out on a landscape
A4 page.  Image certificates are composed with Pillow: the background
(data URI, HTTP URL or storage path) is scaled to the 800x600 editor
canvas and every placeholder box is drawn at its position with its
font size, colour, alignment and rotation.  Any failure surfaces as
``ArtifactRenderError``.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from io import BytesIO

import requests
from django.core.files.storage import default_storage
from django.utils.html import strip_tags
from PIL import Image, ImageColor, ImageDraw, ImageFont
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from common.errors import ArtifactRenderError

from .models import CertificateTemplate

logger = logging.getLogger(__name__)

CANVAS_SIZE = (800, 600)
DATA_URI_RE = re.compile(r"^data:image/[\w.+-]+;base64,(?P<data>.+)$", re.DOTALL)
BLOCK_TAGS_RE = re.compile(r"<\s*(br|/p|/div|/h[1-6]|/li|/tr)\s*/?>", re.IGNORECASE)
STYLE_RE = re.compile(r"<(style|script|title)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)

_RENDER_ERRORS = (OSError, ValueError, TypeError, KeyError, requests.RequestException)


def text_lines(html: str) -> list[str]:
    """Visible text of an HTML certificate, one entry per block."""
    html = STYLE_RE.sub("", html or "")
    html = BLOCK_TAGS_RE.sub("\n", html)
    lines = [" ".join(line.split()) for line in strip_tags(html).splitlines()]
    return [line for line in lines if line]


def _layout(certificate) -> dict:
    data = json.loads(certificate.rendered_content or "{}")
    if isinstance(data, list):
        data = {"placeholders": data}
    return data


def _load_background(source: str) -> Image.Image:
    if not source:
        return Image.new("RGB", CANVAS_SIZE, "white")
    match = DATA_URI_RE.match(source)
    if match:
        try:
            raw = base64.b64decode(match.group("data"))
        except binascii.Error as exc:
            raise ValueError("Invalid background data URI") from exc
    elif source.startswith(("http://", "https://")):
        response = requests.get(source, timeout=10)
        response.raise_for_status()
        raw = response.content
    else:
        with default_storage.open(source, "rb") as fh:
            raw = fh.read()
    with Image.open(BytesIO(raw)) as img:
        return img.convert("RGB").resize(CANVAS_SIZE)


def _font(size: int, bold: bool):
    name = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        return ImageFont.load_default(size=size)


def _colour(value):
    try:
        return ImageColor.getrgb(value or "#000000")
    except ValueError:
        return (0, 0, 0)


def _draw_box(image: Image.Image, box: dict) -> None:
    text = str(box.get("text") or "")
    if not text:
        return
    x, y = int(float(box.get("x", 0))), int(float(box.get("y", 0)))
    width = max(int(float(box.get("width", 200))), 1)
    height = max(int(float(box.get("height", 40))), 1)
    font = _font(int(float(box.get("fontSize", 24))), str(box.get("fontWeight", "")).lower() in ("bold", "700"))

    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    align = box.get("textAlign", "center")
    if align == "left":
        tx = 0
    elif align == "right":
        tx = width - (right - left)
    else:
        tx = (width - (right - left)) / 2
    ty = (height - (bottom - top)) / 2 - top
    draw.text((tx - left, ty), text, fill=_colour(box.get("color")), font=font)

    rotation = float(box.get("rotation") or 0)
    if rotation:
        layer = layer.rotate(-rotation, expand=True, resample=Image.Resampling.BICUBIC)
    px = int(x + width / 2 - layer.width / 2)
    py = int(y + height / 2 - layer.height / 2)
    image.paste(layer, (px, py), layer)


def _compose_image(certificate) -> Image.Image:
    layout = _layout(certificate)
    template = certificate.template
    background = layout.get("backgroundImage") or (template.background_image if template else "")
    image = _load_background(background)
    for box in layout.get("placeholders", []):
        if isinstance(box, dict):
            _draw_box(image, box)
    return image


def _text_image(certificate) -> Image.Image:
    image = Image.new("RGB", CANVAS_SIZE, "white")
    draw = ImageDraw.Draw(image)
    draw.rectangle([15, 15, CANVAS_SIZE[0] - 15, CANVAS_SIZE[1] - 15], outline=(138, 121, 93), width=5)
    lines = text_lines(certificate.rendered_content)
    y = 80
    for index, line in enumerate(lines):
        font = _font(30 if index == 0 else 20, index == 0)
        width = draw.textlength(line, font=font)
        draw.text(((CANVAS_SIZE[0] - width) / 2, y), line, fill="black", font=font)
        y += 60 if index == 0 else 38
    return image


def render_image(certificate) -> Image.Image:
    try:
        if certificate.template_type == CertificateTemplate.TYPE_IMAGE:
            return _compose_image(certificate)
        return _text_image(certificate)
    except _RENDER_ERRORS as exc:
        logger.error("Rendering certificate %s failed: %s", certificate.certificate_number, exc)
        raise ArtifactRenderError() from exc


def render_jpg(certificate) -> bytes:
    image = render_image(certificate)
    buffered = BytesIO()
    image.convert("RGB").save(buffered, format="JPEG", quality=92)
    return buffered.getvalue()


def render_pdf(certificate) -> bytes:
    if certificate.template_type == CertificateTemplate.TYPE_IMAGE:
        image = render_image(certificate)
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=CANVAS_SIZE)
        c.setTitle(certificate.certificate_number)
        c.drawImage(ImageReader(image), 0, 0, width=CANVAS_SIZE[0], height=CANVAS_SIZE[1])
        c.showPage()
        c.save()
        return buffer.getvalue()

    try:
        w, h = landscape(A4)
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(w, h))
        c.setTitle(certificate.certificate_number)
        c.setStrokeColorRGB(0.54, 0.47, 0.36)
        c.setLineWidth(4)
        c.rect(10 * mm, 10 * mm, w - 20 * mm, h - 20 * mm)

        y = h - 40 * mm
        for index, line in enumerate(text_lines(certificate.rendered_content)):
            if index == 0:
                c.setFont("Helvetica-Bold", 28)
                c.drawCentredString(w / 2, y, line)
                y -= 18 * mm
            else:
                c.setFont("Helvetica", 16)
                c.drawCentredString(w / 2, y, line)
                y -= 11 * mm
        c.showPage()
        c.save()
        return buffer.getvalue()
    except _RENDER_ERRORS as exc:
        logger.error("Rendering certificate %s failed: %s", certificate.certificate_number, exc)
        raise ArtifactRenderError() from exc
