from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image


def render_png(payload: str, *, box_size: int = 10, border: int = 2) -> io.BytesIO:
    """Render ``payload`` as a PNG QR image, returned as a rewound buffer."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def decode_pil_image(img: Image.Image) -> list[str]:
    """Return every QR text found in the image, in pyzbar's order."""
    # pyzbar loads the zbar shared library on import; only decoding needs it
    from pyzbar.pyzbar import decode as pyzbar_decode

    texts = []
    for symbol in pyzbar_decode(img.convert("RGB")):
        try:
            texts.append(symbol.data.decode("utf-8").strip())
        except UnicodeDecodeError:
            continue
    return [t for t in texts if t]


def decode_image(stream: BinaryIO) -> list[str]:
    return decode_pil_image(Image.open(stream))
