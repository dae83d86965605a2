"""
Paste envelope: how a Paste is packed into the bytes handed to the store.

Two formats exist, selected once per deployment:
    raw         stored bytes are exactly the paste text, no name
    structured  UTF-8 JSON {"name": ..., "text": <base64>}
"""
import base64
import binascii
import enum
import logging
import math

from pydantic import ValidationError

from blockpaste import crypto
from blockpaste.exceptions import FormatError
from blockpaste.models import MAX_NAME_LENGTH, Paste, PasteEnvelope

logger = logging.getLogger(__name__)


class PasteFormat(str, enum.Enum):
    RAW = "raw"
    STRUCTURED = "structured"

    @classmethod
    def parse(cls, value: str) -> "PasteFormat":
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"PASTE_FORMAT must be one of {choices}, got {value!r}") from None


def to_envelope(paste: Paste) -> PasteEnvelope:
    return PasteEnvelope(
        name=paste.name,
        text=base64.b64encode(paste.text).decode("ascii"),
    )


def max_encoded_size(max_text_size: int, fmt: PasteFormat) -> int:
    """
    Largest envelope a paste of `max_text_size` bytes can encode to.

    Accounts for encryption (nonce + tag), base64 expansion and the JSON
    wrapper around a maximum-length name.
    """
    text_size = max_text_size + crypto.NONCE_SIZE + crypto.TAG_SIZE
    if fmt is PasteFormat.RAW:
        return text_size

    wrapper = to_envelope(Paste(name="A" * MAX_NAME_LENGTH, text=b"")).model_dump_json()
    return len(wrapper.encode("utf-8")) + 4 * math.ceil(text_size / 3)


def encode(paste: Paste, fmt: PasteFormat) -> bytes:
    """
    Encode a paste into storable bytes.

    Args:
        paste: Paste to encode
        fmt: Deployment wire format

    Returns:
        Envelope bytes

    Raises:
        FormatError: If a named paste is encoded in the raw format
    """
    if fmt is PasteFormat.RAW:
        if paste.name is not None:
            raise FormatError(reason="raw format cannot carry a paste name")
        return paste.text

    return to_envelope(paste).model_dump_json().encode("utf-8")


def decode(data: bytes, fmt: PasteFormat) -> Paste:
    """
    Decode stored bytes back into a paste.

    Args:
        data: Envelope bytes fetched from the store
        fmt: Deployment wire format

    Returns:
        The decoded Paste

    Raises:
        FormatError: If structured data is malformed in any way
    """
    if fmt is PasteFormat.RAW:
        return Paste(text=data)

    try:
        envelope = PasteEnvelope.model_validate_json(data)
        text = base64.b64decode(envelope.text, validate=True)
        return Paste(name=envelope.name, text=text)
    except (ValidationError, binascii.Error, ValueError) as e:
        raise FormatError(reason=f"malformed paste envelope: {type(e).__name__}") from e
