"""
Paste routes.
Handles usage text, create (POST) and fetch (GET) operations.
"""
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, Response

from blockpaste import crypto, envelope
from blockpaste.config import Settings
from blockpaste.envelope import PasteFormat
from blockpaste.exceptions import PasteNotFoundError, PasteValidationError
from blockpaste.models import Paste, is_valid_name
from blockpaste.store import PASTE_PREFIX, PasteStore

router = APIRouter()
logger = logging.getLogger(__name__)

CID_RE = re.compile(r"^[A-Za-z0-9]+$")
JSON_MEDIA_TYPE = "application/json"

USAGE_TEXT = """blockpaste -- a content-addressed pastebin with optional encryption

Usage:
$ curl {base} --data 'paste text goes here'
--> '/paste/<PASTE_ID>'

$ curl {base}/paste/<PASTE_ID>
--> 'paste text goes here'

$ curl {base}/?key=awful_password --data 'paste text goes here'
--> '/paste/<PASTE_ID>'

$ curl {base}/paste/<PASTE_ID>?key=awful_password
--> 'paste text goes here'
"""

NAMED_USAGE_TEXT = """
$ curl {base}/my.paste.name --data 'paste text goes here'
--> '/paste/<PASTE_ID>'

$ curl -H 'Accept: application/json' {base}/paste/<PASTE_ID>
--> '{{"name":"my.paste.name","text":"<BASE64_TEXT>"}}'
"""


def build_usage_text(settings: Settings) -> str:
    scheme = "https" if settings.TLS_CERT_FILE and settings.TLS_KEY_FILE else "http"
    base = f"{scheme}://{settings.HTTP_HOSTNAME}"
    usage = USAGE_TEXT.format(base=base)
    if settings.PASTE_FORMAT is PasteFormat.STRUCTURED:
        usage += NAMED_USAGE_TEXT.format(base=base)
    return usage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_paste_store(request: Request) -> PasteStore:
    return request.app.state.paste_store


async def read_limited_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, refusing anything over `limit` bytes.

    A declared Content-Length over the limit is rejected before reading;
    otherwise the stream is aborted as soon as the running total exceeds it.

    Raises:
        PasteValidationError: 413 if the body is too large
    """
    too_large = PasteValidationError(
        f"Paste exceeds maximum size of {limit} bytes", status_code=413
    )

    declared = request.headers.get("content-length")
    if declared is not None:
        try:
            declared_size = int(declared)
        except ValueError as e:
            raise PasteValidationError("Invalid Content-Length header") from e
        if declared_size > limit:
            raise too_large

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise too_large
    return bytes(body)


def _wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    content_type = request.headers.get("content-type", "")
    return JSON_MEDIA_TYPE in accept or JSON_MEDIA_TYPE in content_type


@router.get("/", response_class=PlainTextResponse)
async def usage(request: Request) -> str:
    """Static usage message."""
    return request.app.state.usage_text


@router.get("/paste/{cid}")
async def fetch_paste(
    cid: str,
    request: Request,
    key: Optional[str] = Query(None),
    store: PasteStore = Depends(get_paste_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Fetch a paste by content identifier.

    Args:
        cid: Content identifier from a previous POST
        request: HTTP request context
        key: Optional passphrase; when present the paste text is decrypted

    Returns:
        Raw paste text, or the JSON envelope when requested in structured format

    Raises:
        PasteNotFoundError: Paste absent or lookup timed out (404)
        AuthenticationError: Decryption failed (500)
        FormatError: Stored envelope malformed (502)
    """
    if not CID_RE.fullmatch(cid):
        raise PasteValidationError("Invalid paste identifier")

    data = await store.get(PASTE_PREFIX + cid)
    paste = envelope.decode(data, settings.PASTE_FORMAT)

    # Plaintext pastes fetched with a key fail authentication here
    if key:
        paste = Paste(name=paste.name, text=crypto.decrypt(paste.text, key))

    if settings.PASTE_FORMAT is PasteFormat.STRUCTURED and _wants_json(request):
        return Response(
            content=envelope.to_envelope(paste).model_dump_json(),
            media_type=JSON_MEDIA_TYPE,
        )
    return Response(content=paste.text, media_type="text/plain")


async def _create_paste(
    request: Request,
    name: Optional[str],
    key: Optional[str],
    store: PasteStore,
    settings: Settings,
) -> PlainTextResponse:
    body = await read_limited_body(request, settings.MAX_PASTE_SIZE)

    text = crypto.encrypt(body, key) if key else body
    paste = Paste(name=name, text=text)

    path = await store.put(envelope.encode(paste, settings.PASTE_FORMAT))
    logger.info(f"Paste {path} stored ({len(body)} bytes, encrypted={bool(key)})")
    return PlainTextResponse(path)


@router.post("/", response_class=PlainTextResponse)
async def create_paste(
    request: Request,
    key: Optional[str] = Query(None),
    store: PasteStore = Depends(get_paste_store),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """
    Create a new unnamed paste from the request body.

    Returns:
        Public path of the stored paste, /paste/<id>
    """
    return await _create_paste(request, None, key, store, settings)


@router.post("/{name}", response_class=PlainTextResponse)
async def create_named_paste(
    name: str,
    request: Request,
    key: Optional[str] = Query(None),
    store: PasteStore = Depends(get_paste_store),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """
    Create a new named paste (structured format only).

    The name is checked before the body is read or the store is touched.
    """
    if settings.PASTE_FORMAT is not PasteFormat.STRUCTURED:
        raise PasteNotFoundError("Not Found", reason="named pastes need the structured format")
    if not is_valid_name(name):
        raise PasteValidationError("Invalid paste name")
    return await _create_paste(request, name, key, store, settings)
