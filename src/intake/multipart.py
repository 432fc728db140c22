"""
Streaming multipart/form-data reader that applies the upload rules while the body arrives.

The body is fed through python-multipart's push parser chunk by chunk and
reading stops at the first part that breaks a rule.
"""
from io import BytesIO
from typing import AsyncIterator, List, Optional, Set, Tuple, Union
from loguru import logger
from python_multipart.exceptions import FormParserError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.datastructures import FormData, Headers, UploadFile

from .errors import UploadError
from .models import FILE_FIELDS, TEXT_FIELDS
from .validation import check_file_type, check_slot, file_too_large_message

MALFORMED_BODY_MESSAGE = "Malformed multipart form data"
BODY_TOO_LARGE_MESSAGE = "Request body too large"

# Room for the text fields, part headers and boundaries on top of five full images
FORM_OVERHEAD_BYTES = 1024 * 1024
MAX_FIELD_BYTES = 64 * 1024
MAX_FILE_PARTS = len(FILE_FIELDS) * 2
MAX_FIELD_PARTS = len(TEXT_FIELDS) * 4


def max_body_bytes(max_file_bytes: int) -> int:
    return len(FILE_FIELDS) * max_file_bytes + FORM_OVERHEAD_BYTES


def _decode(value: bytes) -> str:
    return value.decode("utf-8", errors="replace")


class _Part:
    def __init__(self):
        self.name = ""
        self.filename: Optional[str] = None
        self.content_type = ""
        self.content_disposition = b""
        self.headers: List[Tuple[bytes, bytes]] = []
        self.data = bytearray()
        self.discard = False


class BoundedFormParser:
    """Parses one request body into a FormData, holding at most max_file_bytes per file part.

    ``bytes_received`` counts what was pulled off the stream and
    ``bytes_buffered`` counts part data kept in memory.
    """

    def __init__(self, headers: Headers, stream: AsyncIterator[bytes], max_file_bytes: int,
                 max_body: Optional[int] = None, max_field_bytes: int = MAX_FIELD_BYTES):
        self.headers = headers
        self.stream = stream
        self.max_file_bytes = max_file_bytes
        self.max_body = max_body if max_body is not None else max_body_bytes(max_file_bytes)
        self.max_field_bytes = max_field_bytes
        self.items: List[Tuple[str, Union[str, UploadFile]]] = []
        self.bytes_received = 0
        self.bytes_buffered = 0
        self._filled: Set[str] = set()
        self._part = _Part()
        self._header_name = b""
        self._header_value = b""
        self._file_parts = 0
        self._field_parts = 0

    def _check_content_length(self) -> None:
        declared = self.headers.get("content-length")
        if declared is None:
            return
        try:
            length = int(declared)
        except ValueError:
            raise UploadError(MALFORMED_BODY_MESSAGE) from None
        if length > self.max_body:
            raise UploadError(BODY_TOO_LARGE_MESSAGE)

    def on_part_begin(self) -> None:
        self._part = _Part()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        field = self._header_name.lower()
        if field == b"content-disposition":
            self._part.content_disposition = self._header_value
        elif field == b"content-type":
            self._part.content_type = self._header_value.decode("latin-1")
        self._part.headers.append((field, self._header_value))
        self._header_name = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        part = self._part
        _, options = parse_options_header(part.content_disposition)
        if b"name" not in options:
            raise UploadError(MALFORMED_BODY_MESSAGE)
        part.name = _decode(options[b"name"])

        if b"filename" not in options:
            self._field_parts += 1
            if self._field_parts > MAX_FIELD_PARTS:
                raise UploadError(MALFORMED_BODY_MESSAGE)
            return

        self._file_parts += 1
        if self._file_parts > MAX_FILE_PARTS:
            raise UploadError(MALFORMED_BODY_MESSAGE)
        part.filename = _decode(options[b"filename"])
        # An unselected browser file input still posts an empty part
        if not part.filename:
            part.discard = True
            return
        check_slot(part.name, self._filled)
        check_file_type(part.filename, part.content_type)
        self._filled.add(part.name)

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        part = self._part
        if part.discard:
            return
        chunk = data[start:end]
        if part.filename is None:
            if len(part.data) + len(chunk) > self.max_field_bytes:
                raise UploadError(f"Field too large: {part.name}")
        elif len(part.data) + len(chunk) > self.max_file_bytes:
            raise UploadError(file_too_large_message(part.name, self.max_file_bytes))
        part.data.extend(chunk)
        self.bytes_buffered += len(chunk)

    def on_part_end(self) -> None:
        part = self._part
        if part.discard:
            return
        if part.filename is None:
            self.items.append((part.name, _decode(bytes(part.data))))
            return
        upload = UploadFile(
            file=BytesIO(part.data),
            size=len(part.data),
            filename=part.filename,
            headers=Headers(raw=part.headers),
        )
        self.items.append((part.name, upload))

    async def parse(self) -> FormData:
        """Read the whole body; raises UploadError on the first rule broken."""
        content_type, params = parse_options_header(self.headers.get("content-type"))
        if content_type.strip().lower() != b"multipart/form-data":
            logger.debug(f"Ignoring non-multipart body ({_decode(content_type) or 'no content type'})")
            return FormData()
        boundary = params.get(b"boundary")
        if not boundary:
            raise UploadError(MALFORMED_BODY_MESSAGE)
        self._check_content_length()

        callbacks = {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
        }
        try:
            parser = MultipartParser(boundary, callbacks)
            async for chunk in self.stream:
                self.bytes_received += len(chunk)
                if self.bytes_received > self.max_body:
                    raise UploadError(BODY_TOO_LARGE_MESSAGE)
                parser.write(chunk)
            parser.finalize()
        except FormParserError as e:
            raise UploadError(MALFORMED_BODY_MESSAGE) from e

        logger.debug(f"Parsed multipart body: {self.bytes_received} bytes received, {self.bytes_buffered} kept")
        return FormData(self.items)
