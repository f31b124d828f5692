from __future__ import annotations

import json
import logging
import re
from typing import Iterator, List, TextIO

from pydantic import ValidationError

from applytime.errors import StreamDecodeError
from applytime.events import Message

logger = logging.getLogger(__name__)

_DECODER = json.JSONDecoder()
_NON_WS = re.compile(r"\S")
_STRUCTURAL = re.compile(r'[][{}"\\]')

# Well below the interpreter recursion limit the json decoder runs into.
MAX_DEPTH = 512
MAX_RECORD_CHARS = 16 * 1024 * 1024


def _to_message(obj: object, line: int) -> Message:
    if not isinstance(obj, dict):
        raise StreamDecodeError(line, f"expected a JSON object, got {type(obj).__name__}")
    try:
        return Message.from_obj(obj)
    except ValidationError as exc:
        raise StreamDecodeError(line, f"invalid record: {exc.errors()[0].get('msg', exc)}") from exc


def _decode(text: str, line: int) -> object:
    try:
        return _DECODER.decode(text)
    except json.JSONDecodeError as exc:
        raise StreamDecodeError(line, exc.msg) from exc
    except RecursionError as exc:
        raise StreamDecodeError(line, "nesting too deep") from exc


def _read_line(stream: TextIO, lineno: int) -> str:
    try:
        return stream.readline()
    except UnicodeDecodeError as exc:
        raise StreamDecodeError(lineno, f"invalid UTF-8: {exc.reason}") from exc


def read_messages(stream: TextIO) -> Iterator[Message]:
    """
    Decode a stream of JSON values into Message objects, lazily.

    Values may be one per line, several per line, or span lines. Each line
    is scanned once for brackets and string boundaries; a value is decoded
    only when its brackets balance. The generator returns at end-of-stream
    and raises StreamDecodeError on the first malformed record; values
    decoded before it have already been yielded.
    """
    lineno = 0
    start_line = 0
    pending = False
    parts: List[str] = []
    size = 0
    depth = 0
    in_string = False

    while True:
        line = _read_line(stream, lineno + 1)
        if not line:
            break
        lineno += 1
        pos = 0

        while pos < len(line):
            if not pending:
                m = _NON_WS.search(line, pos)
                if m is None:
                    break
                pos = m.start()
                if line[pos] not in "{[":
                    # Scalars never carry a record.
                    try:
                        obj, _ = _DECODER.raw_decode(line, pos)
                    except json.JSONDecodeError as exc:
                        raise StreamDecodeError(lineno, exc.msg) from exc
                    raise StreamDecodeError(lineno, f"expected a JSON object, got {type(obj).__name__}")
                pending, start_line, depth, in_string, size = True, lineno, 0, False, 0

            end = -1
            skip = -1
            for tok in _STRUCTURAL.finditer(line, pos):
                i, c = tok.start(), tok.group()
                if in_string:
                    if i == skip:
                        continue
                    if c == "\\":
                        skip = i + 1
                    elif c == '"':
                        in_string = False
                elif c == '"':
                    in_string = True
                elif c in "{[":
                    depth += 1
                    if depth > MAX_DEPTH:
                        raise StreamDecodeError(start_line, "nesting too deep")
                elif c in "}]":
                    depth -= 1
                    if depth == 0:
                        end = i + 1
                        break

            if end < 0:
                if in_string:
                    raise StreamDecodeError(start_line, "unterminated string")
                size += len(line) - pos
                if size > MAX_RECORD_CHARS:
                    raise StreamDecodeError(start_line, f"record larger than {MAX_RECORD_CHARS} characters")
                parts.append(line[pos:])
                break

            parts.append(line[pos:end])
            text = "".join(parts)
            parts = []
            pending = False
            pos = end
            yield _to_message(_decode(text, start_line), start_line)

    if pending:
        raise StreamDecodeError(start_line, "unexpected end of stream")

    logger.debug("stream exhausted", extra={"extra_data": {"lines": lineno}})
