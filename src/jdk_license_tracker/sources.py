"""Read raw inputs from files, standard input and zip archives.

Every input is bounded in size before it reaches the parser. Zip archives
are checked entry by entry for decompression bombs, and only
``.properties`` entries are read from them.
"""

import logging
import sys
import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO, Optional, Union

from jdk_license_tracker.exceptions import InputError

logger = logging.getLogger(__name__)

STDIN_NAME = "-"

MAX_TEXT_BYTES = 1024 * 1024
MAX_ENTRY_BYTES = 100 * 1024 * 1024
MAX_COMPRESSION_RATIO = 100

NamedInput = tuple[str, str]


def decode(data: bytes) -> str:
    """Decode input bytes as UTF-8, falling back to ISO-8859-1.

    ISO-8859-1 is the historical encoding of ``.properties`` files and
    decodes any byte sequence.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("iso-8859-1")


def _read_limited(stream: BinaryIO, name: str) -> str:
    data = stream.read(MAX_TEXT_BYTES + 1)
    if len(data) > MAX_TEXT_BYTES:
        raise InputError(f"input is larger than {MAX_TEXT_BYTES} bytes", name)
    return decode(data)


def check_zip_entry(info: zipfile.ZipInfo) -> None:
    """Reject archive entries that look like decompression bombs.

    Args:
        info: Archive entry metadata.

    Raises:
        InputError: If the entry is too large or compresses too well.
    """
    if info.file_size > MAX_ENTRY_BYTES:
        raise InputError(f"zip bomb detected: entry too large ({info.file_size} bytes)", info.filename)
    if info.compress_size > 0:
        ratio = info.file_size / info.compress_size
        if ratio > MAX_COMPRESSION_RATIO:
            raise InputError(
                f"zip bomb detected: compression ratio {ratio:.1f} is above {MAX_COMPRESSION_RATIO}",
                info.filename,
            )


def read_zip(path: Path) -> list[NamedInput]:
    """Read every ``.properties`` entry of a zip archive.

    Args:
        path: Archive path.

    Returns:
        (name, text) pairs named ``archive.zip!entry.properties``.

    Raises:
        InputError: If the archive is invalid or an entry fails the bomb
            checks or the size limit, or cannot be extracted.
    """
    inputs = []
    try:
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or not info.filename.lower().endswith(".properties"):
                    continue
                check_zip_entry(info)
                name = f"{path.name}!{info.filename}"
                try:
                    with archive.open(info) as stream:
                        inputs.append((name, _read_limited(stream, name)))
                except (RuntimeError, NotImplementedError, OSError) as e:
                    # encrypted entries, unsupported compression methods
                    raise InputError(f"cannot read archive entry: {e}", name) from e
    except zipfile.BadZipFile as e:
        raise InputError(f"not a valid zip archive: {e}", str(path)) from e

    logger.debug("Read %d properties entries from %s", len(inputs), path)
    return inputs


def read_path(path: Path) -> list[NamedInput]:
    """Read one file, expanding zip archives into their entries.

    Raises:
        InputError: If the file cannot be read or is too large.
    """
    if zipfile.is_zipfile(path):
        return read_zip(path)

    try:
        with open(path, "rb") as f:
            return [(str(path), _read_limited(f, str(path)))]
    except OSError as e:
        raise InputError(f"cannot read file: {e.strerror or e}", str(path)) from e


def collect_inputs(
    paths: Iterable[Union[str, Path]], stdin: Optional[BinaryIO] = None
) -> list[NamedInput]:
    """Collect raw inputs from paths, ``-`` meaning standard input.

    Args:
        paths: Files, zip archives, or ``-``.
        stdin: Binary stream used for ``-``. Defaults to ``sys.stdin.buffer``.

    Returns:
        (name, text) pairs in the order given.

    Raises:
        InputError: If any input cannot be read or fails a safety limit.
    """
    inputs: list[NamedInput] = []
    for item in paths:
        if str(item) == STDIN_NAME:
            stream = stdin if stdin is not None else sys.stdin.buffer
            inputs.append((STDIN_NAME, _read_limited(stream, STDIN_NAME)))
            continue

        path = Path(item)
        if not path.is_file():
            raise InputError("no such file", str(path))
        inputs.extend(read_path(path))
    return inputs
