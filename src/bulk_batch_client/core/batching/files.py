# -*- coding: utf-8 -*-

import logging
from pathlib import Path

from ..errors import FileReadError, InvalidFileTypeError
from ..utils.misc import mask_path
from .models import ContentType


def check_batch_file_type(path: str | Path, content_type: ContentType) -> Path:
    """
    Ensure the upload file extension matches the job content type.

    Args:
        path (str | Path): Path to the upload file.
        content_type (ContentType): Content type of the job.

    Returns:
        Path: The path as a Path object.

    Raises:
        InvalidFileTypeError: If the extension does not match. No I/O is
            attempted in that case.
    """
    path = Path(path)
    expected = ContentType(content_type).file_extension
    if path.suffix.lower() != expected:
        raise InvalidFileTypeError(path, expected)
    return path


def read_batch_file(
        path: str | Path,
        content_type: ContentType = ContentType.XML,
        encoding: str = "utf-8"
    ) -> str:
    """
    Read a whole batch upload file.

    The file is opened in a `with` block so the handle is released on every
    exit path, including decoding failures while reading.

    Args:
        path (str | Path): Path to the upload file.
        content_type (ContentType): Content type of the job.
        encoding (str): Text encoding of the file.

    Returns:
        str: The file content.

    Raises:
        InvalidFileTypeError: If the file extension does not match.
        FileReadError: If the file cannot be opened or read. Carries the
            original cause and the file path.
    """
    path = check_batch_file_type(path, content_type)

    logging.debug(f"Reading batch file {mask_path(path)}")
    try:
        with open(path, "r", encoding=encoding) as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logging.error(f"Cannot read batch file {mask_path(path)}: {e}")
        raise FileReadError(path, e) from e
