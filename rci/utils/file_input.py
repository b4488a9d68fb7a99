"""Request body input: literal text, ``@file`` or ``@-`` for standard input."""

import click

from rci.utils.error import BodyInputError

BODY_METHODS = ("POST", "PUT")


def read_body_file(file_path: str) -> bytes:
    """Read a whole body file into memory.

    Args:
        file_path: Path to the file, or ``-`` for standard input.

    Returns:
        The file contents as bytes.

    Raises:
        BodyInputError: If the file cannot be opened or read.
    """
    try:
        with click.open_file(file_path, "rb") as f:
            return f.read()
    except OSError as e:
        raise BodyInputError(f"Cannot read file {file_path}: {e}")


def resolve_request_body(method: str, body: str) -> bytes | None:
    """Return the request body to send for method, or None.

    Only POST and PUT carry a body. A value starting with ``@`` names a file
    to read the body from; anything else is sent literally.
    """
    if method not in BODY_METHODS:
        return None

    if body.startswith("@"):
        return read_body_file(body[1:])
    return body.encode("utf-8")
