"""
=============================================================================
FILE HANDLER
=============================================================================

GET and POST under /files/, backed by a FileStore.

=============================================================================
FLOW
=============================================================================

    GET /files/notes.txt
        1. filename = path without the "/files/" prefix → "notes.txt"
        2. store.read(filename)
        3. 200 application/octet-stream with the bytes
           404 if the file doesn't exist
           403 if the name escapes the base directory

    POST /files/notes.txt  (body: "hello")
        1. filename as above
        2. store.write(filename, body)    create or truncate
        3. 201 Created, empty body

Any other OSError (permissions, disk full, ...) is NOT handled here. It
propagates to the server, which logs it and answers 500 on this
connection only.

=============================================================================
"""

import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, created, file_response, forbidden, not_found
from ..storage import FileStore, PathTraversalError


logger = logging.getLogger(__name__)


FILES_PREFIX = "/files/"


def filename_from_path(path: str) -> str:
    """
    Strip the "/files/" prefix, if present.

    "/files" and "/filesfoo" also reach the file routes. They don't carry
    the prefix and are passed on unchanged, so they resolve to "files" and
    "filesfoo" inside the base directory.
    """
    if path.startswith(FILES_PREFIX):
        return path[len(FILES_PREFIX):]
    return path


class FileHandler:
    """
    Handler pair for reading and writing files.

    Usage:
        files = FileHandler(FileStore(config.directory))
        router.get("/files", prefix=True)(files.get)
        router.post("/files", prefix=True)(files.post)
    """

    def __init__(self, store: FileStore):
        self.store = store

    def get(self, request: HTTPRequest) -> HTTPResponse:
        filename = filename_from_path(request.path)

        try:
            content = self.store.read(filename)
        except FileNotFoundError:
            logger.debug(f"File not found: {filename!r}")
            return not_found()
        except PathTraversalError:
            return forbidden()

        return file_response(content)

    def post(self, request: HTTPRequest) -> HTTPResponse:
        filename = filename_from_path(request.path)

        try:
            self.store.write(filename, request.body)
        except PathTraversalError:
            return forbidden()

        return created()
