"""
Uploaded candidate documents.

Attachments are session-only: they are read fully into memory when the prompt
is assembled and never written anywhere.
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from dossier.utils.llm import BinaryPart

DEFAULT_MIME_TYPE = "application/octet-stream"


class AttachmentReadError(Exception):
    """
    Raised when an attachment's bytes cannot be read.

    Attributes:
        filename: Name of the attachment that failed
    """

    def __init__(self, filename: str, original_error: Exception):
        self.filename = filename
        self.original_error = original_error
        super().__init__(f"Could not read attachment '{filename}': {original_error}")


def guess_mime(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class UploadedAttachment:
    """
    A candidate document selected for upload.

    Exactly one of path (file on disk, read lazily) or content (bytes already
    in memory, e.g. from a browser upload) is expected.
    """

    filename: str
    mime_type: str
    path: Optional[Path] = None
    content: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Path, mime_type: str = None) -> "UploadedAttachment":
        path = Path(path)
        return cls(filename=path.name, mime_type=mime_type or guess_mime(path.name), path=path)

    @classmethod
    def from_bytes(cls, filename: str, content: bytes, mime_type: str = None) -> "UploadedAttachment":
        return cls(filename=filename, mime_type=mime_type or guess_mime(filename), content=content)

    async def read_bytes(self) -> bytes:
        """
        Read the attachment's full contents.

        Raises:
            AttachmentReadError: If the file cannot be read
        """
        if self.content is not None:
            return self.content
        if self.path is None:
            raise AttachmentReadError(self.filename, ValueError("no path or content"))
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise AttachmentReadError(self.filename, e) from e

    async def to_part(self) -> BinaryPart:
        return BinaryPart(mime_type=self.mime_type, data=await self.read_bytes(), filename=self.filename)


async def read_attachments(attachments: Sequence[UploadedAttachment]) -> List[BinaryPart]:
    """
    Read every attachment concurrently, returning parts in upload order.

    Raises:
        AttachmentReadError: If any read fails (the whole batch is abandoned)
    """
    parts = await asyncio.gather(*(a.to_part() for a in attachments))
    for part in parts:
        logger.debug(f"Read attachment {part.filename} ({part.mime_type}, {len(part.data)} bytes)")
    return list(parts)
