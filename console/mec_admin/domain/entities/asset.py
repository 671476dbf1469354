"""Domain entity — a media file selected for upload."""

import mimetypes
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AssetFile:
    """File content as picked by the user, before it has a remote reference."""

    filename: str
    content: bytes = field(repr=False)
    content_type: str = ""

    @property
    def mime_type(self) -> str:
        return (
            self.content_type
            or mimetypes.guess_type(self.filename)[0]
            or "application/octet-stream"
        )

    @property
    def size(self) -> int:
        return len(self.content)
