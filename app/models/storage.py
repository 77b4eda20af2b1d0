"""
In-memory representation of an uploaded file
"""
import re
from dataclasses import dataclass


@dataclass
class UploadedBlob:
    """File bytes read from a multipart upload"""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def safe_filename(self) -> str:
        return re.sub(r'\s+', '_', self.filename or "file")
