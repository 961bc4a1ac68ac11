"""
MDHD DocFS - Upload progress
"""
from typing import Callable

from pydantic import BaseModel


class UploadProgress(BaseModel):
    total: int
    processed: int
    current_file: str


UploadProgressCallback = Callable[[UploadProgress], None]
