from typing import Optional

import httpx
from pydantic import BaseModel, Field

from ._utils.constants import DEFAULT_CHUNK_SIZE


class Config(BaseModel):
    base_url: str = ""
    timeout: Optional[float] = Field(default=30.0, gt=0)
    connect_timeout: Optional[float] = Field(default=None, gt=0)
    follow_redirects: bool = True
    verify_ssl: bool = True
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    def httpx_timeout(self) -> httpx.Timeout:
        connect = self.connect_timeout if self.connect_timeout is not None else self.timeout
        return httpx.Timeout(self.timeout, connect=connect)
