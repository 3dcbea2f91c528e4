from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from web_retrieval.core.locator import Locator

# Largest body a single call accepts: the maximum signed 32-bit size.
MAX_CONTENT_LENGTH = 2**31 - 1


class RetrievalConfig(BaseModel):
    """
    Settings shared by every retrieval call.
    The defaults are the fixed policy: 3 attempts, 2 seconds apart,
    bodies read in 8192-byte chunks.
    """

    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=2.0, ge=0)
    chunk_size: int = Field(default=8192, gt=0)
    max_content_length: int = Field(default=MAX_CONTENT_LENGTH, gt=0)

    # Transport settings
    timeout: float = Field(default=15, gt=0)
    user_agents: Optional[List[str]] = None


class RetrievalJobConfig(BaseModel):
    """
    Input contract of the retrieval flow.
    Lists the addresses to retrieve and where the files go.
    """

    job_name: str
    source_urls: List[str] = Field(min_length=1)
    destination_path: str = "data"

    # "download" saves files, "text" decodes bodies, "resolve" only follows
    # redirects without reading the body
    mode: Literal["download", "text", "resolve"] = "download"
    # Text mode only: sniff the charset instead of decoding as ASCII
    detect_encoding: bool = False

    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)

    @field_validator("job_name")
    def job_name_must_be_slug(cls, v):
        if " " in v:
            raise ValueError("job_name must not contain spaces")
        return v.lower()

    @field_validator("source_urls")
    def source_urls_must_be_http(cls, v):
        for url in v:
            Locator(url)
        return v

    @property
    def job_path(self) -> str:
        """Folder for this job's files.

        Format: <destination_path>/<job_name>
        """
        return f"{self.destination_path}/{self.job_name}"
