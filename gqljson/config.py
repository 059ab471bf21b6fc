import os


class Config:
    """Environment-driven defaults for the decoder and the CLI."""

    # ijson backend; "python" classifies truncated vs malformed input the same
    # way on every platform
    BACKEND: str = os.getenv("GQLJSON_BACKEND", "python")
    BUF_SIZE: int = int(os.getenv("GQLJSON_BUF_SIZE", str(64 * 1024)))

    LOG_LEVEL: str = os.getenv("GQLJSON_LOG_LEVEL", "WARNING").upper()
