import logging
import sys
from typing import Optional

logger: logging.Logger = logging.getLogger("httpbuilder")


def setup_logging(should_debug: Optional[bool] = None) -> None:
    logging.basicConfig(
        format="[%(asctime)s - %(name)s:%(lineno)d - %(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logger.setLevel(logging.DEBUG if should_debug else logging.INFO)


def redact_headers(lines: list[str]) -> list[str]:
    """Mask credential values in ``Name: value`` header lines before logging."""
    redacted = []
    for line in lines:
        name, _, _ = line.partition(":")
        if name.strip().lower() in ("authorization", "proxy-authorization"):
            redacted.append(f"{name}: <redacted>")
        else:
            redacted.append(line)
    return redacted
