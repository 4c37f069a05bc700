"""Configuration for the platform HTTP client."""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

DEFAULT_INVALID_TOKEN_CODES = frozenset(
    {"jwt_auth_invalid_token", "invalid_token", "token_expired"}
)


def _parse_codes(raw: str) -> FrozenSet[str]:
    return frozenset(code.strip() for code in raw.split(",") if code.strip())


def _normalize_base_url(raw_url: str) -> Optional[str]:
    url = raw_url.strip().rstrip("/")
    if not url:
        return None
    if url.startswith("http://") or url.startswith("https://"):
        return url

    local_hosts = ("localhost", "127.0.0.1", "[::1]")
    scheme = "http" if url.startswith(local_hosts) else "https"
    return f"{scheme}://{url}"


@dataclass
class HttpConfig:
    """Configuration for talking to the review platform.

    Attributes:
        base_url: Root URL every endpoint is appended to
        timeout: Request timeout in seconds
        invalid_token_codes: Error codes that mean the session token is dead
            and the user must be signed out everywhere
    """

    base_url: Optional[str] = "http://localhost:8000"
    timeout: float = 10.0
    invalid_token_codes: FrozenSet[str] = field(
        default_factory=lambda: DEFAULT_INVALID_TOKEN_CODES
    )

    @classmethod
    def from_env(cls) -> "HttpConfig":
        """Load configuration from environment variables.

        Environment variables:
            TASTYPLATES_API_URL: Platform base URL
            TASTYPLATES_TIMEOUT: Request timeout in seconds
            TASTYPLATES_INVALID_TOKEN_CODES: Comma separated auth-invalid codes

        Returns:
            HttpConfig instance
        """
        raw_codes = os.getenv("TASTYPLATES_INVALID_TOKEN_CODES", "")
        return cls(
            base_url=_normalize_base_url(
                os.getenv("TASTYPLATES_API_URL", "http://localhost:8000")
            ),
            timeout=float(os.getenv("TASTYPLATES_TIMEOUT", "10.0")),
            invalid_token_codes=_parse_codes(raw_codes) or DEFAULT_INVALID_TOKEN_CODES,
        )

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.base_url:
            raise ValueError("TASTYPLATES_API_URL is required")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be > 0. Got: {self.timeout}")


@dataclass
class InteractionConfig:
    """Tunables for the optimistic interaction layer."""

    comment_max_length: int = 500
    comment_cooldown: int = 5
    follow_list_ttl: float = 300.0
    replies_ttl: float = 120.0
    page_size: int = 16

    @classmethod
    def from_env(cls) -> "InteractionConfig":
        return cls(
            comment_max_length=int(os.getenv("TASTYPLATES_COMMENT_MAX_LENGTH", "500")),
            comment_cooldown=int(os.getenv("TASTYPLATES_COMMENT_COOLDOWN", "5")),
            follow_list_ttl=float(os.getenv("TASTYPLATES_FOLLOW_LIST_TTL", "300")),
            replies_ttl=float(os.getenv("TASTYPLATES_REPLIES_TTL", "120")),
            page_size=int(os.getenv("TASTYPLATES_PAGE_SIZE", "16")),
        )

    def validate(self) -> None:
        if self.comment_max_length <= 0:
            raise ValueError(
                f"Comment max length must be > 0. Got: {self.comment_max_length}"
            )
        if self.comment_cooldown < 0:
            raise ValueError(f"Cooldown must be >= 0. Got: {self.comment_cooldown}")
        if self.page_size <= 0:
            raise ValueError(f"Page size must be > 0. Got: {self.page_size}")
