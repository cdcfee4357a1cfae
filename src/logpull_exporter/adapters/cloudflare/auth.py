"""Cloudflare API authentication modes.

Exactly one mode is used per client. Each mode renders its own header set:

- TokenAuth: ``Authorization: Bearer <token>``
- KeyEmailAuth: ``X-Auth-Key`` and ``X-Auth-Email``
- UserServiceKeyAuth: ``X-Auth-User-Service-Key``
"""

from dataclasses import dataclass, field

from logpull_exporter.core.errors import ConfigurationFailure


@dataclass(frozen=True)
class TokenAuth:
    """Scoped API token."""

    token: str = field(repr=False)

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@dataclass(frozen=True)
class KeyEmailAuth:
    """Global API key paired with the account email."""

    key: str = field(repr=False)
    email: str

    def headers(self) -> dict[str, str]:
        return {"X-Auth-Key": self.key, "X-Auth-Email": self.email}


@dataclass(frozen=True)
class UserServiceKeyAuth:
    """Origin CA user service key."""

    user_service_key: str = field(repr=False)

    def headers(self) -> dict[str, str]:
        return {"X-Auth-User-Service-Key": self.user_service_key}


Auth = TokenAuth | KeyEmailAuth | UserServiceKeyAuth


def auth_from_credentials(
    token: str | None = None,
    key: str | None = None,
    email: str | None = None,
    user_service_key: str | None = None,
) -> Auth:
    """Pick the authentication mode from raw credentials.

    Empty strings are treated as absent.

    Raises:
        ConfigurationFailure: If no mode or more than one mode is given, or if
            only one half of the key/email pair is given.
    """
    if (key or email) and not (key and email):
        raise ConfigurationFailure(
            "an API key and an API email must be provided together"
        )

    modes: list[Auth] = []
    if token:
        modes.append(TokenAuth(token))
    if key and email:
        modes.append(KeyEmailAuth(key, email))
    if user_service_key:
        modes.append(UserServiceKeyAuth(user_service_key))

    if not modes:
        raise ConfigurationFailure(
            "no API credentials provided: use an API token, an API key and email, "
            "or a user service key"
        )
    if len(modes) > 1:
        raise ConfigurationFailure(
            "more than one kind of API credentials provided: use exactly one"
        )
    return modes[0]
