from typing import Optional

from pydantic import Field

from ..shared.models import EpochMillis, NordnetModel


class SystemStatus(NordnetModel):
    message: Optional[str] = None
    valid_version: bool
    system_running: bool
    skip_phrase: bool
    timestamp: EpochMillis


class Feed(NordnetModel):
    """Connection details for one of the streaming price/order feeds."""

    hostname: str
    port: int
    encrypted: bool


class Login(NordnetModel):
    """Reply to a successful login.

    Attributes:
        session_key (str): Token to present on every authenticated request
        expires_in (int): Seconds of inactivity before the session lapses
        environment (str): Which Nordnet environment issued the session
        private_feed (Feed): Feed for account events
        public_feed (Feed): Feed for public market data
    """

    country: str
    expires_in: int
    session_key: str
    environment: str
    private_feed: Feed
    public_feed: Feed


class LoggedInStatus(NordnetModel):
    logged_in: bool


class RealtimeAccess(NordnetModel):
    market_id: int = Field(alias="marketID")
    level: int
