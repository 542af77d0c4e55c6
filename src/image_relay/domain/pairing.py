"""Domain models for device pairing sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from image_relay.domain.artifacts import StoredFile


class PairingStatus(StrEnum):
    """Lifecycle of a pairing session."""

    WAITING = "waiting"
    UPLOADED = "uploaded"


@dataclass
class PairingSession:
    """Represents an in-memory pairing between a desktop and a phone."""

    id: str
    status: PairingStatus
    created_at: datetime
    file: StoredFile | None = None
