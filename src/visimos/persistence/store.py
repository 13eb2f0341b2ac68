"""
Session Profile Store
=====================

Load/save boundary between the core and external persistence.

Contract:
    load() -> Profile | None
        None when nothing is stored, or when the stored blob is
        unreadable, not JSON, or fails validation. The last three are
        reported as PERSISTENCE_UNAVAILABLE. Never raises.

    save(profile) -> SaveResult
        Stamps last_seen, serializes the flat record and writes it
        under the namespace key. Failures are reported and returned,
        never raised.

Wire format (flat JSON record):
    {"visits": int, "avgDensity": float, "avgSpeed": float,
     "preferredSize": float, "lastSeen": ISO-8601 string (optional)}
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from visimos.models.diagnostics import ErrorKind
from visimos.models.profile import Profile
from visimos.observability.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from visimos.persistence.backends import KeyValueBackend


logger = logging.getLogger(__name__)


DEFAULT_NAMESPACE = "visimos_profile_v4"


class ProfileStoreError(Exception):
    """Raised internally when a stored profile cannot be used."""
    pass


@dataclass(frozen=True, slots=True)
class SaveResult:
    """
    Outcome of a save.

    Attributes:
        ok: Whether the blob was written
        profile: Profile as written (with last_seen stamped)
        error: Failure description when ok is False
    """

    ok: bool
    profile: Profile
    error: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProfileStore:
    """
    Profile persistence under a fixed namespace key.

    Example:
        store = ProfileStore(JsonFileBackend("~/.local/share/visimos"))

        profile = store.load() or Profile()
        result = store.save(profile)
        if not result.ok:
            ...  # already reported, keep running
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        namespace: str = DEFAULT_NAMESPACE,
        diagnostics: Optional[DiagnosticsSink] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize profile store.

        Args:
            backend: Key-value blob storage
            namespace: Key the profile is stored under
            diagnostics: Sink for persistence failures
            clock: Source of last_seen timestamps
        """
        if not namespace:
            raise ValueError("namespace must be non-empty")

        self.backend = backend
        self.namespace = namespace
        self.diagnostics = diagnostics or LoggingDiagnosticsSink()
        self._clock = clock

        logger.info(f"ProfileStore initialized: namespace={namespace}")

    def decode(self, blob: str) -> Profile:
        """
        Parse a stored blob.

        Raises:
            ProfileStoreError: If the blob is not a valid profile record
        """
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as e:
            raise ProfileStoreError(f"Stored profile is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProfileStoreError(
                f"Stored profile is {type(data).__name__}, expected an object"
            )

        try:
            return Profile.model_validate(data)
        except ValidationError as e:
            raise ProfileStoreError(f"Stored profile failed validation: {e}") from e

    def encode(self, profile: Profile) -> str:
        return json.dumps(profile.to_record())

    def load(self) -> Optional[Profile]:
        """Load the stored profile, or None if absent or unusable."""
        try:
            blob = self.backend.read(self.namespace)
        except Exception as e:
            self.diagnostics.report(
                ErrorKind.PERSISTENCE_UNAVAILABLE,
                f"Profile read failed: {e}",
            )
            return None

        if blob is None:
            logger.info("No stored profile, first visit")
            return None

        try:
            profile = self.decode(blob)
        except ProfileStoreError as e:
            self.diagnostics.report(ErrorKind.PERSISTENCE_UNAVAILABLE, str(e))
            return None

        logger.info(f"Loaded {profile.summary()}")
        return profile

    def save(self, profile: Profile) -> SaveResult:
        """Stamp last_seen and write the profile."""
        stamped = profile.model_copy(update={"last_seen": self._clock()})

        try:
            self.backend.write(self.namespace, self.encode(stamped))
        except Exception as e:
            message = f"Profile save failed: {e}"
            self.diagnostics.report(ErrorKind.PERSISTENCE_UNAVAILABLE, message)
            return SaveResult(ok=False, profile=stamped, error=message)

        logger.debug(f"Saved {stamped.summary()}")
        return SaveResult(ok=True, profile=stamped)
