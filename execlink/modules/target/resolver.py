from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionTarget:
    """A fully specified exec destination: one container in one replica."""

    resource_id: str
    revision: str
    replica: str
    container: str

    @property
    def path(self) -> str:
        """Path segment addressing the container below the app's endpoint."""
        return (
            f"/revisions/{self.revision}"
            f"/replicas/{self.replica}"
            f"/containers/{self.container}"
        )


def resolve(
    resource_id: Optional[str],
    revision: Optional[str] = None,
    replica: Optional[str] = None,
    container: Optional[str] = None,
) -> Optional[SessionTarget]:
    """
    Build a target from the current selection.

    Returns:
        SessionTarget when all four values are present and non-empty,
        otherwise None. Partial selections never produce a target.
    """
    if not (resource_id and revision and replica and container):
        return None
    return SessionTarget(
        resource_id=resource_id,
        revision=revision,
        replica=replica,
        container=container,
    )
