"""Run-wide session state.

Built once when the run starts, read-only afterwards, and torn down when the
run ends. Deleting the shared user at teardown is the one remote failure the
harness tolerates: Box refuses to delete users that still own content.
"""

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from .config import HarnessConfig
from .logging import get_logger

if TYPE_CHECKING:
    from .client import BoxClient

logger = get_logger(__name__)

APP_USER_NAME_PREFIX = "IT App User"


class SessionAuthenticator(Protocol):
    """What the session needs from an authentication collaborator."""

    async def admin_client(self) -> "BoxClient": ...

    async def user_client(self, user_id: str) -> "BoxClient": ...


@dataclass(frozen=True)
class Session:
    """Credentialed clients and the shared test user for one run."""

    admin_client: "BoxClient"
    user_client: "BoxClient"
    user_id: str
    user_created: bool = False


async def open_session(config: HarnessConfig, authenticator: SessionAuthenticator) -> Session:
    """Establish the admin and user clients and resolve the shared user.

    Uses ``config.user_id`` when set, otherwise creates a platform-access-only
    app user with the admin client. A user created here is deleted again
    when the user client cannot be built.

    Raises:
        BoxAPIError: If authentication or user creation fails
    """
    admin_client = await authenticator.admin_client()

    user_created = False
    try:
        if config.user_id:
            user_id = config.user_id
            logger.info("session_user_supplied", user_id=user_id, source=config.source)
        else:
            user = await admin_client.create_enterprise_user(
                f"{APP_USER_NAME_PREFIX} - {uuid.uuid4()}", is_platform_access_only=True
            )
            user_id = str(user["id"])
            user_created = True
            logger.info("session_user_created", user_id=user_id)

        user_client = await authenticator.user_client(user_id)
    except Exception:
        if user_created:
            await _delete_created_user(admin_client, user_id)
        await admin_client.aclose()
        raise

    return Session(
        admin_client=admin_client,
        user_client=user_client,
        user_id=user_id,
        user_created=user_created,
    )


async def _delete_created_user(admin_client: "BoxClient", user_id: str) -> None:
    try:
        await admin_client.delete_enterprise_user(user_id, notify=False, force=True)
        logger.info("session_user_deleted", user_id=user_id)
    except Exception as e:
        # Fails while the user still owns content
        logger.warning(
            "session_user_delete_failed",
            user_id=user_id,
            error=str(e),
            exc_info=True,
        )


async def close_session(session: Session) -> None:
    """Delete the shared user if this run created it, then close both clients.

    A failed user deletion is logged and never raised.
    """
    if session.user_created:
        await _delete_created_user(session.admin_client, session.user_id)

    await session.user_client.aclose()
    await session.admin_client.aclose()
