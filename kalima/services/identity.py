"""
Read-only access to the Firebase Authentication user directory.

Only used to backfill a new profile's display data; token verification and
sign-in happen in the client.
"""

import asyncio
import logging
from typing import Any, Dict

from firebase_admin import auth as firebase_auth

from kalima.exceptions import NotFoundError, StoreError

logger = logging.getLogger(__name__)


class FirebaseIdentityProvider:

    def __init__(self, app=None):
        self.app = app

    async def get_profile(self, uid: str) -> Dict[str, Any]:
        """Display data for ``uid`` as stored by Firebase Auth"""
        try:
            user = await asyncio.to_thread(firebase_auth.get_user, uid, app=self.app)
        except firebase_auth.UserNotFoundError as e:
            raise NotFoundError(f"User {uid} not found in identity provider") from e
        except Exception as e:
            logger.error(f"Could not fetch {uid} from Firebase Auth: {e}")
            raise StoreError(f"Error fetching user from identity provider: {e}") from e

        return {
            "displayName": user.display_name or "",
            "email": user.email or "",
            "photoURL": user.photo_url,
        }
