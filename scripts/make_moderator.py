import asyncio
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tathya.core.errors import TathyaError
from tathya.db.session import async_session_maker
from tathya.models.user import ROLE_MODERATOR, ROLE_USER
from tathya.services.moderation_service import set_role


async def change_role(email: str, role: str) -> int:
    async with async_session_maker() as session:
        try:
            user = await set_role(session, email, role)
        except TathyaError as e:
            print(f"Error: {e.detail}")
            return 1
        await session.commit()
        print(f"Success: {user.full_name} ({user.email}) is now a {user.role}.")
        return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/make_moderator.py <email> [--revoke]")
        sys.exit(1)

    role = ROLE_USER if "--revoke" in sys.argv[2:] else ROLE_MODERATOR
    sys.exit(asyncio.run(change_role(sys.argv[1], role)))
