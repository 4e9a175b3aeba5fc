# foodorder/data/seed.py
from sqlalchemy.orm import Session

from foodorder.data.database import SessionLocal
from foodorder.data.models.user import UserModel
from foodorder.services.token_service import create_access_token

DEMO_USER_ID = "demo-user"


def seed(db: Session | None = None) -> str:
    """Create the demo user if missing and return an access token for it."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        if not db.get(UserModel, DEMO_USER_ID):
            db.add(UserModel(id=DEMO_USER_ID, name="Demo", email="demo@example.com", cart_data={}))
            db.commit()
        return create_access_token(DEMO_USER_ID)
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    print(f"token: {seed()}")
