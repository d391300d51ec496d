"""User lookups for resolving a signed-in Firebase account."""

from lilycrest_shared.models.user import User
from lilycrest_shared.services.dynamodb import DynamoDBService


class UserRepository:
    TABLE = "users"

    def __init__(self, db: DynamoDBService) -> None:
        self.db = db

    def get(self, user_id: str) -> User | None:
        item = self.db.get_item(self.TABLE, {"user_id": user_id})
        return User.model_validate(item) if item else None

    def get_by_firebase_uid(self, firebase_uid: str) -> User | None:
        """Get a user by Firebase uid using the GSI.

        Args:
            firebase_uid: uid claim of the verified Firebase ID token

        Returns:
            User or None if the account never completed registration
        """
        results = self.db.query_by_gsi(
            table=self.TABLE,
            index_name="firebase_uid-index",
            partition_key_name="firebase_uid",
            partition_key_value=firebase_uid,
        )
        return User.model_validate(results[0]) if results else None
