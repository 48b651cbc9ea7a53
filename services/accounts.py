"""Account Store: the only place that reads and writes account documents."""

import pytz
import logfire

from datetime import datetime

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from models.users import Account


class AccountExistsError(Exception):
    """Raised when an e-mail is already used by another account."""


def normalize_email(email: str) -> str:
    """E-mails are compared case-insensitively, so they are stored lower-cased."""
    return email.strip().lower()


class AccountStore:
    """Beanie-backed store of `Account` documents."""

    async def find_account_by_email(self, email: str) -> Account | None:
        return await Account.find_one(Account.email == normalize_email(email))

    async def find_account_by_id(self, account_id: str) -> Account | None:
        try:
            return await Account.get(PydanticObjectId(account_id))
        except (InvalidId, TypeError):
            return None

    async def list_accounts(self) -> list[Account]:
        return await Account.find_all().sort(+Account.email).to_list()

    async def create_account(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        is_admin: bool = False,
    ) -> Account:
        """Insert a new account.

        Raises:
            AccountExistsError: Raised when the e-mail is already taken.
        """
        account = Account(
            first_name=first_name,
            last_name=last_name,
            email=normalize_email(email),
            password=password_hash,
            is_admin=is_admin,
        )
        try:
            await account.insert()
        except DuplicateKeyError as e:
            raise AccountExistsError(account.email) from e
        logfire.info(f"Saved new account to database: {account.email}")
        return account

    async def update_account(self, account: Account, changes: dict) -> Account:
        """Apply `changes` (field name to new value) to `account` and save it.

        Raises:
            AccountExistsError: Raised when the new e-mail is already taken.
        """
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        for field, value in changes.items():
            setattr(account, field, value)
        account.updated_at = datetime.now(pytz.utc)
        try:
            await account.save()
        except DuplicateKeyError as e:
            raise AccountExistsError(account.email) from e
        return account

    async def delete_account(self, account: Account) -> None:
        await account.delete()


def get_account_store() -> AccountStore:
    """FastAPI dependency returning the account store."""
    return AccountStore()
