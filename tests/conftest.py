"""Shared fixtures: fixed secrets, in-memory account and catalog stores and a test
client wired to them through `app.dependency_overrides`.
"""
import pytest

from dataclasses import dataclass, field

from bson import ObjectId
from fastapi.testclient import TestClient

from main import app

from security.config import SecuritySettings, get_security_settings
from security.passwords import PasswordHasher
from security.sessions import SessionIssuer
from security.tokens import TokenCodec

from services.accounts import AccountExistsError, get_account_store, normalize_email
from services.catalog import SlugExistsError, get_catalog_store

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"
PEPPER = "test-pepper"


@dataclass
class FakeAccount:
    first_name: str
    last_name: str
    email: str
    password: str
    is_admin: bool = False
    id: str = field(default_factory=lambda: str(ObjectId()))


class InMemoryAccountStore:
    """Dict-backed stand-in for `services.accounts.AccountStore`."""

    def __init__(self):
        self.accounts: dict[str, FakeAccount] = {}

    async def find_account_by_email(self, email):
        return self.accounts.get(normalize_email(email))

    async def find_account_by_id(self, account_id):
        return next((a for a in self.accounts.values() if a.id == account_id), None)

    async def list_accounts(self):
        return sorted(self.accounts.values(), key=lambda a: a.email)

    async def create_account(self, first_name, last_name, email, password_hash, is_admin=False):
        return self.add(FakeAccount(first_name, last_name, email, password_hash, is_admin))

    async def update_account(self, account, changes):
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            if changes["email"] != account.email and changes["email"] in self.accounts:
                raise AccountExistsError(changes["email"])
        del self.accounts[account.email]
        for name, value in changes.items():
            setattr(account, name, value)
        self.accounts[account.email] = account
        return account

    async def delete_account(self, account):
        del self.accounts[account.email]

    def add(self, account: FakeAccount) -> FakeAccount:
        account.email = normalize_email(account.email)
        if account.email in self.accounts:
            raise AccountExistsError(account.email)
        self.accounts[account.email] = account
        return account


@dataclass
class FakeCategory:
    name: str
    image_url: str | None = None
    sort_order: int = 0
    is_published: bool = False
    id: str = field(default_factory=lambda: str(ObjectId()))


@dataclass
class FakeService:
    name: str
    price: float
    slug: str
    category_id: str
    description: str = ""
    image_url: str | None = None
    is_published: bool = False
    id: str = field(default_factory=lambda: str(ObjectId()))


class InMemoryCatalogStore:
    """Dict-backed stand-in for `services.catalog.CatalogStore`."""

    def __init__(self):
        self.categories: dict[str, FakeCategory] = {}
        self.services: dict[str, FakeService] = {}

    async def list_categories(self, published_only=False):
        categories = [c for c in self.categories.values() if c.is_published or not published_only]
        return sorted(categories, key=lambda c: (c.sort_order, c.name))

    async def find_category_by_id(self, category_id):
        return self.categories.get(category_id)

    async def create_category(self, fields):
        category = FakeCategory(**fields)
        self.categories[category.id] = category
        return category

    async def update_category(self, category, fields):
        for name, value in fields.items():
            setattr(category, name, value)
        return category

    async def delete_category(self, category):
        del self.categories[category.id]

    async def count_services_in_category(self, category_id):
        return sum(1 for s in self.services.values() if s.category_id == category_id)

    async def list_services(self, category_id=None, published_only=False):
        services = [
            s for s in self.services.values()
            if (category_id is None or s.category_id == category_id)
            and (s.is_published or not published_only)
        ]
        return sorted(services, key=lambda s: s.name)

    async def find_service_by_slug(self, slug):
        return next((s for s in self.services.values() if s.slug == slug), None)

    async def find_service_by_id(self, service_id):
        return self.services.get(service_id)

    async def create_service(self, fields):
        return self.add_service(FakeService(**fields))

    async def update_service(self, service, fields):
        if any(s.slug == fields["slug"] and s.id != service.id for s in self.services.values()):
            raise SlugExistsError(fields["slug"])
        for name, value in fields.items():
            setattr(service, name, value)
        return service

    async def delete_service(self, service):
        del self.services[service.id]

    def add_category(self, name, sort_order=0, is_published=True) -> FakeCategory:
        category = FakeCategory(name, sort_order=sort_order, is_published=is_published)
        self.categories[category.id] = category
        return category

    def add_service(self, service: FakeService) -> FakeService:
        if any(s.slug == service.slug for s in self.services.values()):
            raise SlugExistsError(service.slug)
        self.services[service.id] = service
        return service


@pytest.fixture()
def settings() -> SecuritySettings:
    # Lowest bcrypt cost keeps the suite fast; the default cost is tested separately
    return SecuritySettings(
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=REFRESH_SECRET,
        password_pepper=PEPPER,
        password_hash_rounds=4,
    )


@pytest.fixture()
def hasher(settings) -> PasswordHasher:
    return PasswordHasher(settings.password_pepper.get_secret_value(), rounds=settings.password_hash_rounds)


@pytest.fixture()
def codec(settings) -> TokenCodec:
    return TokenCodec(settings)


@pytest.fixture()
def issuer(codec) -> SessionIssuer:
    return SessionIssuer(codec)


@pytest.fixture()
def account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture()
def make_account(account_store, hasher):
    """Create and store an account whose password is hashed like a real one."""

    def _make_account(email="user@example.com", password="Secret-pass1", is_admin=False,
                      first_name="Ada", last_name="Lovelace") -> FakeAccount:
        return account_store.add(
            FakeAccount(first_name, last_name, email, hasher.hash(password), is_admin)
        )

    return _make_account


@pytest.fixture()
def admin_headers(make_account, issuer) -> dict:
    admin = make_account(email="admin@example.com", is_admin=True)
    return {"Authorization": f"Bearer {issuer.issue_tokens(admin).access_token}"}


@pytest.fixture()
def catalog_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture()
def client(settings, account_store, catalog_store):
    app.dependency_overrides[get_security_settings] = lambda: settings
    app.dependency_overrides[get_account_store] = lambda: account_store
    app.dependency_overrides[get_catalog_store] = lambda: catalog_store
    yield TestClient(app)
    app.dependency_overrides.clear()
