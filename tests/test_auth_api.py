import pytest
import pytest_asyncio
from sqlalchemy import func, select

from apps.auth.service import AuthService
from common.hashing import hash_password, verify_password
from models.admin import Admin


@pytest_asyncio.fixture
async def admin(db):
    row = Admin(email="gerencia@panel.mx", name="Gerencia", password_hash=hash_password("S3cret!pass"))
    db.add(row)
    await db.commit()
    return row


class TestLogin:
    """POST /api/login"""

    async def test_success(self, client, admin):
        res = await client.post("/api/login", json={"email": "Gerencia@Panel.mx", "password": "S3cret!pass"})
        assert res.status_code == 200
        body = res.json()
        assert body["adminId"] == admin.id
        assert body["name"] == "Gerencia"
        assert body["message"] == "Login successful."

    @pytest.mark.parametrize(
        "email, password",
        [("gerencia@panel.mx", "wrong"), ("nadie@panel.mx", "S3cret!pass")],
    )
    async def test_bad_credentials(self, client, admin, email, password):
        res = await client.post("/api/login", json={"email": email, "password": password})
        assert res.status_code == 401
        assert res.json() == {"message": "Invalid email or password.", "kind": "Unauthorized"}

    async def test_malformed_email(self, client):
        res = await client.post("/api/login", json={"email": "not-an-email", "password": "x"})
        assert res.status_code == 422
        assert res.json()["kind"] == "ValidationError"


class TestBootstrapAdmin:
    async def test_created_once(self, db):
        await AuthService.ensure_bootstrap_admin(db)
        await AuthService.ensure_bootstrap_admin(db)
        count = (await db.execute(select(func.count(Admin.id)))).scalar_one()
        assert count == 1

    async def test_skipped_when_an_admin_exists(self, db, admin):
        await AuthService.ensure_bootstrap_admin(db)
        emails = (await db.execute(select(Admin.email))).scalars().all()
        assert emails == ["gerencia@panel.mx"]


class TestHashing:
    def test_round_trip(self):
        hashed = hash_password("abc123", rounds=4)
        assert hashed != "abc123"
        assert verify_password("abc123", hashed)
        assert not verify_password("abc124", hashed)

    @pytest.mark.parametrize("stored", [None, "", "not-a-bcrypt-hash"])
    def test_unusable_hash_never_matches(self, stored):
        assert verify_password("abc123", stored) is False

    def test_rejects_non_string(self):
        with pytest.raises(TypeError):
            hash_password(12345)
