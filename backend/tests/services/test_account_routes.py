"""Account Routes: registration and login."""

ACCOUNT_ID = 42
ACCOUNT_EMAIL = "ana@runx.test"
ACCOUNT_PASSWORD = "s3creta"


async def test_register_returns_201_with_id(client):
    res = await client.post("/api/clientes/register", json={
        "nombre": "Luis", "email": "luis@runx.test", "password": "clave123",
    })

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Cliente registrado"
    assert isinstance(body["id"], int)


async def test_register_duplicate_email_rejected(client, account):
    res = await client.post("/api/clientes/register", json={
        "nombre": "Otra Ana", "email": ACCOUNT_EMAIL, "password": "x",
    })

    assert res.status_code == 400
    assert res.json()["message"] == "Email ya registrado"
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_register_missing_fields_rejected(client):
    res = await client.post("/api/clientes/register", json={"nombre": "Luis"})
    assert res.status_code == 400


async def test_register_stores_hash_not_password(client, store_session):
    from sqlalchemy import select
    from runx.models.account import Account

    await client.post("/api/clientes/register", json={
        "nombre": "Luis", "email": "luis@runx.test", "password": "clave123",
    })

    stored = await store_session.scalar(
        select(Account.password_hash).where(Account.email == "luis@runx.test"),
    )
    assert stored != "clave123"
    assert stored.startswith("$2")


async def test_login_success_reports_twofa_flag(client, account):
    res = await client.post("/api/clientes/login", json={
        "email": ACCOUNT_EMAIL, "password": ACCOUNT_PASSWORD,
    })

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Login exitoso"
    assert body["cliente"] == {
        "id": ACCOUNT_ID,
        "nombre": "Ana",
        "email": ACCOUNT_EMAIL,
        "twofa_enabled": False,
    }


async def test_login_after_setup_reports_twofa_enabled(client, account):
    await client.post("/api/2fa/setup", json={"clienteId": ACCOUNT_ID})

    res = await client.post("/api/clientes/login", json={
        "email": ACCOUNT_EMAIL, "password": ACCOUNT_PASSWORD,
    })
    assert res.json()["cliente"]["twofa_enabled"] is True


async def test_login_wrong_password_401(client, account):
    res = await client.post("/api/clientes/login", json={
        "email": ACCOUNT_EMAIL, "password": "incorrecta",
    })

    assert res.status_code == 401
    assert res.json()["message"] == "Credenciales inválidas"


async def test_login_unknown_email_401(client):
    res = await client.post("/api/clientes/login", json={
        "email": "nadie@runx.test", "password": "x",
    })
    assert res.status_code == 401


async def test_register_accepts_multibyte_password_at_byte_limit(client):
    res = await client.post("/api/clientes/register", json={
        "nombre": "Íñigo", "email": "inigo@runx.test", "password": "ñ" * 36,
    })
    assert res.status_code == 201

    login = await client.post("/api/clientes/login", json={
        "email": "inigo@runx.test", "password": "ñ" * 36,
    })
    assert login.status_code == 200


async def test_register_rejects_password_over_72_bytes(client):
    res = await client.post("/api/clientes/register", json={
        "nombre": "Íñigo", "email": "inigo@runx.test", "password": "ñ" * 40,
    })

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_login_with_password_over_72_bytes_is_bad_credentials(client, account):
    res = await client.post("/api/clientes/login", json={
        "email": ACCOUNT_EMAIL, "password": "ñ" * 40,
    })

    assert res.status_code == 401
    assert res.json()["message"] == "Credenciales inválidas"
