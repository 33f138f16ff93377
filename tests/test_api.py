"""HTTP tests through FastAPI's TestClient (memory store, tmp upload dir)."""

import inspect
from datetime import date

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import build_services
from src.api.main import app, status_for
from src.api.routes import documents, drivers
from src.config.settings import Settings
from src.core.errors import (
    AuthError,
    ConflictError,
    InfraError,
    InvalidTransitionError,
    NotFoundError,
    StaleRecordError,
    WeakPasswordError,
)
from src.core.rules.brazilian_driver_rules import MAX_FILE_BYTES
from src.infrastructure.memory.in_memory_repository import InMemoryDriverRepository
from tests.factories import PlainHasher, RecordingNotifier, STRONG_PASSWORD

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(tmp_path, notifier):
    settings = Settings(storage_backend="memory", upload_dir=str(tmp_path / "uploads"), notifier_backend="log")
    app.state.services = build_services(
        settings,
        repository=InMemoryDriverRepository(),
        notifier=notifier,
        hasher=PlainHasher(),
    )
    yield TestClient(app)
    app.state.services = None


def register_payload(**overrides) -> dict:
    year = date.today().year
    payload = {
        "nome": "Maria Silva",
        "data_nascimento": f"10/05/{year - 30}",
        "cpf": "111.444.777-35",
        "cnh": "12345678901",
        "categoria_cnh": "B",
        "validade_cnh": f"10/05/{year + 3}",
        "placa_veiculo": "ABC-1D23",
        "modelo_veiculo": "Onix 1.0",
        "telefone": "(11) 98765-4321",
        "email": "maria@example.com",
        "senha": STRONG_PASSWORD,
        "confirmacao_senha": STRONG_PASSWORD,
    }
    payload.update(overrides)
    return payload


def register(client) -> str:
    resp = client.post("/api/auth/register", json=register_payload())
    assert resp.status_code == 201, resp.text
    return resp.json()["motorista"]["id"]


def stored_files(tmp_path, driver_id) -> list[str]:
    folder = tmp_path / "uploads" / driver_id
    return sorted(p.name for p in folder.iterdir()) if folder.is_dir() else []


def upload_all(client, driver_id):
    files = [
        ("files", ("cnh.png", PNG, "image/png")),
        ("files", ("crlv.pdf", b"%PDF-1.4 fake", "application/pdf")),
        ("files", ("selfie.jpg", PNG, "image/jpeg")),
    ]
    data = {"tipo_0": "CNH", "tipo_1": "CRLV", "tipo_2": "Selfie com CNH"}
    return client.post(f"/api/documents/{driver_id}/upload/files", files=files, data=data)


# ── Error mapping ──

@pytest.mark.parametrize("error,status", [
    (WeakPasswordError(), 400),
    (AuthError(), 401),
    (NotFoundError("driver"), 404),
    (ConflictError("email"), 409),
    (StaleRecordError("d"), 409),
    (InvalidTransitionError("a", "b"), 409),
    (InfraError(), 500),
])
def test_status_for(error, status):
    assert status_for(error) == status


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_error_body_is_documented(client):
    responses = client.get("/openapi.json").json()["paths"]["/api/auth/register"]["post"]["responses"]
    for status in ("400", "401", "404", "409", "500"):
        assert responses[status]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")


def test_blocking_handlers_are_sync():
    """Handlers that only call the store run in the threadpool, not on the event loop."""
    for handler in (drivers.register, drivers.login, drivers.change_password, documents.approve):
        assert not inspect.iscoroutinefunction(handler)


# ── Cadastro / login ──

def test_register_and_get_profile(client, notifier):
    driver_id = register(client)
    resp = client.get(f"/api/profile/{driver_id}")
    body = resp.json()["motorista"]

    assert body["cpf"] == "11144477735"
    assert body["placa_veiculo"] == "ABC1D23"
    assert body["status"] == "aguardando_documentos"
    assert body["documentos_pendentes"] == ["CNH", "CRLV", "selfie_cnh"]
    assert "senha" not in body and "password_hash" not in body
    assert notifier.events() == ["registration"]


def test_register_invalid_cpf(client):
    resp = client.post("/api/auth/register", json=register_payload(cpf="11111111111"))
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation.cpf_invalido"


def test_register_duplicate(client):
    register(client)
    resp = client.post("/api/auth/register", json=register_payload())
    assert resp.status_code == 409
    assert resp.json() == {"code": "motorista.cpf_ja_cadastrado", "message": "CPF já cadastrado"}


def test_login(client):
    driver_id = register(client)
    ok = client.post("/api/auth/login", json={"email": "maria@example.com", "senha": STRONG_PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["motorista"]["id"] == driver_id

    bad = client.post("/api/auth/login", json={"email": "maria@example.com", "senha": "x"})
    assert bad.status_code == 401


def test_unknown_driver_is_404(client):
    resp = client.get("/api/profile/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["code"] == "motorista.nao_encontrado"


# ── Documentos ──

def test_upload_batch_moves_to_review(client, notifier):
    driver_id = register(client)
    resp = upload_all(client, driver_id)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "documentos_em_analise"
    assert body["em_analise"] is True
    assert [d["tipo_documento"] for d in body["documentos"]] == ["CNH", "CRLV", "selfie_cnh"]
    assert notifier.events().count("documents_received") == 1

    queue = client.get("/api/documents/review-queue").json()
    assert [m["id"] for m in queue["motoristas"]] == [driver_id]


def test_download_document(client):
    driver_id = register(client)
    upload_all(client, driver_id)
    resp = client.get(f"/api/documents/{driver_id}/file/crlv")
    assert resp.status_code == 200
    assert resp.content == b"%PDF-1.4 fake"
    assert resp.headers["content-type"] == "application/pdf"


def test_download_missing_document(client):
    driver_id = register(client)
    resp = client.get(f"/api/documents/{driver_id}/file/CNH")
    assert resp.status_code == 404
    assert resp.json()["code"] == "documento.nao_encontrado"


def test_upload_too_many_files(client):
    driver_id = register(client)
    files = [("files", (f"f{i}.png", PNG, "image/png")) for i in range(4)]
    data = {f"tipo_{i}": t for i, t in enumerate(["CNH", "CRLV", "selfie_cnh", "CNH"])}
    resp = client.post(f"/api/documents/{driver_id}/upload/files", files=files, data=data)
    assert resp.status_code == 400
    assert resp.json()["code"] == "upload.limite_arquivos"


def test_upload_missing_type_field(client):
    driver_id = register(client)
    resp = client.post(
        f"/api/documents/{driver_id}/upload/files",
        files=[("files", ("cnh.png", PNG, "image/png"))],
    )
    assert resp.status_code == 400


def test_upload_duplicate_types(client):
    driver_id = register(client)
    files = [("files", ("a.png", PNG, "image/png")), ("files", ("b.png", PNG, "image/png"))]
    resp = client.post(
        f"/api/documents/{driver_id}/upload/files",
        files=files, data={"tipo_0": "selfie", "tipo_1": "SELFIE_CNH"},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "documento.duplicado_batch"


def test_upload_bad_format(client):
    driver_id = register(client)
    resp = client.post(
        f"/api/documents/{driver_id}/upload/files",
        files=[("files", ("cnh.gif", b"GIF89a", "image/gif"))], data={"tipo_0": "CNH"},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation.documento_formato"


def test_rejected_batches_leave_no_files(client, tmp_path):
    driver_id = register(client)
    url = f"/api/documents/{driver_id}/upload/files"
    big = b"%PDF" + b"\x00" * MAX_FILE_BYTES

    dup = client.post(url, files=[("files", ("a.png", PNG, "image/png")), ("files", ("b.png", PNG, "image/png"))],
                      data={"tipo_0": "CNH", "tipo_1": "cnh"})
    unknown = client.post(url, files=[("files", ("a.png", PNG, "image/png"))], data={"tipo_0": "RG"})
    bad_fmt = client.post(url, files=[("files", ("a.png", PNG, "image/png")), ("files", ("b.gif", b"GIF89a", "image/gif"))],
                          data={"tipo_0": "CNH", "tipo_1": "CRLV"})
    too_big = client.post(url, files=[("files", ("crlv.pdf", big, "application/pdf"))], data={"tipo_0": "CRLV"})

    assert [r.status_code for r in (dup, unknown, bad_fmt, too_big)] == [400, 400, 400, 400]
    assert too_big.json()["code"] == "validation.documento_tamanho"
    assert stored_files(tmp_path, driver_id) == []
    assert client.get(f"/api/profile/{driver_id}").json()["motorista"]["documentos"] == []


def test_resubmission_removes_replaced_files(client, tmp_path):
    driver_id = register(client)
    upload_all(client, driver_id)
    upload_all(client, driver_id)

    files = stored_files(tmp_path, driver_id)
    docs = client.get(f"/api/profile/{driver_id}").json()["motorista"]["documentos"]
    assert len(files) == 3
    assert sorted(d["caminho_arquivo"].rsplit("/", 1)[-1] for d in docs) == files


# ── Análise ──

def test_approve_flow(client, notifier):
    driver_id = register(client)
    early = client.put(f"/api/documents/{driver_id}/approve")
    assert early.status_code == 400
    assert early.json()["code"] == "documento.obrigatorios_pendentes"

    upload_all(client, driver_id)
    resp = client.put(f"/api/documents/{driver_id}/approve")
    assert resp.status_code == 200
    body = client.get(f"/api/profile/{driver_id}").json()["motorista"]
    assert body["status"] == "aprovado"
    assert {d["status"] for d in body["documentos"]} == {"aprovado"}
    assert "approval" in notifier.events()


def test_reject_requires_reason(client):
    driver_id = register(client)
    upload_all(client, driver_id)
    assert client.put(f"/api/documents/{driver_id}/reject", json={"motivo": ""}).status_code == 400
    ok = client.put(f"/api/documents/{driver_id}/reject", json={"motivo": "CNH ilegível"})
    assert ok.status_code == 200
    assert client.get(f"/api/profile/{driver_id}").json()["motorista"]["status"] == "documentos_rejeitados"


# ── Perfil ──

def test_update_profile(client):
    driver_id = register(client)
    resp = client.put(f"/api/profile/{driver_id}", json={"telefone": "(21) 99876-5432"})
    assert resp.status_code == 200
    assert resp.json()["motorista"]["telefone"] == "21998765432"


def test_change_password_endpoint(client):
    driver_id = register(client)
    resp = client.put(
        f"/api/profile/{driver_id}/password",
        json={"senha_atual": STRONG_PASSWORD, "nova_senha": "NovaSenha#2024", "confirmacao": "NovaSenha#2024"},
    )
    assert resp.status_code == 200
    login = client.post("/api/auth/login", json={"email": "maria@example.com", "senha": "NovaSenha#2024"})
    assert login.status_code == 200


def test_profile_photo_round_trip(client):
    driver_id = register(client)
    assert client.get(f"/api/profile/{driver_id}/photo").status_code == 404

    resp = client.post(f"/api/profile/{driver_id}/photo", files={"foto": ("me.png", PNG, "image/png")})
    assert resp.status_code == 200
    assert resp.json()["motorista"]["foto_perfil_url"] == f"/api/profile/{driver_id}/photo"

    photo = client.get(f"/api/profile/{driver_id}/photo")
    assert photo.status_code == 200
    assert photo.content == PNG


def test_rejected_photo_keeps_current_one(client, tmp_path):
    driver_id = register(client)
    client.post(f"/api/profile/{driver_id}/photo", files={"foto": ("me.png", PNG, "image/png")})

    too_big = b"\x89PNG" + b"\x00" * MAX_FILE_BYTES
    resp = client.post(f"/api/profile/{driver_id}/photo", files={"foto": ("me.png", too_big, "image/png")})
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation.foto_tamanho"

    bad = client.post(f"/api/profile/{driver_id}/photo", files={"foto": ("me.pdf", b"%PDF", "application/pdf")})
    assert bad.status_code == 400

    assert client.get(f"/api/profile/{driver_id}/photo").content == PNG
    assert len(stored_files(tmp_path, driver_id)) == 1


def test_new_photo_replaces_old_file(client, tmp_path):
    driver_id = register(client)
    client.post(f"/api/profile/{driver_id}/photo", files={"foto": ("a.png", PNG, "image/png")})
    client.post(f"/api/profile/{driver_id}/photo", files={"foto": ("b.webp", b"RIFF0000WEBP", "image/webp")})

    assert client.get(f"/api/profile/{driver_id}/photo").content == b"RIFF0000WEBP"
    assert len(stored_files(tmp_path, driver_id)) == 1


def test_deletion_flow(client):
    driver_id = register(client)
    assert client.post(f"/api/profile/{driver_id}/request-deletion").status_code == 200
    assert client.post(f"/api/profile/{driver_id}/request-deletion").status_code == 200
    assert client.post(f"/api/profile/{driver_id}/confirm-deletion").status_code == 200
    assert client.get(f"/api/profile/{driver_id}").json()["motorista"]["status"] == "encerrado"
    assert client.post(f"/api/profile/{driver_id}/confirm-deletion").status_code == 409


def test_confirm_deletion_without_request(client):
    driver_id = register(client)
    assert client.post(f"/api/profile/{driver_id}/confirm-deletion").status_code == 200
    assert client.get(f"/api/profile/{driver_id}").json()["motorista"]["status"] == "encerrado"


# ── Utils ──

@pytest.mark.parametrize("senha,forca", [
    ("abc", "fraca"),
    ("Abcdefg1!", "media"),
    ("Abcdefgh123!@", "forte"),
])
def test_check_password(client, senha, forca):
    resp = client.post("/api/utils/check-password", json={"senha": senha})
    assert resp.status_code == 200
    assert resp.json()["forca"] == forca
