import pytest
from fastapi.testclient import TestClient

from medisocial.main import create_app
from medisocial.models.schemas import PubMedArticle
from medisocial.services.persistence import InMemoryMedium, PersistenceStore
from medisocial.studio import Studio

from tests.conftest import FakeSearch


@pytest.fixture
def client(capability):
    search = FakeSearch([PubMedArticle(uid="1", title="ACL", url="https://pubmed.ncbi.nlm.nih.gov/1/")])
    studio = Studio(capability, PersistenceStore(InMemoryMedium()), search, notification_seconds=0.05)
    with TestClient(create_app(studio)) as client:
        yield client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_post_and_list_history(client):
    r = client.post("/post/generate", json={"topic": "Lesão de menisco", "format": "story"})

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "succeeded"
    assert body["result"]["content"]["headline"] == "Headline 1"
    assert body["result"]["image_url"] == "https://img.test/story/knee-illustration-1.png"

    history = client.get("/history").json()
    assert [item["id"] for item in history] == [body["result"]["id"]]


def test_blank_topic_is_422(client, capability):
    r = client.post("/post/generate", json={"topic": ""})

    assert r.status_code == 422
    assert r.json()["detail"] == "Informe o tema do post."
    assert capability.calls == []


def test_generation_failure_is_502_and_reported(client, capability):
    capability.failing.add("generate_text")

    r = client.post("/post/generate", json={"topic": "LCA"})

    assert r.status_code == 502
    assert client.get("/post").json()["status"] == "failed"


def test_regenerate_without_post_is_noop(client, capability):
    r = client.post("/post/regenerate-text")

    assert r.status_code == 200
    assert r.json()["status"] == "idle"
    assert capability.calls == []


def test_edit_and_refine_draft(client):
    client.post("/post/generate", json={"topic": "LCA"})

    r = client.patch("/post/draft", json={"caption": "Nova legenda"})
    assert r.json()["result"]["content"]["caption"] == "Nova legenda"

    r = client.post("/post/refine", json={"instruction": "mais curto"})
    assert r.json()["result"]["content"]["caption"] == "Nova legenda (mais curto)"


def test_refine_without_post_is_404(client):
    assert client.post("/post/refine", json={"instruction": "mais curto"}).status_code == 404


def test_unknown_history_entry_is_404(client):
    assert client.post("/history/nope/open").status_code == 404


def test_trend_prefill_starts_on_review_step(client, capability):
    r = client.post("/trends/use", json={"topic": "Joelho de corredor", "tone": "motivational"})

    assert r.status_code == 200
    assert r.json()["start_step"] == 3
    assert r.json()["request"]["tone"] == "motivational"
    assert client.get("/post/prefill").json()["request"]["topic"] == "Joelho de corredor"
    assert client.get("/session").json()["view_mode"] == "post"
    assert capability.calls == []


def test_article_to_post_requires_article(client):
    r = client.post("/article/to-post")
    assert r.status_code == 422


def test_article_then_post_prefill(client):
    assert client.post("/article/generate", json={"topic": "Menisco"}).status_code == 200

    r = client.post("/article/to-post")

    assert r.status_code == 200
    assert r.json()["request"]["topic"] == "Guia completo: Menisco"
    assert r.json()["request"]["origin"] == "article_derived"
    assert r.json()["start_step"] == 3


def test_infographic_returns_base_payload(client):
    r = client.post("/infographic/generate", json={"topic": "LCA"})

    assert r.status_code == 200
    assert r.json()["result"]["data"]["title"] == "LCA"


def test_conversion_requires_procedure(client):
    assert client.post("/conversion/generate", json={"procedure": " "}).status_code == 422


def test_rts_score(client):
    r = client.post("/rts/score", json={})

    assert r.json()["score"] == 82
    assert r.json()["label"] == "Treino"


def test_rts_history_requires_name(client):
    assert client.post("/rts/history", json={"patient_name": ""}).status_code == 422

    r = client.post("/rts/history", json={"patient_name": "Ana"})
    assert r.status_code == 200
    assert [e["patient_name"] for e in client.get("/rts/history").json()] == ["Ana"]


def test_evidence_search(client):
    r = client.get("/evidence", params={"q": "ACL"})
    assert [a["uid"] for a in r.json()] == ["1"]


def test_session_navigation(client):
    assert client.post("/session/navigate", json={"mode": "nowhere"}).status_code == 422

    r = client.post("/session/navigate", json={"mode": "seo"})
    assert r.json()["view_mode"] == "seo"
    assert r.json()["visible_panel"] == "editor"
    assert len(r.json()["tools"]) == 4
