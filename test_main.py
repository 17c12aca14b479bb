"""End-to-end tests for the HTTP layer with fake Notion and generator."""

from fastapi.testclient import TestClient

from conftest import FakeGenerator, FakeStore
from main import create_app
from pipeline import ContentPipeline


def client_for(store, generator):
    return TestClient(create_app(pipeline=ContentPipeline(store, generator)))


def test_health():
    response = TestClient(create_app(pipeline=ContentPipeline(FakeStore(), FakeGenerator()))).get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "Notion AI Backend is running!"


def test_summarize_two_page_document(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "summarize", "pageId": "P1"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["output"] == "Summary."
    assert data["appended"] is True
    assert "Hello \nworld\n" in generator.prompts[0]
    assert [call[1] for call in two_page_store.list_calls] == [None, "c1"]
    assert len(two_page_store.append_calls) == 1
    page_id, blocks = two_page_store.append_calls[0]
    assert page_id == "P1"
    assert any(
        span["text"]["content"] == "Summary."
        for block in blocks
        for span in block[block["type"]]["rich_text"]
    )


def test_notion_page_id_alias(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "notes", "notionPageId": "P1", "content": "notes here"}
    )
    assert response.status_code == 200
    assert two_page_store.append_calls[0][0] == "P1"


def test_unknown_action_is_400_without_calls(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "bogus", "pageId": "P1", "content": "x"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidAction"
    assert two_page_store.list_calls == []
    assert two_page_store.append_calls == []
    assert generator.prompts == []


def test_missing_page_id_is_400(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "summarize", "content": "x"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "ValidationError"
    assert two_page_store.list_calls == []
    assert generator.prompts == []


def test_missing_action_is_400(two_page_store, generator):
    response = client_for(two_page_store, generator).post("/process-notion-content", json={"pageId": "P1"})
    assert response.status_code == 400


def test_malformed_json_is_400(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400


def test_empty_page_is_400(generator):
    response = client_for(FakeStore(pages=[[]]), generator).post(
        "/process-notion-content", json={"action": "summarize", "pageId": "P1"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "EmptyContent"


def test_generation_failure_is_500(two_page_store):
    generator = FakeGenerator(error=RuntimeError("model overloaded"))
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "summarize", "pageId": "P1"}
    )

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "GenerationFailed"
    assert body["details"] == "model overloaded"
    assert two_page_store.append_calls == []


def test_append_failure_returns_output(generator):
    store = FakeStore(append_error=RuntimeError("conflict"))
    response = client_for(store, generator).post(
        "/process-notion-content", json={"action": "brainstorm", "pageId": "P1", "content": "ideas"}
    )

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "AppendFailed"
    assert body["output"] == "Summary."


def test_append_false_skips_write(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "quiz", "pageId": "P1", "append": False}
    )

    assert response.status_code == 200
    assert response.json()["appended"] is False
    assert response.json()["message"] == "Content processed!"
    assert two_page_store.append_calls == []


def test_missing_api_keys_is_500():
    with TestClient(create_app()) as client:
        response = client.post("/process-notion-content", json={"action": "summarize", "pageId": "P1"})

    assert response.status_code == 500
    assert response.json()["error"] == "ConfigurationError"


def _traceback_depth(tb):
    depth = 0
    while tb is not None:
        depth += 1
        tb = tb.tb_next
    return depth


def test_repeated_config_errors_keep_stored_traceback_fixed():
    with TestClient(create_app()) as client:
        stored = client.app.state.config_error
        depth = _traceback_depth(stored.__traceback__)

        for _ in range(5):
            response = client.post("/process-notion-content", json={"action": "summarize", "pageId": "P1"})
            assert response.status_code == 500
            assert response.json()["message"] == stored.message

        assert client.app.state.config_error is stored
        assert _traceback_depth(stored.__traceback__) == depth


def test_ask_question_with_content_only(two_page_store, generator):
    response = client_for(two_page_store, generator).post(
        "/process-notion-content", json={"action": "ask_question", "pageId": "P1", "content": "What is X?"}
    )

    assert response.status_code == 200
    prompt = generator.prompts[0]
    assert '"What is X?"' in prompt
    assert prompt.endswith("---\nWhat is X?")
    assert two_page_store.list_calls == []
