import httpx

from app.modules.upload.controller import GENERATION_ERROR
from app.modules.workspace import workspace_manager


PDF = ("notes.pdf", b"%PDF-1.4 test", "application/pdf")
JPEG = ("page.jpg", b"\xff\xd8\xff\xe0", "image/jpeg")


def _workspace(api) -> str:
    resp = api.post("/v1/workspaces")
    assert resp.status_code == 201
    return resp.json()["id"]


def _generate(api, ws_id, pdf=PDF):
    api.post(f"/v1/workspaces/{ws_id}/pdf", files={"file": pdf})
    return api.post(f"/v1/workspaces/{ws_id}/generate")


def test_root(api):
    assert api.get("/").json()["status"] == "ok"


def test_unknown_workspace(api):
    assert api.get("/v1/workspaces/nope").status_code == 404


def test_invalid_pdf_selection(api):
    ws_id = _workspace(api)
    resp = api.post(
        f"/v1/workspaces/{ws_id}/pdf", files={"file": ("a.txt", b"hi", "text/plain")}
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["accepted"] is False
    assert body["upload"]["pdf"] is None
    assert body["upload"]["error"] == "Please select a valid PDF file"


def test_images_have_previews(api):
    ws_id = _workspace(api)
    resp = api.post(
        f"/v1/workspaces/{ws_id}/images", files=[("files", JPEG), ("files", JPEG)]
    )
    images = resp.json()["upload"]["images"]
    assert len(images) == 2
    preview = api.get(images[1]["preview_url"])
    assert preview.status_code == 200
    assert preview.content == JPEG[1]

    resp = api.delete(f"/v1/workspaces/{ws_id}/images/0")
    assert len(resp.json()["images"]) == 1
    assert api.get(f"/v1/workspaces/{ws_id}/images/1").status_code == 404


def test_generate_without_file(api):
    ws_id = _workspace(api)
    assert api.post(f"/v1/workspaces/{ws_id}/generate").status_code == 400


def test_generate_uses_last_card_type(api, fake_service, fake_counter):
    ws_id = _workspace(api)
    for ct in ("cloze", "basic", "cloze"):
        api.put(f"/v1/workspaces/{ws_id}/options", json={"card_type": ct})
    resp = _generate(api, ws_id)
    assert resp.status_code == 200
    body = resp.json()
    assert body["pages"] == 4
    assert body["cards_created"] == 6
    assert body["counter_before"] == 10
    assert fake_counter.value == 16

    sent = fake_service.requests[-1].content
    assert b'name="cardType"\r\n\r\ncloze' in sent
    assert b'name="pdf"' in sent


def test_generate_failure_keeps_previous_collection(api, fake_service, fake_counter):
    ws_id = _workspace(api)
    assert _generate(api, ws_id).status_code == 200

    fake_service.fail = True
    resp = api.post(f"/v1/workspaces/{ws_id}/generate")
    assert resp.status_code == 502
    assert resp.json()["detail"] == GENERATION_ERROR

    state = api.get(f"/v1/workspaces/{ws_id}").json()
    assert state["flashcards"]["total_cards"] == 6
    assert state["upload"]["error"] == GENERATION_ERROR
    assert state["upload"]["busy"] is False
    assert fake_counter.increments == [6]


def test_generate_with_unknown_counter(api, fake_counter):
    fake_counter.value = None
    ws_id = _workspace(api)
    resp = _generate(api, ws_id)
    assert resp.status_code == 200
    assert resp.json()["counter_before"] is None


def test_group_view_and_navigation(api):
    ws_id = _workspace(api)
    view = _generate(api, ws_id).json()["flashcards"]
    assert [p["index"] for p in view["pages"]] == [0, 1, 2]
    assert view["pagination"]["total_groups"] == 2
    assert view["pagination"]["has_prev_group"] is False

    nav = f"/v1/workspaces/{ws_id}/navigation"
    view = api.post(nav, json={"action": "next_group"}).json()
    assert [p["index"] for p in view["pages"]] == [3]
    assert view["pagination"]["has_next_group"] is False
    view = api.post(nav, json={"action": "next_group"}).json()
    assert view["pagination"]["current_group"] == 1

    view = api.post(nav, json={"action": "go_to_page", "page": 99}).json()
    assert view["pagination"]["current_page"] == 3
    assert api.post(nav, json={"action": "go_to_page"}).status_code == 422
    assert api.post(nav, json={"action": "sideways"}).status_code == 422


def test_edit_and_delete_cards(api):
    ws_id = _workspace(api)
    _generate(api, ws_id)
    card = f"/v1/workspaces/{ws_id}/pages/0/cards"

    resp = api.patch(f"{card}/1", json={"field": "back", "value": "four"})
    assert resp.json() == {"index": 1, "front": "2+2?", "back": "four", "type": "basic"}

    view = api.delete(f"{card}/0").json()
    fronts = [c["front"] for c in view["pages"][0]["flashcards"]]
    assert fronts == ["2+2?", "Largest planet?"]
    assert [c["index"] for c in view["pages"][0]["flashcards"]] == [0, 1]
    assert view["pages"][1]["flashcards"][0]["front"] == "H2O is {{c1::water}}"

    assert api.delete(f"{card}/5").status_code == 404
    assert api.patch(f"/v1/workspaces/{ws_id}/pages/9/cards/0", json={"field": "front", "value": "x"}).status_code == 404
    assert api.patch(f"{card}/0", json={"field": "type", "value": "weird"}).status_code == 422


def test_export_and_download(api, fake_service):
    ws_id = _workspace(api)
    assert api.post(f"/v1/workspaces/{ws_id}/export").status_code == 400
    _generate(api, ws_id)
    api.patch(f"/v1/workspaces/{ws_id}/pages/0/cards/0", json={"field": "front", "value": "Edited?"})

    resp = api.post(f"/v1/workspaces/{ws_id}/export")
    assert resp.status_code == 200
    export = resp.json()
    assert export["ready"] is True
    assert export["filename"] == "anki_import.txt"

    payload = fake_service.last_json()
    assert payload["cardType"] == "basic"
    assert payload["flashcardPages"][0]["flashcards"][0]["front"] == "Edited?"
    assert len(payload["flashcardPages"]) == 4

    download = api.get(export["download_url"])
    assert download.content == fake_service.import_body
    assert "anki_import.txt" in download.headers["content-disposition"]


def test_export_failure(api, fake_service):
    ws_id = _workspace(api)
    _generate(api, ws_id)
    fake_service.fail = True
    resp = api.post(f"/v1/workspaces/{ws_id}/export")
    assert resp.status_code == 502
    assert api.get(f"/v1/workspaces/{ws_id}/download").status_code == 404


def test_new_selection_drops_old_download(api):
    ws_id = _workspace(api)
    _generate(api, ws_id)
    api.post(f"/v1/workspaces/{ws_id}/export")
    api.post(f"/v1/workspaces/{ws_id}/pdf", files={"file": PDF})
    assert api.get(f"/v1/workspaces/{ws_id}").json()["export"]["ready"] is False


def test_counter(api, fake_counter):
    assert api.get("/v1/counter").json() == {"count": 10}
    fake_counter.value = None
    assert api.get("/v1/counter").json() == {"count": None}


def test_feedback(api, monkeypatch):
    from app.modules.feedback import dispatcher as fb_module

    real_client = httpx.AsyncClient
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="OK"))
    monkeypatch.setattr(
        fb_module.httpx,
        "AsyncClient",
        lambda **kw: real_client(**{**kw, "transport": transport}),
    )
    ws_id = _workspace(api)
    assert api.post(f"/v1/workspaces/{ws_id}/feedback", json={"message": ""}).status_code == 422
    resp = api.post(f"/v1/workspaces/{ws_id}/feedback", json={"message": "Great tool"})
    assert resp.json()["status"] == "success"


def test_discard_workspace(api):
    ws_id = _workspace(api)
    assert api.delete(f"/v1/workspaces/{ws_id}").status_code == 204
    assert api.get(f"/v1/workspaces/{ws_id}").status_code == 404


def test_null_front_is_rejected_without_breaking_workspace(api):
    ws_id = _workspace(api)
    _generate(api, ws_id)
    card = f"/v1/workspaces/{ws_id}/pages/0/cards/0"

    assert api.patch(card, json={"field": "front", "value": None}).status_code == 422
    assert api.patch(card, json={"field": "type", "value": None}).status_code == 422

    assert api.get(f"/v1/workspaces/{ws_id}").status_code == 200
    view = api.get(f"/v1/workspaces/{ws_id}/flashcards")
    assert view.status_code == 200
    assert view.json()["pages"][0]["flashcards"][0]["front"] == "Capital of France?"

    resp = api.patch(card, json={"field": "back", "value": None})
    assert resp.status_code == 200
    assert resp.json()["back"] is None


def test_export_while_busy_conflicts(api, fake_service):
    ws_id = _workspace(api)
    _generate(api, ws_id)
    workspace_manager.get(ws_id).importer.busy = True
    sent = len(fake_service.requests)
    resp = api.post(f"/v1/workspaces/{ws_id}/export")
    assert resp.status_code == 409
    assert len(fake_service.requests) == sent
