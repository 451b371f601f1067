import time


def test_verify_oversized_token_never_500s(client, siteverify):
    import httpx
    siteverify(lambda req: httpx.Response(200, json={"success": False, "error-codes": ["invalid-input-response"]}))
    r = client.post("/verify-recaptcha", json={"token": "x" * 200_000})
    assert r.status_code == 200
    assert r.json()["success"] is False

def test_contact_oversized_fields_are_handled(client, fake_store):
    sid = client.post("/contact/session").json()["session_id"]
    s = fake_store.load(sid); s.started_at = time.time() - 10; fake_store.save(s)
    huge = "x" * 2_000_000  # 2 MB
    r = client.post("/contact/submit", json={"session_id": sid, "name": huge, "email": huge, "message": huge})
    # validation error, never 500
    assert r.status_code in (413, 422)

def test_contact_wrong_types_are_422(client):
    r = client.post("/contact/submit", json={"session_id": "s", "name": {"$ne": ""}})
    assert r.status_code == 422

def test_header_injection_is_flattened_in_mailto(client, fake_store):
    sid = client.post("/contact/session").json()["session_id"]
    s = fake_store.load(sid); s.started_at = time.time() - 10; fake_store.save(s)
    r = client.post("/contact/submit", json={
        "session_id": sid,
        "name": "Jane Doe\r\nBcc: victim@gmail.com",
        "email": "jane.doe@gmail.com",
        "message": "hello there",
        "challenge": s.challenge.answer,
    })
    assert r.status_code == 200
    mailto = r.json()["mailto"]
    assert "%0D" not in mailto and "%0A%0ABcc" not in mailto
    assert "Jane%20Doe%20%20Bcc" in mailto

def test_session_store_is_never_shared_between_sessions(client, fake_store):
    a = client.post("/contact/session").json()["session_id"]
    b = client.post("/contact/session").json()["session_id"]
    assert a != b
    assert fake_store.get(a) is not None and fake_store.get(b) is not None
