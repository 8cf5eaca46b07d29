from types import SimpleNamespace

from tathya.schemas.resume import DEFAULT_SUMMARY, build_default_resume, upgrade_document

API = "/api/v1"

EXPERIENCE = {"company": "Acme", "position": "Intern", "duration": "2023", "description": "Testing"}


async def test_first_access_builds_default_from_profile(client, alice):
    response = await client.get(f"{API}/resume", headers=alice.headers)
    assert response.status_code == 200
    resume = response.json()
    assert resume["name"] == "Alice Rao"
    assert resume["email"] == alice.email
    assert resume["summary"] == DEFAULT_SUMMARY
    assert resume["template"] == "modern"
    assert resume["schema_version"] == 1
    assert resume["experience"] == [] and resume["skills"] == []


async def test_put_replaces_and_patch_merges(client, alice):
    full = {
        "name": "Alice R.",
        "email": "alice@work.example",
        "phone": "12345",
        "summary": "Physics grad",
        "experience": [EXPERIENCE],
        "education": [],
        "skills": ["python", "latex"],
        "template": "classic",
    }
    saved = await client.put(f"{API}/resume", json=full, headers=alice.headers)
    assert saved.status_code == 200
    assert saved.json()["experience"][0]["company"] == "Acme"

    patched = await client.patch(f"{API}/resume", json={"skills": ["go"], "template": "minimal"}, headers=alice.headers)
    body = patched.json()
    assert body["skills"] == ["go"]
    assert body["template"] == "minimal"
    assert body["summary"] == "Physics grad"
    assert body["experience"][0]["position"] == "Intern"


async def test_resume_validation(client, alice):
    bad_template = await client.patch(f"{API}/resume", json={"template": "fancy"}, headers=alice.headers)
    assert bad_template.status_code == 422

    bad_entry = await client.put(
        f"{API}/resume", json={"experience": [{"company": "", "position": "x", "duration": "y"}]}, headers=alice.headers
    )
    assert bad_entry.status_code == 422


async def test_delete_resume(client, alice):
    await client.get(f"{API}/resume", headers=alice.headers)
    assert (await client.delete(f"{API}/resume", headers=alice.headers)).status_code == 204
    assert (await client.delete(f"{API}/resume", headers=alice.headers)).status_code == 404
    # recreated on next access
    assert (await client.get(f"{API}/resume", headers=alice.headers)).json()["name"] == "Alice Rao"


async def test_resume_is_per_user(client, alice, bob):
    await client.patch(f"{API}/resume", json={"summary": "Alice only"}, headers=alice.headers)
    bob_resume = (await client.get(f"{API}/resume", headers=bob.headers)).json()
    assert bob_resume["summary"] == DEFAULT_SUMMARY
    assert (await client.get(f"{API}/resume")).status_code == 401


def test_build_default_resume_handles_missing_profile_fields():
    resume = build_default_resume(SimpleNamespace(full_name="Dev", email=None, phone=None))
    assert resume.name == "Dev"
    assert resume.email == "" and resume.phone == ""


def test_upgrade_document_from_unversioned():
    upgraded = upgrade_document({"name": "Old", "skills": "python, sql ,"}, None)
    assert upgraded.skills == ["python", "sql"]
    assert upgraded.template == "modern"

    current = upgrade_document({"skills": ["a"]}, 1)
    assert current.skills == ["a"]
