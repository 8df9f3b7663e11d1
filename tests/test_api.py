"""Tests for the JSON API.

Covers project activation, literature CRUD and search, attribute
tagging, schema management and tidy export over HTTP.
"""

import pytest
from httpx import AsyncClient

ARTICLE = {
    "type": "journal_article",
    "title": "A Study",
    "year": 2023,
    "authors": ["X"],
    "journal": "Journal of Studies",
}


async def _create(client: AsyncClient, payload: dict) -> dict:
    response = await client.post("/literatures", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_unconfigured_project(unconfigured_client: AsyncClient):
    response = await unconfigured_client.get("/project")
    assert response.status_code == 200
    assert response.json() == {"configured": False, "project": None}

    response = await unconfigured_client.get("/literatures")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_activate_and_adopt(unconfigured_client: AsyncClient, tmp_path):
    target = tmp_path / "new-project"
    response = await unconfigured_client.post(
        "/project",
        json={"projectName": "New", "projectDescription": "", "workingDir": str(target)},
    )
    assert response.status_code == 200
    assert response.json()["project"]["projectName"] == "New"
    assert (target / "attributes").is_dir()

    response = await unconfigured_client.post("/project/adopt", json={"directory": str(tmp_path)})
    assert response.status_code == 400

    response = await unconfigured_client.post("/project/adopt", json={"directory": str(target)})
    assert response.status_code == 200
    assert response.json()["project"]["projectName"] == "New"


@pytest.mark.asyncio
async def test_adopt_malformed_marker(unconfigured_client: AsyncClient, tmp_path):
    broken = tmp_path / "broken"
    broken.mkdir()
    (broken / "project-metadata.json").write_text("\"not an object\"", encoding="utf-8")
    response = await unconfigured_client.post("/project/adopt", json={"directory": str(broken)})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_activate_validation_error(unconfigured_client: AsyncClient):
    response = await unconfigured_client.post(
        "/project", json={"projectName": "", "workingDir": "relative"}
    )
    assert response.status_code == 422
    paths = {e["path"] for e in response.json()["errors"]}
    assert {"projectName", "workingDir"} <= paths


@pytest.mark.asyncio
async def test_literature_crud(client: AsyncClient):
    created = await _create(client, ARTICLE)
    lit_id = created["id"]
    assert created["createdAt"] == created["updatedAt"]

    response = await client.get(f"/literatures/{lit_id}")
    assert response.status_code == 200
    assert response.json()["type"] == "journal_article"
    assert response.json()["journal"] == "Journal of Studies"

    response = await client.put(f"/literatures/{lit_id}", json={**ARTICLE, "title": "Revised"})
    assert response.status_code == 200
    assert response.json()["title"] == "Revised"
    assert response.json()["createdAt"] == created["createdAt"]

    response = await client.put(f"/literatures/{lit_id}", json={**ARTICLE, "type": "book"})
    assert response.status_code == 400

    response = await client.delete(f"/literatures/{lit_id}")
    assert response.status_code == 204
    assert (await client.get(f"/literatures/{lit_id}")).status_code == 404
    assert (await client.delete(f"/literatures/{lit_id}")).status_code == 404


@pytest.mark.asyncio
async def test_create_returns_all_validation_errors(client: AsyncClient):
    response = await client.post(
        "/literatures", json={"type": "journal_article", "title": "", "year": 3000, "authors": []}
    )
    assert response.status_code == 422
    assert {e["path"] for e in response.json()["errors"]} == {"title", "year", "authors"}


@pytest.mark.asyncio
async def test_list_and_search(client: AsyncClient):
    await _create(client, ARTICLE)
    await _create(client, {"type": "book", "title": "Ocean book", "year": 1999, "authors": ["Lee"]})

    response = await client.get("/literatures")
    assert response.json()["total"] == 2

    response = await client.get("/literatures", params={"keyword": "ocean"})
    assert [i["title"] for i in response.json()["items"]] == ["Ocean book"]

    response = await client.get("/literatures", params={"sort": "year", "order": "desc"})
    assert [i["year"] for i in response.json()["items"]] == [2023, 1999]

    response = await client.get("/literatures", params={"type": "journal_article"})
    assert [i["title"] for i in response.json()["items"]] == ["A Study"]


@pytest.mark.asyncio
async def test_paths(client: AsyncClient, context):
    created = await _create(client, {**ARTICLE, "pdfFilePath": "pdfs/study.pdf"})
    response = await client.get(f"/literatures/{created['id']}/paths")
    body = response.json()
    assert body["record"].endswith(f"{created['id']}.literature.json")
    assert body["pdf"] == str(context.working_dir / "pdfs/study.pdf")
    assert body["pdfExists"] is False


@pytest.mark.asyncio
async def test_schema_crud(client: AsyncClient):
    response = await client.post(
        "/attributes",
        json={"name": "Region", "predefinedValues": [{"value": "Europe"}, {"value": "Asia"}]},
    )
    assert response.status_code == 201
    schema = response.json()
    assert all(v["id"] for v in schema["predefinedValues"])
    assert schema["allowFreeText"] is False

    response = await client.put(
        f"/attributes/{schema['id']}", json={**schema, "allowFreeText": True}
    )
    assert response.json()["allowFreeText"] is True

    response = await client.get("/attributes")
    assert response.json() == [{"id": schema["id"], "name": "Region"}]

    assert (await client.delete(f"/attributes/{schema['id']}")).status_code == 204
    assert (await client.get(f"/attributes/{schema['id']}")).status_code == 404
    assert (await client.put(f"/attributes/{schema['id']}", json=schema)).status_code == 404


@pytest.mark.asyncio
async def test_tagging_flow(client: AsyncClient):
    lit = await _create(client, ARTICLE)
    schema = (await client.post(
        "/attributes", json={"name": "Region", "predefinedValues": [{"value": "Europe"}]}
    )).json()

    url = f"/literatures/{lit['id']}/attributes"
    response = await client.post(url, json={"attributeId": schema["id"], "value": "Mars"})
    assert response.status_code == 400

    for _ in range(2):
        response = await client.post(url, json={"attributeId": schema["id"], "value": "Europe"})
        assert response.status_code == 200
    assert response.json()["attributes"] == [
        {"attributeId": schema["id"], "values": ["Europe"], "note": ""}
    ]

    response = await client.put(f"{url}/{schema['id']}/note", json={"note": "checked"})
    assert response.json()["attributes"][0]["note"] == "checked"

    response = await client.delete(f"{url}/{schema['id']}/values/Europe")
    assert response.status_code == 200
    assert "attributes" not in response.json()

    # deleting a schema leaves references in place
    await client.post(url, json={"attributeId": schema["id"], "value": "Europe"})
    await client.delete(f"/attributes/{schema['id']}")
    response = await client.get(f"/literatures/{lit['id']}")
    assert response.json()["attributes"][0]["attributeId"] == schema["id"]


@pytest.mark.asyncio
async def test_remove_value_containing_slash(client: AsyncClient):
    lit = await _create(client, ARTICLE)
    schema = (await client.post("/attributes", json={"name": "Design", "allowFreeText": True})).json()
    url = f"/literatures/{lit['id']}/attributes"

    response = await client.post(url, json={"attributeId": schema["id"], "value": "A/B test"})
    assert response.json()["attributes"][0]["values"] == ["A/B test"]

    response = await client.delete(f"{url}/{schema['id']}/values/A%2FB%20test")
    assert response.status_code == 200
    assert "attributes" not in response.json()


@pytest.mark.asyncio
async def test_export_scenario(client: AsyncClient):
    schema = (await client.post("/attributes", json={"name": "Method", "allowFreeText": True})).json()
    lit = await _create(client, ARTICLE)
    await client.post(
        f"/literatures/{lit['id']}/attributes",
        json={"attributeId": schema["id"], "value": "Survey"},
    )

    response = await client.post(
        "/export", json={"format": "csv", "fields": ["id", "attribute", "value"]}
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text == f"id,attribute,value\n{lit['id']},Method,Survey\n"


@pytest.mark.asyncio
async def test_export_rejects_unknown_field(client: AsyncClient):
    response = await client.post("/export", json={"fields": ["id", "doi"]})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_navigation_state(client: AsyncClient):
    assert (await client.get("/navigation-state")).json() == {}
    await client.put("/navigation-state", json={"view": "attributes"})
    assert (await client.get("/navigation-state")).json() == {"view": "attributes"}
