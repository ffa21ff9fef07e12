"""
Сценарии HTTP API записей: видимость, создание, удаление, пагинация, выгрузка.
"""
import csv
import io
from types import SimpleNamespace

import pytest

JOURNALS = "/api/research/journal"
CHAPTERS = "/api/research/book-chapter"
COPYRIGHTS = "/api/research/copyright"


def journal_payload(serial_no: str, **overrides) -> dict:
    payload = {
        "serialNo": serial_no,
        "title": f"Paper {serial_no}",
        "journalName": "Journal of Testing",
        "scope": "INTERNATIONAL",
        "reviewType": "PEER_REVIEWED",
        "accessType": "OPEN_ACCESS",
        "indexing": "SCOPUS",
        "publicationMode": "ONLINE",
        "isPublic": False,
        "facultyAuthorIds": ["f1"],
        "studentAuthorIds": ["s1"],
    }
    payload.update(overrides)
    return payload


def copyright_payload(reg_no: str, **overrides) -> dict:
    payload = {
        "regNo": reg_no,
        "title": f"Copyright {reg_no}",
        "isPublic": True,
        "facultyAuthorIds": ["f1"],
        "studentAuthorIds": ["s1"],
    }
    payload.update(overrides)
    return payload


async def create(client, url: str, payload: dict, headers: dict) -> dict:
    response = await client.post(url, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return next(iter(response.json().values()))


def ids_of(body: dict, key: str) -> list[str]:
    return [item["id"] for item in body[key]]


@pytest.mark.asyncio
async def test_private_journal_visible_only_to_its_authors(client, people, headers):
    created = await create(client, JOURNALS, journal_payload("J-001"), headers(people["f1"]))
    assert created["serialNo"] == "J-001"
    assert created["status"] == "SUBMITTED"
    assert created["teacherStatus"] == "UPLOADED"
    assert [a["userId"] for a in created["facultyAuthors"]] == ["f1"]
    assert [a["user"]["name"] for a in created["studentAuthors"]] == ["Student One"]

    as_s1 = (await client.get(JOURNALS, headers=headers(people["s1"]))).json()
    assert ids_of(as_s1, "journals") == [created["id"]]
    assert as_s1["pagination"] == {"total": 1, "page": 1, "limit": 10, "totalPages": 1}

    as_s2 = (await client.get(JOURNALS, headers=headers(people["s2"]))).json()
    assert as_s2["journals"] == []
    assert as_s2["pagination"]["total"] == 0

    anonymous = (await client.get(JOURNALS)).json()
    assert anonymous["journals"] == []

    as_admin = (await client.get(JOURNALS, headers=headers(people["admin"]))).json()
    assert ids_of(as_admin, "journals") == [created["id"]]


@pytest.mark.asyncio
async def test_journal_list_is_authored_only_even_for_public_records(client, people, headers):
    await create(client, JOURNALS, journal_payload("J-PUB", isPublic=True), headers(people["f1"]))

    as_s2 = (await client.get(JOURNALS, headers=headers(people["s2"]))).json()
    assert as_s2["journals"] == []
    # аноним ограничен только флагом isPublic
    anonymous = (await client.get(JOURNALS)).json()
    assert len(anonymous["journals"]) == 1


@pytest.mark.asyncio
async def test_copyright_list_shows_public_and_authored(client, people, headers):
    public = await create(client, COPYRIGHTS, copyright_payload("C-1"), headers(people["admin"]))
    private = await create(
        client,
        COPYRIGHTS,
        copyright_payload("C-2", isPublic=False, studentAuthorIds=["s2"]),
        headers(people["admin"]),
    )

    as_s1 = (await client.get(COPYRIGHTS, headers=headers(people["s1"]))).json()
    assert ids_of(as_s1, "copyrights") == [public["id"]]

    as_s2 = (await client.get(COPYRIGHTS, headers=headers(people["s2"]))).json()
    assert set(ids_of(as_s2, "copyrights")) == {public["id"], private["id"]}


@pytest.mark.asyncio
async def test_duplicate_serial_number_is_rejected(client, people, headers):
    await create(client, JOURNALS, journal_payload("J-001"), headers(people["f1"]))
    response = await client.post(JOURNALS, json=journal_payload("J-001"), headers=headers(people["f1"]))
    assert response.status_code == 400
    assert "already exists" in response.json()["error"]


@pytest.mark.asyncio
async def test_create_requires_authentication(client, people):
    response = await client.post(JOURNALS, json=journal_payload("J-001"))
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "missing, message",
    [
        ("serialNo", "Serial number is required"),
        ("journalName", "Journal name is required"),
        ("scope", "scope is required"),
    ],
)
async def test_required_journal_fields(client, people, headers, missing, message):
    payload = journal_payload("J-001")
    payload.pop(missing)
    response = await client.post(JOURNALS, json=payload, headers=headers(people["f1"]))
    assert response.status_code == 400
    assert response.json()["error"] == message


@pytest.mark.asyncio
async def test_invalid_enum_in_body_is_rejected(client, people, headers):
    payload = journal_payload("J-001", indexing="GOOGLE_SCHOLAR")
    response = await client.post(JOURNALS, json=payload, headers=headers(people["f1"]))
    assert response.status_code == 400
    assert "indexing" in response.json()["error"]


@pytest.mark.asyncio
@pytest.mark.parametrize("url, payload", [
    (JOURNALS, journal_payload("J-001", facultyAuthorIds=[])),
    (COPYRIGHTS, copyright_payload("C-1", facultyAuthorIds=[])),
])
async def test_empty_faculty_authors_rejected_where_required(client, people, headers, url, payload):
    response = await client.post(url, json=payload, headers=headers(people["admin"]))
    assert response.status_code == 400
    assert response.json()["error"] == "At least one faculty author is required"


@pytest.mark.asyncio
async def test_book_chapter_accepts_empty_author_lists(client, people, headers):
    chapter = await create(
        client,
        CHAPTERS,
        {"title": "Chapter One", "facultyAuthorIds": [], "studentAuthorIds": []},
        headers(people["admin"]),
    )
    assert chapter["facultyAuthors"] == []
    assert chapter["studentAuthors"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("faculty_ids, student_ids, label", [
    (["s1"], ["s1"], "faculty"),
    (["f1"], ["nobody"], "student"),
    (["f1", "f1"], ["s1"], "faculty"),
])
async def test_invalid_author_references(client, people, headers, faculty_ids, student_ids, label):
    payload = journal_payload("J-001", facultyAuthorIds=faculty_ids, studentAuthorIds=student_ids)
    response = await client.post(JOURNALS, json=payload, headers=headers(people["f1"]))
    assert response.status_code == 400
    assert response.json()["error"] == f"One or more {label} authors are invalid"

    listing = (await client.get(JOURNALS, headers=headers(people["admin"]))).json()
    assert listing["journals"] == []


@pytest.mark.asyncio
async def test_student_cannot_delete(client, people, headers):
    created = await create(client, JOURNALS, journal_payload("J-001"), headers(people["f1"]))

    single = await client.delete(f"{JOURNALS}/{created['id']}", headers=headers(people["s1"]))
    assert single.status_code == 403

    bulk = await client.request(
        "DELETE", JOURNALS, json={"ids": [created["id"]]}, headers=headers(people["s1"])
    )
    assert bulk.status_code == 403

    anonymous = await client.delete(f"{JOURNALS}/{created['id']}")
    assert anonymous.status_code == 403

    still_there = await client.get(f"{JOURNALS}/{created['id']}", headers=headers(people["s1"]))
    assert still_there.status_code == 200


@pytest.mark.asyncio
async def test_delete_single_and_bulk(client, people, headers):
    admin = headers(people["admin"])
    first = await create(client, COPYRIGHTS, copyright_payload("C-1"), admin)
    second = await create(client, COPYRIGHTS, copyright_payload("C-2"), admin)
    third = await create(client, COPYRIGHTS, copyright_payload("C-3"), admin)

    response = await client.delete(f"{COPYRIGHTS}/{first['id']}", headers=headers(people["f1"]))
    assert response.status_code == 200
    assert response.json() == {"message": "Copyright deleted successfully"}

    missing = await client.delete(f"{COPYRIGHTS}/{first['id']}", headers=admin)
    assert missing.status_code == 404

    bulk = await client.request(
        "DELETE", COPYRIGHTS, json={"ids": [second["id"], third["id"], "unknown"]}, headers=admin
    )
    assert bulk.status_code == 200
    assert bulk.json()["count"] == 2

    empty = await client.request("DELETE", COPYRIGHTS, json={"ids": []}, headers=admin)
    assert empty.status_code == 400
    assert empty.json()["error"] == "IDs array is required"

    listing = (await client.get(COPYRIGHTS, headers=admin)).json()
    assert listing["copyrights"] == []


@pytest.mark.asyncio
async def test_single_get_access_rules(client, people, headers):
    created = await create(client, JOURNALS, journal_payload("J-001"), headers(people["f1"]))
    url = f"{JOURNALS}/{created['id']}"

    assert (await client.get(url)).status_code == 401
    assert (await client.get(url, headers=headers(people["s2"]))).status_code == 403
    assert (await client.get(url, headers=headers(people["s1"]))).status_code == 200
    assert (await client.get(url, headers=headers(people["admin"]))).status_code == 200
    assert (await client.get(f"{JOURNALS}/missing", headers=headers(people["admin"]))).status_code == 404

    body = (await client.get(url, headers=headers(people["f1"]))).json()
    assert body["journal"]["id"] == created["id"]


@pytest.mark.asyncio
async def test_invalid_token_is_not_treated_as_anonymous(client, people):
    response = await client.get(COPYRIGHTS, headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_pagination_covers_every_record_once(client, people, headers):
    admin = headers(people["admin"])
    created_ids = {
        (await create(client, COPYRIGHTS, copyright_payload(f"C-{n}"), admin))["id"]
        for n in range(5)
    }

    seen: list[str] = []
    for page in (1, 2, 3):
        body = (await client.get(COPYRIGHTS, params={"page": page, "limit": 2}, headers=admin)).json()
        assert body["pagination"]["total"] == 5
        assert body["pagination"]["totalPages"] == 3
        seen.extend(ids_of(body, "copyrights"))
    assert len(seen) == 5
    assert set(seen) == created_ids

    beyond = (await client.get(COPYRIGHTS, params={"page": 4, "limit": 2}, headers=admin)).json()
    assert beyond["copyrights"] == []


@pytest.mark.asyncio
async def test_sorting_and_its_validation(client, people, headers):
    admin = headers(people["admin"])
    for reg_no in ("C-b", "C-a", "C-c"):
        await create(client, COPYRIGHTS, copyright_payload(reg_no), admin)

    body = (
        await client.get(COPYRIGHTS, params={"sortBy": "regNo", "sortOrder": "asc"}, headers=admin)
    ).json()
    assert [c["regNo"] for c in body["copyrights"]] == ["C-a", "C-b", "C-c"]

    bad_field = await client.get(COPYRIGHTS, params={"sortBy": "password"}, headers=admin)
    assert bad_field.status_code == 400
    bad_order = await client.get(COPYRIGHTS, params={"sortOrder": "sideways"}, headers=admin)
    assert bad_order.status_code == 400
    too_big = await client.get(COPYRIGHTS, params={"limit": 10_000}, headers=admin)
    assert too_big.status_code == 400


@pytest.mark.asyncio
async def test_filters_narrow_the_list(client, people, headers):
    admin = headers(people["admin"])
    ml = await create(
        client,
        JOURNALS,
        journal_payload("J-1", keywords=["ml", "vision"], publisher="Springer Nature", registrationFees=100),
        admin,
    )
    await create(
        client,
        JOURNALS,
        journal_payload(
            "J-2",
            keywords=["bio"],
            publisher="Elsevier",
            registrationFees=900,
            scope="NATIONAL",
            facultyAuthorIds=["f2"],
            studentAuthorIds=["s2"],
        ),
        admin,
    )

    async def listed(**params) -> list[str]:
        response = await client.get(JOURNALS, params=params, headers=admin)
        assert response.status_code == 200, response.text
        return ids_of(response.json(), "journals")

    assert await listed(keyword="ml") == [ml["id"]]
    assert await listed(publisher="springer") == [ml["id"]]
    assert await listed(scope="INTERNATIONAL") == [ml["id"]]
    assert await listed(maxRegistrationFees="500") == [ml["id"]]
    assert await listed(facultyAuthorIds="f1") == [ml["id"]]
    assert await listed(studentAuthorIds="f1") == []
    assert await listed(search="nature") == [ml["id"]]
    assert len(await listed(search="journal of testing")) == 2


@pytest.mark.asyncio
async def test_invalid_filter_value_is_rejected(client, people, headers):
    response = await client.get(JOURNALS, params={"indexing": "GOOGLE"}, headers=headers(people["admin"]))
    assert response.status_code == 400
    assert "indexing" in response.json()["error"]

    response = await client.get(COPYRIGHTS, params={"minRegistrationFees": "NaN"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_patch_applies_author_changes_as_diff(client, people, headers):
    created = await create(client, JOURNALS, journal_payload("J-001"), headers(people["f1"]))
    f1_row = created["facultyAuthors"][0]["id"]
    url = f"{JOURNALS}/{created['id']}"

    response = await client.patch(
        url,
        json={"facultyAuthorIds": ["f1", "f2"], "title": "Renamed"},
        headers=headers(people["f1"]),
    )
    assert response.status_code == 200, response.text
    journal = response.json()["journal"]
    assert journal["title"] == "Renamed"
    assert journal["serialNo"] == "J-001"
    faculty = {a["userId"]: a["id"] for a in journal["facultyAuthors"]}
    assert set(faculty) == {"f1", "f2"}
    assert faculty["f1"] == f1_row
    assert [a["userId"] for a in journal["studentAuthors"]] == ["s1"]

    response = await client.patch(url, json={"studentAuthorIds": []}, headers=headers(people["f1"]))
    assert response.status_code == 400

    response = await client.patch(url, json={"title": "  "}, headers=headers(people["f1"]))
    assert response.status_code == 400
    assert response.json()["error"] == "Title is required"


@pytest.mark.asyncio
async def test_patch_unique_field_conflict(client, people, headers):
    f1 = headers(people["f1"])
    await create(client, JOURNALS, journal_payload("J-001"), f1)
    second = await create(client, JOURNALS, journal_payload("J-002"), f1)

    response = await client.patch(f"{JOURNALS}/{second['id']}", json={"serialNo": "J-001"}, headers=f1)
    assert response.status_code == 400

    same = await client.patch(f"{JOURNALS}/{second['id']}", json={"serialNo": "J-002"}, headers=f1)
    assert same.status_code == 200


@pytest.mark.asyncio
async def test_patch_missing_record(client, people, headers):
    response = await client.patch(f"{COPYRIGHTS}/missing", json={"title": "x"}, headers=headers(people["f1"]))
    assert response.status_code == 404
    assert response.json() == {"error": "Copyright not found"}


@pytest.mark.asyncio
async def test_export_matches_list_for_same_filters(client, people, headers):
    admin = headers(people["admin"])
    await create(client, JOURNALS, journal_payload("J-1", title='Hello, "World"'), admin)
    await create(client, JOURNALS, journal_payload("J-2"), admin)
    await create(
        client,
        JOURNALS,
        journal_payload("J-3", facultyAuthorIds=["f2"], studentAuthorIds=["s2"]),
        admin,
    )

    f1 = headers(people["f1"])
    listed: set[str] = set()
    for page in (1, 2):
        body = (await client.get(JOURNALS, params={"page": page, "limit": 1}, headers=f1)).json()
        listed.update(ids_of(body, "journals"))

    response = await client.get(f"{JOURNALS}/export", headers=f1)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="journals-') and disposition.endswith('.csv"')

    rows = list(csv.reader(io.StringIO(response.text)))
    header, data = rows[0], rows[1:]
    assert header[0] == "ID"
    assert {row[0] for row in data} == listed
    assert len(listed) == 2
    titles = {row[header.index("Title")] for row in data}
    assert 'Hello, "World"' in titles
    assert data[0][header.index("Faculty Authors")] == "Faculty One (f1@university.edu)"


@pytest.mark.asyncio
async def test_export_requires_authentication(client, people):
    response = await client.get(f"{COPYRIGHTS}/export")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_of_deleted_user_gives_not_found(client, people, headers):
    ghost = SimpleNamespace(id="ghost", email="ghost@university.edu")
    response = await client.get(COPYRIGHTS, headers=headers(ghost))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_export_quotes_url_columns(client, people, headers):
    admin = headers(people["admin"])
    image_url = "https://cdn.example.org/img?a=1,2"
    document_url = 'https://files.example.org/d"q.pdf'
    await create(
        client,
        JOURNALS,
        journal_payload("J-URL", imageUrl=image_url, documentUrl=document_url),
        admin,
    )

    response = await client.get(f"{JOURNALS}/export", headers=admin)
    assert response.status_code == 200
    header, row = list(csv.reader(io.StringIO(response.text)))
    assert len(row) == len(header)
    assert row[header.index("Image URL")] == image_url
    assert row[header.index("Document URL")] == document_url
    assert row[header.index("Serial No")] == "J-URL"


@pytest.mark.asyncio
async def test_student_bulk_delete_is_forbidden_before_body_validation(client, people, headers):
    response = await client.request(
        "DELETE", JOURNALS, json={"ids": "not-a-list"}, headers=headers(people["s1"])
    )
    assert response.status_code == 403

    editor = await client.request(
        "DELETE", JOURNALS, json={"ids": "not-a-list"}, headers=headers(people["f1"])
    )
    assert editor.status_code == 400
