"""
Integration tests for prompts endpoints.
"""


def create_prompt(client, headers, title="Prompt", content="Body", **extra):
    response = client.post(
        "/api/prompts",
        headers=headers,
        json={"title": title, "content": content, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_tag(client, headers, name):
    response = client.post("/api/tags", headers=headers, json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_category(client, headers, name):
    response = client.post("/api/categories", headers=headers, json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def get_detail(client, headers, prompt_id):
    response = client.get(f"/api/prompts/{prompt_id}", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestCreatePrompt:
    """Tests for POST /api/prompts."""

    def test_create_full(self, client, auth_headers):
        category = create_category(client, auth_headers, "Writing")
        tag = create_tag(client, auth_headers, "ai")

        data = create_prompt(
            client,
            auth_headers,
            title="Summarize",
            content="Summarize {{topic}}",
            description="Short summary",
            categoryId=category["id"],
            tags=[tag["id"], tag["id"]],
            variables=[{"name": "topic", "required": True}],
            metadata={"model": "any"},
            isFavorite=True,
        )

        assert data["title"] == "Summarize"
        assert data["category"] == {"id": category["id"], "name": "Writing", "color": "#6B7280"}
        assert [t["id"] for t in data["tags"]] == [tag["id"]]
        assert data["variables"] == [
            {
                "name": "topic",
                "type": "string",
                "default": None,
                "description": None,
                "required": True,
            }
        ]
        assert data["metadata"] == {"model": "any"}
        assert data["isFavorite"] is True
        assert data["isPublic"] is False
        assert data["usageCount"] == 0
        assert data["lastUsedAt"] is None

    def test_create_records_first_version(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers)

        versions = get_detail(client, auth_headers, prompt["id"])["versions"]

        assert len(versions) == 1
        assert versions[0]["versionNumber"] == 1
        assert versions[0]["changeLog"] == "initial version"

    def test_create_missing_fields(self, client, auth_headers):
        response = client.post("/api/prompts", headers=auth_headers, json={"title": "Only"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELDS"

    def test_create_blank_title(self, client, auth_headers):
        response = client.post(
            "/api/prompts", headers=auth_headers, json={"title": "   ", "content": "Body"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELDS"

    def test_create_invalid_variable_type(self, client, auth_headers):
        response = client.post(
            "/api/prompts",
            headers=auth_headers,
            json={
                "title": "T",
                "content": "C",
                "variables": [{"name": "x", "type": "date"}],
            },
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATA"

    def test_create_with_foreign_tag(self, client, auth_headers, other_headers):
        theirs = create_tag(client, other_headers, "private")
        mine = create_tag(client, auth_headers, "mine")

        response = client.post(
            "/api/prompts",
            headers=auth_headers,
            json={"title": "T", "content": "C", "tags": [mine["id"], theirs["id"]]},
        )

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "TAG_NOT_FOUND"
        assert error["details"] == {"tagIds": [theirs["id"]]}

        listed = client.get("/api/prompts", headers=auth_headers).json()
        assert listed["data"] == []

    def test_create_with_foreign_category(self, client, auth_headers, other_headers):
        theirs = create_category(client, other_headers, "Theirs")

        response = client.post(
            "/api/prompts",
            headers=auth_headers,
            json={"title": "T", "content": "C", "categoryId": theirs["id"]},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CATEGORY_NOT_FOUND"


class TestUpdatePrompt:
    """Tests for PUT /api/prompts/{id}."""

    def test_description_only_adds_no_version(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers)

        response = client.put(
            f"/api/prompts/{prompt['id']}",
            headers=auth_headers,
            json={"description": "Now with a description", "isFavorite": True},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["description"] == "Now with a description"
        assert data["isFavorite"] is True
        assert data["title"] == "Prompt"
        assert len(get_detail(client, auth_headers, prompt["id"])["versions"]) == 1

    def test_each_content_update_adds_version(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers)

        for i in range(3):
            response = client.put(
                f"/api/prompts/{prompt['id']}",
                headers=auth_headers,
                json={"content": f"Body v{i + 2}"},
            )
            assert response.status_code == 200

        versions = get_detail(client, auth_headers, prompt["id"])["versions"]
        assert [v["versionNumber"] for v in versions] == [4, 3, 2, 1]
        assert versions[0]["changeLog"] == "content update"

    def test_unchanged_title_still_adds_version(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers, title="Same")

        client.put(f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"title": "Same"})

        versions = get_detail(client, auth_headers, prompt["id"])["versions"]
        assert len(versions) == 2

    def test_replace_and_clear_tags(self, client, auth_headers):
        a = create_tag(client, auth_headers, "a")
        b = create_tag(client, auth_headers, "b")
        prompt = create_prompt(client, auth_headers, tags=[a["id"]])

        response = client.put(
            f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"tags": [b["id"]]}
        )
        assert [t["name"] for t in response.json()["data"]["tags"]] == ["b"]

        response = client.put(f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"tags": []})
        assert response.json()["data"]["tags"] == []

    def test_omitted_tags_untouched(self, client, auth_headers):
        a = create_tag(client, auth_headers, "a")
        prompt = create_prompt(client, auth_headers, tags=[a["id"]])

        response = client.put(
            f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"isPublic": True}
        )

        assert [t["name"] for t in response.json()["data"]["tags"]] == ["a"]

    def test_null_category_uncategorizes(self, client, auth_headers):
        category = create_category(client, auth_headers, "Work")
        prompt = create_prompt(client, auth_headers, categoryId=category["id"])

        response = client.put(
            f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"categoryId": None}
        )

        assert response.status_code == 200
        assert response.json()["data"]["categoryId"] is None

    def test_blank_content_rejected(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers)

        response = client.put(
            f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"content": "  "}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELDS"

    def test_update_with_foreign_tag(self, client, auth_headers, other_headers):
        theirs = create_tag(client, other_headers, "private")
        prompt = create_prompt(client, auth_headers)

        response = client.put(
            f"/api/prompts/{prompt['id']}", headers=auth_headers, json={"tags": [theirs["id"]]}
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TAG_NOT_FOUND"


class TestSoftDelete:
    """A deleted prompt disappears from every read and write."""

    def test_deleted_prompt_invisible(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers)
        keep = create_prompt(client, auth_headers, title="Keep")

        response = client.delete(f"/api/prompts/{prompt['id']}", headers=auth_headers)
        assert response.status_code == 200

        base = f"/api/prompts/{prompt['id']}"
        for method, path, kwargs in (
            ("get", base, {}),
            ("put", base, {"json": {"title": "Back"}}),
            ("delete", base, {}),
            ("post", f"{base}/use", {}),
            ("post", f"{base}/copy", {}),
        ):
            response = getattr(client, method)(path, headers=auth_headers, **kwargs)
            assert response.status_code == 404, (method, path)
            assert response.json()["error"]["code"] == "PROMPT_NOT_FOUND"

        listed = client.get("/api/prompts", headers=auth_headers).json()
        assert [p["id"] for p in listed["data"]] == [keep["id"]]
        assert listed["meta"]["pagination"]["total"] == 1


class TestUseAndCopy:
    """Tests for /use and /copy."""

    def test_use_counts(self, client, auth_headers):
        prompt = create_prompt(client, auth_headers)

        for _ in range(3):
            response = client.post(f"/api/prompts/{prompt['id']}/use", headers=auth_headers)
            assert response.status_code == 200

        data = response.json()["data"]
        assert data["usageCount"] == 3
        assert data["lastUsedAt"] is not None
        assert len(get_detail(client, auth_headers, prompt["id"])["versions"]) == 1

    def test_copy_is_independent(self, client, auth_headers):
        tag = create_tag(client, auth_headers, "ai")
        source = create_prompt(
            client, auth_headers, title="Original", tags=[tag["id"]], metadata={"k": "v"}
        )
        client.post(f"/api/prompts/{source['id']}/use", headers=auth_headers)

        response = client.post(f"/api/prompts/{source['id']}/copy", headers=auth_headers)

        assert response.status_code == 201
        copy = response.json()["data"]
        assert copy["id"] != source["id"]
        assert copy["title"] == "Original (copy)"
        assert copy["content"] == source["content"]
        assert copy["metadata"] == {"k": "v"}
        assert [t["id"] for t in copy["tags"]] == [tag["id"]]
        assert copy["usageCount"] == 0
        assert get_detail(client, auth_headers, copy["id"])["versions"] == []

        client.put(f"/api/prompts/{copy['id']}", headers=auth_headers, json={"content": "Changed"})
        original = get_detail(client, auth_headers, source["id"])
        assert original["content"] == "Body"
        assert original["usageCount"] == 1

        client.delete(f"/api/prompts/{source['id']}", headers=auth_headers)
        survivor = get_detail(client, auth_headers, copy["id"])
        assert survivor["content"] == "Changed"
        assert [t["id"] for t in survivor["tags"]] == [tag["id"]]

    def test_copy_long_title_fits(self, client, auth_headers):
        source = create_prompt(client, auth_headers, title="x" * 200)

        copy = client.post(f"/api/prompts/{source['id']}/copy", headers=auth_headers).json()["data"]

        assert len(copy["title"]) == 200
        assert copy["title"].endswith(" (copy)")


class TestListPrompts:
    """Tests for GET /api/prompts."""

    def test_pagination(self, client, auth_headers):
        for i in range(5):
            create_prompt(client, auth_headers, title=f"P{i}")

        response = client.get(
            "/api/prompts", headers=auth_headers, params={"page": 3, "pageSize": 2}
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 1
        assert body["meta"]["pagination"] == {
            "page": 3,
            "pageSize": 2,
            "total": 5,
            "totalPages": 3,
        }

    def test_page_size_limit(self, client, auth_headers):
        response = client.get("/api/prompts", headers=auth_headers, params={"pageSize": 101})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATA"

    def test_search_case_insensitive(self, client, auth_headers):
        create_prompt(client, auth_headers, title="Haiku writer")
        create_prompt(client, auth_headers, title="Other", content="write a HAIKU")
        create_prompt(client, auth_headers, title="Third", description="haiku helper")
        create_prompt(client, auth_headers, title="Unrelated")

        response = client.get("/api/prompts", headers=auth_headers, params={"search": "Haiku"})

        assert response.json()["meta"]["pagination"]["total"] == 3

    def test_search_wildcards_are_literal(self, client, auth_headers):
        create_prompt(client, auth_headers, title="Discount 50% off")
        create_prompt(client, auth_headers, title="Version 500 notes")
        create_prompt(client, auth_headers, title="snake_case helper")
        create_prompt(client, auth_headers, title="snakeXcase helper")

        response = client.get("/api/prompts", headers=auth_headers, params={"search": "50%"})
        assert [p["title"] for p in response.json()["data"]] == ["Discount 50% off"]

        response = client.get("/api/prompts", headers=auth_headers, params={"search": "snake_case"})
        assert [p["title"] for p in response.json()["data"]] == ["snake_case helper"]

    def test_filter_by_category(self, client, auth_headers):
        category = create_category(client, auth_headers, "Work")
        create_prompt(client, auth_headers, title="In", categoryId=category["id"])
        create_prompt(client, auth_headers, title="Out")

        response = client.get(
            "/api/prompts", headers=auth_headers, params={"categoryId": category["id"]}
        )
        assert [p["title"] for p in response.json()["data"]] == ["In"]

        for value in ("all", ""):
            response = client.get("/api/prompts", headers=auth_headers, params={"categoryId": value})
            assert response.json()["meta"]["pagination"]["total"] == 2

    def test_filter_by_tags_matches_any(self, client, auth_headers):
        a = create_tag(client, auth_headers, "a")
        b = create_tag(client, auth_headers, "b")
        create_prompt(client, auth_headers, title="A", tags=[a["id"]])
        create_prompt(client, auth_headers, title="AB", tags=[a["id"], b["id"]])
        create_prompt(client, auth_headers, title="B", tags=[b["id"]])
        create_prompt(client, auth_headers, title="None")

        response = client.get(
            "/api/prompts",
            headers=auth_headers,
            params={"tags": "a,b", "sortBy": "title", "sortOrder": "asc"},
        )

        assert [p["title"] for p in response.json()["data"]] == ["A", "AB", "B"]

    def test_filter_favorites(self, client, auth_headers):
        create_prompt(client, auth_headers, title="Fav", isFavorite=True)
        create_prompt(client, auth_headers, title="Plain")

        response = client.get("/api/prompts", headers=auth_headers, params={"isFavorite": "true"})

        assert [p["title"] for p in response.json()["data"]] == ["Fav"]

    def test_sort_by_usage(self, client, auth_headers):
        low = create_prompt(client, auth_headers, title="Low")
        high = create_prompt(client, auth_headers, title="High")
        for _ in range(2):
            client.post(f"/api/prompts/{high['id']}/use", headers=auth_headers)
        client.post(f"/api/prompts/{low['id']}/use", headers=auth_headers)
        create_prompt(client, auth_headers, title="Never")

        response = client.get(
            "/api/prompts", headers=auth_headers, params={"sortBy": "usageCount"}
        )

        assert [p["title"] for p in response.json()["data"]] == ["High", "Low", "Never"]

    def test_invalid_sort_field(self, client, auth_headers):
        response = client.get("/api/prompts", headers=auth_headers, params={"sortBy": "content"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATA"

    def test_only_own_prompts(self, client, auth_headers, other_headers):
        create_prompt(client, other_headers, title="Theirs")

        body = client.get("/api/prompts", headers=auth_headers).json()

        assert body["data"] == []
        assert body["meta"]["pagination"]["total"] == 0
        assert body["meta"]["pagination"]["totalPages"] == 0


class TestCrossTenant:
    """Another user's prompt looks exactly like a missing one."""

    def test_every_operation(self, client, auth_headers, other_headers):
        theirs = create_prompt(client, other_headers, title="Theirs")

        for method, suffix, kwargs in (
            ("get", "", {}),
            ("put", "", {"json": {"title": "Mine"}}),
            ("delete", "", {}),
            ("post", "/use", {}),
            ("post", "/copy", {}),
        ):
            foreign = getattr(client, method)(
                f"/api/prompts/{theirs['id']}{suffix}", headers=auth_headers, **kwargs
            )
            missing = getattr(client, method)(
                f"/api/prompts/999999{suffix}", headers=auth_headers, **kwargs
            )
            assert foreign.status_code == missing.status_code == 404
            assert foreign.json() == missing.json()

        data = get_detail(client, other_headers, theirs["id"])
        assert data["title"] == "Theirs"
        assert data["usageCount"] == 0

    def test_invalid_id(self, client, auth_headers):
        response = client.get("/api/prompts/not-a-number", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"
