"""
Main Blog Backend — Blog Endpoint Tests
=========================================

What:  /blogs endpoints over HTTP against a real SQLite database, including
       multipart uploads written to the uploads directory.

What we test:
    ✅ Required-field presence check (each field individually)
    ✅ Exact-author listing and case-insensitive title search
    ✅ Update semantics for image and externalLink
    ✅ Delete and 404 handling
    ✅ Full create → list → update → list round trip
    ✅ Uploaded files are served back under /uploads
"""

import pytest


async def create_blog(client, fields, image=None):
    files = {"image": image} if image else None
    return await client.post("/blogs/create", data=fields, files=files)


async def all_blogs(client, **params):
    response = await client.get("/blogs", params=params)
    assert response.status_code == 200
    return response.json()["blogs"]


class TestCreateBlog:

    @pytest.mark.asyncio
    async def test_create_without_image(self, test_client, blog_fields):
        response = await create_blog(test_client, blog_fields)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Blog created successfully"
        blog = body["blog"]
        assert blog["title"] == "Category Theory"
        assert blog["author"] == "alice"
        assert blog["externalLink"] == "https://example.com/ct"
        assert blog["image"] is None
        assert blog["_id"]
        assert blog["createdAt"]

    @pytest.mark.asyncio
    async def test_create_with_image(self, test_client, blog_fields, sample_image_bytes, upload_dir):
        response = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )

        assert response.status_code == 200
        image = response.json()["blog"]["image"]
        assert image.startswith("/uploads/")
        assert image.endswith(".png")
        stored = upload_dir / image.rsplit("/", 1)[1]
        assert stored.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_uploaded_image_is_served(self, test_client, blog_fields, sample_image_bytes):
        response = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )
        image_url = response.json()["blog"]["image"]

        served = await test_client.get(image_url)

        assert served.status_code == 200
        assert served.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_external_link_is_optional(self, test_client, blog_fields):
        del blog_fields["externalLink"]

        response = await create_blog(test_client, blog_fields)

        assert response.status_code == 200
        assert response.json()["blog"]["externalLink"] is None

    @pytest.mark.parametrize("missing", ["title", "content", "author", "category"])
    @pytest.mark.asyncio
    async def test_missing_required_field_persists_nothing(self, test_client, blog_fields, missing):
        del blog_fields[missing]

        response = await create_blog(test_client, blog_fields)

        assert response.status_code == 400
        assert response.json()["message"] == "Please fill all the required fields"
        assert await all_blogs(test_client) == []

    @pytest.mark.asyncio
    async def test_empty_required_field_is_rejected(self, test_client, blog_fields):
        blog_fields["title"] = ""

        response = await create_blog(test_client, blog_fields)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_rejected_create_leaves_no_upload(
        self, test_client, blog_fields, sample_image_bytes, upload_dir
    ):
        before = set(upload_dir.iterdir())
        del blog_fields["category"]

        response = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )

        assert response.status_code == 400
        assert set(upload_dir.iterdir()) == before

    @pytest.mark.asyncio
    async def test_author_is_not_checked_against_users(self, test_client, blog_fields):
        blog_fields["author"] = "never-registered"

        response = await create_blog(test_client, blog_fields)

        assert response.status_code == 200
        assert response.json()["blog"]["author"] == "never-registered"


class TestListBlogs:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/blogs")

        assert response.status_code == 200
        assert response.json() == {"blogs": []}

    @pytest.mark.asyncio
    async def test_filter_by_exact_author(self, test_client, blog_fields):
        for author in ["alice", "Alice", "alice2", "bob", "alice"]:
            await create_blog(test_client, {**blog_fields, "author": author})

        blogs = await all_blogs(test_client, username="alice")

        assert len(blogs) == 2
        assert {b["author"] for b in blogs} == {"alice"}

    @pytest.mark.asyncio
    async def test_without_username_returns_everything(self, test_client, blog_fields):
        for author in ["alice", "bob", "carol"]:
            await create_blog(test_client, {**blog_fields, "author": author})

        blogs = await all_blogs(test_client)

        assert {b["author"] for b in blogs} == {"alice", "bob", "carol"}


class TestSearchBlogs:

    @pytest.mark.asyncio
    async def test_case_insensitive_substring(self, test_client, blog_fields):
        await create_blog(test_client, {**blog_fields, "title": "Category Theory"})
        await create_blog(test_client, {**blog_fields, "title": "Dog Tricks"})

        response = await test_client.get("/blogs/search", params={"title": "cat"})

        assert response.status_code == 200
        titles = [b["title"] for b in response.json()["blogs"]]
        assert titles == ["Category Theory"]

    @pytest.mark.asyncio
    async def test_without_title_returns_everything(self, test_client, blog_fields):
        await create_blog(test_client, {**blog_fields, "title": "Category Theory"})
        await create_blog(test_client, {**blog_fields, "title": "Dog Tricks"})

        response = await test_client.get("/blogs/search")

        assert len(response.json()["blogs"]) == 2

    @pytest.mark.asyncio
    async def test_pattern_is_not_escaped(self, test_client, blog_fields):
        await create_blog(test_client, {**blog_fields, "title": "Cats"})
        await create_blog(test_client, {**blog_fields, "title": "Cuts"})
        await create_blog(test_client, {**blog_fields, "title": "C.ts literally"})

        response = await test_client.get("/blogs/search", params={"title": "^c.ts$"})

        titles = {b["title"] for b in response.json()["blogs"]}
        assert titles == {"Cats", "Cuts"}

    @pytest.mark.asyncio
    async def test_invalid_pattern_is_server_error(self, test_client, blog_fields):
        await create_blog(test_client, blog_fields)

        response = await test_client.get("/blogs/search", params={"title": "(unclosed"})

        assert response.status_code == 500
        assert response.json()["message"] == "Error fetching blogs"


class TestUpdateBlog:

    @pytest.mark.asyncio
    async def test_update_without_image_keeps_image(
        self, test_client, blog_fields, sample_image_bytes
    ):
        created = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )
        blog = created.json()["blog"]

        response = await test_client.put(
            f"/blogs/update/{blog['_id']}", data={**blog_fields, "title": "Renamed"}
        )

        assert response.status_code == 200
        updated = response.json()["blog"]
        assert updated["title"] == "Renamed"
        assert updated["image"] == blog["image"]

    @pytest.mark.asyncio
    async def test_update_with_image_replaces_it(
        self, test_client, blog_fields, sample_image_bytes
    ):
        created = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )
        blog = created.json()["blog"]

        response = await test_client.put(
            f"/blogs/update/{blog['_id']}",
            data=blog_fields,
            files={"image": ("new.jpg", b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9", "image/jpeg")},
        )

        updated = response.json()["blog"]
        assert updated["image"] != blog["image"]
        assert updated["image"].endswith(".jpg")

    @pytest.mark.asyncio
    async def test_empty_external_link_clears_it(self, test_client, blog_fields):
        created = await create_blog(test_client, blog_fields)
        blog_id = created.json()["blog"]["_id"]

        response = await test_client.put(
            f"/blogs/update/{blog_id}", data={**blog_fields, "externalLink": ""}
        )

        assert response.status_code == 200
        assert response.json()["blog"]["externalLink"] is None
        stored = (await all_blogs(test_client))[0]
        assert stored["externalLink"] is None

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_not_found(self, test_client, blog_fields):
        response = await test_client.put(
            "/blogs/update/00000000-0000-0000-0000-000000000000", data=blog_fields
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Blog not found"

    @pytest.mark.asyncio
    async def test_update_malformed_id_is_not_found(self, test_client, blog_fields):
        response = await test_client.put("/blogs/update/not-a-uuid", data=blog_fields)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_missing_field_is_rejected(self, test_client, blog_fields):
        created = await create_blog(test_client, blog_fields)
        blog_id = created.json()["blog"]["_id"]

        response = await test_client.put(
            f"/blogs/update/{blog_id}", data={**blog_fields, "content": ""}
        )

        assert response.status_code == 400
        stored = (await all_blogs(test_client))[0]
        assert stored["content"] == blog_fields["content"]


class TestDeleteBlog:

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, test_client):
        response = await test_client.delete("/blogs/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json()["message"] == "Blog not found"

    @pytest.mark.asyncio
    async def test_delete_existing(self, test_client, blog_fields):
        keep = (await create_blog(test_client, {**blog_fields, "title": "Keep"})).json()["blog"]
        drop = (await create_blog(test_client, {**blog_fields, "title": "Drop"})).json()["blog"]

        response = await test_client.delete(f"/blogs/{drop['_id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Blog deleted successfully"}
        ids = [b["_id"] for b in await all_blogs(test_client)]
        assert ids == [keep["_id"]]

    @pytest.mark.asyncio
    async def test_delete_leaves_image_on_disk(
        self, test_client, blog_fields, sample_image_bytes, upload_dir
    ):
        created = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )
        blog = created.json()["blog"]

        await test_client.delete(f"/blogs/{blog['_id']}")

        assert (upload_dir / blog["image"].rsplit("/", 1)[1]).exists()


class TestRoundTrip:

    @pytest.mark.asyncio
    async def test_create_list_update_list(self, test_client, blog_fields, sample_image_bytes):
        created = await create_blog(
            test_client, blog_fields, image=("cover.png", sample_image_bytes, "image/png")
        )
        original = created.json()["blog"]

        listed = await all_blogs(test_client, username="alice")
        assert listed == [original]

        new_fields = {
            "title": "Dog Tricks",
            "content": "Sit. Stay.",
            "author": "bob",
            "category": "pets",
            "externalLink": "https://example.com/dogs",
        }
        await test_client.put(f"/blogs/update/{original['_id']}", data=new_fields)

        assert await all_blogs(test_client, username="alice") == []
        (stored,) = await all_blogs(test_client, username="bob")
        assert stored["_id"] == original["_id"]
        assert stored["title"] == "Dog Tricks"
        assert stored["content"] == "Sit. Stay."
        assert stored["category"] == "pets"
        assert stored["externalLink"] == "https://example.com/dogs"
        assert stored["image"] == original["image"]
        assert stored["createdAt"] == original["createdAt"]
