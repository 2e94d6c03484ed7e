"""
Category endpoint tests.
"""

from bson import ObjectId


class TestCategories:
    async def test_create_and_duplicate_name(self, client, make_category):
        created = await make_category("tech", "Software and hardware")

        res = await client.post("/categories", json={"name": "tech"})

        assert created["description"] == "Software and hardware"
        assert res.status_code == 409
        assert res.json()["error"]["code"] == "CONFLICT"

    async def test_list_sorted_by_name(self, client, make_category):
        for name in ("travel", "art", "music"):
            await make_category(name)

        res = await client.get("/categories")

        assert [c["name"] for c in res.json()] == ["art", "music", "travel"]

    async def test_update(self, client, make_category):
        category = await make_category("tech")

        res = await client.patch(f"/categories/{category['id']}", json={"description": "All things code"})

        assert res.status_code == 200
        assert res.json()["description"] == "All things code"

    async def test_update_to_taken_name_conflicts(self, client, make_category):
        await make_category("tech")
        art = await make_category("art")

        res = await client.patch(f"/categories/{art['id']}", json={"name": "tech"})

        assert res.status_code == 409

    async def test_update_without_changes_conflicts(self, client, make_category):
        category = await make_category("tech")

        res = await client.patch(f"/categories/{category['id']}", json={"name": "tech"})

        assert res.status_code == 409
        assert res.json()["error"]["code"] == "NO_CHANGES"

    async def test_delete_keeps_posts(self, client, db, make_user, make_category, make_post):
        user = await make_user()
        x = await make_category("x")
        y = await make_category("y")
        post = await make_post(user["id"], [x["id"], y["id"]])

        res = await client.delete(f"/categories/{x['id']}")

        assert res.status_code == 200
        assert (await client.get(f"/categories/{x['id']}")).status_code == 404
        stored = await db.posts.find_one({"_id": ObjectId(post["id"])})
        assert stored is not None
        assert stored["categories"] == [ObjectId(y["id"])]
        assert [p["id"] for p in (await client.get(f"/users/{user['id']}")).json()["posts"]] == [post["id"]]

    async def test_malformed_id(self, client):
        res = await client.delete("/categories/xyz")

        assert res.status_code == 404
        assert res.json()["error"]["code"] == "MALFORMED_IDENTIFIER"
