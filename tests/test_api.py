import io
import json
from unittest.mock import AsyncMock, Mock, patch

import pytest


def upload(client, day, content=b"image-bytes", filename="photo.jpg", **fields):
    data = {"date": day, **fields}
    return client.post("/api/upload", data=data, files={"image": (filename, content, "image/jpeg")})


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert "message" in client.get("/").json()


def test_upload_returns_record_and_serves_binary(client):
    resp = upload(
        client, "2025-02-27",
        caption="Beach day", location="Santa Cruz", takenAt="golden hour",
        metadata=json.dumps({"aperture": "f/2.8", "iso": 200}),
    )

    assert resp.status_code == 200
    body = resp.json()
    record = body["metadata"]
    assert body["success"] is True
    assert body["date"] == "2025-02-27"
    assert body["caption"] == "Beach day"
    assert body["replaced"] is False
    assert body["filePath"] == record["url"] == f"/uploads/{record['fileName']}"
    assert record["location"] == "Santa Cruz"
    assert record["takenAt"] == "golden hour"
    assert record["metadata"] == {"aperture": "f/2.8", "iso": "200"}
    assert record["size"] == len(b"image-bytes")

    served = client.get(record["url"])
    assert served.status_code == 200
    assert served.content == b"image-bytes"


def test_listing_is_sorted_newest_first_and_uncached(client):
    for day in ["2025-01-15", "2025-02-27", "2025-01-01"]:
        assert upload(client, day).status_code == 200

    resp = client.get("/api/photos")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert [p["date"] for p in body["photos"]] == ["2025-02-27", "2025-01-15", "2025-01-01"]
    assert "timestamp" in body
    assert "no-store" in resp.headers["cache-control"]
    assert resp.headers["pragma"] == "no-cache"
    assert resp.headers["expires"] == "0"


def test_reupload_replaces_photo_for_date(client):
    first = upload(client, "2025-02-27", content=b"first", caption="old").json()
    second = upload(client, "2025-02-27", content=b"second", caption="new").json()

    assert second["replaced"] is True
    assert second["replacedFileName"] == first["metadata"]["fileName"]

    photos = client.get("/api/photos").json()["photos"]
    assert len(photos) == 1
    assert photos[0]["caption"] == "new"
    assert client.get(first["filePath"]).status_code == 404
    assert client.get(second["filePath"]).content == b"second"


@pytest.mark.parametrize(
    "data, files",
    [
        ({"date": "2025-02-27"}, None),
        ({}, {"image": ("a.jpg", b"img", "image/jpeg")}),
        ({"date": "02/27/2025"}, {"image": ("a.jpg", b"img", "image/jpeg")}),
        ({"date": "2025-03-02"}, {"image": ("a.jpg", b"img", "image/jpeg")}),
        ({"date": "2025-02-27", "metadata": "not json"}, {"image": ("a.jpg", b"img", "image/jpeg")}),
        ({"date": "2025-02-27", "metadata": "[1, 2]"}, {"image": ("a.jpg", b"img", "image/jpeg")}),
    ],
)
def test_upload_rejects_bad_input(client, data, files):
    resp = client.post("/api/upload", data=data, files=files)

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"]
    assert client.get("/api/photos").json()["photos"] == []


def test_upload_too_large(client):
    from api.endpoints.upload import get_ingestion_service
    from main import app

    spy = AsyncMock()
    app.dependency_overrides[get_ingestion_service] = lambda: Mock(ingest=spy)
    with patch("api.endpoints.upload.configs.MAX_UPLOAD_SIZE", 4):
        resp = upload(client, "2025-02-27", content=b"12345")

    assert resp.status_code == 413
    assert resp.json()["success"] is False
    spy.assert_not_called()


def test_image_sent_as_text_field_is_bad_request(client):
    resp = client.post("/api/upload", data={"date": "2025-02-27", "image": "not-a-file"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "image" in resp.json()["error"]
    assert client.get("/api/photos").json()["photos"] == []


@pytest.mark.asyncio
async def test_upload_without_declared_size_reads_at_most_one_byte_past_limit(clock):
    from starlette.datastructures import UploadFile

    from api.endpoints.upload import upload_photo
    from gallery.errors import PayloadTooLargeError

    image = UploadFile(io.BytesIO(b"x" * 64), filename="big.jpg")
    assert image.size is None
    spy = AsyncMock(side_effect=PayloadTooLargeError("too big"))

    with patch("api.endpoints.upload.configs.MAX_UPLOAD_SIZE", 4):
        with pytest.raises(PayloadTooLargeError):
            await upload_photo(
                image=image, date="2025-02-27", caption="", location=None, taken_at=None,
                metadata=None, service=Mock(ingest=spy), clock=clock,
            )

    assert len(spy.call_args.args[0]) == 5


def test_storage_failure_is_server_error(client):
    with patch("core.storage.local.LocalStorageService.save_file", AsyncMock(side_effect=OSError("disk full"))):
        resp = upload(client, "2025-02-27")

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert "disk full" in resp.json()["error"]
    assert client.get("/api/photos").json()["photos"] == []


def test_get_single_photo(client):
    upload(client, "2025-01-15", caption="Forest walk")

    assert client.get("/api/photos/2025-01-15").json()["caption"] == "Forest walk"
    assert client.get("/api/photos/2025-01-16").status_code == 404


def test_viewer_shows_today_placeholder_without_photos(client):
    resp = client.get("/api/viewer")

    assert resp.status_code == 200
    body = resp.json()
    assert body["today"] == "2025-03-01"
    assert body["selectedDate"] == "2025-03-01"
    assert body["display"]["isPlaceholder"] is True
    assert body["display"]["reason"] == "today"
    assert body["display"]["url"] is None
    assert body["hasPrevious"] is False
    assert body["hasNext"] is False


def test_viewer_and_navigation(client):
    for day in ["2025-01-01", "2025-01-15", "2025-02-27"]:
        upload(client, day, caption=f"photo {day}")

    body = client.get("/api/viewer", params={"date": "2025-02-27"}).json()
    assert body["display"]["kind"] == "photo"
    assert body["display"]["caption"] == "photo 2025-02-27"
    assert body["previousDate"] == "2025-01-15"

    prev = client.get("/api/viewer/navigate", params={"date": "2025-02-27", "direction": "prev"}).json()
    assert prev["selectedDate"] == "2025-01-15"
    assert prev["display"]["record"]["caption"] == "photo 2025-01-15"

    stay = client.get("/api/viewer/navigate", params={"date": "2025-01-01", "direction": "prev"}).json()
    assert stay["selectedDate"] == "2025-01-01"
    assert stay["hasPrevious"] is False

    missing = client.get("/api/viewer", params={"date": "2025-02-03"}).json()
    assert missing["display"]["reason"] == "missing"
    assert missing["selectable"] is False


def test_navigate_rejects_unknown_direction(client):
    resp = client.get("/api/viewer/navigate", params={"direction": "sideways"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "direction" in resp.json()["error"]


def test_calendar(client):
    upload(client, "2025-02-14")

    body = client.get("/api/calendar", params={"selected": "2025-02-14"}).json()

    assert body["year"] == 2025
    feb = body["months"][1]
    assert feb["name"] == "Feb"
    day14 = feb["days"][13]
    assert day14["hasPhoto"] and day14["selectable"] and day14["selected"]
    assert feb["days"][14]["isMissing"] is True
    march = body["months"][2]
    assert march["days"][0]["isToday"] is True
    assert march["days"][1]["isFuture"] is True


def test_calendar_for_other_year(client):
    body = client.get("/api/calendar", params={"year": 2024}).json()

    assert body["year"] == 2024
    assert len(body["months"][1]["days"]) == 29
