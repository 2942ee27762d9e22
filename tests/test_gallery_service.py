"""Tests for the paginated photo collection."""

import asyncio
import math

import httpx
import pytest

from gallery_sync.domain.photos import PhotoSource
from gallery_sync.domain.results import Err, Ok
from gallery_sync.services.gallery import PhotoCollection
from gallery_sync.services.messages import StatusMessage
from tests.conftest import FakeGalleryClient


def _collection(photos: dict[str, list[int]], limit: int = 10) -> PhotoCollection:
    return PhotoCollection(client=FakeGalleryClient(photos=photos), limit=limit)


@pytest.mark.parametrize(
    ("total", "limit"), [(0, 1), (1, 1), (9, 10), (10, 10), (11, 10), (25, 48)]
)
def test_total_pages_rounds_up(total: int, limit: int) -> None:
    collection = _collection({}, limit=limit)
    collection.total = total

    assert collection.total_pages == math.ceil(total / limit)


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _collection({}, limit=0)


def test_fetch_replaces_items_and_total() -> None:
    collection = _collection({"google_photos": list(range(1, 26))})

    result = asyncio.run(collection.fetch())

    assert isinstance(result, Ok)
    assert [photo.id for photo in collection.items] == list(range(1, 11))
    assert collection.total == 25
    assert collection.total_pages == 3
    assert collection.offset == 0


def test_fetch_handles_null_photo_list() -> None:
    collection = _collection({"google_photos": []})

    result = asyncio.run(collection.fetch())

    assert isinstance(result, Ok)
    assert collection.items == []
    assert collection.total == 0
    assert collection.page == 1


def test_fetch_failure_keeps_previous_page() -> None:
    collection = _collection({"google_photos": list(range(1, 26))})
    asyncio.run(collection.fetch())
    collection.client.fail_list = True

    result = asyncio.run(collection.next_page())

    assert isinstance(result, Err)
    assert [photo.id for photo in collection.items] == list(range(1, 11))
    assert collection.total == 25
    assert collection.page == 1
    assert not collection.loading


def test_next_and_previous_page_move_and_fetch() -> None:
    collection = _collection({"google_photos": list(range(1, 26))})
    client = collection.client

    async def scenario() -> None:
        await collection.fetch()
        await collection.next_page()
        assert collection.page == 2
        assert collection.offset == 10
        await collection.next_page()
        assert [photo.id for photo in collection.items] == list(range(21, 26))
        await collection.previous_page()
        assert collection.page == 2

    asyncio.run(scenario())

    assert [offset for _, _, offset in client.list_calls] == [0, 10, 20, 10]


def test_navigation_is_noop_at_boundaries() -> None:
    collection = _collection({"google_photos": list(range(1, 16))})
    client = collection.client

    async def scenario() -> None:
        await collection.fetch()
        assert await collection.previous_page() is None
        assert collection.page == 1
        await collection.next_page()
        assert await collection.next_page() is None
        assert collection.page == 2

    asyncio.run(scenario())

    assert len(client.list_calls) == 2


def test_next_page_is_noop_when_empty() -> None:
    collection = _collection({"google_photos": []})
    asyncio.run(collection.fetch())

    assert asyncio.run(collection.next_page()) is None
    assert collection.page == 1


def test_set_source_resets_page_and_clears_items() -> None:
    collection = _collection(
        {"google_photos": list(range(1, 26)), "telegram": [100, 101]}
    )

    async def scenario() -> None:
        await collection.fetch()
        await collection.next_page()
        await collection.set_source(PhotoSource.TELEGRAM)

    asyncio.run(scenario())

    assert collection.source == PhotoSource.TELEGRAM
    assert collection.page == 1
    assert [photo.id for photo in collection.items] == [100, 101]
    assert collection.client.list_calls[-1] == ("telegram", 10, 0)


def test_set_source_clears_before_fetching() -> None:
    client = FakeGalleryClient(photos={"google_photos": [1, 2], "telegram": [3]})
    collection = PhotoCollection(client=client, limit=10)

    async def scenario() -> None:
        await collection.fetch()
        gate = asyncio.Event()
        client.gates["telegram"] = gate
        task = asyncio.create_task(collection.set_source(PhotoSource.TELEGRAM))
        await asyncio.sleep(0)
        assert collection.items == []
        assert collection.total == 0
        assert collection.loading
        gate.set()
        await task

    asyncio.run(scenario())

    assert [photo.id for photo in collection.items] == [3]


def test_stale_response_for_previous_source_is_dropped() -> None:
    client = FakeGalleryClient(
        photos={"google_photos": [1, 2, 3], "telegram": [10], "url_proxy": [20, 21]}
    )
    collection = PhotoCollection(client=client, limit=10)

    async def scenario() -> None:
        slow = asyncio.Event()
        client.gates["telegram"] = slow
        stale = asyncio.create_task(collection.set_source(PhotoSource.TELEGRAM))
        await asyncio.sleep(0)
        await collection.set_source(PhotoSource.URL_PROXY)
        slow.set()
        await stale

    asyncio.run(scenario())

    assert collection.source == PhotoSource.URL_PROXY
    assert [photo.id for photo in collection.items] == [20, 21]
    assert collection.total == 2


def test_delete_one_refetches_current_page() -> None:
    collection = _collection({"google_photos": list(range(1, 26))})

    async def scenario() -> None:
        await collection.fetch()
        await collection.delete_one(3)

    asyncio.run(scenario())

    assert collection.client.deleted == [3]
    assert collection.total == 24
    assert 3 not in [photo.id for photo in collection.items]


def test_delete_last_photo_on_last_page_steps_back() -> None:
    collection = _collection({"google_photos": list(range(1, 12))})

    async def scenario() -> None:
        await collection.fetch()
        await collection.next_page()
        assert [photo.id for photo in collection.items] == [11]
        await collection.delete_one(11)

    asyncio.run(scenario())

    assert collection.page == 1
    assert collection.total_pages == 1
    assert [photo.id for photo in collection.items] == list(range(1, 11))


def test_delete_one_failure_propagates() -> None:
    collection = _collection({"google_photos": [1, 2]})
    collection.client.fail_delete = True

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(collection.delete_one(1))

    assert collection.client.deleted == []


def test_delete_all_resets_page_and_shows_transient_message() -> None:
    message = StatusMessage()
    client = FakeGalleryClient(photos={"google_photos": list(range(1, 26))})
    collection = PhotoCollection(
        client=client, message=message, limit=10, message_ttl_seconds=0.02
    )

    async def scenario() -> None:
        await collection.fetch()
        await collection.next_page()
        text = await collection.delete_all()
        assert text == "Deleted 25 photos"
        assert message.text == "Deleted 25 photos"
        assert collection.page == 1
        assert collection.total == 0
        await asyncio.sleep(0.05)
        assert message.text == ""

    asyncio.run(scenario())


def test_fetch_keeps_clamping_while_data_shrinks() -> None:
    client = FakeGalleryClient(photos={"google_photos": list(range(1, 26))})
    collection = PhotoCollection(client=client, limit=10)
    collection.page = 3
    sizes = [15, 5]
    real_list_photos = client.list_photos

    async def shrinking_list_photos(source: str, limit: int, offset: int):
        if sizes:
            client.photos[source] = client.photos[source][: sizes.pop(0)]
        return await real_list_photos(source, limit, offset)

    client.list_photos = shrinking_list_photos

    result = asyncio.run(collection.fetch())

    assert isinstance(result, Ok)
    assert collection.page == 1
    assert collection.total_pages == 1
    assert [photo.id for photo in collection.items] == [1, 2, 3, 4, 5]
    assert [offset for _, _, offset in client.list_calls] == [20, 10, 0]
