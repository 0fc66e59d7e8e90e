from concurrent.futures import ThreadPoolExecutor

import pytest

from postbox.core.exceptions import (
    AuthorizationError,
    PostTooLongError,
    ResourceNotFoundError,
    ValidationError,
)
from postbox.services.post_service import PostService


def test_create_post_assigns_increasing_ids(store):
    posts = PostService(store)
    first = posts.create_post("first", author_id=1)
    second = posts.create_post("second", author_id=1)

    assert first.id == 1
    assert second.id == 2


def test_ids_are_not_reused_after_delete(store):
    posts = PostService(store)
    first = posts.create_post("first", author_id=1)
    second = posts.create_post("second", author_id=1)

    posts.delete_post(first.id)
    third = posts.create_post("third", author_id=1)
    assert third.id > second.id

    posts.delete_post(third.id)
    fourth = posts.create_post("fourth", author_id=1)
    assert fourth.id > third.id


def test_create_post_stores_redacted_body(store):
    post = PostService(store).create_post("what a Kerfuffle", author_id=4)

    assert post.body == "what a ****"
    assert store.read().posts[post.id].body == "what a ****"


def test_too_long_post_is_not_persisted(store):
    before = store.path.read_bytes()

    with pytest.raises(PostTooLongError):
        PostService(store).create_post("x" * 141, author_id=1)

    assert store.path.read_bytes() == before


def test_list_posts_filters_and_sorts(store):
    posts = PostService(store)
    posts.create_post("a", author_id=1)
    posts.create_post("b", author_id=2)
    posts.create_post("c", author_id=1)

    assert [p.id for p in posts.list_posts()] == [1, 2, 3]
    assert [p.id for p in posts.list_posts(order="desc")] == [3, 2, 1]
    assert [p.id for p in posts.list_posts(author_id=1)] == [1, 3]
    assert posts.list_posts(author_id=99) == []


def test_list_posts_rejects_unknown_order(store):
    with pytest.raises(ValidationError):
        PostService(store).list_posts(order="sideways")


def test_get_post(store):
    posts = PostService(store)
    created = posts.create_post("hello", author_id=1)

    assert posts.get_post(created.id) == created
    with pytest.raises(ResourceNotFoundError):
        posts.get_post(42)


def test_delete_post_checks_author(store):
    posts = PostService(store)
    created = posts.create_post("mine", author_id=1)

    with pytest.raises(AuthorizationError):
        posts.delete_post(created.id, author_id=2)
    assert posts.get_post(created.id) == created

    posts.delete_post(created.id, author_id=1)
    with pytest.raises(ResourceNotFoundError):
        posts.get_post(created.id)


def test_delete_missing_post_raises(store):
    with pytest.raises(ResourceNotFoundError):
        PostService(store).delete_post(5)


def test_concurrent_creates_lose_no_updates(store):
    posts = PostService(store)
    count = 40

    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(lambda i: posts.create_post(f"post {i}", author_id=i), range(count)))

    ids = sorted(post.id for post in created)
    assert ids == list(range(1, count + 1))
    assert len(store.read().posts) == count
