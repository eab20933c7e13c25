import pytest

from publishing.models import Article, Comment
from publishing.stores import Store, get_store


@pytest.mark.django_db
class TestLookups:

    def test_find_by_id(self, store, alice):
        assert store.find_by_id("user", alice.pk) == alice
        assert store.find_by_id("user", 424242) is None

    def test_find_by_unique_key(self, store, alice):
        assert store.find_by_unique_key("user", "alice") == alice
        assert store.find_by_unique_key("user", "Alice") is None

    def test_articles_have_no_unique_key(self, store):
        with pytest.raises(ValueError):
            store.find_by_unique_key("article", "anything")

    def test_unknown_kind(self, store):
        with pytest.raises(ValueError):
            store.find_by_id("tag", 1)

    def test_login_by_username_or_email(self, store, make_user):
        dana = make_user("dana", email="dana@example.com")
        assert store.find_user_by_login("dana") == dana
        assert store.find_user_by_login("DANA@example.com") == dana
        assert store.find_user_by_login("nobody@example.com") is None

    def test_ambiguous_email_does_not_resolve(self, store, make_user):
        make_user("one", email="shared@example.com")
        make_user("two", email="shared@example.com")
        assert store.find_user_by_login("shared@example.com") is None


@pytest.mark.django_db
class TestWrites:

    def test_save_inserts_new_record(self, store, alice):
        article = store.save(Article(author=alice, title="T", description="D", body="B"))
        assert article.pk is not None
        assert Article.objects.filter(pk=article.pk).exists()

    def test_save_with_fields_preserves_other_columns(self, store, alice, make_article):
        article = make_article(alice, "Original")
        stale = Article.objects.get(pk=article.pk)
        Article.objects.filter(pk=article.pk).update(body="Edited elsewhere")

        stale.title = "Renamed"
        store.save(stale, fields=["title"])

        article.refresh_from_db()
        assert article.title == "Renamed"
        assert article.body == "Edited elsewhere"

    def test_save_replaces_relation_sets(self, store, alice, bob, make_article):
        first = make_article(alice, "First")
        second = make_article(alice, "Second")
        store.save(bob, fields=[], favorites={first.pk, second.pk})
        assert store.related_ids(bob, "favorites") == {first.pk, second.pk}

        store.save(bob, fields=[], favorites={second.pk})
        assert store.related_ids(bob, "favorites") == {second.pk}

    def test_delete_by_id(self, store, alice, make_article):
        article = make_article(alice)
        assert store.delete_by_id("article", article.pk) is True
        assert store.delete_by_id("article", article.pk) is False

    def test_deleting_article_clears_favorites_and_comments(self, store, alice, bob, make_article, make_comment):
        article = make_article(alice)
        make_comment(article, bob)
        bob.favorites.add(article)

        store.delete_by_id("article", article.pk)

        assert not bob.favorites.exists()
        assert not Comment.objects.exists()


@pytest.mark.django_db
class TestAggregates:

    def test_distinct_tag_list(self, store, alice, make_article):
        make_article(alice, "A", tags=["go", "rust"])
        make_article(alice, "B", tags=["go"])
        make_article(alice, "C", tags=[])
        assert store.distinct_tag_list() == {"go", "rust"}

    def test_distinct_tag_list_ignores_duplicates_within_article(self, store, alice, make_article):
        make_article(alice, "A", tags=["go", "go"])
        assert store.distinct_tag_list() == {"go"}

    def test_distinct_tag_list_empty(self, store):
        assert store.distinct_tag_list() == set()

    def test_query_articles_filters(self, store, alice, bob, make_article):
        go = make_article(alice, "Go", tags=["go"])
        rust = make_article(bob, "Rust", tags=["rust"])
        bob.favorites.add(go)
        bob.following.add(alice)

        assert list(store.query_articles(tag="rust")) == [rust]
        assert list(store.query_articles(author=bob)) == [rust]
        assert list(store.query_articles(favorited_by=bob)) == [go]
        assert list(store.query_articles(followed_by=bob.pk)) == [go]
        assert list(store.query_articles()) == [rust, go]

    def test_comments_are_ordered_oldest_first(self, store, alice, bob, make_article, make_comment):
        article = make_article(alice)
        first = make_comment(article, bob, "first")
        second = make_comment(article, alice, "second")
        assert list(store.comments_for(article)) == [first, second]
        assert store.count_comments(article) == 2


class TestLifecycle:

    def test_app_store_is_bound_to_configured_alias(self, settings):
        assert get_store().alias == settings.PUBLISHING_DATABASE

    def test_store_closes_on_exit(self, monkeypatch):
        store = Store("default")
        closed = []
        monkeypatch.setattr(store, "close", lambda: closed.append(True))
        with store as entered:
            assert entered is store
        assert closed == [True]
