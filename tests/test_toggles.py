import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection

from publishing.exceptions import InvalidOperation, NotFound
from publishing.identity import IdentityRef
from publishing.models import Article, Follow
from publishing.stores import Store
from publishing.toggles import RelationshipToggles, toggle


class TestToggle:

    def test_adds_missing_member_and_increments(self):
        outcome = toggle(9, {1, 2}, 0)
        assert outcome.member is True
        assert outcome.members == {1, 2, 9}
        assert outcome.count == 1

    def test_removes_present_member_and_decrements(self):
        outcome = toggle(9, {9}, 3)
        assert outcome.member is False
        assert outcome.members == frozenset()
        assert outcome.count == 2

    def test_decrement_clamps_at_zero(self):
        assert toggle(9, {9}, 0).count == 0

    def test_without_counter(self):
        outcome = toggle(5, set())
        assert outcome.member is True
        assert outcome.count is None

    def test_is_its_own_inverse(self):
        first = toggle(9, {1}, 4)
        second = toggle(9, first.members, first.count)
        assert second.members == {1}
        assert second.count == 4

    def test_input_set_is_not_mutated(self):
        members = {1}
        toggle(2, members, 0)
        assert members == {1}

    @pytest.mark.parametrize("calls", [1, 2, 3, 4, 7])
    def test_count_tracks_parity(self, calls):
        members, count = set(), 0
        for _ in range(calls):
            outcome = toggle(9, members, count)
            members, count = outcome.members, outcome.count
        assert count == calls % 2
        assert (9 in members) == bool(calls % 2)


@pytest.mark.django_db
class TestFavorite:

    def test_favorite_then_unfavorite(self, store, alice, make_article, identity_of):
        article = make_article(alice, "Go generics")
        engine = RelationshipToggles(store)

        result = engine.favorite(identity_of(alice), article.pk)
        assert result.payload["article"]["favorited"] is True
        assert result.payload["article"]["favoritesCount"] == 1

        result = engine.favorite(identity_of(alice), article.pk)
        assert result.payload["article"]["favorited"] is False
        assert result.payload["article"]["favoritesCount"] == 0

        article.refresh_from_db()
        assert article.favorites_count == 0
        assert not alice.favorites.exists()

    def test_counter_matches_favoriting_users(self, store, alice, bob, make_user, make_article, identity_of):
        carol = make_user("carol")
        article = make_article(carol, "Rust lifetimes")
        engine = RelationshipToggles(store)

        for user in (alice, bob, carol):
            engine.favorite(identity_of(user), article.pk)
        engine.favorite(identity_of(bob), article.pk)

        article.refresh_from_db()
        assert article.favorites_count == 2
        assert article.favorites_count == article.favorited_by.count()
        assert set(article.favorited_by.values_list("username", flat=True)) == {"alice", "carol"}

    def test_missing_article_leaves_state_untouched(self, store, alice, make_article, identity_of):
        article = make_article(alice)
        alice.favorites.add(article)

        with pytest.raises(NotFound):
            RelationshipToggles(store).favorite(identity_of(alice), 999999)

        assert list(alice.favorites.values_list("pk", flat=True)) == [article.pk]

    def test_other_favorites_are_kept(self, store, alice, make_article, identity_of):
        first = make_article(alice, "First")
        second = make_article(alice, "Second")
        engine = RelationshipToggles(store)

        engine.favorite(identity_of(alice), first.pk)
        engine.favorite(identity_of(alice), second.pk)
        engine.favorite(identity_of(alice), first.pk)

        assert list(alice.favorites.values_list("pk", flat=True)) == [second.pk]
        assert Article.objects.get(pk=first.pk).favorites_count == 0
        assert Article.objects.get(pk=second.pk).favorites_count == 1

    def test_failed_write_rolls_back_both_records(self, store, alice, make_article, identity_of, monkeypatch):
        article = make_article(alice)
        original_save = store.save

        def failing_save(record, fields=None, **relations):
            if relations:
                raise RuntimeError("store unavailable")
            return original_save(record, fields, **relations)

        monkeypatch.setattr(store, "save", failing_save)
        with pytest.raises(RuntimeError):
            RelationshipToggles(store).favorite(identity_of(alice), article.pk)

        article.refresh_from_db()
        assert article.favorites_count == 0
        assert not alice.favorites.exists()


@pytest.mark.django_db
class TestFollow:

    def test_follow_then_unfollow(self, store, alice, bob, identity_of):
        engine = RelationshipToggles(store)

        result = engine.follow(identity_of(alice), "bob")
        assert result.payload["profile"]["following"] is True
        assert list(alice.following.all()) == [bob]
        assert list(bob.followers.all()) == [alice]

        result = engine.follow(identity_of(alice), "bob")
        assert result.payload["profile"]["following"] is False
        assert not Follow.objects.exists()

    def test_follow_is_one_way(self, store, alice, bob, identity_of):
        RelationshipToggles(store).follow(identity_of(alice), "bob")
        assert not bob.following.exists()

    def test_cannot_follow_self(self, store, alice, identity_of):
        with pytest.raises(InvalidOperation):
            RelationshipToggles(store).follow(identity_of(alice), "alice")
        assert not alice.following.exists()

    def test_unknown_user(self, store, alice, identity_of):
        with pytest.raises(NotFound):
            RelationshipToggles(store).follow(identity_of(alice), "nobody")


@pytest.mark.django_db(transaction=True)
class TestConcurrentFavorites:

    def test_parallel_favorites_lose_no_update(self, make_user, make_article):
        article = make_article(make_user("author"), "Popular")
        fans = [make_user(f"fan{i}") for i in range(8)]
        barrier = threading.Barrier(len(fans))

        def favorite(user):
            # Each worker thread opens its own connection
            try:
                barrier.wait()
                return RelationshipToggles(Store("default")).favorite(IdentityRef(user.pk), article.pk)
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=len(fans)) as pool:
            results = list(pool.map(favorite, fans))

        assert all(result.is_ok for result in results)
        article.refresh_from_db()
        assert article.favorites_count == article.favorited_by.count() == len(fans)

    def test_parallel_double_toggle_returns_to_zero(self, make_user, make_article):
        article = make_article(make_user("author"), "Flaky")
        fans = [make_user(f"fan{i}") for i in range(4)]
        calls = fans + fans
        barrier = threading.Barrier(len(calls))

        def favorite(user):
            try:
                barrier.wait()
                return RelationshipToggles(Store("default")).favorite(IdentityRef(user.pk), article.pk)
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=len(calls)) as pool:
            list(pool.map(favorite, calls))

        article.refresh_from_db()
        assert article.favorites_count == 0
        assert not article.favorited_by.exists()
