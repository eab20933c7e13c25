import pytest

from publishing.exceptions import Forbidden
from publishing.guards import assert_owner, is_owner
from publishing.identity import IdentityRef


@pytest.mark.django_db
class TestOwnershipGuard:

    def test_author_passes(self, alice, make_article, identity_of):
        article = make_article(alice)
        assert assert_owner(article, identity_of(alice)) is None
        assert is_owner(article, identity_of(alice))

    def test_other_user_is_forbidden(self, alice, bob, make_article, identity_of):
        article = make_article(alice)
        with pytest.raises(Forbidden) as excinfo:
            assert_owner(article, identity_of(bob))
        assert excinfo.value.status == 403
        assert "article" in excinfo.value.message

    def test_compares_identity_not_names(self, alice, make_user, make_article):
        impostor = make_user("impostor", name=alice.name)
        article = make_article(alice)
        assert not is_owner(article, IdentityRef(impostor.pk))
        assert is_owner(article, IdentityRef(alice.pk))

    def test_comment_checks_comment_author_not_article_author(
            self, alice, bob, make_article, make_comment, identity_of):
        article = make_article(alice)
        comment = make_comment(article, bob)
        with pytest.raises(Forbidden):
            assert_owner(comment, identity_of(alice))
        assert_owner(comment, identity_of(bob))

    def test_guard_does_not_touch_the_resource(self, alice, bob, make_article, identity_of):
        article = make_article(alice, "Stable")
        with pytest.raises(Forbidden):
            assert_owner(article, identity_of(bob))
        article.refresh_from_db()
        assert article.title == "Stable"

    def test_anonymous_is_never_owner(self, alice, make_article):
        assert not is_owner(make_article(alice), None)
