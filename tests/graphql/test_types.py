"""
Tests for converting ORM rows into GraphQL types
"""

import uuid

import pytest
from sqlalchemy.orm.attributes import set_committed_value

from usergraph.dbmodels import MemberTypes, Posts, Profiles, Users
from usergraph.enums import MemberTypeId
from usergraph.graphql.preload import preloaded
from usergraph.graphql.types.member_type import MemberType
from usergraph.graphql.types.post import Post
from usergraph.graphql.types.profile import Profile
from usergraph.graphql.types.user import User


def make_user(name: str = "Alice", balance: float = 10.5) -> Users:
    return Users(id=uuid.uuid4(), name=name, balance=balance)


def make_profile(user: Users, member_type_id: str = "BASIC") -> Profiles:
    return Profiles(
        id=uuid.uuid4(),
        is_male=False,
        year_of_birth=1990,
        user_id=user.id,
        member_type_id=member_type_id,
    )


def make_post(user: Users, title: str = "Hello") -> Posts:
    return Posts(id=uuid.uuid4(), title=title, content="Body", author_id=user.id)


class TestPreloaded:
    def test_unloaded_relationship_is_none(self):
        user = make_user()
        assert preloaded(user, "posts") is None

    def test_loaded_relationship_is_returned(self):
        user = make_user()
        post = make_post(user)
        set_committed_value(user, "posts", [post])

        assert preloaded(user, "posts") == [post]

    def test_loaded_empty_relationship_stays_empty(self):
        user = make_user()
        set_committed_value(user, "posts", [])

        assert preloaded(user, "posts") == []


class TestMemberType:
    def test_from_model(self):
        row = MemberTypes(id="BUSINESS", discount=5.1, posts_limit_per_month=100)

        result = MemberType.from_model(row)

        assert result.id is MemberTypeId.BUSINESS
        assert result.discount == 5.1
        assert result.posts_limit_per_month == 100

    def test_unknown_tier_is_rejected(self):
        row = MemberTypes(id="GOLD", discount=1.0, posts_limit_per_month=1)

        with pytest.raises(ValueError):
            MemberType.from_model(row)


class TestPost:
    def test_from_model(self):
        user = make_user()
        row = make_post(user, title="First")

        result = Post.from_model(row)

        assert result.id == row.id
        assert result.title == "First"
        assert result.content == "Body"
        assert result.author_id == user.id


class TestProfile:
    def test_member_type_absent_when_not_loaded(self):
        row = make_profile(make_user())

        result = Profile.from_model(row)

        assert result.member_type_id is MemberTypeId.BASIC
        assert result.loaded_member_type is None

    def test_member_type_attached_when_loaded(self):
        row = make_profile(make_user(), member_type_id="BUSINESS")
        member_type = MemberTypes(id="BUSINESS", discount=5.1, posts_limit_per_month=100)
        set_committed_value(row, "member_type", member_type)

        result = Profile.from_model(row)

        assert result.loaded_member_type is not None
        assert result.loaded_member_type.id is MemberTypeId.BUSINESS


class TestUser:
    def test_scalars_only_when_nothing_loaded(self):
        row = make_user(name="Bob", balance=3.0)

        result = User.from_model(row)

        assert result.id == row.id
        assert result.name == "Bob"
        assert result.balance == 3.0
        assert result.loaded_profile is None
        assert result.loaded_posts is None
        assert result.loaded_subscribed_to is None
        assert result.loaded_subscribers is None

    def test_users_shape_has_posts_list_and_nullable_profile(self):
        row = make_user()
        set_committed_value(row, "profile", None)
        set_committed_value(row, "posts", [])

        result = User.from_model(row)

        assert result.loaded_profile is None
        assert result.loaded_posts == []

    def test_nested_profile_and_posts(self):
        row = make_user()
        profile = make_profile(row)
        set_committed_value(
            profile,
            "member_type",
            MemberTypes(id="BASIC", discount=2.3, posts_limit_per_month=20),
        )
        set_committed_value(row, "profile", profile)
        set_committed_value(row, "posts", [make_post(row, "a"), make_post(row, "b")])

        result = User.from_model(row)

        assert result.loaded_profile.id == profile.id
        assert result.loaded_profile.loaded_member_type.posts_limit_per_month == 20
        assert [p.title for p in result.loaded_posts] == ["a", "b"]

    def test_subscription_users_carry_no_relations(self):
        alice = make_user("Alice")
        bob = make_user("Bob")
        set_committed_value(bob, "posts", [make_post(bob)])
        set_committed_value(alice, "user_subscribed_to", [bob])
        set_committed_value(alice, "subscribed_to_user", [])

        result = User.from_model(alice)

        subscribed_to = result.loaded_subscribed_to
        assert [u.name for u in subscribed_to] == ["Bob"]
        assert subscribed_to[0].loaded_posts is None
        assert result.loaded_subscribers == []

    def test_self_subscription_does_not_recurse(self):
        alice = make_user("Alice")
        set_committed_value(alice, "user_subscribed_to", [alice])
        set_committed_value(alice, "subscribed_to_user", [alice])

        result = User.from_model(alice)

        assert result.loaded_subscribed_to[0].id == alice.id
        assert result.loaded_subscribed_to[0].loaded_subscribed_to is None
