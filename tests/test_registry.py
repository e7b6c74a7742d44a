"""
Tests for node registration, encoding and the registry lifecycle.
"""

from dataclasses import dataclass

import pytest

from globalnode.codecs import Base64Codec, UriCodec
from globalnode.errors import (
    DuplicateTypeError,
    MalformedIdError,
    RegistrationError,
    RegistrySealedError,
    UnknownTypeError,
    UnresolvedTypeError,
)
from globalnode.registry import NodeRegistry


@dataclass
class Post:
    id: int
    title: str


@dataclass
class PinnedPost(Post):
    pinned: bool = True


@dataclass
class Comment:
    uid: str
    body: str


POSTS = {1: Post(id=1, title="First"), 2: Post(id=2, title="Second")}


def lookup_post(local_id: str) -> Post | None:
    return POSTS.get(int(local_id))


def lookup_comment(local_id: str) -> Comment | None:
    return None


class TestRegistration:
    """Tests for NodeRegistry.register."""

    def setup_method(self):
        self.codec = Base64Codec()
        self.registry = NodeRegistry(self.codec)

    def test_register_type(self):
        entry = self.registry.register("Post", lookup_post, model=Post)

        assert len(self.registry) == 1
        assert "Post" in self.registry
        assert self.registry.get("Post") is entry
        assert entry.lookup is lookup_post
        assert entry.model is Post

    def test_get_unregistered_returns_none(self):
        assert self.registry.get("Ghost") is None
        assert "Ghost" not in self.registry

    def test_list_type_names(self):
        self.registry.register("Post", lookup_post)
        self.registry.register("Comment", lookup_comment)

        assert self.registry.list_type_names() == ["Post", "Comment"]

    def test_register_duplicate_fails(self):
        self.registry.register("Post", lookup_post)

        with pytest.raises(DuplicateTypeError, match="Type 'Post' is already registered"):
            self.registry.register("Post", lookup_comment)

        assert self.registry.get("Post").lookup is lookup_post

    def test_register_duplicate_model_fails(self):
        self.registry.register("Post", lookup_post, model=Post)

        with pytest.raises(DuplicateTypeError, match="already registered as 'Post'"):
            self.registry.register("Article", lookup_post, model=Post)

        assert "Article" not in self.registry

    def test_replace_policy_overwrites(self):
        registry = NodeRegistry(self.codec, duplicate_policy="replace")
        registry.register("Post", lookup_post)

        registry.register("Post", lookup_comment)

        assert len(registry) == 1
        assert registry.get("Post").lookup is lookup_comment

    def test_replace_policy_moves_model(self):
        registry = NodeRegistry(self.codec, duplicate_policy="replace")
        registry.register("Post", lookup_post, model=Post)

        registry.register("Article", lookup_post, model=Post)

        assert registry.type_name_for(POSTS[1]) == "Article"
        assert "Post" not in registry

    def test_unknown_duplicate_policy(self):
        with pytest.raises(ValueError, match="Unknown duplicate policy"):
            NodeRegistry(self.codec, duplicate_policy="ignore")

    def test_type_name_with_delimiter_rejected(self):
        with pytest.raises(RegistrationError, match="cannot be encoded"):
            self.registry.register("Bad:Type", lookup_post)

        assert len(self.registry) == 0

    def test_type_name_must_suit_codec(self):
        registry = NodeRegistry(UriCodec())

        with pytest.raises(RegistrationError):
            registry.register("not a type", lookup_post)

    def test_empty_type_name_rejected(self):
        with pytest.raises(RegistrationError, match="non-empty"):
            self.registry.register("", lookup_post)

    def test_non_callable_lookup_rejected(self):
        with pytest.raises(RegistrationError, match="not callable"):
            self.registry.register("Post", POSTS)  # type: ignore[arg-type]

    def test_node_decorator(self):
        @self.registry.node("Post", model=Post)
        def load(local_id: str) -> Post | None:
            return POSTS.get(int(local_id))

        assert self.registry.get("Post").lookup is load
        assert self.registry.type_name_for(POSTS[1]) == "Post"


class TestSealing:
    """Tests for the Open -> Sealed lifecycle."""

    def setup_method(self):
        self.registry = NodeRegistry(Base64Codec())
        self.registry.register("Post", lookup_post, model=Post)

    def test_registry_starts_open(self):
        assert self.registry.sealed is False

    def test_register_after_seal_fails(self):
        self.registry.seal()

        with pytest.raises(RegistrySealedError, match="registry is sealed"):
            self.registry.register("Comment", lookup_comment)

        assert self.registry.sealed is True
        assert self.registry.list_type_names() == ["Post"]

    def test_sealed_error_is_a_registration_error(self):
        self.registry.seal()

        with pytest.raises(RegistrationError):
            self.registry.register("Post", lookup_post)

    def test_seal_is_idempotent(self):
        self.registry.seal()
        self.registry.seal()

        assert self.registry.sealed is True
        assert len(self.registry) == 1

    def test_sealed_registry_still_encodes_and_parses(self):
        self.registry.seal()
        token = self.registry.global_id(POSTS[1])

        assert self.registry.parse(token) == ("Post", "1")


class TestEncoding:
    """Tests for id_for, type_name_for and global_id."""

    def setup_method(self):
        self.codec = Base64Codec()
        self.registry = NodeRegistry(self.codec)
        self.registry.register("Post", lookup_post, model=Post)

    def test_id_for(self):
        token = self.registry.id_for(POSTS[1], "Post")

        assert token == self.codec.encode("Post", "1")

    def test_id_for_unregistered_type(self):
        token = self.registry.id_for(POSTS[1], "Article")

        assert self.codec.decode(token) == ("Article", "1")

    def test_id_for_mapping(self):
        token = self.registry.id_for({"id": 5}, "Post")

        assert self.codec.decode(token) == ("Post", "5")

    def test_id_for_surfaces_accessor_error(self):
        with pytest.raises(AttributeError):
            self.registry.id_for(Comment(uid="c1", body="hi"), "Comment")

    def test_entry_local_id_accessor(self):
        self.registry.register("Comment", lookup_comment, local_id_for=lambda c: c.uid)

        token = self.registry.id_for(Comment(uid="c1", body="hi"), "Comment")

        assert self.codec.decode(token) == ("Comment", "c1")

    def test_registry_local_id_accessor(self):
        registry = NodeRegistry(self.codec, local_id_for=lambda obj: f"x{obj.id}")

        assert self.codec.decode(registry.id_for(POSTS[2], "Post")) == ("Post", "x2")

    def test_type_name_for_model(self):
        assert self.registry.type_name_for(POSTS[1]) == "Post"

    def test_type_name_for_subclass(self):
        assert self.registry.type_name_for(PinnedPost(id=3, title="Pinned")) == "Post"

    def test_type_name_for_exact_class_wins(self):
        self.registry.register("PinnedPost", lookup_post, model=PinnedPost)

        assert self.registry.type_name_for(PinnedPost(id=3, title="Pinned")) == "PinnedPost"
        assert self.registry.type_name_for(POSTS[1]) == "Post"

    def test_type_name_for_unknown_model(self):
        with pytest.raises(UnresolvedTypeError, match="Comment"):
            self.registry.type_name_for(Comment(uid="c1", body="hi"))

    def test_custom_type_name_for(self):
        registry = NodeRegistry(self.codec, type_name_for=lambda obj: type(obj).__name__)

        assert registry.type_name_for(Comment(uid="c1", body="hi")) == "Comment"

    def test_custom_type_name_for_failure(self):
        names = {Post: "Post"}
        registry = NodeRegistry(self.codec, type_name_for=lambda obj: names[type(obj)])

        with pytest.raises(UnresolvedTypeError) as exc_info:
            registry.type_name_for(Comment(uid="c1", body="hi"))

        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_custom_type_name_for_empty_result(self):
        registry = NodeRegistry(self.codec, type_name_for=lambda obj: "")

        with pytest.raises(UnresolvedTypeError):
            registry.type_name_for(POSTS[1])

    def test_global_id(self):
        assert self.registry.global_id(POSTS[2]) == self.codec.encode("Post", "2")

    def test_global_id_unresolved(self):
        with pytest.raises(UnresolvedTypeError):
            self.registry.global_id(Comment(uid="c1", body="hi"))


class TestParse:
    """Tests for parse and decode."""

    def setup_method(self):
        self.codec = Base64Codec()
        self.registry = NodeRegistry(self.codec)
        self.registry.register("Post", lookup_post, model=Post)

    def test_parse(self):
        parsed = self.registry.parse(self.codec.encode("Post", "1"))

        assert parsed.type_name == "Post"
        assert parsed.local_id == "1"

    def test_parse_expected_type(self):
        token = self.codec.encode("Post", "1")

        assert self.registry.parse(token, expected_type="Post").local_id == "1"

    def test_parse_wrong_expected_type(self):
        self.registry.register("Comment", lookup_comment)
        token = self.codec.encode("Post", "1")

        with pytest.raises(UnknownTypeError, match="Expected a 'Comment' ID"):
            self.registry.parse(token, expected_type="Comment")

    def test_parse_unknown_type(self):
        with pytest.raises(UnknownTypeError) as exc_info:
            self.registry.parse(self.codec.encode("Ghost", "1"))

        assert exc_info.value.type_name == "Ghost"
        assert exc_info.value.local_id == "1"

    def test_parse_malformed(self):
        with pytest.raises(MalformedIdError):
            self.registry.parse("garbage")

    def test_decode_skips_registration_check(self):
        assert self.registry.decode(self.codec.encode("Ghost", "1")) == ("Ghost", "1")
