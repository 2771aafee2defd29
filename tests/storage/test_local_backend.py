"""Tests for the in-memory LocalBackend.

Focus: schema checks on create (user-facing errors), id/revision assignment,
multi-load ordering, query semantics and link generation.
"""

import pytest

from entitydriver import Capability, Conjunction, LocalBackendSettings, Operator
from entitydriver.core.field import ReferenceItems, ScalarItems
from entitydriver.storage import (
    InvalidEntityValuesError,
    InvalidQueryError,
    LinkGenerationError,
    LocalBackend,
    UnknownEntityTypeError,
)


def _save(backend, entity_type_id, values):
    entity = backend.create(entity_type_id, values)
    backend.save(entity)
    return entity


# Creation


def test_create_returns_unsaved_entity(backend):
    entity = backend.create("node", {"type": "article", "title": "Hello"})

    assert entity.is_new()
    assert entity.id() is None
    assert entity.bundle() == "article"
    assert entity.label() == "Hello"


def test_create_applies_defaults_and_langcode(backend):
    entity = backend.create("node", {"type": "page", "title": "About"})

    assert entity.get("status") == ScalarItems("status", (1,))
    assert entity.get("field_weight") == ScalarItems("field_weight", (0,))
    assert entity.langcode == "en"


def test_unknown_entity_type_is_rejected(backend):
    with pytest.raises(UnknownEntityTypeError, match="'bogus' entity type does not exist"):
        backend.create("bogus", {})


def test_unknown_entity_type_is_a_key_error(backend):
    with pytest.raises(KeyError):
        backend.load_multiple("bogus", [1])


@pytest.mark.parametrize(
    ("values", "message"),
    [
        ({"title": "No bundle"}, "Missing bundle"),
        ({"type": "blog", "title": "x"}, "Bundle 'blog' does not exist"),
        ({"type": "article", "title": "x", "colour": "red"}, "Unknown field"),
        ({"type": "page", "title": "x", "body": "only on articles"}, "Unknown field"),
        ({"type": "article"}, "'title' is required"),
        ({"type": "article", "title": ["a", "b"]}, "at most 1 value"),
        ({"type": "article", "title": "x", "nid": 5}, "assigned on save"),
    ],
)
def test_invalid_values_are_rejected(backend, values, message):
    with pytest.raises(InvalidEntityValuesError, match=message):
        backend.create("node", values)


def test_single_bundle_type_needs_no_bundle_value(backend):
    entity = backend.create("user", {"name": "admin"})

    assert entity.bundle() == "user"


def test_reference_values_accept_ids_dicts_and_entities(backend):
    admin = _save(backend, "user", {"name": "admin"})
    red = _save(backend, "taxonomy_term", {"name": "red"})
    blue = _save(backend, "taxonomy_term", {"name": "blue"})

    entity = backend.create(
        "node",
        {
            "type": "article",
            "title": "x",
            "uid": admin,
            "field_tags": [{"target_id": red.id()}, str(blue.id())],
        },
    )

    assert entity.get("uid") == ReferenceItems("uid", "user", (admin.id(),))
    assert entity.get("field_tags").target_ids == (red.id(), blue.id())


def test_reference_to_wrong_entity_type_is_rejected(backend):
    term = _save(backend, "taxonomy_term", {"name": "red"})

    with pytest.raises(InvalidEntityValuesError, match="needs a saved user entity"):
        backend.create("node", {"type": "article", "title": "x", "uid": term})


def test_reference_accepts_list_of_entity_objects(backend):
    """Entity objects reduce to ids before values are copied into the new entity."""
    red = _save(backend, "taxonomy_term", {"name": "red"})
    blue = _save(backend, "taxonomy_term", {"name": "blue"})

    entity = backend.create("node", {"type": "article", "title": "x", "field_tags": [red, blue]})
    backend.save(entity)

    assert entity.get("field_tags").target_ids == (red.id(), blue.id())
    assert [ref.id() for ref in entity.referenced_entities("field_tags")] == [1, 2]


def test_unsaved_entity_reference_is_rejected(backend):
    draft = backend.create("user", {"name": "draft"})

    with pytest.raises(InvalidEntityValuesError, match="needs a saved user entity"):
        backend.create("node", {"type": "article", "title": "x", "uid": draft})


def test_created_entity_does_not_alias_input_values(backend):
    roles = ["editor"]
    entity = backend.create("user", {"name": "admin", "roles": roles})

    roles.append("admin")

    assert entity.get("roles").values == ("editor",)



def test_scalar_value_dicts_are_unwrapped(backend):
    entity = backend.create("node", {"type": "article", "title": [{"value": "Wrapped"}]})

    assert entity.label() == "Wrapped"


# Saving and loading


def test_save_assigns_sequential_ids_per_type(backend):
    first = _save(backend, "node", {"type": "article", "title": "a"})
    second = _save(backend, "node", {"type": "article", "title": "b"})
    user = _save(backend, "user", {"name": "admin"})

    assert (first.id(), second.id(), user.id()) == (1, 2, 1)


def test_each_save_creates_a_revision(backend):
    entity = _save(backend, "node", {"type": "article", "title": "a"})
    first_revision = entity.revision_id()

    backend.save(entity)

    assert entity.id() == 1
    assert entity.revision_id() == first_revision + 1


def test_non_revisionable_type_has_no_revision(backend):
    user = _save(backend, "user", {"name": "admin"})

    assert user.revision_id() is None
    assert Capability.REVISIONABLE not in user.capabilities()
    assert Capability.ACCOUNT in user.capabilities()


def test_save_rejects_foreign_entities(backend, entity_types):
    other = LocalBackend(entity_types)
    entity = other.create("user", {"name": "stranger"})

    with pytest.raises(TypeError, match="does not belong"):
        backend.save(entity)


def test_loaded_entities_are_copies(backend):
    _save(backend, "user", {"name": "admin", "roles": ["editor"]})

    loaded = backend.load_multiple("user", [1])[1]
    loaded._items["roles"].append("admin")

    assert backend.load_multiple("user", [1])[1].get("roles").values == ("editor",)


def test_load_multiple_skips_missing_ids(backend):
    for title in ("a", "b"):
        _save(backend, "node", {"type": "article", "title": title})

    loaded = backend.load_multiple("node", [1, 2, 999])

    assert set(loaded) == {1, 2}


def test_load_multiple_uses_storage_order(backend):
    """Results follow storage order, not the order ids were requested in."""
    for title in ("a", "b", "c"):
        _save(backend, "node", {"type": "article", "title": title})

    loaded = backend.load_multiple("node", [3, 1, 2])

    assert list(loaded) == [1, 2, 3]


def test_load_multiple_accepts_numeric_strings_and_ignores_junk(backend):
    _save(backend, "user", {"name": "admin"})

    assert list(backend.load_multiple("user", ["1", ["not", "hashable"], None])) == [1]


def test_referenced_entities_skip_broken_targets(backend):
    red = _save(backend, "taxonomy_term", {"name": "red"})
    node = _save(
        backend, "node", {"type": "article", "title": "x", "field_tags": [red.id(), 404]}
    )

    refs = node.referenced_entities("field_tags")

    assert [ref.id() for ref in refs] == [red.id()]


def test_referenced_entities_of_scalar_field_is_empty(backend):
    node = _save(backend, "node", {"type": "article", "title": "x"})

    assert node.referenced_entities("title") == []


def test_to_dict_flattens_values(backend):
    admin = _save(backend, "user", {"name": "admin", "roles": ["editor", "admin"]})
    node = _save(backend, "node", {"type": "article", "title": "Hello", "uid": admin.id()})

    assert node.to_dict() == {
        "nid": 1,
        "vid": 1,
        "type": "article",
        "langcode": "en",
        "title": "Hello",
        "status": 1,
        "uid": [{"target_id": 1}],
        "body": None,
        "field_tags": [],
    }
    assert admin.to_dict()["roles"] == ["editor", "admin"]


# Links


def test_link_templates_fill_entity_id(backend):
    node = _save(backend, "node", {"type": "article", "title": "x"})

    assert node.to_url("canonical") == "/node/1"
    assert node.to_url("edit-form") == "/node/1/edit"


def test_link_with_unknown_placeholder_fails(backend):
    node = _save(backend, "node", {"type": "article", "title": "x"})

    with pytest.raises(LinkGenerationError, match="Missing parameter 'node_revision'"):
        node.to_url("revision")


def test_link_for_unsaved_entity_fails(backend):
    node = backend.create("node", {"type": "article", "title": "x"})

    with pytest.raises(LinkGenerationError, match="unsaved"):
        node.to_url("canonical")


def test_unknown_link_template_fails(backend):
    node = _save(backend, "node", {"type": "article", "title": "x"})

    with pytest.raises(LinkGenerationError, match="No link template"):
        node.to_url("delete-form")


def test_base_url_prefixes_links(entity_types):
    settings = LocalBackendSettings(base_url="https://cms.test/")
    backend = LocalBackend(entity_types, settings=settings)
    user = _save(backend, "user", {"name": "admin"})

    assert user.to_url("canonical") == "https://cms.test/user/1"


# Queries


@pytest.fixture
def populated(backend):
    _save(backend, "node", {"type": "article", "title": "Alpha", "status": 1})
    _save(backend, "node", {"type": "article", "title": "Beta", "status": 0})
    _save(backend, "node", {"type": "page", "title": "Gamma", "status": 1, "langcode": "fr"})
    return backend


def test_query_without_conditions_returns_all(populated):
    assert populated.get_query("node").execute() == [1, 2, 3]


def test_query_and_or(populated):
    and_ids = populated.get_query("node", "AND").condition("status", 1).condition("type", "page")
    or_ids = populated.get_query("node", "or").condition("status", 0).condition("type", "page")

    assert and_ids.execute() == [3]
    assert or_ids.execute() == [2, 3]


def test_query_defaults_to_in_for_lists(populated):
    assert populated.get_query("node").condition("nid", [1, 3]).execute() == [1, 3]


def test_query_langcode_restricts_condition(populated):
    query = populated.get_query("node").condition("status", 1, langcode="fr")

    assert query.execute() == [3]


def test_query_on_field_property(populated):
    query = populated.get_query("node").condition("title.value", "A", "STARTS_WITH")

    assert query.execute() == [1]


def test_query_on_bundle_specific_field_skips_other_bundles(populated):
    query = populated.get_query("node").condition("field_weight", 0)

    assert query.execute() == [3]


def test_query_on_unknown_field_fails(populated):
    with pytest.raises(InvalidQueryError, match="'colour' not found"):
        populated.get_query("node").condition("colour", "red").execute()


def test_query_rejects_bad_conjunction(backend):
    with pytest.raises(ValueError, match="Invalid conjunction"):
        backend.get_query("node", "XOR")


def test_access_policy_applies_only_while_checking_access(entity_types):
    def published(entity):
        return entity.get("status").values == (1,)

    backend = LocalBackend(entity_types, access_policy=published)
    _save(backend, "node", {"type": "article", "title": "Published"})
    _save(backend, "node", {"type": "article", "title": "Draft", "status": 0})

    assert backend.get_query("node").execute() == [1]
    assert backend.get_query("node").access_check(False).execute() == [1, 2]


def test_query_builder_records_state(backend):
    query = backend.get_query("node", "or")
    query.condition("status", [0, 1]).condition("title", "x", "!=")

    assert query.conjunction is Conjunction.OR
    assert [c.operator for c in query.conditions] == [Operator.IN, Operator.NE]
    assert query.checks_access
    assert not query.access_check(False).checks_access
