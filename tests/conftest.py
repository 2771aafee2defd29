"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from entitydriver import (
    UNLIMITED,
    DriverSettings,
    EntityDriver,
    EntityKeys,
    EntityTypeDefinition,
    FieldDefinition,
    LocalBackend,
    LocalBackendSettings,
)

NODE_TYPE = EntityTypeDefinition(
    id="node",
    label="Content",
    keys=EntityKeys(id="nid", revision="vid", bundle="type", label="title"),
    bundles=("article", "page"),
    revisionable=True,
    link_templates={
        "canonical": "/node/{node}",
        "edit-form": "/node/{node}/edit",
        "revision": "/node/{node}/revisions/{node_revision}/view",
    },
    base_fields=(
        FieldDefinition("title", required=True),
        FieldDefinition("status", default=1),
        FieldDefinition.reference("uid", "user"),
    ),
    bundle_fields={
        "article": (
            FieldDefinition("body"),
            FieldDefinition.reference("field_tags", "taxonomy_term", cardinality=UNLIMITED),
        ),
        "page": (FieldDefinition("field_weight", default=0),),
    },
)

USER_TYPE = EntityTypeDefinition(
    id="user",
    label="User",
    keys=EntityKeys(id="uid", label="name"),
    account=True,
    display_name_field="name",
    link_templates={"canonical": "/user/{user}", "cancel-form": "/user/{user}/cancel"},
    base_fields=(
        FieldDefinition("name", required=True),
        FieldDefinition("mail"),
        FieldDefinition("roles", cardinality=UNLIMITED),
    ),
)

TERM_TYPE = EntityTypeDefinition(
    id="taxonomy_term",
    label="Taxonomy term",
    keys=EntityKeys(id="tid", bundle="vid", label="name"),
    bundles=("tags",),
    link_templates={"canonical": "/taxonomy/term/{taxonomy_term}"},
    base_fields=(
        FieldDefinition("name", required=True),
        FieldDefinition.reference("parent", "taxonomy_term"),
    ),
)

MENU_TYPE = EntityTypeDefinition(
    id="menu",
    label="Menu",
    keys=EntityKeys(label="label"),
    fieldable=False,
    base_fields=(FieldDefinition("label"), FieldDefinition("description")),
)


@pytest.fixture
def backend():
    """Fresh LocalBackend with node, user, taxonomy_term and menu types."""
    return LocalBackend(
        [NODE_TYPE, USER_TYPE, TERM_TYPE, MENU_TYPE],
        settings=LocalBackendSettings(base_url="", default_langcode="en"),
    )


@pytest.fixture
def driver(backend):
    """EntityDriver over the fixture backend with default settings."""
    return EntityDriver(backend, settings=DriverSettings(default_conjunction="AND"))


@pytest.fixture
def entity_types():
    """Entity type definitions used by the fixture backend."""
    return [NODE_TYPE, USER_TYPE, TERM_TYPE, MENU_TYPE]
