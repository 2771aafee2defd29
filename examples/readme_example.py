import json
import logging

from entitydriver import (
    UNLIMITED,
    EntityDriver,
    EntityKeys,
    EntityTypeDefinition,
    FieldDefinition,
    LocalBackend,
)

node_type = EntityTypeDefinition(
    id="node",
    label="Content",
    keys=EntityKeys(id="nid", revision="vid", bundle="type", label="title"),
    bundles=("article",),
    revisionable=True,
    link_templates={"canonical": "/node/{node}", "edit-form": "/node/{node}/edit"},
    base_fields=(
        FieldDefinition("title", required=True),
        FieldDefinition("status", default=1),
        FieldDefinition.reference("uid", "user"),
        FieldDefinition.reference("field_tags", "taxonomy_term", cardinality=UNLIMITED),
    ),
)

user_type = EntityTypeDefinition(
    id="user",
    keys=EntityKeys(id="uid", label="name"),
    account=True,
    display_name_field="name",
    link_templates={"canonical": "/user/{user}"},
    base_fields=(FieldDefinition("name", required=True),),
)

term_type = EntityTypeDefinition(
    id="taxonomy_term",
    keys=EntityKeys(id="tid", bundle="vid", label="name"),
    bundles=("tags",),
    link_templates={"canonical": "/taxonomy/term/{taxonomy_term}"},
    base_fields=(FieldDefinition("name", required=True),),
)


def published_only(entity) -> bool:
    return entity.get("status").values == (1,)


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    backend = LocalBackend([node_type, user_type, term_type], access_policy=published_only)
    driver = EntityDriver(backend)

    author = driver.create_entity("user", {"name": "editor"})
    tag = driver.create_entity("taxonomy_term", {"name": "news"})
    driver.create_entity(
        "node",
        {
            "title": "Hello",
            "uid": author["_meta"]["id"],
            "field_tags": [tag["_meta"]["id"], 404],
        },
    )
    driver.create_entity("node", {"title": "Draft", "status": 0})

    # The access policy hides the draft from regular queries, the driver sees both.
    print("Backend query:", backend.get_query("node").execute())
    print(json.dumps(driver.query_entities("node", []), indent=2))
    print(json.dumps(driver.load_entities("node", [2, 1, 999]), indent=2))


if __name__ == "__main__":
    main()
