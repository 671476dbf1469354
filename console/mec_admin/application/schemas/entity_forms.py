"""Form schemas for every entity screen of the console."""

from mec_admin.domain.entities import (
    AssetSlot,
    BlockCodec,
    EntityFormSchema,
    EntityType,
    KeyedObjectCodec,
    RepeatableGroup,
    ScalarField,
    ValueListCodec,
)

BANNER_FORM = EntityFormSchema(
    entity_type=EntityType.BANNERS,
    label="Banner",
    scalars=(
        ScalarField("name", required=True),
        ScalarField("description", required=True),
        ScalarField("position", required=True),
        ScalarField("is_active", default=True),
    ),
    asset_slots=(AssetSlot("img", required=True),),
)

CLIENT_FORM = EntityFormSchema(
    entity_type=EntityType.CLIENTS,
    label="Client",
    scalars=(ScalarField("client_name", required=True),),
    groups=(
        RepeatableGroup(
            "companies",
            codec=KeyedObjectCodec("name"),
            required_fields=("value",),
        ),
        RepeatableGroup("client_emails", codec=ValueListCodec(), drop_blank=True),
        RepeatableGroup("client_phones", codec=ValueListCodec(), drop_blank=True),
    ),
)

PROJECT_FORM = EntityFormSchema(
    entity_type=EntityType.PROJECTS,
    label="Project",
    scalars=(
        ScalarField("project_name", required=True),
        ScalarField("short_description", required=True),
        ScalarField("project_url", required=True),
        ScalarField("client_id", required=True, reference=EntityType.CLIENTS),
        ScalarField("work_id", required=True, reference=EntityType.WORKS),
    ),
    asset_slots=(AssetSlot("project_image", required=True),),
)

_WORK_INFO_FIELDS = ("heading", "details", "img")

WORK_FORM = EntityFormSchema(
    entity_type=EntityType.WORKS,
    label="Work",
    scalars=(ScalarField("title", required=True),),
    groups=(
        RepeatableGroup(
            "info",
            codec=BlockCodec(_WORK_INFO_FIELDS),
            field_names=_WORK_INFO_FIELDS,
            min_instances=0,
            required_fields=("heading", "details"),
            asset_fields=("img",),
        ),
    ),
)

REVIEW_FORM = EntityFormSchema(
    entity_type=EntityType.REVIEWS,
    label="Review",
    scalars=(ScalarField("is_verified", default=False),),
)

SUBSCRIBER_FORM = EntityFormSchema(
    entity_type=EntityType.SUBSCRIBERS,
    label="Subscriber",
)

ENQUIRY_FORM = EntityFormSchema(
    entity_type=EntityType.ENQUIRIES,
    label="Enquiry",
    scalars=(
        ScalarField("is_opened", default=False),
        ScalarField("opened_at", default=None),
    ),
)

FORM_SCHEMAS: dict[EntityType, EntityFormSchema] = {
    schema.entity_type: schema
    for schema in (
        BANNER_FORM,
        CLIENT_FORM,
        PROJECT_FORM,
        WORK_FORM,
        REVIEW_FORM,
        SUBSCRIBER_FORM,
        ENQUIRY_FORM,
    )
}


def get_form_schema(entity_type: EntityType | str) -> EntityFormSchema:
    return FORM_SCHEMAS[EntityType(entity_type)]
