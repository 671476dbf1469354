from .record import EntityType, Record
from .asset import AssetFile
from .form_schema import (
    AssetSlot,
    BlockCodec,
    EntityFormSchema,
    GroupCodec,
    GroupInstance,
    KeyedObjectCodec,
    RepeatableGroup,
    ScalarField,
    SlotRef,
    ValueListCodec,
    VALUE_FIELD,
    is_blank,
)
from .dashboard import (
    LAST_MONTH_PLACEHOLDER_OFFSETS,
    DashboardSnapshot,
    DashboardState,
    MetricCard,
    MetricComparison,
)

__all__ = [
    "EntityType",
    "Record",
    "AssetFile",
    "AssetSlot",
    "BlockCodec",
    "EntityFormSchema",
    "GroupCodec",
    "GroupInstance",
    "KeyedObjectCodec",
    "RepeatableGroup",
    "ScalarField",
    "SlotRef",
    "ValueListCodec",
    "VALUE_FIELD",
    "is_blank",
    "LAST_MONTH_PLACEHOLDER_OFFSETS",
    "DashboardSnapshot",
    "DashboardState",
    "MetricCard",
    "MetricComparison",
]
