"""Field schemas for every TikTok tool."""

from ..constants import (
    AD_FORMATS,
    APP_PROMOTION_TYPES,
    BUDGET_MODES,
    CREATIVE_MATERIAL_MODES,
    DATA_LEVELS,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    IMAGE_UPLOAD_TYPES,
    INTERACTION_SETTINGS,
    MAX_NAME_LENGTH,
    MAX_PAGE_SIZE,
    OBJECTIVE_TYPES,
    OPERATION_STATUSES,
    PLACEMENT_TYPES,
    PRIVACY_LEVELS,
    PRODUCT_AVAILABILITY,
    REPORT_TYPES,
    SCHEDULE_TYPES,
    VIDEO_UPLOAD_TYPES,
)
from ..utils.validators import FieldSpec

# Shared fields
ADVERTISER_ID = FieldSpec("advertiser_id", min_length=1, ambient=True, description="Advertiser account ID")
BC_ID = FieldSpec("bc_id", min_length=1, ambient=True, description="Business Center ID")
PAGINATION = (
    FieldSpec("page", type="integer", default=DEFAULT_PAGE, minimum=1, description="Page number"),
    FieldSpec(
        "page_size",
        type="integer",
        default=DEFAULT_PAGE_SIZE,
        minimum=1,
        maximum=MAX_PAGE_SIZE,
        description="Results per page",
    ),
)


def _id(name: str, required: bool = True) -> FieldSpec:
    return FieldSpec(name, required=required, min_length=1)


def _id_list(name: str, required: bool = False) -> FieldSpec:
    return FieldSpec(name, type="array", items="string", required=required, min_length=1 if required else None)


def _name(name: str, required: bool = True) -> FieldSpec:
    return FieldSpec(name, required=required, min_length=1, max_length=MAX_NAME_LENGTH)


# Campaigns
CAMPAIGN_CREATE = (
    ADVERTISER_ID,
    _name("campaign_name"),
    FieldSpec("objective_type", required=True, enum=OBJECTIVE_TYPES),
    FieldSpec("budget", type="number", required=True, exclusive_minimum=0),
    FieldSpec("budget_mode", required=True, enum=BUDGET_MODES),
    FieldSpec("app_promotion_type", enum=APP_PROMOTION_TYPES),
)

CAMPAIGN_GET = (
    ADVERTISER_ID,
    _id_list("campaign_ids"),
    FieldSpec("campaign_name"),
    FieldSpec("objective_type", enum=OBJECTIVE_TYPES),
    FieldSpec("primary_status"),
    *PAGINATION,
)

CAMPAIGN_UPDATE = (
    ADVERTISER_ID,
    _id("campaign_id"),
    _name("campaign_name", required=False),
    FieldSpec("budget", type="number", exclusive_minimum=0),
    FieldSpec("budget_mode", enum=BUDGET_MODES),
)

CAMPAIGN_STATUS_UPDATE = (
    ADVERTISER_ID,
    _id_list("campaign_ids", required=True),
    FieldSpec("operation_status", required=True, enum=OPERATION_STATUSES),
)

# Ad groups
ADGROUP_CREATE = (
    ADVERTISER_ID,
    _id("campaign_id"),
    _name("adgroup_name"),
    FieldSpec("placement_type", required=True, enum=PLACEMENT_TYPES),
    FieldSpec("placements", type="array", items="string"),
    FieldSpec("target_audience_settings", type="object"),
    FieldSpec("budget", type="number", exclusive_minimum=0),
    FieldSpec("schedule_type", enum=SCHEDULE_TYPES),
    FieldSpec("schedule_start_time", format="datetime"),
    FieldSpec("schedule_end_time", format="datetime"),
)

ADGROUP_GET = (
    ADVERTISER_ID,
    _id_list("campaign_ids"),
    _id_list("adgroup_ids"),
    *PAGINATION,
)

# Ads
AD_CREATE = (
    ADVERTISER_ID,
    _id("adgroup_id"),
    _name("ad_name"),
    FieldSpec("ad_format", required=True, enum=AD_FORMATS),
    FieldSpec("ad_text", max_length=100),
    FieldSpec("call_to_action"),
    FieldSpec("creative_material_mode", enum=CREATIVE_MATERIAL_MODES),
    _id("video_id", required=False),
    _id_list("image_ids"),
    FieldSpec("landing_page_url", max_length=2048),
    FieldSpec("display_name", max_length=40),
)

AD_GET = (
    ADVERTISER_ID,
    _id_list("campaign_ids"),
    _id_list("adgroup_ids"),
    _id_list("ad_ids"),
    *PAGINATION,
)

# Creatives
VIDEO_UPLOAD = (
    ADVERTISER_ID,
    FieldSpec("video_file", required=True, min_length=1),
    FieldSpec("video_signature", min_length=32, max_length=32),
    FieldSpec("video_size", type="integer", minimum=1),
    FieldSpec("video_name", min_length=1, max_length=MAX_NAME_LENGTH),
    FieldSpec("upload_type", required=True, enum=VIDEO_UPLOAD_TYPES),
)

IMAGE_UPLOAD = (
    ADVERTISER_ID,
    FieldSpec("image_file", required=True, min_length=1),
    FieldSpec("image_signature", min_length=32, max_length=32),
    FieldSpec("image_size", type="integer", minimum=1),
    FieldSpec("image_name", min_length=1, max_length=MAX_NAME_LENGTH),
    FieldSpec("upload_type", required=True, enum=IMAGE_UPLOAD_TYPES),
)

# Reporting
REPORT_INTEGRATED_GET = (
    ADVERTISER_ID,
    FieldSpec("report_type", required=True, enum=REPORT_TYPES),
    FieldSpec("data_level", required=True, enum=DATA_LEVELS),
    FieldSpec("dimensions", type="array", items="string"),
    FieldSpec("metrics", type="array", items="string"),
    FieldSpec("start_date", required=True, format="date"),
    FieldSpec("end_date", required=True, format="date"),
    FieldSpec("filters", type="object"),
    *PAGINATION,
)

# Business Center
BC_ADVERTISER_GET = (BC_ID, *PAGINATION)

BC_PIXEL_CREATE = (
    BC_ID,
    _name("pixel_name"),
    FieldSpec("description", max_length=MAX_NAME_LENGTH),
)

BC_PIXEL_GET = (BC_ID, _id_list("pixel_ids"), *PAGINATION)

# Accounts and organic content
ACCOUNT_INFO_GET = (ADVERTISER_ID,)

POST_CREATE = (
    ADVERTISER_ID,
    _id("video_id"),
    FieldSpec("post_text", max_length=2200),
    FieldSpec("privacy_level", enum=PRIVACY_LEVELS),
    FieldSpec("comment_setting", enum=INTERACTION_SETTINGS),
    FieldSpec("duet_setting", enum=INTERACTION_SETTINGS),
    FieldSpec("stitch_setting", enum=INTERACTION_SETTINGS),
)

COMMENT_LIST = (
    ADVERTISER_ID,
    _id("video_id"),
    FieldSpec("cursor"),
    FieldSpec("count", type="integer", default=20, minimum=1, maximum=50),
)

# Catalogs
CATALOG_GET = (BC_ID, _id("catalog_id", required=False))

PRODUCT_FIELDS = (
    FieldSpec("sku_id", required=True, min_length=1),
    FieldSpec("title", required=True, min_length=1, max_length=MAX_NAME_LENGTH),
    FieldSpec("description"),
    FieldSpec("price", type="number", exclusive_minimum=0),
    FieldSpec("availability", enum=PRODUCT_AVAILABILITY),
    FieldSpec("image_url"),
    FieldSpec("landing_page_url"),
)

CATALOG_PRODUCT_UPLOAD = (
    BC_ID,
    _id("catalog_id"),
    FieldSpec("products", type="array", required=True, min_length=1, item_fields=PRODUCT_FIELDS),
)

# Creator marketplace
CREATOR_SEARCH = (
    ADVERTISER_ID,
    FieldSpec("creator_audience_countries", type="array", items="string"),
    FieldSpec("creator_follower_count_min", type="integer", minimum=0),
    FieldSpec("creator_follower_count_max", type="integer", minimum=0),
    FieldSpec("creator_audience_age_groups", type="array", items="string"),
    FieldSpec("creator_audience_genders", type="array", items="string"),
    *PAGINATION,
)

# Targeting utilities
TOOL_LANGUAGE = (ADVERTISER_ID,)

TOOL_REGION = (ADVERTISER_ID, FieldSpec("placements", type="array", items="string"))

TOOL_INTEREST_CATEGORY = (
    ADVERTISER_ID,
    FieldSpec("placements", type="array", items="string"),
    FieldSpec("special_industries", type="array", items="string"),
)

TRENDING_HASHTAGS = (
    ADVERTISER_ID,
    FieldSpec("country_code", min_length=2, max_length=2),
    FieldSpec("industry"),
)
