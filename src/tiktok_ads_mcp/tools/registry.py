"""Declarative descriptors mapping tool names to TikTok endpoints."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Sequence

from ..utils.validators import FieldSpec
from . import schemas

Transform = Callable[[Dict[str, Any]], Dict[str, Any]]

LISTING_FILTER_FIELDS = (
    "campaign_ids",
    "campaign_name",
    "objective_type",
    "primary_status",
    "adgroup_ids",
    "ad_ids",
)


def passthrough(params: Dict[str, Any]) -> Dict[str, Any]:
    return dict(params)


def nest_filtering(params: Dict[str, Any]) -> Dict[str, Any]:
    """Move listing filter fields under a ``filtering`` object."""
    payload = dict(params)
    filtering = {name: payload.pop(name) for name in LISTING_FILTER_FIELDS if name in payload}
    if filtering:
        payload["filtering"] = filtering
    return payload


def rename(**renames: str) -> Transform:
    """Build a transform that renames fields, leaving the rest untouched."""

    def transform(params: Dict[str, Any]) -> Dict[str, Any]:
        return {renames.get(key, key): value for key, value in params.items()}

    return transform


def video_upload_payload(params: Dict[str, Any]) -> Dict[str, Any]:
    # video_file is a URL, a video id or a file reference depending on upload_type
    payload = rename(video_name="file_name")(params)
    source = payload.pop("video_file")
    upload_type = payload["upload_type"]

    if upload_type == "UPLOAD_BY_URL":
        payload["video_url"] = source
        payload.pop("video_signature", None)
    elif upload_type == "UPLOAD_BY_VIDEO_ID":
        payload["video_id"] = source
        payload.pop("video_signature", None)
    else:
        payload["video_file"] = source
    return payload


def image_upload_payload(params: Dict[str, Any]) -> Dict[str, Any]:
    payload = rename(image_name="file_name")(params)
    source = payload.pop("image_file")
    upload_type = payload["upload_type"]

    if upload_type == "UPLOAD_BY_URL":
        payload["image_url"] = source
        payload.pop("image_signature", None)
    elif upload_type == "UPLOAD_BY_FILE_ID":
        payload["file_id"] = source
        payload.pop("image_signature", None)
    else:
        payload["image_file"] = source
    return payload


def advertiser_info_payload(params: Dict[str, Any]) -> Dict[str, Any]:
    payload = dict(params)
    payload["advertiser_ids"] = [payload.pop("advertiser_id")]
    return payload


@dataclass(frozen=True)
class ToolDescriptor:
    """Everything the dispatcher needs to serve one tool."""

    name: str
    fields: Sequence[FieldSpec]
    method: str
    endpoint: str
    transform: Transform = passthrough


class ToolRegistry:
    """Mapping of tool name to descriptor with unique keys."""

    def __init__(self, descriptors: Sequence[ToolDescriptor] = ()) -> None:
        self._descriptors: Dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._descriptors:
            raise ValueError(f"Tool {descriptor.name!r} is already registered")
        self._descriptors[descriptor.name] = descriptor

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._descriptors.get(name)

    def names(self) -> list[str]:
        return list(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)


TOOL_DESCRIPTORS = (
    # Campaign management
    ToolDescriptor("campaign_create", schemas.CAMPAIGN_CREATE, "POST", "/campaign/create/"),
    ToolDescriptor("campaign_get", schemas.CAMPAIGN_GET, "GET", "/campaign/get/", nest_filtering),
    ToolDescriptor("campaign_update", schemas.CAMPAIGN_UPDATE, "POST", "/campaign/update/"),
    ToolDescriptor("campaign_status_update", schemas.CAMPAIGN_STATUS_UPDATE, "POST", "/campaign/status/update/"),
    # Ad group management
    ToolDescriptor("adgroup_create", schemas.ADGROUP_CREATE, "POST", "/adgroup/create/"),
    ToolDescriptor("adgroup_get", schemas.ADGROUP_GET, "GET", "/adgroup/get/", nest_filtering),
    # Ad management
    ToolDescriptor("ad_create", schemas.AD_CREATE, "POST", "/ad/create/"),
    ToolDescriptor("ad_get", schemas.AD_GET, "GET", "/ad/get/", nest_filtering),
    # Creatives
    ToolDescriptor("video_upload", schemas.VIDEO_UPLOAD, "POST", "/file/video/ad/upload/", video_upload_payload),
    ToolDescriptor("image_upload", schemas.IMAGE_UPLOAD, "POST", "/file/image/ad/upload/", image_upload_payload),
    # Reporting
    ToolDescriptor(
        "report_integrated_get", schemas.REPORT_INTEGRATED_GET, "GET", "/report/integrated/get/",
        rename(filters="filtering"),
    ),
    # Business Center
    ToolDescriptor("bc_advertiser_get", schemas.BC_ADVERTISER_GET, "GET", "/bc/advertiser/get/"),
    ToolDescriptor("bc_pixel_create", schemas.BC_PIXEL_CREATE, "POST", "/bc/pixel/create/"),
    ToolDescriptor("bc_pixel_get", schemas.BC_PIXEL_GET, "GET", "/bc/pixel/get/"),
    # Accounts and organic content
    ToolDescriptor("account_info_get", schemas.ACCOUNT_INFO_GET, "GET", "/advertiser/info/", advertiser_info_payload),
    ToolDescriptor("post_create", schemas.POST_CREATE, "POST", "/business/video/publish/", rename(post_text="text")),
    ToolDescriptor("comment_list", schemas.COMMENT_LIST, "GET", "/business/comment/list/"),
    # Catalogs
    ToolDescriptor("catalog_get", schemas.CATALOG_GET, "GET", "/catalog/get/"),
    ToolDescriptor("catalog_product_upload", schemas.CATALOG_PRODUCT_UPLOAD, "POST", "/catalog/product/upload/"),
    # Creator marketplace
    ToolDescriptor("creator_search", schemas.CREATOR_SEARCH, "GET", "/tcm/creator/discover/"),
    # Targeting utilities
    ToolDescriptor("tool_language", schemas.TOOL_LANGUAGE, "GET", "/tool/language/"),
    ToolDescriptor("tool_region", schemas.TOOL_REGION, "GET", "/tool/region/"),
    ToolDescriptor("tool_interest_category", schemas.TOOL_INTEREST_CATEGORY, "GET", "/tool/interest_category/"),
    ToolDescriptor("trending_hashtags", schemas.TRENDING_HASHTAGS, "GET", "/tool/hashtag/recommend/"),
)


def build_registry(descriptors: Sequence[ToolDescriptor] = TOOL_DESCRIPTORS) -> ToolRegistry:
    return ToolRegistry(descriptors)
