#!/usr/bin/env python3
"""MCP Server for the TikTok Business API using FastMCP.

Every tool is a thin wrapper that hands its arguments to the shared
dispatcher, which validates them, applies the ambient advertiser and Business
Center ids, and forwards the call to the TikTok Business API.

Requires environment variables (a local .env file is honoured):
- TIKTOK_ACCESS_TOKEN: long-term access token (required)
- TIKTOK_ADVERTISER_ID: default advertiser id (optional)
- TIKTOK_BC_ID: default Business Center id (optional)
- TIKTOK_APP_ID, TIKTOK_APP_SECRET, TIKTOK_REFRESH_TOKEN: token refresh (optional)
"""

import asyncio
import json
import logging
import signal
import sys
from typing import Annotated, Any, Optional

from fastmcp import FastMCP
from pydantic import StrictFloat, StrictInt

from .config import load_settings
from .dispatcher import ToolDispatcher, build_dispatcher
from .exceptions import ConfigurationError
from .logging_utils import configure_logging
from .middleware import ToolErrorMiddleware
from .tools.registry import build_registry
from .utils.decorators import handle_tiktok_api_errors

logger = logging.getLogger(__name__)

mcp: FastMCP = FastMCP(
    "tiktok-ads-mcp",
    instructions=(
        "Tools for the TikTok Business API: campaigns, ad groups, ads, creatives, reporting, "
        "Business Center, catalogs, creators and targeting utilities. advertiser_id and bc_id "
        "may be omitted when defaults are configured on the server."
    ),
)
mcp.add_middleware(ToolErrorMiddleware(build_registry().names()))

_dispatcher: Optional[ToolDispatcher] = None

ADVERTISER_ID_HELP = "Advertiser account ID (optional if TIKTOK_ADVERTISER_ID is set)"
BC_ID_HELP = "Business Center ID (optional if TIKTOK_BC_ID is set)"


def get_dispatcher() -> ToolDispatcher:
    """Return the process-wide dispatcher, building it from the environment on first use."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher(load_settings())
    return _dispatcher


async def _call_tool(tool_name: str, arguments: dict[str, Any]) -> str:
    args = {key: value for key, value in arguments.items() if value is not None}
    # Dispatch blocks on rate limiting and HTTP, so it runs off the event loop.
    result = await asyncio.to_thread(get_dispatcher().dispatch, tool_name, args)
    return json.dumps(result, indent=2)


# Campaign management


@mcp.tool()
@handle_tiktok_api_errors
async def campaign_create(
    campaign_name: Annotated[str, "Name of the campaign"],
    objective_type: Annotated[
        str, "Campaign objective: REACH, TRAFFIC, APP_INSTALL, VIDEO_VIEW, CONVERSIONS or LEAD_GENERATION"
    ],
    budget: Annotated[StrictFloat, "Campaign budget amount (greater than 0)"],
    budget_mode: Annotated[str, "Budget mode: BUDGET_MODE_DAY or BUDGET_MODE_TOTAL"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    app_promotion_type: Annotated[
        Optional[str], "App promotion type for APP_INSTALL objectives: APP_INSTALL or APP_RETARGETING"
    ] = None,
) -> str:
    """Create a new TikTok advertising campaign."""
    return await _call_tool("campaign_create", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def campaign_get(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    campaign_ids: Annotated[Optional[list[str]], "Specific campaign IDs to retrieve"] = None,
    campaign_name: Annotated[Optional[str], "Filter by campaign name"] = None,
    objective_type: Annotated[Optional[str], "Filter by objective type"] = None,
    primary_status: Annotated[Optional[str], "Filter by primary status"] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Get campaigns for an advertiser, optionally filtered."""
    return await _call_tool("campaign_get", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def campaign_update(
    campaign_id: Annotated[str, "Campaign ID to update"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    campaign_name: Annotated[Optional[str], "New campaign name"] = None,
    budget: Annotated[Optional[StrictFloat], "New budget amount"] = None,
    budget_mode: Annotated[Optional[str], "New budget mode"] = None,
) -> str:
    """Update an existing campaign."""
    return await _call_tool("campaign_update", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def campaign_status_update(
    campaign_ids: Annotated[list[str], "Campaign IDs to update"],
    operation_status: Annotated[str, "Operation to perform: ENABLE, DISABLE or DELETE"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
) -> str:
    """Enable, disable or delete campaigns."""
    return await _call_tool("campaign_status_update", locals())


# Ad group management


@mcp.tool()
@handle_tiktok_api_errors
async def adgroup_create(
    campaign_id: Annotated[str, "Parent campaign ID"],
    adgroup_name: Annotated[str, "Name of the ad group"],
    placement_type: Annotated[str, "PLACEMENT_TYPE_AUTOMATIC or PLACEMENT_TYPE_MANUAL"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    placements: Annotated[Optional[list[str]], "Placement IDs for manual placement"] = None,
    target_audience_settings: Annotated[
        Optional[dict[str, Any]], "Targeting settings including demographics and interests"
    ] = None,
    budget: Annotated[Optional[StrictFloat], "Ad group budget"] = None,
    schedule_type: Annotated[Optional[str], "SCHEDULE_START_END or SCHEDULE_FROM_NOW"] = None,
    schedule_start_time: Annotated[Optional[str], "Start time (YYYY-MM-DD HH:MM:SS)"] = None,
    schedule_end_time: Annotated[Optional[str], "End time (YYYY-MM-DD HH:MM:SS)"] = None,
) -> str:
    """Create a new ad group within a campaign."""
    return await _call_tool("adgroup_create", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def adgroup_get(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    campaign_ids: Annotated[Optional[list[str]], "Filter by campaign IDs"] = None,
    adgroup_ids: Annotated[Optional[list[str]], "Filter by ad group IDs"] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Get ad group information."""
    return await _call_tool("adgroup_get", locals())


# Ad management


@mcp.tool()
@handle_tiktok_api_errors
async def ad_create(
    adgroup_id: Annotated[str, "Parent ad group ID"],
    ad_name: Annotated[str, "Name of the ad"],
    ad_format: Annotated[str, "SINGLE_VIDEO, SINGLE_IMAGE, CAROUSEL or SPARK_AD"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    ad_text: Annotated[Optional[str], "Ad text/copy"] = None,
    call_to_action: Annotated[Optional[str], "Call to action button text"] = None,
    creative_material_mode: Annotated[Optional[str], "CUSTOM or DYNAMIC"] = None,
    video_id: Annotated[Optional[str], "Video creative ID"] = None,
    image_ids: Annotated[Optional[list[str]], "Image creative IDs"] = None,
    landing_page_url: Annotated[Optional[str], "Landing page URL"] = None,
    display_name: Annotated[Optional[str], "Display name for the ad"] = None,
) -> str:
    """Create a new ad within an ad group."""
    return await _call_tool("ad_create", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def ad_get(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    campaign_ids: Annotated[Optional[list[str]], "Filter by campaign IDs"] = None,
    adgroup_ids: Annotated[Optional[list[str]], "Filter by ad group IDs"] = None,
    ad_ids: Annotated[Optional[list[str]], "Filter by ad IDs"] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Get ad information."""
    return await _call_tool("ad_get", locals())


# Creative management


@mcp.tool()
@handle_tiktok_api_errors
async def video_upload(
    video_file: Annotated[str, "Video URL, existing video ID or file reference, depending on upload_type"],
    upload_type: Annotated[str, "UPLOAD_BY_URL, UPLOAD_BY_VIDEO_ID or UPLOAD_BY_FILE"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    video_signature: Annotated[Optional[str], "MD5 hash of the video file"] = None,
    video_size: Annotated[Optional[StrictInt], "Video file size in bytes"] = None,
    video_name: Annotated[Optional[str], "Name for the video creative"] = None,
) -> str:
    """Upload a video creative for ads."""
    return await _call_tool("video_upload", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def image_upload(
    image_file: Annotated[str, "Image URL, file ID or file reference, depending on upload_type"],
    upload_type: Annotated[str, "UPLOAD_BY_URL, UPLOAD_BY_FILE_ID or UPLOAD_BY_FILE"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    image_signature: Annotated[Optional[str], "MD5 hash of the image file"] = None,
    image_size: Annotated[Optional[StrictInt], "Image file size in bytes"] = None,
    image_name: Annotated[Optional[str], "Name for the image creative"] = None,
) -> str:
    """Upload an image creative for ads."""
    return await _call_tool("image_upload", locals())


# Reporting


@mcp.tool()
@handle_tiktok_api_errors
async def report_integrated_get(
    report_type: Annotated[str, "BASIC, AUDIENCE, PLAYABLE_MATERIAL or RESERVATION"],
    data_level: Annotated[str, "AUCTION_ADVERTISER, AUCTION_CAMPAIGN, AUCTION_ADGROUP or AUCTION_AD"],
    start_date: Annotated[str, "Start date (YYYY-MM-DD)"],
    end_date: Annotated[str, "End date (YYYY-MM-DD)"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    dimensions: Annotated[Optional[list[str]], "Dimensions to group by (e.g., stat_time_day, gender, age)"] = None,
    metrics: Annotated[Optional[list[str]], "Metrics to include (e.g., spend, impressions, clicks, ctr, cpm)"] = None,
    filters: Annotated[Optional[dict[str, Any]], "Additional filters for campaigns, ad groups or ads"] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Get integrated advertising reports with metrics."""
    return await _call_tool("report_integrated_get", locals())


# Business Center


@mcp.tool()
@handle_tiktok_api_errors
async def bc_advertiser_get(
    bc_id: Annotated[Optional[str], BC_ID_HELP] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Get Business Center advertiser accounts."""
    return await _call_tool("bc_advertiser_get", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def bc_pixel_create(
    pixel_name: Annotated[str, "Name of the pixel"],
    bc_id: Annotated[Optional[str], BC_ID_HELP] = None,
    description: Annotated[Optional[str], "Description of the pixel"] = None,
) -> str:
    """Create a tracking pixel in Business Center."""
    return await _call_tool("bc_pixel_create", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def bc_pixel_get(
    bc_id: Annotated[Optional[str], BC_ID_HELP] = None,
    pixel_ids: Annotated[Optional[list[str]], "Specific pixel IDs to retrieve"] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Get Business Center pixels."""
    return await _call_tool("bc_pixel_get", locals())


# Accounts and organic content


@mcp.tool()
@handle_tiktok_api_errors
async def account_info_get(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
) -> str:
    """Get advertiser account information."""
    return await _call_tool("account_info_get", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def post_create(
    video_id: Annotated[str, "Video creative ID to post"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    post_text: Annotated[Optional[str], "Caption text for the post"] = None,
    privacy_level: Annotated[Optional[str], "PUBLIC_TO_EVERYONE, MUTUAL_FOLLOW_FRIEND or SELF_ONLY"] = None,
    comment_setting: Annotated[Optional[str], "Who can comment: EVERYONE, FRIENDS or OFF"] = None,
    duet_setting: Annotated[Optional[str], "Who can duet: EVERYONE, FRIENDS or OFF"] = None,
    stitch_setting: Annotated[Optional[str], "Who can stitch: EVERYONE, FRIENDS or OFF"] = None,
) -> str:
    """Create and publish content to the TikTok account."""
    return await _call_tool("post_create", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def comment_list(
    video_id: Annotated[str, "Video ID to get comments for"],
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    cursor: Annotated[Optional[str], "Pagination cursor"] = None,
    count: Annotated[Optional[StrictInt], "Number of comments to retrieve, 1-50 (default 20)"] = None,
) -> str:
    """Get comments for a TikTok post."""
    return await _call_tool("comment_list", locals())


# Catalogs


@mcp.tool()
@handle_tiktok_api_errors
async def catalog_get(
    bc_id: Annotated[Optional[str], BC_ID_HELP] = None,
    catalog_id: Annotated[Optional[str], "Specific catalog ID"] = None,
) -> str:
    """Get product catalogs."""
    return await _call_tool("catalog_get", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def catalog_product_upload(
    catalog_id: Annotated[str, "Catalog ID"],
    products: Annotated[
        list[dict[str, Any]],
        "Products with sku_id, title, description, price, availability, image_url, landing_page_url",
    ],
    bc_id: Annotated[Optional[str], BC_ID_HELP] = None,
) -> str:
    """Upload products to a catalog."""
    return await _call_tool("catalog_product_upload", locals())


# Creator marketplace


@mcp.tool()
@handle_tiktok_api_errors
async def creator_search(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    creator_audience_countries: Annotated[Optional[list[str]], "Target audience countries"] = None,
    creator_follower_count_min: Annotated[Optional[StrictInt], "Minimum follower count"] = None,
    creator_follower_count_max: Annotated[Optional[StrictInt], "Maximum follower count"] = None,
    creator_audience_age_groups: Annotated[Optional[list[str]], "Target audience age groups"] = None,
    creator_audience_genders: Annotated[Optional[list[str]], "Target audience genders"] = None,
    page: Annotated[Optional[StrictInt], "Page number (default 1)"] = None,
    page_size: Annotated[Optional[StrictInt], "Results per page, 1-1000 (default 10)"] = None,
) -> str:
    """Search for creators in the TikTok Creator Marketplace."""
    return await _call_tool("creator_search", locals())


# Targeting utilities


@mcp.tool()
@handle_tiktok_api_errors
async def tool_language(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
) -> str:
    """Get supported languages for TikTok advertising."""
    return await _call_tool("tool_language", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def tool_region(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    placements: Annotated[Optional[list[str]], "Placement types to get regions for"] = None,
) -> str:
    """Get supported regions and countries for targeting."""
    return await _call_tool("tool_region", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def tool_interest_category(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    placements: Annotated[Optional[list[str]], "Placement types to get interests for"] = None,
    special_industries: Annotated[Optional[list[str]], "Special industry categories"] = None,
) -> str:
    """Get interest categories for audience targeting."""
    return await _call_tool("tool_interest_category", locals())


@mcp.tool()
@handle_tiktok_api_errors
async def trending_hashtags(
    advertiser_id: Annotated[Optional[str], ADVERTISER_ID_HELP] = None,
    country_code: Annotated[Optional[str], "Two-letter country code for localized trends"] = None,
    industry: Annotated[Optional[str], "Industry vertical for relevant hashtags"] = None,
) -> str:
    """Get trending hashtags for content inspiration."""
    return await _call_tool("trending_hashtags", locals())


def _handle_sigterm(signum: int, frame: Any) -> None:
    logger.info("Received SIGTERM, shutting down")
    sys.exit(0)


def main() -> None:
    """Entry point for the MCP server."""
    global _dispatcher

    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    _dispatcher = build_dispatcher(settings)
    signal.signal(signal.SIGTERM, _handle_sigterm)

    logger.info("TikTok Business API MCP server running on stdio")
    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
