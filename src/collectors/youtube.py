"""
YouTube channel collector.

Lists every upload of a channel through the YouTube Data API v3.

Environment:
    YOUTUBE_API_KEY: API key
    YOUTUBE_CHANNEL_ID: Channel to list
"""

import logging
import os
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from src.logger import log_function


YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
EMBED_URL = "https://www.youtube.com/embed/{video_id}"
THUMBNAIL_PREFERENCE = ("maxres", "standard", "high", "medium", "default")
PAGE_SIZE = 50


def best_thumbnail(thumbnails: dict[str, Any]) -> Optional[str]:
    for size in THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


def get_uploads_playlist(
    session: requests.Session, api_key: str, channel_id: str, timeout: float = 30
) -> str:
    response = session.get(
        f"{YOUTUBE_API_URL}/channels",
        params={"part": "contentDetails", "id": channel_id, "key": api_key},
        timeout=timeout,
    )
    response.raise_for_status()
    items = response.json().get("items") or []
    if not items:
        raise ValueError(f"YouTube channel {channel_id} not found")
    return items[0]["contentDetails"]["relatedPlaylists"]["uploads"]


@log_function(logger_name="content_sync", log_execution_time=True)
def list_all_videos(
    api_key: Optional[str] = None,
    channel_id: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 30,
) -> list[dict[str, Any]]:
    """
    Fetch all uploads of a YouTube channel.

    Args:
        api_key: API key. If None, reads YOUTUBE_API_KEY.
        channel_id: Channel ID. If None, reads YOUTUBE_CHANNEL_ID.
        session: Optional requests session

    Returns:
        List of dictionaries with keys:
        - title (str)
        - description (str)
        - publishedAt (str): ISO 8601 publish time
        - thumbnailUrl (str): Largest available thumbnail
        - embedLink (str): Embeddable player URL

    Raises:
        EnvironmentError: If credentials are missing
        requests.RequestException: If an API call fails
    """
    logger = logging.getLogger("content_sync")

    load_dotenv()
    api_key = api_key or os.getenv("YOUTUBE_API_KEY")
    channel_id = channel_id or os.getenv("YOUTUBE_CHANNEL_ID")
    if not api_key or not channel_id:
        raise EnvironmentError("YOUTUBE_API_KEY and YOUTUBE_CHANNEL_ID must be set")

    session = session or requests.Session()
    playlist_id = get_uploads_playlist(session, api_key, channel_id, timeout)
    logger.info(f"Listing uploads playlist {playlist_id}")

    videos = []
    page_token = None
    while True:
        params = {
            "part": "snippet,contentDetails",
            "playlistId": playlist_id,
            "maxResults": PAGE_SIZE,
            "key": api_key,
        }
        if page_token:
            params["pageToken"] = page_token

        response = session.get(
            f"{YOUTUBE_API_URL}/playlistItems", params=params, timeout=timeout
        )
        response.raise_for_status()
        payload = response.json()

        for entry in payload.get("items", []):
            snippet = entry.get("snippet", {})
            video_id = (snippet.get("resourceId") or {}).get("videoId")
            thumbnail = best_thumbnail(snippet.get("thumbnails") or {})
            # Private and deleted videos come back without thumbnails
            if not video_id or not thumbnail:
                continue
            videos.append(
                {
                    "title": snippet.get("title", ""),
                    "description": snippet.get("description", ""),
                    "publishedAt": (entry.get("contentDetails") or {}).get(
                        "videoPublishedAt"
                    )
                    or snippet.get("publishedAt", ""),
                    "thumbnailUrl": thumbnail,
                    "embedLink": EMBED_URL.format(video_id=video_id),
                }
            )

        page_token = payload.get("nextPageToken")
        if not page_token:
            break

    logger.info(f"Found {len(videos)} videos")
    return videos
