"""
Flickr album collector.

Lists every album (photoset) of a user through the Flickr REST API.

Environment:
    FLICKR_API_KEY: API key
    FLICKR_USER_ID: NSID of the album owner
"""

import logging
import os
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from src.logger import log_function


FLICKR_API_URL = "https://api.flickr.com/services/rest/"
PHOTO_URL = "https://live.staticflickr.com/{server}/{photo_id}_{secret}_b.jpg"
ALBUM_URL = "https://www.flickr.com/photos/{user_id}/albums/{album_id}"
PAGE_SIZE = 500


def call_flickr(
    session: requests.Session, method: str, api_key: str, timeout: float = 30, **params
) -> dict[str, Any]:
    """
    Call a Flickr REST method and return its JSON payload.

    Raises:
        requests.RequestException: On transport or HTTP errors
        RuntimeError: If Flickr reports a failure
    """
    response = session.get(
        FLICKR_API_URL,
        params={
            "method": method,
            "api_key": api_key,
            "format": "json",
            "nojsoncallback": 1,
            **params,
        },
        timeout=timeout,
    )
    response.raise_for_status()
    payload = response.json()
    if payload.get("stat") != "ok":
        raise RuntimeError(
            f"Flickr {method} failed ({payload.get('code')}): {payload.get('message')}"
        )
    return payload


def get_last_photo_timestamp(
    session: requests.Session,
    api_key: str,
    user_id: str,
    album_id: str,
    timeout: float = 30,
) -> str:
    """Return the ``datetaken`` of the last photo of an album."""
    params = {
        "photoset_id": album_id,
        "user_id": user_id,
        "extras": "date_taken",
        "per_page": PAGE_SIZE,
    }
    photoset = call_flickr(
        session, "flickr.photosets.getPhotos", api_key, timeout, page=1, **params
    )["photoset"]

    pages = int(photoset.get("pages") or 1)
    if pages > 1:
        photoset = call_flickr(
            session, "flickr.photosets.getPhotos", api_key, timeout, page=pages, **params
        )["photoset"]

    photos = photoset.get("photo") or []
    return photos[-1].get("datetaken", "") if photos else ""


@log_function(logger_name="content_sync", log_execution_time=True)
def get_albums(
    api_key: Optional[str] = None,
    user_id: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 30,
) -> list[dict[str, Any]]:
    """
    Fetch all albums of a Flickr user.

    Returns:
        List of dictionaries with keys:
        - title (str): Album title, possibly prefixed with "YYYY-MM "
        - description (str)
        - lastPhotoTimestamp (str): Date taken of the album's last photo
        - featureImageUrl (str): Large size of the album's primary photo
        - link (str): Album page URL

    Raises:
        EnvironmentError: If credentials are missing
        requests.RequestException, RuntimeError: If an API call fails
    """
    logger = logging.getLogger("content_sync")

    load_dotenv()
    api_key = api_key or os.getenv("FLICKR_API_KEY")
    user_id = user_id or os.getenv("FLICKR_USER_ID")
    if not api_key or not user_id:
        raise EnvironmentError("FLICKR_API_KEY and FLICKR_USER_ID must be set")

    session = session or requests.Session()
    albums = []
    page, pages = 1, 1
    while page <= pages:
        photosets = call_flickr(
            session,
            "flickr.photosets.getList",
            api_key,
            timeout,
            user_id=user_id,
            page=page,
            per_page=PAGE_SIZE,
        )["photosets"]
        pages = int(photosets.get("pages") or 1)

        for photoset in photosets.get("photoset", []):
            album_id = photoset["id"]
            albums.append(
                {
                    "title": (photoset.get("title") or {}).get("_content", ""),
                    "description": (photoset.get("description") or {}).get(
                        "_content", ""
                    ),
                    "lastPhotoTimestamp": get_last_photo_timestamp(
                        session, api_key, user_id, album_id, timeout
                    ),
                    "featureImageUrl": PHOTO_URL.format(
                        server=photoset.get("server"),
                        photo_id=photoset.get("primary"),
                        secret=photoset.get("secret"),
                    ),
                    "link": ALBUM_URL.format(user_id=user_id, album_id=album_id),
                }
            )
        page += 1

    logger.info(f"Found {len(albums)} albums")
    return albums
