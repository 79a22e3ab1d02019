"""Newswire notifier: post the latest Rockstar Newswire article to a webhook."""

LAST_POSTED_FILENAME = "last_posted.json"
SITE_URL = "https://www.rockstargames.com"
MEDIA_URL = "https://media-rockstargames-com.akamaized.net"
NEWSWIRE_URL = SITE_URL + "/newswire"

__all__ = ["LAST_POSTED_FILENAME", "SITE_URL", "MEDIA_URL", "NEWSWIRE_URL"]
