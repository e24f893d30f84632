"""
Outbound HTTP clients: Discord REST, Discord webhooks and the IFATC gates page
"""

import time
import logging
from typing import Dict, Any, Optional, List

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# CIRCUIT BREAKER
# =============================================================================

class CircuitBreakerError(Exception):
    """Discord calls are suspended after repeated failures."""


class CircuitBreaker:
    """
    Opens after ``failure_threshold`` consecutive failures. While open, one
    trial call is let through per ``cooldown`` window and the others are
    refused. A successful trial closes it again; a failed one restarts the
    cooldown.
    """

    def __init__(self, name: str, failure_threshold: int = 5, cooldown: float = 30.0):
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown = cooldown
        self.failures = 0
        self.opened_at: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None

    def can_execute(self) -> bool:
        if not self.is_open:
            return True
        now = time.monotonic()
        if now - self.opened_at < self.cooldown:
            return False
        # next trial waits a full window
        self.opened_at = now
        return True

    def record_success(self) -> None:
        if self.is_open:
            logger.info(f"{self.name} circuit closed")
        self.failures = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failures += 1
        if self.is_open or self.failures >= self.failure_threshold:
            if not self.is_open:
                logger.warning(f"{self.name} circuit opened after {self.failures} failures")
            self.opened_at = time.monotonic()


# Shared by every DiscordClient in the process.
discord_breaker = CircuitBreaker('discord')


# =============================================================================
# DISCORD REST
# =============================================================================

class DiscordAPIError(Exception):
    """Non-2xx answer from the Discord API"""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"Discord API {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


# Errors a Discord call can surface to callers that want to log and carry on.
DISCORD_ERRORS = (DiscordAPIError, CircuitBreakerError, httpx.HTTPError)


class DiscordClient:
    """
    Bot-token client for the Discord REST API.
    """

    VIEW_CHANNEL = 1024
    OVERWRITE_ROLE = 0
    OVERWRITE_MEMBER = 1
    PUBLIC_THREAD = 11

    def __init__(self, bot_token: str = None, base_url: str = None):
        config = settings.DISCORD
        self.bot_token = bot_token if bot_token is not None else config['BOT_TOKEN']
        self.base_url = (base_url or config['API_BASE']).rstrip('/')
        self.timeout = httpx.Timeout(10.0, connect=5.0)
        self.circuit_breaker = discord_breaker

    def _get_headers(self, authenticated: bool = True) -> Dict:
        headers = {'Content-Type': 'application/json'}
        if authenticated:
            if not self.bot_token:
                raise DiscordAPIError(0, 'Missing DISCORD_BOT_TOKEN')
            headers['Authorization'] = f'Bot {self.bot_token}'
        return headers

    def _request(
        self,
        method: str,
        path: str,
        data: Any = None,
        authenticated: bool = True
    ) -> Optional[Any]:
        if not self.circuit_breaker.can_execute():
            raise CircuitBreakerError(f"Discord calls suspended after {self.circuit_breaker.failures} failures")

        url = f"{self.base_url}/{path.lstrip('/')}"

        with httpx.Client(timeout=self.timeout) as client:
            try:
                response = client.request(
                    method=method,
                    url=url,
                    json=data,
                    headers=self._get_headers(authenticated),
                )
            except httpx.RequestError as e:
                logger.error(f"Discord {method} {path} unreachable: {e}")
                self.circuit_breaker.record_failure()
                raise

        if response.status_code >= 500:
            self.circuit_breaker.record_failure()
        else:
            self.circuit_breaker.record_success()

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            message = body.get('message') if isinstance(body, dict) else str(body)
            logger.error(
                f"Discord API error {response.status_code} on {method} {path}",
                extra={'status_code': response.status_code, 'discord_message': message}
            )
            raise DiscordAPIError(response.status_code, message or response.reason_phrase, body)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ----- channels and messages -----

    def create_channel(
        self,
        guild_id: str,
        name: str,
        parent_id: str = None,
        permission_overwrites: List[Dict] = None
    ) -> Dict:
        data = {'name': name, 'type': 0}
        if parent_id:
            data['parent_id'] = parent_id
        if permission_overwrites:
            data['permission_overwrites'] = permission_overwrites
        return self._request('POST', f'guilds/{guild_id}/channels', data)

    def get_channel(self, channel_id: str) -> Dict:
        return self._request('GET', f'channels/{channel_id}')

    def post_message(self, channel_id: str, payload: Dict) -> Dict:
        return self._request('POST', f'channels/{channel_id}/messages', payload)

    def delete_message(self, channel_id: str, message_id: str) -> None:
        self._request('DELETE', f'channels/{channel_id}/messages/{message_id}')

    def delete_message_quietly(self, channel_id: str, message_id: str) -> bool:
        """Delete a message, logging instead of raising when it is already gone."""
        if not channel_id or not message_id:
            return False
        try:
            self.delete_message(channel_id, message_id)
            return True
        except DISCORD_ERRORS as e:
            logger.info(f"Could not delete message {message_id} in {channel_id}: {e}")
            return False

    def set_channel_permission(
        self,
        channel_id: str,
        overwrite_id: str,
        allow: int = 0,
        deny: int = 0,
        overwrite_type: int = OVERWRITE_MEMBER
    ) -> None:
        self._request(
            'PUT',
            f'channels/{channel_id}/permissions/{overwrite_id}',
            {'type': overwrite_type, 'allow': str(allow), 'deny': str(deny)},
        )

    def create_thread(
        self,
        channel_id: str,
        name: str,
        auto_archive_duration: int = 1440
    ) -> Dict:
        return self._request('POST', f'channels/{channel_id}/threads', {
            'name': name[:100],
            'type': self.PUBLIC_THREAD,
            'auto_archive_duration': auto_archive_duration,
        })

    # ----- guild members -----

    def get_member(self, guild_id: str, user_id: str) -> Dict:
        return self._request('GET', f'guilds/{guild_id}/members/{user_id}')

    def update_member_roles(self, guild_id: str, user_id: str, roles: List[str]) -> Dict:
        return self._request('PATCH', f'guilds/{guild_id}/members/{user_id}', {'roles': roles})

    # ----- interactions -----

    def post_followup(self, application_id: str, interaction_token: str, payload: Dict) -> Dict:
        return self._request(
            'POST',
            f'webhooks/{application_id}/{interaction_token}',
            payload,
            authenticated=False,
        )

    def register_commands(self, application_id: str, commands: List[Dict]) -> List[Dict]:
        return self._request('PUT', f'applications/{application_id}/commands', commands)


# =============================================================================
# WEBHOOKS AND SCRAPING
# =============================================================================

def post_webhook(url: str, payload: Dict) -> int:
    """POST a JSON payload to a Discord webhook URL and return the status code."""
    with httpx.Client(timeout=httpx.Timeout(10.0, connect=5.0)) as client:
        response = client.post(url, json=payload)
    if response.is_error:
        logger.error(
            f"Webhook responded {response.status_code}",
            extra={'status_code': response.status_code, 'body': response.text[:500]}
        )
        raise DiscordAPIError(response.status_code, response.text[:500])
    return response.status_code


def fetch_gates_page(icao: str) -> str:
    """Download the IFATC gates page for an airport."""
    with httpx.Client(timeout=httpx.Timeout(15.0, connect=5.0), follow_redirects=True) as client:
        response = client.get(
            settings.IFATC_GATES_URL,
            params={'code': icao},
            headers={'User-Agent': 'Mozilla/5.0 (compatible; AFLV-CrewCenter/1.0)'},
        )
        response.raise_for_status()
        return response.text
