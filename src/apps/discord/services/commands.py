# src/apps/discord/services/commands.py
"""
Slash-command definitions and their registration with Discord.
"""

import logging
from typing import Dict, Any, List

from django.conf import settings

from common.clients import DiscordClient

logger = logging.getLogger(__name__)

STRING = 3
NUMBER = 10


class CommandRegistry:

    COMMANDS: List[Dict[str, Any]] = [
        {
            'name': 'pirep',
            'description': 'File a PIREP',
            'options': [
                {'name': 'flight_number', 'description': 'Flight number (e.g. RAM123)', 'type': STRING, 'required': True},
                {'name': 'dep_icao', 'description': 'Departure ICAO', 'type': STRING, 'required': True},
                {'name': 'arr_icao', 'description': 'Arrival ICAO', 'type': STRING, 'required': True},
                {'name': 'operator', 'description': 'Airline/operator', 'type': STRING, 'required': True,
                 'autocomplete': True},
                {'name': 'aircraft', 'description': 'Aircraft ICAO code', 'type': STRING, 'required': True,
                 'autocomplete': True},
                {
                    'name': 'flight_type',
                    'description': 'Flight type',
                    'type': STRING,
                    'required': True,
                    'choices': [
                        {'name': 'Passenger', 'value': 'passenger'},
                        {'name': 'Cargo', 'value': 'cargo'},
                        {'name': 'Charter', 'value': 'charter'},
                    ],
                },
                {'name': 'flight_hours', 'description': 'Flight duration in hours', 'type': NUMBER, 'required': True},
                {'name': 'multiplier', 'description': 'Flight hour multiplier', 'type': STRING, 'required': False,
                 'autocomplete': True},
                {'name': 'flight_date', 'description': 'Flight date (YYYY-MM-DD)', 'type': STRING, 'required': False},
            ],
        },
        {'name': 'get-events', 'description': 'Get events in next 2 days and join from Discord'},
        {'name': 'leaderboard', 'description': 'Show pilot leaderboard'},
        {'name': 'challange', 'description': 'Show active challenges and participate'},
        {'name': 'notams', 'description': 'Show active NOTAMs'},
        {'name': 'rotw', 'description': 'Show routes of the week'},
        {'name': 'featured', 'description': 'Show featured routes for today'},
    ]

    @classmethod
    def register_commands(cls, client: DiscordClient = None) -> Dict[str, Any]:
        """
        Overwrite the application's global commands.

        Raises:
            ValueError: bot token or application id not configured
            DiscordAPIError: Discord rejected the command set
        """
        application_id = settings.DISCORD.get('APPLICATION_ID')
        if not application_id or not settings.DISCORD.get('BOT_TOKEN'):
            raise ValueError('Missing Discord configuration: DISCORD_BOT_TOKEN and DISCORD_APPLICATION_ID')

        client = client or DiscordClient()
        registered = client.register_commands(application_id, cls.COMMANDS) or []
        logger.info(f"Registered {len(registered)} slash commands")
        return {'ok': True, 'count': len(registered), 'commands': registered}
