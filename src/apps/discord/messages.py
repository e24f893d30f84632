# src/apps/discord/messages.py
"""
Discord protocol constants and payload builders.

Everything here returns plain dicts ready to be serialised as an
interaction response or a channel message body.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from django.utils import timezone

EPHEMERAL = 64


class InteractionType:
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class ResponseType:
    PONG = 1
    CHANNEL_MESSAGE = 4
    DEFERRED_CHANNEL_MESSAGE = 5
    UPDATE_MESSAGE = 7
    AUTOCOMPLETE_RESULT = 8
    MODAL = 9


class ButtonStyle:
    PRIMARY = 1
    SECONDARY = 2
    SUCCESS = 3
    DANGER = 4


class Colors:
    BLUE = 0x3498db
    GREEN = 0x2ecc71
    RED = 0xe74c3c
    ORANGE = 0xe67e22
    GOLD = 0xf1c40f
    RANK_BLUE = 0x1e90ff


class CustomId:
    FLY_HIGH = 'recruitment_fly_high'
    SET_CALLSIGN = 'recruitment_set_callsign:'
    CALLSIGN_MODAL = 'recruitment_callsign_modal:'
    PRACTICAL_CONFIRM = 'recruitment_practical_confirm:'
    PRACTICAL_READY = 'recruitment_practical_ready:'
    PRACTICAL_REVIEW = 'recruitment_practical_review:'
    PRACTICAL_REVIEW_MODAL = 'recruitment_practical_review_modal:'
    EVENT_JOIN = 'event_join:'
    CHALLENGE_ACCEPT = 'challenge_accept:'


PRACTICAL_TASKS = [
    "1. Spawn at any gate at UUBW.",
    "2. Taxi to RWY 30.",
    "3. Depart straight and transition to UUDD pattern for RWY 32L.",
    "4. Touch and go with proper UNICOM use.",
    "5. Transition to UUDD RWY 32R downwind.",
    "6. Touch and go, then depart to the northwest.",
    '7. Proceed direct "MR" Moscow Shr. VOR.',
    "8. Transition to pattern for landing at any runway at UUEE.",
    "9. Land, park, and exit.",
    "> **Note - You are currently a Provisional Pilot. You can fly for AFLV any time "
    "and any route under the cadet rank.**",
]

PRACTICAL_AIRCRAFT = 'C172'


# =============================================================================
# FORMATTING
# =============================================================================

def mention(user_id: str) -> str:
    return f"<@{user_id}>"


def channel_mention(channel_id: str) -> str:
    return f"<#{channel_id}>"


def discord_timestamp(value: datetime, style: str = 'f') -> str:
    return f"<t:{int(value.timestamp())}:{style}>"


def short_pid(pid: str) -> str:
    pid = str(pid or 'AFLV')
    return pid[4:] if pid.upper().startswith('AFLV') and len(pid) > 4 else pid


def practical_callsign_lines(pid: str) -> str:
    return f"ATYP - {PRACTICAL_AIRCRAFT}\nCALLSIGN - Aeroflot {short_pid(pid)}CR"


def practical_notes(pid: str) -> str:
    return '\n'.join(['Recruitment practical', *PRACTICAL_TASKS, '', practical_callsign_lines(pid)])


# =============================================================================
# COMPONENTS
# =============================================================================

def action_row(*components: Dict) -> Dict:
    return {'type': 1, 'components': list(components)}


def button(style: int, custom_id: str, label: str) -> Dict:
    return {'type': 2, 'style': style, 'custom_id': custom_id[:100], 'label': label[:80]}


def text_input(
    custom_id: str,
    label: str,
    style: int = 1,
    required: bool = True,
    min_length: int = None,
    max_length: int = None,
    placeholder: str = None,
) -> Dict:
    component = {'type': 4, 'custom_id': custom_id, 'label': label, 'style': style, 'required': required}
    if min_length is not None:
        component['min_length'] = min_length
    if max_length is not None:
        component['max_length'] = max_length
    if placeholder:
        component['placeholder'] = placeholder
    return component


def embed(
    title: str,
    description: str = '',
    color: int = Colors.BLUE,
    fields: Optional[Iterable[Dict]] = None,
    image_url: str = None,
    footer: str = None,
    timestamp: bool = True,
) -> Dict:
    data: Dict[str, Any] = {'title': title, 'description': description, 'color': color}
    fields = list(fields or [])
    if fields:
        data['fields'] = fields
    if image_url:
        data['image'] = {'url': image_url}
    if footer:
        data['footer'] = {'text': footer}
    if timestamp:
        data['timestamp'] = timezone.now().isoformat()
    return data


def field(name: str, value: Any, inline: bool = False) -> Dict:
    return {'name': name, 'value': str(value)[:1024] or '-', 'inline': inline}


# =============================================================================
# INTERACTION RESPONSES
# =============================================================================

def pong() -> Dict:
    return {'type': ResponseType.PONG}


def message(
    content: str = None,
    embeds: List[Dict] = None,
    components: List[Dict] = None,
    ephemeral: bool = False,
    response_type: int = ResponseType.CHANNEL_MESSAGE,
) -> Dict:
    data: Dict[str, Any] = {}
    if content is not None:
        data['content'] = content
    if embeds is not None:
        data['embeds'] = embeds
    if components is not None:
        data['components'] = components
    if ephemeral:
        data['flags'] = EPHEMERAL
    return {'type': response_type, 'data': data}


def ephemeral(content: str) -> Dict:
    return message(content=content, ephemeral=True)


def embed_response(title: str, description: str, color: int, fields=None, image_url=None,
                   is_ephemeral: bool = False) -> Dict:
    return message(
        embeds=[embed(title, description, color, fields=fields, image_url=image_url)],
        ephemeral=is_ephemeral,
    )


def error_embed(title: str, description: str) -> Dict:
    return embed_response(title, description, Colors.RED, is_ephemeral=True)


def deferred_ephemeral() -> Dict:
    return {'type': ResponseType.DEFERRED_CHANNEL_MESSAGE, 'data': {'flags': EPHEMERAL}}


def modal(custom_id: str, title: str, inputs: List[Dict]) -> Dict:
    return {
        'type': ResponseType.MODAL,
        'data': {
            'custom_id': custom_id[:100],
            'title': title[:45],
            'components': [action_row(component) for component in inputs],
        },
    }


def autocomplete(choices: List[Dict]) -> Dict:
    return {'type': ResponseType.AUTOCOMPLETE_RESULT, 'data': {'choices': choices[:25]}}


# =============================================================================
# RECRUITMENT MESSAGES
# =============================================================================

def recruitment_board_message() -> Dict:
    return {
        'embeds': [embed(
            'AFLV Recruitments',
            'Click **Fly High** to open your recruitment ticket and start your entrance written exam.',
            Colors.BLUE,
            timestamp=False,
        )],
        'components': [action_row(button(ButtonStyle.SUCCESS, CustomId.FLY_HIGH, 'Fly High'))],
    }


def written_test_message(discord_user_id: str, exam_url: str, token: str) -> Dict:
    return {
        'content': mention(discord_user_id),
        'embeds': [embed(
            'AFLV | Recruitment Written Test',
            '\n'.join([
                'Please complete your entrance written exam using the link below:',
                exam_url,
                '',
                'After you pass, click **Continue** below.',
                '**Note:** If you fail, there is a 24-hour cooldown before a new written test link '
                'is issued. If a new link is not issued please inform the recruitment staff.',
            ]),
            Colors.BLUE,
        )],
        'components': [action_row(button(ButtonStyle.PRIMARY, f"{CustomId.SET_CALLSIGN}{token}", 'Continue'))],
    }


def retest_message(discord_user_id: str, exam_url: str) -> Dict:
    return {
        'content': (
            f"🔁 {mention(discord_user_id)} your 24-hour cooldown is complete.\n"
            f"Here is your NEW written test link:\n{exam_url}\n\n"
            f"(Previous test link has been removed.)"
        ),
    }


def practical_assigned_response(pid: str, practical_id: str) -> Dict:
    components = []
    if practical_id:
        components = [action_row(
            button(ButtonStyle.SUCCESS, f"{CustomId.PRACTICAL_REVIEW}passed:{practical_id}", 'Pass'),
            button(ButtonStyle.DANGER, f"{CustomId.PRACTICAL_REVIEW}failed:{practical_id}", 'Fail'),
        )]
    return message(
        embeds=[embed(
            'AFLV | Practical Assigned',
            'Your practical is assigned. Complete the task and wait for examiner review.',
            Colors.BLUE,
            fields=[
                {'name': 'Practical Tasks', 'value': '\n'.join(PRACTICAL_TASKS)},
                {'name': 'Aircraft / Callsign', 'value': practical_callsign_lines(pid)},
            ],
        )],
        components=components,
    )
