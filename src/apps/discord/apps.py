from django.apps import AppConfig


class DiscordConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.discord'
    label = 'discord_bot'
    verbose_name = 'Discord Bot'
