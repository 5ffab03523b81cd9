# Views package
from .player_view import PlayerView
from .settings_view import SettingsView
