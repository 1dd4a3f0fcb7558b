ESPN_HEADSHOT_URL_TEMPLATE = "https://a.espncdn.com/i/headshots/nfl/players/full/{external_id}.png"
DEFAULT_PLAYER_IMAGE_URL = "https://sleepercdn.com/images/v2/icons/player_default.webp"

# List view colors by position code
POSITION_COLORS: dict[str, str] = {
    "QB": "#ff6b6b",
    "RB": "#4ecdc4",
    "WR": "#45b7d1",
    "TE": "#96ceb4",
    "K": "#ffeead",
    "DEF": "#d4a4eb",
}
DEFAULT_POSITION_COLOR = "grey50"


def headshot_url(
    external_id: str | None,
    template: str = ESPN_HEADSHOT_URL_TEMPLATE,
    default_url: str = DEFAULT_PLAYER_IMAGE_URL,
) -> str:
    """Image URL for a player's external analytics ID, or the placeholder when there is none."""
    if not external_id:
        return default_url
    return template.format(external_id=external_id)


def position_color(position: str) -> str:
    return POSITION_COLORS.get(position, DEFAULT_POSITION_COLOR)
