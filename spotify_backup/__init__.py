"""Back up Spotify playlists to a JSON file and restore them on any account."""

__version__ = "0.1.0"
