"""Read-only HTTP API for guild game-server instances: health, active server snapshot, in-game clock."""
