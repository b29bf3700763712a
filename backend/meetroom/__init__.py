"""Meeting room coordination server: host-gated rooms and WebRTC signaling relay."""

__version__ = "0.1.0"
