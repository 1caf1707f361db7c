"""Keepalive handling for inbound IRC events."""

from collections.abc import Callable

from .codec import Line
from .models import Event


class PingResponder:
    """Answers every server PING with a PONG echoing its parameters."""

    def __init__(self, send: Callable[[Line], object]):
        self.send = send

    def handle(self, event: Event) -> bool:
        """Reply to a PING event.

        Returns:
            True if the event was a PING and a PONG was sent
        """
        if not isinstance(event, Line) or event.command != "PING":
            return False

        self.send(
            Line(command="PONG", arguments=list(event.arguments), suffix=event.suffix)
        )
        return True
