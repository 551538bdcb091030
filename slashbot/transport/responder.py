"""One-shot reply capability attached to each invocation."""

from __future__ import annotations

from .errors import ResponderUsedError
from .rest import DiscordRestClient


class InteractionResponder:
    """Sends the single allowed reply to one interaction."""

    def __init__(self, rest: DiscordRestClient, interaction_id: str, interaction_token: str) -> None:
        self._rest = rest
        self._interaction_id = interaction_id
        self._interaction_token = interaction_token
        self._used = False

    @property
    def used(self) -> bool:
        return self._used

    async def respond(self, text: str) -> None:
        if self._used:
            raise ResponderUsedError(f"Interaction {self._interaction_id} was already answered")
        self._used = True
        await self._rest.create_interaction_response(
            self._interaction_id, self._interaction_token, text,
        )
