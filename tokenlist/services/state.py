"""
Discovery run state.

Tracks one address's token list through Idle -> Loading -> Loaded/Failed,
guards transitions, and discards results from runs that were superseded by a
newer run before they finished.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Set, Tuple

from ..providers.base import ProviderError
from ..types import TokenRecord
from .address import normalize_address
from .discovery import DiscoveryPipeline

logger = logging.getLogger(__name__)


class DiscoveryState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: DiscoveryState, to_state: DiscoveryState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Cannot transition from {from_state.value} to {to_state.value}")


class TokenListState:
    """Published token list plus the registered-only display filter."""

    TRANSITIONS: Dict[DiscoveryState, Set[DiscoveryState]] = {
        DiscoveryState.IDLE: {DiscoveryState.LOADING},
        DiscoveryState.LOADING: {
            DiscoveryState.LOADING,  # Superseded by a newer run
            DiscoveryState.LOADED,
            DiscoveryState.FAILED,
        },
        DiscoveryState.LOADED: {DiscoveryState.LOADING},
        DiscoveryState.FAILED: {DiscoveryState.LOADING},
    }

    def __init__(self, registered_only: bool = True):
        self.current_state = DiscoveryState.IDLE
        self.address: Optional[str] = None
        self.generation = 0
        self.tokens: Tuple[TokenRecord, ...] = ()
        self.error: Optional[str] = None
        self.registered_only = registered_only

    @property
    def loading(self) -> bool:
        return self.current_state == DiscoveryState.LOADING

    @property
    def visible_tokens(self) -> Tuple[TokenRecord, ...]:
        """Tokens after the display filter, in published order."""
        if not self.registered_only:
            return self.tokens
        return tuple(token for token in self.tokens if token.registered)

    def can_transition_to(self, to_state: DiscoveryState) -> bool:
        return to_state in self.TRANSITIONS.get(self.current_state, set())

    def transition_to(self, to_state: DiscoveryState) -> None:
        if not self.can_transition_to(to_state):
            raise InvalidTransitionError(self.current_state, to_state)
        logger.debug("State %s -> %s (generation %d)", self.current_state.value, to_state.value, self.generation)
        self.current_state = to_state

    def begin(self, address: str, generation: int) -> None:
        self.transition_to(DiscoveryState.LOADING)
        self.address = address
        self.generation = generation
        self.tokens = ()
        self.error = None

    def publish(self, tokens: Tuple[TokenRecord, ...]) -> None:
        self.transition_to(DiscoveryState.LOADED)
        self.tokens = tokens

    def fail(self, error: str) -> None:
        self.transition_to(DiscoveryState.FAILED)
        self.tokens = ()
        self.error = error


class TokenListController:
    """
    Drives discovery runs into a TokenListState.

    Each run takes a new generation number; a run only publishes if its
    generation is still the latest when it completes, so a slow run for a
    previous address can never overwrite a newer one.
    """

    def __init__(self, pipeline: DiscoveryPipeline, registered_only: bool = True):
        self.pipeline = pipeline
        self.state = TokenListState(registered_only=registered_only)
        self._generation = 0

    def set_registered_only(self, registered_only: bool) -> None:
        # Read-time filter only; the resolved list is untouched
        self.state.registered_only = registered_only

    async def set_address(self, address: Optional[str]) -> bool:
        """Start a run when the address differs from the current one."""
        if address and self.state.address and normalize_address(address) == self.state.address:
            return False
        return await self.run_discovery(address)

    async def run_discovery(self, address: Optional[str]) -> bool:
        """Run discovery for ``address`` and publish the outcome.

        Returns True if this run's result (tokens or failure) was published,
        False if there was no address or a newer run superseded this one.

        Raises:
            InvalidAddressError: ``address`` is not a hex address
        """
        if not address:
            return False
        owner = normalize_address(address)

        self._generation += 1
        generation = self._generation
        self.state.begin(owner, generation)

        try:
            tokens = await self.pipeline.discover(owner)
        except ProviderError as e:
            if not self._is_current(generation):
                logger.info("Ignoring failure of superseded run %d for %s", generation, owner)
                return False
            logger.error("Discovery failed for %s: %s", owner, e)
            self.state.fail(str(e))
            return True
        except Exception as e:
            if self._is_current(generation):
                self.state.fail(str(e))
            raise

        if not self._is_current(generation):
            logger.info("Ignoring result of superseded run %d for %s", generation, owner)
            return False
        self.state.publish(tuple(tokens))
        return True

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation
