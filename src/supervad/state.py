"""Hysteresis state machine as a pure reducer.

``step()`` takes the current ``MachineState`` plus one scored token and
returns the next ``MachineState`` and the ``Event`` describing the
transition. Nothing is mutated in place: buffers are tuples of read-only
tokens, so an earlier state stays valid after a step.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum

import numpy as np

from supervad.config import VADParams


class VADState(Enum):
    DEACTIVATED = "deactivated"
    ACTIVATING = "activating"
    ACTIVE = "active"
    DEACTIVATING = "deactivating"


class EventKind(Enum):
    UNCHANGED = "unchanged"
    ACTIVATING = "activating"
    ACTIVE = "active"
    ACTIVATION_CANCELED = "activation-canceled"
    DEACTIVATING = "deactivating"
    DEACTIVATION_CANCELED = "deactivation-canceled"
    COMPLETE = "complete"


@dataclass(frozen=True, eq=False)
class Event:
    kind: EventKind
    segment: np.ndarray | None = None

    @property
    def is_complete(self) -> bool:
        return self.kind is EventKind.COMPLETE


UNCHANGED = Event(EventKind.UNCHANGED)


@dataclass(frozen=True, eq=False)
class MachineState:
    state: VADState = VADState.DEACTIVATED
    counter: int = 0
    pre_roll: tuple[np.ndarray, ...] = field(default=())
    active: tuple[np.ndarray, ...] = field(default=())

    @property
    def active_samples(self) -> int:
        return sum(t.shape[0] for t in self.active)

    def segment(self) -> np.ndarray:
        """Concatenate the open segment in arrival order."""
        if not self.active:
            return np.zeros(0, dtype=np.float32)
        return np.concatenate(self.active)


Transition = Callable[[MachineState, VADParams, np.ndarray, float], tuple[MachineState, Event]]


def _from_deactivated(m: MachineState, p: VADParams, token: np.ndarray, prob: float):
    if prob < p.activation_threshold:
        return m, UNCHANGED
    if p.activation_tokens <= 1:
        return (
            replace(m, state=VADState.ACTIVE, counter=0, active=m.pre_roll),
            Event(EventKind.ACTIVE),
        )
    return (
        replace(m, state=VADState.ACTIVATING, counter=1, active=m.pre_roll),
        Event(EventKind.ACTIVATING),
    )


def _from_activating(m: MachineState, p: VADParams, token: np.ndarray, prob: float):
    counter = m.counter + 1 if prob >= p.activation_threshold else m.counter - 1
    if counter <= 0:
        return (
            replace(m, state=VADState.DEACTIVATED, counter=0, active=()),
            Event(EventKind.ACTIVATION_CANCELED),
        )
    active = m.active + (token,)
    if counter >= p.activation_tokens:
        return (
            replace(m, state=VADState.ACTIVE, counter=0, active=active),
            Event(EventKind.ACTIVE),
        )
    return replace(m, counter=counter, active=active), UNCHANGED


def _from_active(m: MachineState, p: VADParams, token: np.ndarray, prob: float):
    active = m.active + (token,)
    if prob <= p.deactivation_threshold:
        return (
            replace(m, state=VADState.DEACTIVATING, counter=1, active=active),
            Event(EventKind.DEACTIVATING),
        )
    return replace(m, active=active), UNCHANGED


def _from_deactivating(m: MachineState, p: VADParams, token: np.ndarray, prob: float):
    active = m.active + (token,)
    if prob >= p.activation_threshold:
        return (
            replace(m, state=VADState.ACTIVE, counter=0, active=active),
            Event(EventKind.DEACTIVATION_CANCELED),
        )
    counter = m.counter + 1 if prob <= p.deactivation_threshold else m.counter - 1
    if counter <= 0:
        return (
            replace(m, state=VADState.ACTIVE, counter=0, active=active),
            Event(EventKind.DEACTIVATION_CANCELED),
        )
    if counter >= p.deactivation_tokens:
        segment = np.concatenate(active)
        return (
            replace(m, state=VADState.DEACTIVATED, counter=0, active=()),
            Event(EventKind.COMPLETE, segment),
        )
    return replace(m, counter=counter, active=active), UNCHANGED


TRANSITIONS: dict[VADState, Transition] = {
    VADState.DEACTIVATED: _from_deactivated,
    VADState.ACTIVATING: _from_activating,
    VADState.ACTIVE: _from_active,
    VADState.DEACTIVATING: _from_deactivating,
}


def step(
    machine: MachineState,
    params: VADParams,
    token: np.ndarray,
    probability: float,
) -> tuple[MachineState, Event]:
    """Advance by one token. At most one transition per call.

    The pre-roll is updated first, unconditionally, so a token that
    triggers activation is already part of the seeded segment.
    """
    pre_roll = (machine.pre_roll + (token,))[-params.prebuffer_tokens:]
    machine = replace(machine, pre_roll=pre_roll)
    return TRANSITIONS[machine.state](machine, params, token, probability)
