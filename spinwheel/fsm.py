from __future__ import annotations

from statemachine import State, StateMachine

from spinwheel.api.models import GameMode


class ModeFSM(StateMachine):
    """Guards reward <-> elimination switches.

    The FSM only validates transitions; snapshot capture and other side effects
    are applied by the session after a transition succeeds.
    """

    reward = State(GameMode.reward.value, value=GameMode.reward.value, initial=True)
    elimination = State(GameMode.elimination.value, value=GameMode.elimination.value)

    start_elimination = reward.to(elimination)
    start_reward = elimination.to(reward)

    def __init__(self, mode: GameMode = GameMode.reward):
        super().__init__(start_value=mode.value)

    @property
    def mode(self) -> GameMode:
        return GameMode(str(self.current_state.value))

    def switch_to(self, mode: GameMode) -> bool:
        """Move to `mode`. Returns False when already there."""

        if mode == self.mode:
            return False
        if mode == GameMode.elimination:
            self.start_elimination()
        else:
            self.start_reward()
        return True
