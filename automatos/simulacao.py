from typing import Callable, List, Optional, Tuple

from automatos.base import AutomatonFactory, AutomatonSnapshot, SimulationResult, SimulationStep

ANIM_MS = 800


class SimulationDriver:
    """
    Reprodução passo a passo de um SimulationResult.

    O driver só avança um índice sobre o resultado, que é imutável. O
    `scheduler` precisa de `after(ms, callback)` e `after_cancel(id)`;
    qualquer widget Tk serve.
    """

    def __init__(self, factory: AutomatonFactory, scheduler=None, interval_ms: int = ANIM_MS):
        self.factory = factory
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self.result: Optional[SimulationResult] = None
        self.index = 0
        self.is_playing = False
        self._timer = None
        self._listeners: List[Callable[["SimulationDriver"], None]] = []

    def subscribe(self, callback: Callable[["SimulationDriver"], None]):
        self._listeners.append(callback)

    def _notify(self):
        for callback in self._listeners:
            callback(self)

    def run(self, snapshot: AutomatonSnapshot, input_str: str) -> SimulationResult:
        """Simula sobre uma cópia do snapshot e volta ao passo 0, pausado."""
        self._cancel_timer()
        self.result = self.factory.simulate(snapshot.copy(), input_str)
        self.index = 0
        self.is_playing = False
        self._notify()
        return self.result

    def reset(self):
        self._cancel_timer()
        self.result = None
        self.index = 0
        self.is_playing = False
        self._notify()

    @property
    def is_simulating(self) -> bool:
        return self.result is not None

    @property
    def is_finished(self) -> bool:
        return self.result is None or self.index >= len(self.result.steps) - 1

    @property
    def current_step(self) -> Optional[SimulationStep]:
        if not self.result or not self.result.steps:
            return None
        return self.result.steps[min(self.index, len(self.result.steps) - 1)]

    @property
    def current_state_id(self) -> Optional[str]:
        step = self.current_step
        return step.current_state if step else None

    @property
    def active_state_ids(self) -> Tuple[str, ...]:
        step = self.current_step
        if step is None:
            return ()
        if step.active_states is not None:
            return step.active_states
        return (step.current_state,) if step.current_state else ()

    def step_forward(self) -> bool:
        if self.is_finished:
            return False
        self.index += 1
        self._notify()
        return True

    def step_backward(self) -> bool:
        if self.index <= 0:
            return False
        self.index -= 1
        self._notify()
        return True

    def play(self):
        if not self.is_simulating or self.is_finished:
            self.is_playing = False
            return
        self._cancel_timer()
        self.is_playing = True
        self._schedule()
        self._notify()

    def pause(self):
        self._cancel_timer()
        if self.is_playing:
            self.is_playing = False
            self._notify()

    def toggle_play(self):
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def _schedule(self):
        if self.scheduler is not None:
            self._timer = self.scheduler.after(self.interval_ms, self._tick)

    def _cancel_timer(self):
        if self._timer is not None and self.scheduler is not None:
            self.scheduler.after_cancel(self._timer)
        self._timer = None

    def _tick(self):
        self._timer = None
        if not self.is_playing:
            return
        self.step_forward()
        if self.is_finished:
            self.is_playing = False
            self._notify()
        else:
            self._schedule()
