from automatos.base import AutomatonSnapshot, State


def st(state_id, initial=False, final=False, output=None):
    return State(id=state_id, label=state_id, x=0, y=0, is_initial=initial, is_final=final, output=output)


def snap(kind, states, transitions, **meta):
    return AutomatonSnapshot(kind=kind, meta=meta, states=list(states), transitions=list(transitions))
