from .models import ActionIntent, BackendCommand, ControlAction

CONTROL_ACTIONS: tuple[ControlAction, ...] = (
    ControlAction(
        key="emulator-start",
        label="Start emulator",
        command=BackendCommand.START_EMULATOR,
        intent=ActionIntent.PRIMARY,
    ),
    ControlAction(
        key="emulator-stop",
        label="Stop emulator",
        command=BackendCommand.STOP_EMULATOR,
        intent=ActionIntent.DANGER,
    ),
    ControlAction(
        key="maa-startup",
        label="Run MAA startup",
        command=BackendCommand.RUN_MAA_STARTUP,
        intent=ActionIntent.NEUTRAL,
    ),
)


def get_action(key: str) -> ControlAction:
    """
    Look up a control action by key.

    :param key: The action key.
    :return: The matching action.
    :raises KeyError: If no action has that key.
    """
    for action in CONTROL_ACTIONS:
        if action.key == key:
            return action
    raise KeyError(f"Unknown control action: {key}")
