from enum import Enum

from skill_bridge.models import ActionStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    DIM = "dim"
    WHITE = "white"


ACTION_STATUS_STYLE = {
    ActionStatus.CREATE: UIStyle.GREEN.value,
    ActionStatus.UPDATE: UIStyle.CYAN.value,
    ActionStatus.REMOVE: UIStyle.YELLOW.value,
    ActionStatus.NOOP: UIStyle.DIM.value,
    ActionStatus.FAILED: UIStyle.RED.value,
}
