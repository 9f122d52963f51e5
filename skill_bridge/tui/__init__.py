from skill_bridge.tui.renderers import SkillBridgeConsoleUI

__all__ = ["SkillBridgeConsoleUI"]
