from .decode import action_name, decode_action
from .process import KCLProcess

__all__ = ["KCLProcess", "action_name", "decode_action"]
