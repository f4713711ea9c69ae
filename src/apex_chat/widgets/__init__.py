"""Widget exports for apex_chat UI."""

from .code_block import CodeBlock
from .conversation import ConversationView
from .input_box import InputBox
from .message import MessageBubble
from .toggle_bar import ToggleBar

__all__ = ["CodeBlock", "ConversationView", "InputBox", "MessageBubble", "ToggleBar"]
