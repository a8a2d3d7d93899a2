from .playback import PlaybackQueue
from .errors import describe_error
from .controller import VoiceChatClient
from .transcript import Transcript, TranscriptEntry

__all__ = ["PlaybackQueue", "Transcript", "TranscriptEntry", "VoiceChatClient", "describe_error"]
