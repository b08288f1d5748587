"""
fakeyou-client Services Layer.

Each module covers one group of vendor endpoints and shares a single
ApiTransport:
    - http.py: ApiTransport (request, error mapping, body parsing)
    - session.py: login/logout and the Session value
    - tts.py: TTS submission and voice listing
    - uploads.py: image/audio uploads
    - face_animation.py: face animation submission
    - polling.py: JobPoller (status queries and the wait loop)
    - validators.py: argument checks run before any request

FakeYouClient (client.py) wires these together.
"""
from .face_animation import FaceAnimationService
from .http import ApiTransport, create_http_client
from .polling import JOB_KIND_FACE_ANIMATION, JOB_KIND_TTS, JobPoller, PollPolicy
from .session import Session, login, logout
from .tts import TtsService
from .uploads import UploadService

__all__ = [
    "ApiTransport",
    "create_http_client",
    "Session",
    "login",
    "logout",
    "TtsService",
    "UploadService",
    "FaceAnimationService",
    "JobPoller",
    "PollPolicy",
    "JOB_KIND_TTS",
    "JOB_KIND_FACE_ANIMATION",
]
