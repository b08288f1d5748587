"""
fakeyou-client: Async Python client for the FakeYou API.

Wraps the FakeYou text-to-speech and face animation web API:
    - Login with username/password (session cookie)
    - TTS job submission and voice listing
    - Image/audio uploads for face animation
    - Job polling until completion, with bounded attempts and timeout

Example Usage:
    >>> import asyncio
    >>> from fakeyou import FakeYouClient
    >>>
    >>> async def speak():
    ...     async with FakeYouClient() as client:
    ...         token = await client.submit_tts("TM:7wbtjphx8h8v", "Hello, world!")
    ...         job = await client.poll(token)
    ...         return job.result_url
    >>>
    >>> asyncio.run(speak())
    'https://storage.googleapis.com/vocodes-public/tts_inference_output/...wav'
"""

__version__ = "0.2.0"

from fakeyou.api.schemas import InferenceJob, InferenceStatus, JobStatus, TtsVoice
from fakeyou.client import FakeYouClient
from fakeyou.errors import (
    AuthError,
    ErrorCode,
    FakeYouError,
    JobFailedError,
    PollError,
    RequestError,
    TimeoutError,
    TooManyRequestsError,
    UploadError,
)
from fakeyou.services.polling import PollPolicy
from fakeyou.services.session import Session

__all__ = [
    "__version__",
    "FakeYouClient",
    "Session",
    "PollPolicy",
    "InferenceJob",
    "InferenceStatus",
    "JobStatus",
    "TtsVoice",
    "FakeYouError",
    "ErrorCode",
    "AuthError",
    "RequestError",
    "TooManyRequestsError",
    "UploadError",
    "PollError",
    "TimeoutError",
    "JobFailedError",
]
