"""
Job Status Polling.

After submission the vendor processes a job in the background. The
poller queries the job's status until it reaches a terminal state:

    query → pending/running → wait → query → ... → succeeded | failed

Bounds:
    - max_attempts status queries, and
    - timeout_s seconds of elapsed time,
whichever is hit first raises TimeoutError. A token the service does not
know (HTTP 404) or a body that does not parse raises PollError right
away, so a bad token never loops.

Waiting uses asyncio.sleep, so many jobs can be polled concurrently
from independent tasks. The poller keeps no per-job state between
calls: polling the same token twice, or restarting after a timeout,
only repeats status queries and never re-submits the job.

Delay policy:
    interval starts at the per-kind default (8s TTS, 10s face animation)
    and is multiplied by backoff_multiplier after each non-terminal
    answer, capped at max_interval_s. The default multiplier of 1.0
    keeps the delay fixed.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, Optional

from fakeyou.api.schemas import (
    FaceAnimationJobResponse,
    InferenceJob,
    InferenceStatus,
    TtsJobResponse,
)
from fakeyou.core.config import ClientConfig, PollingConfig
from fakeyou.core.logging import (
    fail,
    get_logger,
    reset_job_token,
    set_job_token,
    success,
    verbose,
    warn,
)
from fakeyou.errors import JobFailedError, PollError, TimeoutError
from fakeyou.services.http import ApiTransport
from fakeyou.services.validators import validate_job_token
from fakeyou.utils.timeit import timeit

_LOG = get_logger("fakeyou.polling")

JOB_KIND_TTS = "tts"
JOB_KIND_FACE_ANIMATION = "face_animation"
JOB_KINDS = (JOB_KIND_TTS, JOB_KIND_FACE_ANIMATION)


@dataclass(frozen=True)
class PollPolicy:
    """
    Delay and bounds for one polling run.

    Attributes:
        interval_s: Delay after the first non-terminal answer.
        backoff_multiplier: Factor applied to the delay after each answer.
        max_interval_s: Upper bound for the delay.
        max_attempts: Maximum number of status queries.
        timeout_s: Maximum elapsed seconds.
    """
    interval_s: float
    backoff_multiplier: float = 1.0
    max_interval_s: float = 30.0
    max_attempts: int = 120
    timeout_s: float = 900.0

    @classmethod
    def from_config(cls, polling: PollingConfig, kind: str) -> "PollPolicy":
        interval = polling.tts_interval_s if kind == JOB_KIND_TTS else polling.face_animation_interval_s
        return cls(
            interval_s=interval,
            backoff_multiplier=polling.backoff_multiplier,
            max_interval_s=polling.max_interval_s,
            max_attempts=polling.max_attempts,
            timeout_s=polling.timeout_s,
        )

    def next_interval(self, current: float) -> float:
        """Delay to use after current, never above the cap (or the start)."""
        cap = max(self.max_interval_s, self.interval_s)
        return min(current * self.backoff_multiplier, cap)


class JobPoller:
    """
    Queries job status and waits for terminal states.

    Attributes:
        transport: Shared ApiTransport.
        config: Client configuration.
        file_url: Builds a public URL from a bucket media path.
    """

    def __init__(
        self,
        transport: ApiTransport,
        config: ClientConfig,
        file_url: Callable[[str], str],
    ):
        self.transport = transport
        self.config = config
        self.file_url = file_url
        self._fetchers: Dict[str, Callable[[str], Awaitable[InferenceJob]]] = {
            JOB_KIND_TTS: self.get_tts_job,
            JOB_KIND_FACE_ANIMATION: self.get_face_animation_job,
        }

    def policy_for(self, kind: str) -> PollPolicy:
        return PollPolicy.from_config(self.config.polling, kind)

    # -------------------------------------------------------------------------
    # Single status queries
    # -------------------------------------------------------------------------

    async def get_tts_job(self, job_token: str) -> InferenceJob:
        """
        Query a TTS job once (GET /tts/job/{token}).

        Raises:
            PollError: Unknown token, HTTP failure or malformed body.
        """
        job_token = validate_job_token(job_token)
        response = await self.transport.request(
            "GET", f"/tts/job/{job_token}", error_cls=PollError, action="tts job status",
        )
        body = self.transport.parse(response, TtsJobResponse, error_cls=PollError, action="tts job status")

        if not body.success or body.state is None:
            if body.success:
                raise PollError("tts job status has no state", details={"job_token": job_token})
            # success=false means the vendor gave up on the job
            return InferenceJob(
                job_token=job_token,
                kind=JOB_KIND_TTS,
                status=InferenceStatus.FAILED,
                vendor_status=body.state.status if body.state else None,
                response=body,
            )

        return self._build_job(
            job_token=job_token,
            kind=JOB_KIND_TTS,
            vendor_status=body.state.status,
            result_path=body.state.maybe_public_bucket_wav_audio_path,
            response=body,
        )

    async def get_face_animation_job(self, job_token: str) -> InferenceJob:
        """
        Query a face animation job once
        (GET /model_inference/job_status/{token}).

        Raises:
            PollError: Unknown token, HTTP failure or malformed body.
        """
        job_token = validate_job_token(job_token)
        response = await self.transport.request(
            "GET", f"/model_inference/job_status/{job_token}",
            error_cls=PollError, action="face animation job status",
        )
        body = self.transport.parse(
            response, FaceAnimationJobResponse, error_cls=PollError, action="face animation job status",
        )

        if not body.success or body.state is None:
            if body.success:
                raise PollError("face animation job status has no state", details={"job_token": job_token})
            return InferenceJob(
                job_token=job_token,
                kind=JOB_KIND_FACE_ANIMATION,
                status=InferenceStatus.FAILED,
                vendor_status=body.state.status.status if body.state else None,
                response=body,
            )

        result = body.state.maybe_result
        return self._build_job(
            job_token=job_token,
            kind=JOB_KIND_FACE_ANIMATION,
            vendor_status=body.state.status.status,
            result_path=result.maybe_public_bucket_media_path if result else None,
            response=body,
        )

    def _build_job(self, *, job_token, kind, vendor_status, result_path, response) -> InferenceJob:
        status = InferenceStatus.from_vendor(vendor_status)
        if status is InferenceStatus.SUCCEEDED and not result_path:
            raise PollError(
                "job reported success without a result",
                details={"job_token": job_token, "kind": kind},
            )
        return InferenceJob(
            job_token=job_token,
            kind=kind,
            status=status,
            vendor_status=vendor_status,
            result_path=result_path if status is InferenceStatus.SUCCEEDED else None,
            result_url=self.file_url(result_path) if status is InferenceStatus.SUCCEEDED else None,
            response=response,
        )

    # -------------------------------------------------------------------------
    # Polling loop
    # -------------------------------------------------------------------------

    async def poll(
        self,
        job_token: str,
        kind: str = JOB_KIND_TTS,
        policy: Optional[PollPolicy] = None,
    ) -> InferenceJob:
        """
        Wait until a job succeeds.

        Args:
            job_token: Token returned by a submission.
            kind: "tts" or "face_animation".
            policy: Override the configured delay and bounds.

        Returns:
            The succeeded InferenceJob, with result_url set.

        Raises:
            JobFailedError: The job reached a failed terminal status.
            TimeoutError: The attempt or elapsed-time bound was hit.
            PollError: Unknown token, malformed response, bad kind.
            AuthError: The session was rejected.
        """
        if kind not in self._fetchers:
            raise PollError(f"Unknown job kind {kind!r}; expected one of {', '.join(JOB_KINDS)}")
        job_token = validate_job_token(job_token)
        policy = policy or self.policy_for(kind)
        fetch = self._fetchers[kind]

        previous = set_job_token(job_token)
        try:
            return await self._run(job_token, kind, policy, fetch)
        finally:
            reset_job_token(previous)

    async def _run(
        self,
        job_token: str,
        kind: str,
        policy: PollPolicy,
        fetch: Callable[[str], Awaitable[InferenceJob]],
    ) -> InferenceJob:
        deadline = time.monotonic() + policy.timeout_s
        interval = policy.interval_s
        attempt = 0

        with timeit("poll") as t:
            while True:
                attempt += 1
                job = replace(await fetch(job_token), attempts=attempt)
                verbose(
                    _LOG, "poll_status",
                    kind=kind, attempt=attempt, status=job.status.value,
                    vendor_status=job.vendor_status.value if job.vendor_status else None,
                )

                if job.status is InferenceStatus.SUCCEEDED:
                    success(_LOG, "job_succeeded", seconds=t.seconds, attempts=attempt, result_url=job.result_url)
                    return job

                if job.status is InferenceStatus.FAILED:
                    fail(
                        _LOG, "job_failed", seconds=t.seconds, attempts=attempt,
                        vendor_status=job.vendor_status.value if job.vendor_status else None,
                    )
                    raise JobFailedError(f"{kind} job '{job_token}' was unsuccessful", job)

                remaining = deadline - time.monotonic()
                if attempt >= policy.max_attempts or remaining <= 0:
                    warn(_LOG, "poll_timeout", seconds=t.seconds, attempts=attempt, status=job.status.value)
                    raise TimeoutError(
                        f"{kind} job '{job_token}' did not finish after {attempt} attempts",
                        details={
                            "job_token": job_token,
                            "attempts": attempt,
                            "elapsed_s": round(t.seconds, 3),
                            "last_status": job.status.value,
                        },
                    )

                await asyncio.sleep(min(interval, remaining))
                interval = policy.next_interval(interval)
