import asyncio
import time
from typing import Iterable, Optional

from plant_identifier.orchestrator.contracts import (
    IdentifyOutcome, ImageArtifact, PlantInfo, RequestState,
)
from plant_identifier.orchestrator import errors
from plant_identifier.orchestrator.errors import MalformedResponse, PreconditionViolation, ServiceFailure
from plant_identifier.orchestrator.normalizer import PROMPT, parse_plant_info

DEFAULT_TIMEOUT_S = 60.0


class Orchestrator:
    def __init__(self, vision, status_store, timeout_s: float | None = DEFAULT_TIMEOUT_S,
                 noise_patterns: Optional[Iterable] = None):
        self.vision = vision
        self.status = status_store
        self.timeout_s = timeout_s
        self.noise_patterns = list(noise_patterns) if noise_patterns is not None else None

    async def identify(self, artifact: Optional[ImageArtifact]) -> IdentifyOutcome:
        """
        One identification round trip:
          encode → generate (IN_FLIGHT) → clean → parse → SUCCEEDED | FAILED
        At most one call is in flight; a second call while IN_FLIGHT is caller misuse.
        """
        if artifact is None:
            raise PreconditionViolation("no image selected")
        if self.status.in_flight:
            self.status.log("identify: rejected, a call is already in flight")
            raise PreconditionViolation("identification already in progress")

        # check-and-set with no await in between: nothing can interleave
        self.status.set_state(RequestState.IN_FLIGHT)
        t0 = time.time()
        try:
            self.status.log(f"identify: start source={artifact.source} {artifact.media_type} {len(artifact.data)}B")
            image_b64 = artifact.b64()

            try:
                raw = await asyncio.wait_for(
                    self.vision.generate(PROMPT, image_b64, artifact.media_type),
                    timeout=self.timeout_s,
                )
                info = self._parse(raw)
            except asyncio.TimeoutError:
                return self._fail(t0, errors.ERR_TIMEOUT, f"no reply within {self.timeout_s}s")
            except (ServiceFailure, MalformedResponse) as e:
                return self._fail(t0, e.code, str(e))
            return self._succeed(t0, info)

        except Exception as e:
            return self._fail(t0, errors.ERR_UNKNOWN, f"{type(e).__name__}: {e}")
        finally:
            if self.status.in_flight:
                # cancellation of the awaiting task lands here
                self.status.set_state(RequestState.FAILED)
                self.status.last_result = None

    def _succeed(self, t0: float, info: PlantInfo) -> IdentifyOutcome:
        dt = int((time.time() - t0) * 1000)
        self.status.last_result = info
        self.status.clear_error()
        self.status.set_state(RequestState.SUCCEEDED)
        self.status.log(f"identify: done name={info.name!r} dt={dt}ms")
        return IdentifyOutcome(ok=True, state=RequestState.SUCCEEDED, duration_ms=dt, result=info)

    def _fail(self, t0: float, code: str, msg: str) -> IdentifyOutcome:
        dt = int((time.time() - t0) * 1000)
        self.status.last_result = None
        self.status.record_error(code, msg)
        self.status.set_state(RequestState.FAILED)
        self.status.log(f"identify: error {code} {msg} dt={dt}ms")
        return IdentifyOutcome(ok=False, state=RequestState.FAILED, duration_ms=dt, error_code=code, error=msg)

    def _parse(self, raw: str) -> PlantInfo:
        info = parse_plant_info(raw, self.noise_patterns)
        if info is None:
            self.status.log(f"identify: unparseable reply '{raw[:120]}'")
            raise MalformedResponse("reply is not the six-field structure")
        return info
