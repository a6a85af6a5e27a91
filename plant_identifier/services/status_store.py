from dataclasses import dataclass, field
from typing import Optional, List
from plant_identifier.orchestrator.contracts import PlantInfo, RequestState

@dataclass
class StatusStore:
    state: RequestState = RequestState.IDLE
    last_result: Optional[PlantInfo] = None
    last_error: Optional[str] = None
    last_error_code: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    @property
    def in_flight(self) -> bool:
        return self.state is RequestState.IN_FLIGHT

    def set_state(self, v: RequestState):
        self.state = v

    def record_error(self, code: str, msg: str):
        self.last_error_code = code
        self.last_error = msg

    def clear_error(self):
        self.last_error_code = None
        self.last_error = None

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
