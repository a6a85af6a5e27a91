from abc import ABC, abstractmethod

class CameraAdapter(ABC):
    @abstractmethod
    def open(self) -> None:
        """Acquire the capture device. Raises DeviceUnavailable on denial or absence."""
        ...

    @abstractmethod
    def capture_bytes(self) -> bytes | None:
        """Capture one frame. Returns JPEG bytes or None on failure."""
        ...

    @abstractmethod
    def release(self) -> None:
        """Stop the device stream. Safe to call when nothing is open."""
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...
