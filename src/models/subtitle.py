"""Subtitle cue model."""

from dataclasses import dataclass


@dataclass
class Subtitle:
    """A single timed subtitle cue (times in seconds)."""

    id: str
    start_time: float
    end_time: float
    text: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Subtitle":
        return cls(
            id=str(data.get("id", "")),
            start_time=float(data["startTime"]),
            end_time=float(data["endTime"]),
            text=str(data.get("text", "")),
        )
