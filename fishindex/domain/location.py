"""Administrative location shared by NISECI and HFBI stations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """Region and province of a sampling station."""

    region: str
    province: str

    def to_dict(self):
        return {"region": self.region, "province": self.province}
